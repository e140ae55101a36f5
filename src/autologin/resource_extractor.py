"""Resource extraction for pages fetched behind a session."""

import logging
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from autologin.constants import DEFAULT_FORM_METHOD, ELLIPSIS, INLINE_SCRIPT_PREVIEW_LENGTH
from autologin.models import FormDescriptor, PageResources

logger = logging.getLogger(__name__)

# Link schemes that do not point at fetchable pages
SKIPPED_LINK_PREFIXES = ("javascript:", "mailto:", "tel:", "#")


def extract_title(soup: BeautifulSoup) -> str:
    title = soup.find("title")
    return title.get_text(strip=True) if title else ""


def extract_body_text(soup: BeautifulSoup) -> str:
    """Visible text of the body, or of the whole document when it has none."""
    body = soup.find("body")
    return (body or soup).get_text(separator=" ")


class ResourceExtractor:
    """Categorizes the scripts, stylesheets, forms, images and links of a page."""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def parse(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or "", self.parser)

    def extract(self, html: str, source_url: str) -> PageResources:
        """Extract resources from HTML.

        Args:
            html: Document HTML
            source_url: URL the document was fetched from

        Returns:
            PageResources with URLs resolved against ``source_url``
        """
        return self.extract_from_soup(self.parse(html), source_url)

    def extract_from_soup(self, soup: BeautifulSoup, source_url: str) -> PageResources:
        resources = PageResources()

        # External scripts
        for script in soup.find_all("script", src=True):
            src = script.get("src")
            if src:
                resources.scripts.append(urljoin(source_url, src))

        # Inline scripts, numbered by position among all src-less scripts
        inline = [s for s in soup.find_all("script") if not s.has_attr("src")]
        for index, script in enumerate(inline, start=1):
            content = script.string if script.string is not None else script.get_text()
            if content and content.strip():
                preview = content[:INLINE_SCRIPT_PREVIEW_LENGTH]
                resources.inline_scripts.append(f"Inline script #{index}: {preview}{ELLIPSIS}")

        # Stylesheets
        for link in soup.find_all("link", rel="stylesheet"):
            href = link.get("href")
            if href:
                resources.styles.append(urljoin(source_url, href))

        # Forms
        for form in soup.find_all("form"):
            resources.forms.append(
                FormDescriptor(
                    action=form.get("action"),
                    method=form.get("method") or DEFAULT_FORM_METHOD,
                    inputs=[
                        {
                            "name": element.get("name"),
                            "type": element.get("type"),
                            "value": element.get("value"),
                        }
                        for element in form.find_all("input")
                    ],
                )
            )

        # Images
        for img in soup.find_all("img", src=True):
            src = img.get("src")
            if src:
                resources.images.append(urljoin(source_url, src))

        # Links
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href or href.lower().startswith(SKIPPED_LINK_PREFIXES):
                continue
            resources.links.append(urljoin(source_url, href))

        logger.debug(
            f"Extracted from {source_url}: {len(resources.scripts)} scripts, "
            f"{len(resources.inline_scripts)} inline, {len(resources.styles)} styles, "
            f"{len(resources.forms)} forms"
        )
        return resources
