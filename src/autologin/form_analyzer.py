"""Login form discovery.

Locates the first form on a page and captures its action, method and named
inputs. Field classification happens separately in
``autologin.credential_mapper``.
"""

import logging
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from autologin.constants import DEFAULT_LOGIN_METHOD
from autologin.models import FormField, LoginForm

logger = logging.getLogger(__name__)


class FormAnalyzer:
    """Finds the login form in an HTML document.

    The first ``<form>`` in document order is taken as the login form; no
    attempt is made to score competing forms.
    """

    def __init__(self, parser: str = "html.parser"):
        """
        Args:
            parser: BeautifulSoup tree builder (``html.parser`` never fails on
                malformed markup)
        """
        self.parser = parser

    def analyze(self, html: str, base_url: str) -> LoginForm:
        """Extract the login form from a page.

        Args:
            html: Raw page HTML
            base_url: URL the page was loaded from, used to resolve the action

        Returns:
            LoginForm with an absolute action URL. A page without forms
            yields an empty-field form posting back to ``base_url``.
        """
        soup = BeautifulSoup(html or "", self.parser)
        form = soup.find("form")

        if form is None:
            logger.info(f"No form found on {base_url}, using page URL as action")
            return LoginForm(
                action_url=base_url,
                method=DEFAULT_LOGIN_METHOD,
                fields=[],
                raw_action=base_url,
            )

        raw_action = form.get("action") or base_url
        method = (form.get("method") or DEFAULT_LOGIN_METHOD).upper()
        action_url = urljoin(base_url, raw_action)
        fields = self._extract_fields(form)

        logger.info(
            f"Detected form on {base_url}: {method} {action_url} "
            f"with {len(fields)} named inputs"
        )

        return LoginForm(
            action_url=action_url,
            method=method,
            fields=fields,
            raw_action=raw_action,
        )

    def _extract_fields(self, form: Tag) -> list[FormField]:
        """Collect named inputs in document order; first occurrence of a name wins."""
        fields: list[FormField] = []
        seen: set[str] = set()

        for element in form.find_all("input"):
            name = element.get("name")
            if not name or name in seen:
                continue
            seen.add(name)
            fields.append(
                FormField(
                    name=name,
                    field_type=_attr(element, "type"),
                    original_value=_attr(element, "value") or "",
                )
            )

        return fields


def _attr(element: Tag, name: str) -> Optional[str]:
    # bs4 returns a list for multi-valued attributes such as class
    value = element.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value
