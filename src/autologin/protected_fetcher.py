"""Fetching pages behind a stored login session."""

import logging
import posixpath
from typing import Optional
from urllib.parse import urljoin, urlparse, urlunparse

import httpx

from autologin.config import Config
from autologin.errors import DownloadError, SessionError, UpstreamTransportError
from autologin.models import ProtectedDocument, Session
from autologin.resource_extractor import ResourceExtractor, extract_title
from autologin.session_store import SessionStore
from autologin.transport import browser_headers, describe_error, open_client

logger = logging.getLogger(__name__)


def resolve_target(final_url: str, path: Optional[str] = None) -> str:
    """Resolve a caller path against a session's final URL.

    A final URL whose last segment has no file extension is treated as a
    directory, so ``https://example.com/app`` plus ``settings`` gives
    ``https://example.com/app/settings``. Absolute and root-relative paths
    resolve as usual.
    """
    if not path:
        return final_url

    parsed = urlparse(final_url)
    last_segment = parsed.path.rsplit("/", 1)[-1]
    if last_segment and not posixpath.splitext(last_segment)[1]:
        parsed = parsed._replace(path=parsed.path + "/")
    return urljoin(urlunparse(parsed), path)


class ProtectedFetcher:
    """Refetches content with the cookies captured at login."""

    def __init__(
        self,
        store: SessionStore,
        config: Optional[Config] = None,
        extractor: Optional[ResourceExtractor] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.store = store
        self.config = config or Config()
        self.extractor = extractor or ResourceExtractor()
        self.transport = transport

    def _require_session(self, session_id: Optional[str]) -> Session:
        session = self.store.get(session_id)
        if session is None:
            raise SessionError()
        return session

    def _session_client(self, session: Session, url: str) -> httpx.AsyncClient:
        return open_client(
            self.config.fetch_timeout,
            self.config.max_redirects,
            self.transport,
            cookies=session.cookies,
            cookie_url=url,
        )

    async def fetch(self, session_id: Optional[str], path: Optional[str] = None) -> ProtectedDocument:
        """Fetch a page using a stored session.

        Every status code is accepted; the document carries the status the
        site returned.

        Args:
            session_id: Id returned by a previous login
            path: Optional path resolved against the session's final URL

        Returns:
            ProtectedDocument with extracted resources

        Raises:
            SessionError: If the session id is unknown
            UpstreamTransportError: On network failure or timeout
        """
        session = self._require_session(session_id)
        target_url = resolve_target(session.final_url, path)
        headers = browser_headers(self.config.user_agent, Referer=session.final_url)

        logger.info(f"Fetching protected content: {target_url} (session {session_id})")

        try:
            async with self._session_client(session, target_url) as client:
                response = await client.get(target_url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Fetch error for {target_url}: {describe_error(e)}")
            raise UpstreamTransportError(
                "Failed to fetch protected content", details=describe_error(e), url=target_url
            ) from e

        html = response.text
        soup = self.extractor.parse(html)

        return ProtectedDocument(
            url=target_url,
            status_code=response.status_code,
            html=html,
            title=extract_title(soup),
            resources=self.extractor.extract_from_soup(soup, target_url),
        )

    async def download(self, url: str, session_id: Optional[str]) -> str:
        """Fetch the raw HTML of a URL with a session's cookies.

        Raises:
            SessionError: If the session id is unknown
            DownloadError: On any fetch failure, including non-2xx statuses
        """
        session = self._require_session(session_id)
        headers = browser_headers(self.config.user_agent)

        try:
            async with self._session_client(session, url) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Download failed for {url}: {describe_error(e)}")
            raise DownloadError("Download failed", details=describe_error(e)) from e

        logger.info(f"Downloaded {len(response.text)} characters from {url}")
        return response.text
