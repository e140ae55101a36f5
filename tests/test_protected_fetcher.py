"""Tests for fetching pages behind a stored session."""

import httpx
import pytest

from autologin.errors import DownloadError, SessionError, UpstreamTransportError
from autologin.models import Session
from autologin.protected_fetcher import ProtectedFetcher, resolve_target
from autologin.session_store import SessionStore


PROTECTED_PAGE = """
<html><head><title>Settings</title><link rel="stylesheet" href="/s.css"></head>
<body><script src="/a.js"></script><script>init();</script></body></html>
"""


class TestResolveTarget:
    """Tests for target URL resolution."""

    def test_no_path_returns_final_url(self):
        """Test the final URL is used when no path is given."""
        assert resolve_target("https://example.com/app") == "https://example.com/app"
        assert resolve_target("https://example.com/app", "") == "https://example.com/app"

    def test_relative_path_under_final_url(self):
        """Test relative paths nest under an extensionless final URL."""
        assert resolve_target("https://example.com/app", "settings") == "https://example.com/app/settings"

    def test_trailing_slash_base(self):
        """Test a directory-style final URL."""
        assert resolve_target("https://example.com/app/", "settings") == "https://example.com/app/settings"

    def test_file_like_base(self):
        """Test a final URL naming a file resolves against its directory."""
        assert resolve_target("https://example.com/app/index.php", "settings") == "https://example.com/app/settings"

    def test_root_relative_path(self):
        """Test root-relative paths resolve against the host."""
        assert resolve_target("https://example.com/app", "/billing") == "https://example.com/billing"

    def test_absolute_path(self):
        """Test absolute URLs replace the base entirely."""
        assert resolve_target("https://example.com/app", "https://other.example.org/x") == "https://other.example.org/x"

    def test_host_only_base(self):
        """Test a host-only final URL."""
        assert resolve_target("https://example.com", "settings") == "https://example.com/settings"


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def session_id(store):
    return store.put(
        Session(
            source_url="https://example.com/login",
            final_url="https://example.com/app",
            cookies=["sid=xyz; Path=/", "theme=dark"],
        )
    )


class TestProtectedFetcher:
    """Test cases for ProtectedFetcher."""

    @pytest.mark.asyncio
    async def test_fetch_with_cookies(self, store, session_id):
        """Test the stored cookies and referer are sent."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text=PROTECTED_PAGE)

        fetcher = ProtectedFetcher(store, transport=httpx.MockTransport(handler))

        document = await fetcher.fetch(session_id, "settings")

        request = seen[0]
        assert str(request.url) == "https://example.com/app/settings"
        assert request.headers["Cookie"] == "sid=xyz; Path=/; theme=dark"
        assert request.headers["Referer"] == "https://example.com/app"
        assert document.url == "https://example.com/app/settings"
        assert document.status_code == 200
        assert document.title == "Settings"
        assert document.resources.scripts == ["https://example.com/a.js"]
        assert document.resources.inline_scripts == ["Inline script #1: init();..."]
        assert document.resources.styles == ["https://example.com/s.css"]
        assert document.full_size == len(PROTECTED_PAGE)

    @pytest.mark.asyncio
    async def test_non_2xx_is_reported_not_raised(self, store, session_id):
        """Test error statuses come back on the document."""
        fetcher = ProtectedFetcher(
            store,
            transport=httpx.MockTransport(lambda r: httpx.Response(403, text="<title>Forbidden</title>")),
        )

        document = await fetcher.fetch(session_id)

        assert document.status_code == 403
        assert document.title == "Forbidden"
        assert document.url == "https://example.com/app"

    @pytest.mark.asyncio
    async def test_server_error_is_reported(self, store, session_id):
        """Test 5xx statuses are also accepted."""
        fetcher = ProtectedFetcher(
            store, transport=httpx.MockTransport(lambda r: httpx.Response(500, text="boom"))
        )

        document = await fetcher.fetch(session_id)

        assert document.status_code == 500

    @pytest.mark.asyncio
    async def test_unknown_session(self, store):
        """Test unknown ids raise SessionError."""
        fetcher = ProtectedFetcher(store)

        with pytest.raises(SessionError):
            await fetcher.fetch("session_unknown")
        with pytest.raises(SessionError):
            await fetcher.fetch(None)

    @pytest.mark.asyncio
    async def test_network_failure(self, store, session_id):
        """Test network errors become transport errors."""

        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fetcher = ProtectedFetcher(store, transport=httpx.MockTransport(timeout))

        with pytest.raises(UpstreamTransportError) as exc_info:
            await fetcher.fetch(session_id)

        assert "timeout" in exc_info.value.details.lower()

    @pytest.mark.asyncio
    async def test_session_without_cookies(self, store):
        """Test no Cookie header is sent when the session has none."""
        seen = []
        session_id = store.put(Session(source_url="https://e.com/", final_url="https://e.com/home"))

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text="")

        fetcher = ProtectedFetcher(store, transport=httpx.MockTransport(handler))
        await fetcher.fetch(session_id)

        assert "Cookie" not in seen[0].headers


class TestDownload:
    """Test cases for the raw download passthrough."""

    @pytest.mark.asyncio
    async def test_download_returns_raw_html(self, store, session_id):
        """Test the raw body is returned with cookies attached."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, text="<html>raw</html>")

        fetcher = ProtectedFetcher(store, transport=httpx.MockTransport(handler))

        html = await fetcher.download("https://example.com/app/report", session_id)

        assert html == "<html>raw</html>"
        assert seen[0].headers["Cookie"] == "sid=xyz; Path=/; theme=dark"

    @pytest.mark.asyncio
    async def test_download_error_status(self, store, session_id):
        """Test non-2xx statuses fail the download."""
        fetcher = ProtectedFetcher(
            store, transport=httpx.MockTransport(lambda r: httpx.Response(404, text="nope"))
        )

        with pytest.raises(DownloadError):
            await fetcher.download("https://example.com/missing", session_id)

    @pytest.mark.asyncio
    async def test_download_unknown_session(self, store):
        """Test an unknown session is rejected before any request."""
        fetcher = ProtectedFetcher(store)

        with pytest.raises(SessionError):
            await fetcher.download("https://example.com/", "session_unknown")


class TestRedirectCookies:
    """Test session cookies follow same-host redirects."""

    @staticmethod
    def trailing_slash_site(seen):
        def handler(request):
            seen.append((request.url.path, request.headers.get("Cookie")))
            if request.url.path == "/app":
                return httpx.Response(301, headers={"Location": "/app/"})
            return httpx.Response(200, text=PROTECTED_PAGE)

        return handler

    @pytest.mark.asyncio
    async def test_fetch_keeps_cookies_across_redirect(self, store, session_id):
        """Test every hop of a fetch carries the session cookies."""
        seen = []
        fetcher = ProtectedFetcher(
            store, transport=httpx.MockTransport(self.trailing_slash_site(seen))
        )

        document = await fetcher.fetch(session_id)

        assert seen == [
            ("/app", "sid=xyz; Path=/; theme=dark"),
            ("/app/", "sid=xyz; Path=/; theme=dark"),
        ]
        assert document.status_code == 200
        assert document.title == "Settings"

    @pytest.mark.asyncio
    async def test_download_keeps_cookies_across_redirect(self, store, session_id):
        """Test the download follows a redirect with the session cookies."""
        seen = []
        fetcher = ProtectedFetcher(
            store, transport=httpx.MockTransport(self.trailing_slash_site(seen))
        )

        html = await fetcher.download("https://example.com/app", session_id)

        assert html == PROTECTED_PAGE
        assert seen[-1] == ("/app/", "sid=xyz; Path=/; theme=dark")
