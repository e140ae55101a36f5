"""Shared outbound HTTP helpers.

Every call opens its own ``httpx.AsyncClient`` so that no cookie jar is
shared between sessions; cookies travel only through explicit headers.
"""

from typing import Optional
from urllib.parse import urlparse

import httpx

from autologin.constants import BROWSER_HEADERS, MAX_REDIRECTS


def browser_headers(user_agent: Optional[str] = None, **extra: str) -> dict[str, str]:
    """Build the browser-like header set, with optional additions.

    Args:
        user_agent: Override for the default browser user agent
        **extra: Additional headers (use a dict for names with dashes)

    Returns:
        New header dictionary
    """
    headers = dict(BROWSER_HEADERS)
    if user_agent:
        headers["User-Agent"] = user_agent
    headers.update(extra)
    return headers


def cookie_hook(cookies: list[str], url: str):
    """Request hook sending ``cookies`` on every request to the host of ``url``.

    httpx drops a caller's ``Cookie`` header when it follows a redirect, so
    the header is attached per request instead, redirect hops included.
    Cookies the client picked up from ``Set-Cookie`` along the way are kept
    after the captured ones.
    """
    header = join_cookies(cookies)
    host = urlparse(url).hostname

    async def attach_cookies(request: httpx.Request) -> None:
        if request.url.host != host:
            return
        picked_up = request.headers.get("Cookie")
        request.headers["Cookie"] = f"{header}; {picked_up}" if picked_up else header

    return attach_cookies


def open_client(
    timeout: float,
    max_redirects: int = MAX_REDIRECTS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    cookies: Optional[list[str]] = None,
    cookie_url: Optional[str] = None,
) -> httpx.AsyncClient:
    """Create a redirect-following client with a fixed timeout.

    When ``cookies`` are given they are sent on every request to the host
    of ``cookie_url``.
    """
    event_hooks = {}
    if cookies and cookie_url:
        event_hooks["request"] = [cookie_hook(cookies, cookie_url)]

    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        max_redirects=max_redirects,
        transport=transport,
        event_hooks=event_hooks,
    )


def get_set_cookies(response: httpx.Response) -> list[str]:
    """Raw ``Set-Cookie`` header values, in order, across the redirect chain."""
    cookies: list[str] = []
    for hop in [*response.history, response]:
        cookies.extend(hop.headers.get_list("set-cookie"))
    return cookies


def join_cookies(cookies: list[str]) -> str:
    return "; ".join(cookies)


def origin_of(url: str) -> str:
    """Scheme and host of a URL, e.g. ``https://example.com:8443``."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def final_url_of(response: httpx.Response, fallback: str) -> str:
    """Post-redirect URL of a response, or ``fallback`` if none is known."""
    url = str(response.url) if response.url else ""
    return url or fallback


def describe_error(exc: Exception) -> str:
    """Short human-readable description of a transport failure."""
    if isinstance(exc, httpx.TimeoutException):
        return f"Request timeout: {exc}" if str(exc) else "Request timeout"
    if isinstance(exc, httpx.TooManyRedirects):
        return f"Too many redirects: {exc}"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from {exc.request.url}"
    message = str(exc)
    return message if message else type(exc).__name__
