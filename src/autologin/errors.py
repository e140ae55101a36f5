"""Exception hierarchy for login automation.

Each exception maps onto one HTTP failure class at the API boundary:

- ValidationError (and SessionError): 400 with a JSON ``{"error": ...}`` body
- UpstreamTransportError: 500 with ``{"error", "details"}``
- DownloadError: 500 with a plain-text body
"""

from typing import Optional


class AutoLoginError(Exception):
    """Base class for all errors raised by the package."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AutoLoginError):
    """Required caller input is missing or refers to nothing."""

    status_code = 400


class SessionError(ValidationError):
    """The session id is missing or unknown to the store."""

    def __init__(self, message: str = "Invalid or expired session", details: Optional[str] = None):
        super().__init__(message, details)


class UpstreamTransportError(AutoLoginError):
    """Network failure, timeout, or server error while talking to the target site."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details)
        self.url = url
        self.upstream_status = status_code


class DownloadError(AutoLoginError):
    """Any failure in the raw HTML download passthrough."""
