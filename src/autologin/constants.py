# src/autologin/constants.py
"""Centralized constants for login automation.

Timeouts and limits that operators may want to change also live on
``autologin.config.Config``; the values here are the defaults.
"""

# =============================================================================
# Outbound HTTP
# =============================================================================

# Browser user agent presented to target sites
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
)

# Header set sent with every page fetch
BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

DEFAULT_CONFIG_FILE = "config.json"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Seconds
FETCH_TIMEOUT = 15.0
SUBMIT_TIMEOUT = 20.0

MAX_REDIRECTS = 5

# Submission responses at or above this status are transport failures
SERVER_ERROR_STATUS = 500

# =============================================================================
# Form handling
# =============================================================================

DEFAULT_LOGIN_METHOD = "POST"

# Method reported for forms found on protected pages
DEFAULT_FORM_METHOD = "GET"

# =============================================================================
# Success heuristic
# =============================================================================

# Body markers whose presence suggests an authenticated page
POSITIVE_BODY_MARKERS = ("dashboard", "welcome", "logout", "my account")

# Title marker whose presence suggests an authenticated page
POSITIVE_TITLE_MARKER = "dashboard"

# Body markers whose absence counts in favour of success
NEGATIVE_BODY_MARKERS = ("invalid", "incorrect", "login failed")

# Login succeeds when strictly more indicators than this are true
SUCCESS_THRESHOLD = 2

LOGIN_SUCCESS_MESSAGE = "Login successful!"
LOGIN_UNCERTAIN_MESSAGE = "Login may have failed - check response"

# =============================================================================
# Previews
# =============================================================================

RESPONSE_PREVIEW_LENGTH = 2000
HTML_PREVIEW_LENGTH = 5000
INLINE_SCRIPT_PREVIEW_LENGTH = 100
ELLIPSIS = "..."

# =============================================================================
# Sessions
# =============================================================================

SESSION_ID_PREFIX = "session_"
SESSION_CLEARED_MESSAGE = "Session cleared"
