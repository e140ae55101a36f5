"""Heuristic login success detection.

Scores a post-login page against eight fixed indicators. The rule set and
threshold are part of the observable behaviour and are not tuned here; the
result is an estimate with no guarantee of correctness.
"""

from typing import List

from autologin.constants import (
    NEGATIVE_BODY_MARKERS,
    POSITIVE_BODY_MARKERS,
    POSITIVE_TITLE_MARKER,
    SUCCESS_THRESHOLD,
)


def success_indicators(body_text: str, title_text: str) -> List[bool]:
    """Evaluate the eight success indicators.

    Order: body contains dashboard, welcome, logout, my account; title
    contains dashboard; body lacks invalid, incorrect, login failed.
    """
    body = (body_text or "").lower()
    title = (title_text or "").lower()

    indicators = [marker in body for marker in POSITIVE_BODY_MARKERS]
    indicators.append(POSITIVE_TITLE_MARKER in title)
    indicators.extend(marker not in body for marker in NEGATIVE_BODY_MARKERS)
    return indicators


def is_login_successful(body_text: str, title_text: str) -> bool:
    """True when more than two of the eight indicators hold."""
    return sum(success_indicators(body_text, title_text)) > SUCCESS_THRESHOLD
