"""
In-memory session storage.

Sessions live for the lifetime of the process: there is no expiry, no
capacity bound and no persistence. The store is constructed once at startup
and handed to the request layer; callers refer to sessions only by id.

Access is not locked. Two requests working on the same id can interleave
their read and delete steps.
"""
import logging
import secrets
import time
from typing import Dict, Optional

from autologin.constants import SESSION_ID_PREFIX
from autologin.models import Session

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """Mint an id from the current time in milliseconds plus 64 random bits."""
    return f"{SESSION_ID_PREFIX}{int(time.time() * 1000)}_{secrets.token_hex(8)}"


class SessionStore:
    """Process-wide mapping of session id to Session."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def put(self, session: Session) -> str:
        """Store a session under a freshly minted id.

        The id is written back onto ``session.id``.

        Returns:
            The new session id
        """
        session_id = new_session_id()
        while session_id in self._sessions:
            session_id = new_session_id()

        session.id = session_id
        self._sessions[session_id] = session
        logger.info(f"Session stored: {session_id} ({len(session.cookies)} cookies)")
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def has(self, session_id: Optional[str]) -> bool:
        return bool(session_id) and session_id in self._sessions

    def delete(self, session_id: str) -> bool:
        """Remove a session. Always succeeds, whether or not it existed."""
        if self._sessions.pop(session_id, None) is not None:
            logger.info(f"Session deleted: {session_id}")
        return True

    def __len__(self) -> int:
        return len(self._sessions)
