"""
SESSION STORE MODULE
====================

Keyed store of chat sessions. Each session owns its own history (list of Turn)
and its own Preferences; nothing is shared between sessions.

EXPIRY:
  Sessions expire after MAX_SESSION_AGE seconds without being looked up.
  Expiry is lazy: get() drops an expired session when it is asked for it, and
  create() sweeps the whole store at most once per sweep_interval. There is no
  background thread or timer.

The HTTP layer and ChatService only use the SessionStore interface, so an
external backend (Redis, etc.) can replace InMemorySessionStore.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from app.errors import SessionError
from app.models import Preferences, Turn
from config import MAX_SESSION_AGE

logger = logging.getLogger("gemini-chatbot")


@dataclass
class Session:
    """One client's conversation state."""
    id: str
    history: List[Turn] = field(default_factory=list)
    preferences: Preferences = field(default_factory=Preferences)
    last_seen: float = 0.0


class SessionStore(ABC):
    """get / set / destroy interface used by the chat services."""

    @abstractmethod
    def create(self) -> Session:
        """Create and store a new session with a fresh id."""

    @abstractmethod
    def get(self, session_id: Optional[str]) -> Optional[Session]:
        """Return the live session for session_id, or None if unknown or expired."""

    @abstractmethod
    def set(self, session: Session) -> None:
        """Store (or overwrite) a session."""

    @abstractmethod
    def destroy(self, session_id: str) -> None:
        """Remove a session. Unknown ids are not an error."""


def require_session(store: SessionStore, session_id: str) -> Session:
    """store.get() that raises SessionError instead of returning None."""
    session = store.get(session_id)
    if session is None:
        raise SessionError(f"Unknown or expired session: {session_id}")
    return session


class InMemorySessionStore(SessionStore):
    """
    Process-local session store. Lost on restart.

    clock is injectable so tests can move time forward.
    """

    def __init__(
        self,
        max_age: float = MAX_SESSION_AGE,
        sweep_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_age = max_age
        self.sweep_interval = max_age if sweep_interval is None else sweep_interval
        self._clock = clock
        self._sessions: Dict[str, Session] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> Session:
        now = self._clock()
        if now - self._last_sweep >= self.sweep_interval:
            self.sweep()
        session = Session(id=str(uuid.uuid4()), last_seen=now)
        self._sessions[session.id] = session
        logger.info("Session created: %s", session.id)
        return session

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        session = self._sessions.get(session_id)
        if session is None:
            return None
        now = self._clock()
        if self._is_expired(session, now):
            del self._sessions[session_id]
            logger.info("Session expired: %s", session_id)
            return None
        session.last_seen = now
        return session

    def set(self, session: Session) -> None:
        session.last_seen = self._clock()
        self._sessions[session.id] = session

    def destroy(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("Session destroyed: %s", session_id)

    def sweep(self) -> int:
        """Drop every expired session. Returns how many were removed."""
        now = self._clock()
        self._last_sweep = now
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s, now)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Swept %s expired session(s)", len(expired))
        return len(expired)

    def _is_expired(self, session: Session, now: float) -> bool:
        return now - session.last_seen > self.max_age
