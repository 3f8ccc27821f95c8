"""
HISTORY LEDGER MODULE
=====================

Bounded, ordered log of turns for each session.

TRIMMING:
  append_pair() adds the user turn and the assistant turn, then drops turns
  from the front until at most `limit` remain. This is plain FIFO: with an
  odd limit the oldest kept turn can be an assistant reply whose prompt was
  dropped. Pairs are not kept whole.
"""

from typing import List

from app.models import Turn
from app.services.session_store import SessionStore, require_session
from config import HISTORY_LIMIT


class HistoryLedger:
    """Reads and writes Session.history through a SessionStore."""

    def __init__(self, store: SessionStore, limit: int = HISTORY_LIMIT):
        self.store = store
        self.limit = limit

    def append(self, session_id: str, turn: Turn) -> None:
        session = require_session(self.store, session_id)
        session.history.append(turn)
        self.store.set(session)

    def append_pair(self, session_id: str, user_turn: Turn, assistant_turn: Turn) -> None:
        session = require_session(self.store, session_id)
        session.history.extend((user_turn, assistant_turn))
        if len(session.history) > self.limit:
            del session.history[: len(session.history) - self.limit]
        self.store.set(session)

    def list(self, session_id: str) -> List[Turn]:
        """Snapshot of the history; changing it does not touch the session."""
        return list(require_session(self.store, session_id).history)

    def clear(self, session_id: str) -> None:
        session = require_session(self.store, session_id)
        session.history.clear()
        self.store.set(session)
