"""
CHAT SERVICE MODULE
===================

Runs one chat turn for a session:

  validate -> sanitize -> read preferences + history -> compose payload
  -> call Gemini -> extract reply -> append (user, assistant) pair -> return

History is only written after Gemini answered. If the call fails (UpstreamError)
or the awaiting task is cancelled, the session's history is left untouched.

Also owns the session lifecycle used by the HTTP layer: get_or_create_session,
preference updates, history reads and reset.

CONCURRENCY:
  Two concurrent chat calls for the same session can interleave their appends;
  clients are expected to send one message at a time per session.
"""

import logging
from typing import Any, Dict, List, Optional

from app.errors import ValidationError
from app.models import ChatResult, Preferences, Turn
from app.services.gemini_client import GeminiClient, extract_reply_text
from app.services.history_ledger import HistoryLedger
from app.services.preference_store import PreferenceStore
from app.services.prompt_composer import compose_payload
from app.services.session_store import Session, SessionStore
from app.utils.sanitize import sanitize_input

logger = logging.getLogger("gemini-chatbot")


class ChatService:
    """
    Coordinates the session store, preference store, history ledger, prompt
    composer and Gemini client. Holds no per-request state itself.
    """

    def __init__(
        self,
        store: SessionStore,
        gemini_client: GeminiClient,
        history: Optional[HistoryLedger] = None,
        preferences: Optional[PreferenceStore] = None,
    ):
        self.store = store
        self.gemini_client = gemini_client
        self.history = history or HistoryLedger(store)
        self.preferences = preferences or PreferenceStore(store)

    # -------------------------------------------------------------------------
    # SESSIONS
    # -------------------------------------------------------------------------

    def get_or_create_session(self, session_id: Optional[str] = None) -> Session:
        """Return the live session for session_id, or a new one if it is missing or expired."""
        session = self.store.get(session_id)
        if session is None:
            session = self.store.create()
        return session

    def reset(self, session_id: str) -> None:
        """
        Empty the session's history and destroy the session. Unknown or expired
        ids are a no-op; a store that cannot destroy raises SessionError.
        """
        if self.store.get(session_id) is None:
            return
        self.history.clear(session_id)
        self.store.destroy(session_id)

    # -------------------------------------------------------------------------
    # PREFERENCES AND HISTORY
    # -------------------------------------------------------------------------

    def get_preferences(self, session_id: str) -> Preferences:
        return self.preferences.get(session_id)

    def update_preferences(self, session_id: str, partial: Dict[str, Any]) -> Preferences:
        updated = self.preferences.update(session_id, partial)
        logger.info("Preferences updated for %s: %s", session_id, updated.to_api())
        return updated

    def get_history(self, session_id: str) -> List[Turn]:
        return self.history.list(session_id)

    # -------------------------------------------------------------------------
    # CHAT
    # -------------------------------------------------------------------------

    async def chat(self, session_id: str, message: Any) -> ChatResult:
        """
        Process one user message and return the assistant's reply.

        Raises ValidationError for a missing or blank message and UpstreamError
        when Gemini fails; neither records anything in history.
        """
        if not isinstance(message, str) or not message.strip():
            raise ValidationError([{"field": "message", "msg": "Message cannot be empty"}])

        user_message = sanitize_input(message)
        preferences = self.preferences.get(session_id)
        turns = self.history.list(session_id)
        payload = compose_payload(user_message, preferences, turns)

        logger.info("Chat turn for %s (history_turns=%s, chars=%s)", session_id, len(turns), len(user_message))
        response = await self.gemini_client.generate(payload)
        reply = extract_reply_text(response)

        self.history.append_pair(
            session_id,
            Turn(role="user", content=user_message),
            Turn(role="assistant", content=reply),
        )
        return ChatResult(reply=reply, session_id=session_id)
