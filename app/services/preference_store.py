"""
PREFERENCE STORE MODULE
=======================

Validated, per-session response preferences.

UPDATE RULES:
  - Only responseLength, formality, tone and creativity are recognised; any
    other key in the update is ignored.
  - Every recognised key is validated. If one of them is invalid the whole
    update is rejected with a ValidationError listing each bad field, and the
    stored preferences are left exactly as they were.
"""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.models import Preferences
from app.services.session_store import SessionStore, require_session

logger = logging.getLogger("gemini-chatbot")

PREFERENCE_KEYS = ("responseLength", "formality", "tone", "creativity")


class PreferenceStore:
    """Reads and writes Session.preferences through a SessionStore."""

    def __init__(self, store: SessionStore):
        self.store = store

    def get(self, session_id: str) -> Preferences:
        return require_session(self.store, session_id).preferences

    def update(self, session_id: str, partial: Dict[str, Any]) -> Preferences:
        """Apply a partial update atomically and return the full resulting preferences."""
        if not isinstance(partial, dict):
            raise ValidationError([{"field": "body", "msg": "Preferences must be a JSON object"}])

        session = require_session(self.store, session_id)
        changes = {key: partial[key] for key in PREFERENCE_KEYS if key in partial}

        errors: List[Dict[str, str]] = []
        for key, value in changes.items():
            try:
                Preferences.model_validate({key: value})
            except PydanticValidationError:
                errors.append({"field": key, "msg": f"Invalid {key} value"})
        if errors:
            logger.warning("Rejected preference update for %s: %s", session_id, errors)
            raise ValidationError(errors)

        session.preferences = Preferences.model_validate({**session.preferences.to_api(), **changes})
        self.store.set(session)
        return session.preferences
