"""
ERRORS MODULE
=============

The three failure kinds the chat pipeline can raise. None of them is retried;
app.main turns each into a JSON error response:

  ValidationError - bad input shape or values            -> 400 {"errors": [...]}
  UpstreamError   - Gemini API or network failure         -> 500
  SessionError    - session lookup / destroy failure      -> 500
"""

from typing import Dict, List, Optional


class ChatbotError(Exception):
    """Base class for every error raised by the chat services."""


class ValidationError(ChatbotError):
    """
    Input rejected before any state was touched.

    errors is a list of {"field": ..., "msg": ...} dicts, one per bad field.
    """

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__(", ".join(e["msg"] for e in errors))


class UpstreamError(ChatbotError):
    """The Gemini call failed. The message is the one Gemini returned, when it returned one."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class SessionError(ChatbotError):
    """The session store could not find or destroy a session."""
