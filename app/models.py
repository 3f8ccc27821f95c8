"""
DATA MODELS MODULE
==================

This file defines the Pydantic models used for API requests, responses, and
internal session state. FastAPI uses these to validate incoming JSON and to
serialize responses; the services use them for turns and preferences.

MODELS:
  Turn            - One message in a conversation (role + content). Immutable.
  Preferences     - Per-session response settings (length, formality, tone, creativity).
  ChatRequest     - Body of POST /api/chat.
  ChatResponse    - Body returned by POST /api/chat (reply + conversation id).
  ChatResult      - What ChatService.chat returns to the HTTP layer.
"""

import math
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ==============================================================================
# CONVERSATION STATE
# ==============================================================================

class Turn(BaseModel):
    """
    A single message in a conversation (user or assistant).
    Stored in order inside a session's history; order defines chronology.
    """
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class Preferences(BaseModel):
    """
    Response settings for one session.

    JSON uses camelCase (responseLength); Python code uses the snake_case
    attribute names. Defaults are medium / neutral / friendly / 0.5.
    """
    model_config = ConfigDict(populate_by_name=True)

    response_length: Literal["short", "medium", "long"] = Field("medium", alias="responseLength")
    formality: Literal["casual", "neutral", "formal"] = "neutral"
    tone: Literal["friendly", "professional", "humorous"] = "friendly"
    creativity: float = Field(0.5, ge=0.0, le=1.0)

    @field_validator("creativity", mode="before")
    @classmethod
    def _creativity_must_be_numeric(cls, value):
        # Pydantic would otherwise accept True/False as 1.0/0.0.
        if isinstance(value, bool) or value is None:
            raise ValueError("creativity must be a number")
        if isinstance(value, str):
            value = float(value.strip())
        if isinstance(value, float) and math.isnan(value):
            raise ValueError("creativity must be a number")
        return value

    def to_api(self) -> dict:
        """Serialize with the camelCase keys the API exposes."""
        return self.model_dump(by_alias=True)


# ==============================================================================
# REQUEST / RESPONSE MODELS
# ==============================================================================

class ChatRequest(BaseModel):
    """
    Request body for POST /api/chat.

    message is optional here so that a missing message is reported by
    ChatService as a 400 with a field-level error, like an empty one.
    """
    message: Optional[str] = None


class ChatResponse(BaseModel):
    """
    Response body for POST /api/chat.

    - response: The assistant's reply text.
    - conversationId: The session this message belongs to.
    """
    response: str
    conversationId: str


class ChatResult(BaseModel):
    """Outcome of one successful chat turn."""
    reply: str
    session_id: str
