"""
PROMPT COMPOSER MODULE
======================

Builds the JSON body for Gemini's generateContent endpoint from the sanitized
user message, the session's preferences and its history. Pure: no I/O, no
session access.

PAYLOAD SHAPE:
  {
    "contents": [{"role": "user" | "model", "parts": [{"text": ...}]}, ...],
    "generationConfig": {"maxOutputTokens", "temperature", "topP", "topK"},
    "safetySettings": [{"category": ..., "threshold": "BLOCK_MEDIUM_AND_ABOVE"}, ...]
  }
"""

from typing import Any, Dict, Sequence

from app.models import Preferences, Turn

# responseLength -> maxOutputTokens; anything else gets DEFAULT_MAX_OUTPUT_TOKENS.
MAX_OUTPUT_TOKENS = {"long": 1000, "short": 200}
DEFAULT_MAX_OUTPUT_TOKENS = 500

# tone -> temperature when creativity is not usable.
TONE_TEMPERATURE = {"professional": 0.2, "humorous": 0.7}
DEFAULT_TEMPERATURE = 0.5

TOP_P = 0.9
TOP_K = 40

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"


def _has_creativity(preferences: Preferences) -> bool:
    # Legacy rule: creativity == 0 counts as "not set" and falls back to the tone.
    return preferences.creativity is not None and preferences.creativity != 0


def temperature_for(preferences: Preferences) -> float:
    if _has_creativity(preferences):
        return preferences.creativity
    return TONE_TEMPERATURE.get(preferences.tone, DEFAULT_TEMPERATURE)


def max_output_tokens_for(preferences: Preferences) -> int:
    return MAX_OUTPUT_TOKENS.get(preferences.response_length, DEFAULT_MAX_OUTPUT_TOKENS)


def _content(role: str, text: str) -> Dict[str, Any]:
    return {"role": role, "parts": [{"text": text}]}


def compose_payload(message: str, preferences: Preferences, history: Sequence[Turn] = ()) -> Dict[str, Any]:
    """Return the generateContent request body for one chat turn."""
    contents = [_content("user" if turn.role == "user" else "model", turn.content) for turn in history]
    contents.append(_content("user", message))

    return {
        "contents": contents,
        "generationConfig": {
            "maxOutputTokens": max_output_tokens_for(preferences),
            "temperature": temperature_for(preferences),
            "topP": TOP_P,
            "topK": TOP_K,
        },
        "safetySettings": [
            {"category": category, "threshold": SAFETY_THRESHOLD} for category in SAFETY_CATEGORIES
        ],
    }
