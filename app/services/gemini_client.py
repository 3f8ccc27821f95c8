"""
GEMINI CLIENT MODULE
====================

Async client for the Gemini generateContent REST endpoint. Used by ChatService
for every chat turn.

FLOW:
  1. generate(payload): POST the composed payload to GEMINI_API_URL?key=GEMINI_API_KEY.
  2. Non-2xx responses, network errors and timeouts raise UpstreamError with the
     message Gemini returned (error.message) when there is one.
  3. extract_reply_text(response): join the text parts of the first candidate.

Calls are never retried. Latency is logged for every call, successful or not.

CANCELLATION:
  generate() is a plain coroutine over httpx, so cancelling the task awaiting it
  aborts the in-flight HTTP request. UPSTREAM_TIMEOUT bounds every call.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from app.errors import UpstreamError
from config import GEMINI_API_KEY, GEMINI_API_URL, UPSTREAM_TIMEOUT

logger = logging.getLogger("gemini-chatbot")

FALLBACK_REPLY = "I'm sorry, I cannot provide a response to that request."
DEFAULT_ERROR_MESSAGE = "Failed to call Gemini API"
CLIENT_HEADER = "gemini-chatbot/1.0"


def _error_message(response: httpx.Response) -> str:
    """Gemini's error.message from an error response body, if it has one."""
    try:
        data = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return data["error"].get("message") or DEFAULT_ERROR_MESSAGE
    return DEFAULT_ERROR_MESSAGE


def extract_reply_text(response: Dict[str, Any]) -> str:
    """
    Join the text of every part of the first candidate with newlines.
    Falls back to FALLBACK_REPLY when there is no candidate, content or text
    part (for example when Gemini blocked the prompt).
    """
    candidates = response.get("candidates") if isinstance(response, dict) else None
    if not candidates:
        return FALLBACK_REPLY
    parts = (candidates[0].get("content") or {}).get("parts") or []
    texts = [part["text"] for part in parts if isinstance(part, dict) and "text" in part]
    if not texts:
        return FALLBACK_REPLY
    return "\n".join(texts)


class GeminiClient:
    """
    Thin wrapper around an httpx.AsyncClient bound to one Gemini endpoint and key.

    transport is only passed by tests (httpx.MockTransport).
    """

    def __init__(
        self,
        api_key: str = GEMINI_API_KEY,
        api_url: str = GEMINI_API_URL,
        timeout: float = UPSTREAM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "X-Goog-Api-Client": CLIENT_HEADER},
        )

    async def generate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST payload to Gemini and return the parsed JSON response."""
        if not self.api_key:
            raise UpstreamError("GEMINI_API_KEY is not configured")

        start = time.perf_counter()
        try:
            response = await self._client.post(self.api_url, params={"key": self.api_key}, json=payload)
        except httpx.TimeoutException as e:
            logger.error("Gemini API call timed out after %.0fms: %s", _elapsed_ms(start), e)
            raise UpstreamError("Gemini API request timed out") from e
        except httpx.HTTPError as e:
            logger.error("Gemini API call failed after %.0fms: %s", _elapsed_ms(start), e)
            raise UpstreamError(str(e) or DEFAULT_ERROR_MESSAGE) from e

        logger.info("Gemini API response time: %.0fms (status %s)", _elapsed_ms(start), response.status_code)

        if not response.is_success:
            message = _error_message(response)
            logger.error("Gemini API error %s: %s", response.status_code, message)
            raise UpstreamError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error("Gemini API returned a non-JSON body")
            raise UpstreamError("Gemini API returned an invalid response") from e

    async def close(self) -> None:
        await self._client.aclose()


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
