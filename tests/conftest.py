"""
Pytest configuration and fixtures
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

import app.main as main_module
from app.services.chat_service import ChatService
from app.services.gemini_client import GeminiClient
from app.services.session_store import InMemorySessionStore


def gemini_reply(*texts):
    """A successful generateContent response body with one candidate."""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": t} for t in texts]}}]}


class FakeClock:
    """Manually advanced monotonic clock for session expiry tests."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeGemini:
    """
    MockTransport handler that records every request and answers with a
    queued response (default: a one-part reply echoing a counter).
    """

    def __init__(self):
        self.requests = []
        self.responses = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            status, body = self.responses.pop(0)
            return httpx.Response(status, json=body)
        return httpx.Response(200, json=gemini_reply(f"reply {len(self.requests)}"))

    def payload(self, index=-1):
        return json.loads(self.requests[index].content)

    def fail_next(self, status=500, message="Internal error"):
        self.responses.append((status, {"error": {"code": status, "message": message}}))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemorySessionStore(max_age=100, clock=clock)


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def gemini_client(fake_gemini):
    return GeminiClient(api_key="test-key", api_url="https://gemini.test/generate", transport=httpx.MockTransport(fake_gemini))


@pytest.fixture
def chat_service(store, gemini_client):
    return ChatService(store, gemini_client)


@pytest.fixture
def client(monkeypatch, fake_gemini):
    """TestClient whose startup builds a GeminiClient backed by fake_gemini."""
    monkeypatch.setattr(
        main_module,
        "GeminiClient",
        lambda: GeminiClient(api_key="test-key", api_url="https://gemini.test/generate", transport=httpx.MockTransport(fake_gemini)),
    )
    monkeypatch.setattr(main_module, "IS_DEVELOPMENT", False)
    monkeypatch.setattr(main_module, "IS_PRODUCTION", False)
    with TestClient(main_module.app) as test_client:
        yield test_client
