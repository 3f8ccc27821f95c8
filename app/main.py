"""
GEMINI CHATBOT MAIN API
=======================

This module defines the FastAPI application and all HTTP endpoints. The server
keeps a short conversation history and response preferences per browser
session and forwards each message to the Gemini API.

ENDPOINTS:
  GET  /                 - Returns API name and list of endpoints.
  GET  /api/health       - Liveness: status, uptime, timestamp, version.
  POST /api/chat         - Send a message; returns the reply and the conversation id.
  POST /api/preferences  - Partial update of the session's response preferences.
  GET  /api/history      - Messages currently kept for the session.
  POST /api/reset        - Destroy the session (history and preferences) and clear the cookie.

SESSION:
  The session id lives in an http-only cookie (SESSION_COOKIE_NAME, 24h, same-site lax)
  set by the server on the first request. Every session-bound response also carries
  it in the X-Conversation-ID header. Sessions are kept in memory and expire after
  24h without requests.

ERRORS:
  400 {"errors": [{"field", "msg"}]}  for invalid input.
  500 {"error", "details"}            for Gemini / session failures; details only when
                                      APP_ENV=development.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, Optional, TypeVar

import uvicorn
from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.errors import SessionError, UpstreamError, ValidationError
from app.models import ChatRequest, ChatResponse
from app.services.chat_service import ChatService
from app.services.gemini_client import GeminiClient
from app.services.session_store import InMemorySessionStore
from config import (
    APP_VERSION,
    CORS_ORIGINS,
    DISCONNECT_POLL_INTERVAL,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    IS_DEVELOPMENT,
    IS_PRODUCTION,
    LOG_FILE,
    MAX_SESSION_AGE,
    PORT,
    SESSION_COOKIE_NAME,
)

T = TypeVar("T")

CONVERSATION_HEADER = "X-Conversation-ID"
CHAT_ERROR_MESSAGE = "An error occurred while processing your request."
RESET_ERROR_MESSAGE = "Failed to reset conversation"


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
logger = logging.getLogger("gemini-chatbot")

# One line per request; also written to LOG_FILE when it is set.
access_logger = logging.getLogger("gemini-chatbot.access")
if LOG_FILE:
    _file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    _file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    access_logger.addHandler(_file_handler)


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCES
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by all route handlers.
session_store: Optional[InMemorySessionStore] = None
gemini_client: Optional[GeminiClient] = None
chat_service: Optional[ChatService] = None

START_TIME = time.monotonic()


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    STARTUP: build the session store, the Gemini client and the chat service.
    SHUTDOWN: close the Gemini client's connection pool. Sessions are not saved.
    """
    global session_store, gemini_client, chat_service

    logger.info("=" * 60)
    logger.info("Gemini Chatbot - Starting Up...")
    logger.info("=" * 60)

    if not GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not set. Chat requests will fail until it is configured.")
    else:
        logger.info("Using Gemini model %s with key %s...", GEMINI_MODEL, GEMINI_API_KEY[:6])

    session_store = InMemorySessionStore()
    gemini_client = GeminiClient()
    chat_service = ChatService(session_store, gemini_client)
    logger.info("Chat service ready (version %s)", APP_VERSION)

    try:
        yield
    finally:
        logger.info("Shutting down Gemini Chatbot...")
        await gemini_client.close()
        chat_service = None
        logger.info("Upstream client closed. Goodbye!")


# -------------------------------------------------------------------------
# FASTAPI APP, CORS AND ACCESS LOG
# -------------------------------------------------------------------------
app = FastAPI(
    title="Gemini Chatbot API",
    description="Conversational proxy in front of the Gemini API",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", CONVERSATION_HEADER],
    expose_headers=[CONVERSATION_HEADER],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    access_logger.info(
        '%s "%s %s" %s %.1fms',
        request.client.host if request.client else "-",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
    )
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are reported as 400 {"errors": [...]}, like every other validation failure."""
    errors = [
        {"field": ".".join(str(p) for p in err["loc"][1:]) or "body", "msg": err["msg"]}
        for err in exc.errors()
    ]
    logger.warning("Invalid request body on %s: %s", request.url.path, errors)
    return JSONResponse(status_code=400, content={"errors": errors})


# -------------------------------------------------------------------------
# HELPERS
# -------------------------------------------------------------------------

def _require_chat_service() -> ChatService:
    if not chat_service:
        raise HTTPException(status_code=503, detail="Chat service not initialized")
    return chat_service


def _attach_session(response: JSONResponse, session_id: str) -> JSONResponse:
    """Set the session cookie and the X-Conversation-ID header on a response."""
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_id,
        max_age=MAX_SESSION_AGE,
        httponly=True,
        samesite="lax",
        secure=IS_PRODUCTION,
    )
    response.headers[CONVERSATION_HEADER] = session_id
    return response


def _error_response(status_code: int, message: str, exc: Exception) -> JSONResponse:
    """Generic error body; the exception text is only exposed in development."""
    content: Dict[str, Any] = {"error": message}
    if IS_DEVELOPMENT:
        content["details"] = str(exc)
    return JSONResponse(status_code=status_code, content=content)


async def _cancel_on_disconnect(request: Request, work: Awaitable[T]) -> T:
    """
    Await work, cancelling it if the client disconnects first or if this
    coroutine is itself cancelled (e.g. on shutdown).
    A cancelled chat turn records nothing, since history is written only after Gemini answers.
    """
    task = asyncio.ensure_future(work)
    try:
        while not task.done():
            await asyncio.wait({task}, timeout=DISCONNECT_POLL_INTERVAL)
            if not task.done() and await request.is_disconnected():
                logger.info("Client disconnected from %s; cancelling upstream call", request.url.path)
                task.cancel()
                break
        return await task
    finally:
        if not task.done():
            task.cancel()


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint (for discovery)."""
    return {
        "message": "Gemini Chatbot API",
        "endpoints": {
            "/api/chat": "Send a message and get the assistant's reply",
            "/api/preferences": "Update response length, formality, tone and creativity",
            "/api/history": "Messages kept for the current session",
            "/api/reset": "Start a new conversation",
            "/api/health": "System health check",
        },
    }


@app.get("/api/health")
async def health():
    """Liveness probe."""
    return {
        "status": "healthy",
        "uptime": time.monotonic() - START_TIME,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "version": APP_VERSION,
    }


@app.post("/api/chat")
async def chat(request: Request, body: ChatRequest):
    """
    Send one message to the assistant.

    REQUEST BODY:  {"message": "What is Python?"}
    RESPONSE:      {"response": "...", "conversationId": "..."}

    The message is trimmed, stripped of < > " ' ` and cut to 2000 characters
    before it is sent. If Gemini fails the turn is not recorded.
    """
    service = _require_chat_service()
    session = service.get_or_create_session(request.cookies.get(SESSION_COOKIE_NAME))

    try:
        result = await _cancel_on_disconnect(request, service.chat(session.id, body.message))
        response = JSONResponse(
            ChatResponse(response=result.reply, conversationId=result.session_id).model_dump()
        )
    except ValidationError as e:
        logger.warning("Rejected chat message for %s: %s", session.id, e)
        response = JSONResponse(status_code=400, content={"errors": e.errors})
    except UpstreamError as e:
        logger.error("Chat error for %s: %s", session.id, e)
        response = _error_response(500, CHAT_ERROR_MESSAGE, e)
    except Exception as e:
        logger.error("Unexpected chat error for %s: %s", session.id, e, exc_info=True)
        response = _error_response(500, CHAT_ERROR_MESSAGE, e)

    return _attach_session(response, session.id)


@app.post("/api/preferences")
async def update_preferences(request: Request, partial: Dict[str, Any] = Body(...)):
    """
    Partially update the session's preferences.

    REQUEST BODY:  {"tone": "humorous", "creativity": 0.9}
    RESPONSE:      {"success": true, "preferences": {...full set...}}

    Unknown keys are ignored. If any known key is invalid nothing is changed
    and the response is 400 with one error per bad field.
    """
    service = _require_chat_service()
    session = service.get_or_create_session(request.cookies.get(SESSION_COOKIE_NAME))

    try:
        preferences = service.update_preferences(session.id, partial)
        response = JSONResponse({"success": True, "preferences": preferences.to_api()})
    except ValidationError as e:
        response = JSONResponse(status_code=400, content={"errors": e.errors})

    return _attach_session(response, session.id)


@app.get("/api/history")
async def get_history(request: Request):
    """Return the turns currently kept for the session, oldest first."""
    service = _require_chat_service()
    session = service.get_or_create_session(request.cookies.get(SESSION_COOKIE_NAME))
    messages = [turn.model_dump() for turn in service.get_history(session.id)]
    return _attach_session(
        JSONResponse({"conversationId": session.id, "messages": messages}),
        session.id,
    )


@app.post("/api/reset")
async def reset(request: Request):
    """
    Destroy the session and clear its cookie. The next request starts a new
    session with empty history and default preferences.
    """
    service = _require_chat_service()
    session_id = request.cookies.get(SESSION_COOKIE_NAME)

    try:
        if session_id:
            service.reset(session_id)
    except SessionError as e:
        logger.error("Session destruction error for %s: %s", session_id, e)
        return _error_response(500, RESET_ERROR_MESSAGE, e)

    response = JSONResponse({"success": True, "message": "Conversation reset successfully"})
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="lax", secure=IS_PRODUCTION)
    return response


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m app.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py); used if someone does python -m app.main"""
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=IS_DEVELOPMENT,
        log_level="info",
    )


if __name__ == "__main__":
    run()
