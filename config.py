"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all chatbot settings: the Gemini API key and endpoint,
  session lifetime, history and message limits, and logging options.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so the API key stays out of code).
  - Exposes GEMINI_API_KEY, GEMINI_MODEL and GEMINI_API_URL for the upstream client.
  - Defines MAX_MESSAGE_LENGTH and HISTORY_LIMIT used by the chat pipeline.
  - Defines MAX_SESSION_AGE and the session cookie name used by the HTTP layer.

USAGE:
  Import what you need: `from config import GEMINI_API_KEY, HISTORY_LIMIT`
  All services import from here so behaviour is consistent.
"""

import os
from dotenv import load_dotenv


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
load_dotenv()

# "development" turns on error details in API responses.
# "production" marks the session cookie as secure (HTTPS only).
APP_ENV = os.getenv("APP_ENV", "").strip().lower()
IS_DEVELOPMENT = APP_ENV == "development"
IS_PRODUCTION = APP_ENV == "production"

PORT = int(os.getenv("PORT", "3000"))
APP_VERSION = "1.0.0"

# ============================================================================
# GEMINI API CONFIGURATION
# ============================================================================
# Gemini is the generative-language API every chat turn is forwarded to.
# The key is sent as the ?key= query parameter on each generateContent call.

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL",
    f"https://generativelanguage.googleapis.com/v1beta/models/{GEMINI_MODEL}:generateContent",
)

# Seconds before an upstream call is abandoned.
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

# ============================================================================
# CHAT LIMITS
# ============================================================================
# Maximum length (characters) for a single sanitized user message.
MAX_MESSAGE_LENGTH = 2000

# Maximum number of turns (user and assistant messages, not pairs) kept per session.
# Oldest turns are dropped first once the limit is exceeded.
HISTORY_LIMIT = 20

# ============================================================================
# SESSIONS
# ============================================================================
# Sessions expire after this many seconds without a request (24 hours).
MAX_SESSION_AGE = 24 * 60 * 60

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "conversation_id")

# How often (seconds) a chat request checks whether the client went away.
DISCONNECT_POLL_INTERVAL = 0.5

# ============================================================================
# HTTP / LOGGING
# ============================================================================
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Optional file for the access log (one line per request). Empty disables it.
LOG_FILE = os.getenv("LOG_FILE", "").strip()
