"""
GEMINI CHATBOT APPLICATION PACKAGE
==================================

Main Python package for the chatbot backend:

  from app.main import app
  from app.models import Preferences, Turn
  from app.services.chat_service import ChatService

FILE STRUCTURE:
  app/
    __init__.py   - This file; marks 'app' as a package.
    main.py       - FastAPI app and all HTTP endpoints (/api/chat, /api/preferences, ...).
    models.py     - Pydantic models for turns, preferences and API bodies.
    errors.py     - ValidationError, UpstreamError, SessionError.
    services/     - Sessions, history, preferences, prompt composition, Gemini client, chat flow.
    utils/        - Input sanitizing.
"""
