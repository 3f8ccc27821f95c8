"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (app.main) calls these services;
they don't handle HTTP, only sessions, chat flow and the Gemini call.

MODULES:
    session_store    - Keyed, lazily expiring session store
    history_ledger   - Bounded per-session turn history
    preference_store - Validated per-session preferences
    prompt_composer  - Builds the Gemini request body
    gemini_client    - Async HTTP client for Gemini generateContent
    chat_service     - One chat turn end to end
"""
