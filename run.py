"""
RUN SCRIPT - Start the Gemini Chatbot server
============================================

PURPOSE:
  Single entry point to start the backend.

WHAT IT DOES:
  - Imports the FastAPI app from app.main.
  - Runs it with uvicorn on host 0.0.0.0 and PORT (default 3000).
  - reload is on only when APP_ENV=development.

USAGE:
  python run.py

  Then call the API (e.g. with python test.py). API docs: http://localhost:3000/docs

NOTE:
  Before running, set GEMINI_API_KEY in .env.
"""

import uvicorn

from config import IS_DEVELOPMENT, PORT

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",   # String path to the FastAPI app instance (module:variable).
        host="0.0.0.0",   # Listen on all network interfaces so other devices can connect.
        port=PORT,
        reload=IS_DEVELOPMENT
    )
