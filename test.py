"""
CHATBOT TEST SCRIPT - Interactive terminal client
=================================================

PURPOSE:
This is a command-line interface for talking to the chatbot backend without
the browser frontend. It keeps the server's session cookie in a
requests.Session, so every message lands in the same conversation until you
reset it.

USAGE:
    python test.py

    Make sure the server is running first: python run.py

COMMANDS:
    /prefs key=value ...  - Update preferences, e.g. /prefs tone=humorous creativity=0.9
    /history              - View the messages the server keeps for this session
    /reset                - Reset the conversation (new session on the next message)
    /quit or /exit        - Exit the test interface
"""

import os

import requests


# -----------------------------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------------------------
# API base URL; change if your server runs on a different host or port.
BASE_URL = os.getenv("CHATBOT_URL", "http://localhost:3000")
# Carries the session cookie between requests.
HTTP = requests.Session()


# -----------------------------------------------------------------------------
# UI HELPERS
# -----------------------------------------------------------------------------

def print_header():
    print("\n" + "=" * 60)
    print("🤖 Gemini Chatbot")
    print("=" * 60)
    print("\nCommands:")
    print("  /prefs key=value ... - Update preferences")
    print("  /history - See chat history")
    print("  /reset - Start a new conversation")
    print("  /quit - Exit")
    print("=" * 60 + "\n")


def get_user_input():
    """Read one line; None on Ctrl-C / Ctrl-D."""
    try:
        return input("\nYou: ").strip()
    except (KeyboardInterrupt, EOFError):
        return None


def _format_errors(response):
    """Turn a 400/500 body into one readable line."""
    try:
        data = response.json()
    except ValueError:
        return f"❌ Error: {response.status_code} - {response.text}"
    if isinstance(data.get("errors"), list):
        return "❌ " + "; ".join(e.get("msg", str(e)) for e in data["errors"])
    detail = data.get("details") or data.get("detail")
    message = data.get("error", f"Error {response.status_code}")
    return f"❌ {message}" + (f" ({detail})" if detail else "")


# -----------------------------------------------------------------------------
# API CALLS
# -----------------------------------------------------------------------------

def send_message(message):
    """POST /api/chat and return the reply text (or an error line)."""
    try:
        response = HTTP.post(f"{BASE_URL}/api/chat", json={"message": message}, timeout=60)
        if response.status_code == 200:
            return response.json().get("response", "No response")
        return _format_errors(response)
    except requests.exceptions.ConnectionError:
        return "❌ Cannot connect to backend. Start it with: python run.py"
    except requests.exceptions.Timeout:
        return "❌ Request timed out."


def parse_preferences(args):
    """'tone=humorous creativity=0.9' -> {"tone": "humorous", "creativity": "0.9"}"""
    prefs = {}
    for item in args.split():
        key, sep, value = item.partition("=")
        if sep:
            prefs[key] = value
    return prefs


def update_preferences(prefs):
    """POST /api/preferences and describe the resulting preferences."""
    if not prefs:
        return "Usage: /prefs responseLength=short|medium|long tone=friendly|professional|humorous ..."
    try:
        response = HTTP.post(f"{BASE_URL}/api/preferences", json=prefs, timeout=10)
    except requests.exceptions.RequestException as e:
        return f"❌ Error: {e}"
    if response.status_code == 200:
        current = response.json()["preferences"]
        return "✅ Preferences: " + ", ".join(f"{k}={v}" for k, v in current.items())
    return _format_errors(response)


def get_chat_history():
    """GET /api/history and format it for display."""
    try:
        response = HTTP.get(f"{BASE_URL}/api/history", timeout=10)
    except requests.exceptions.RequestException as e:
        return f"Error retrieving history: {e}"
    if response.status_code != 200:
        return "Could not retrieve history"

    messages = response.json().get("messages", [])
    if not messages:
        return "No messages in this session"

    output = f"\n📜 Chat History ({len(messages)} messages):\n"
    output += "-" * 60 + "\n"
    for i, msg in enumerate(messages, 1):
        role = "You" if msg.get("role") == "user" else "Assistant"
        output += f"{i}. {role}: {msg.get('content', '')}\n"
    output += "-" * 60 + "\n"
    return output


def reset_conversation():
    """POST /api/reset; the server clears the cookie, so the next message starts fresh."""
    try:
        response = HTTP.post(f"{BASE_URL}/api/reset", timeout=10)
    except requests.exceptions.RequestException as e:
        return f"❌ Error: {e}"
    if response.status_code == 200:
        HTTP.cookies.clear()
        return "🔄 " + response.json().get("message", "Conversation reset")
    return _format_errors(response)


# -----------------------------------------------------------------------------
# MAIN LOOP
# -----------------------------------------------------------------------------

def main():
    """Accept messages and commands until /quit or /exit."""
    print_header()

    while True:
        user_input = get_user_input()
        if user_input is None or user_input in ["/quit", "/exit"]:
            print("\n👋 Goodbye!")
            break
        if not user_input:
            continue

        if user_input == "/history":
            print(get_chat_history())
        elif user_input == "/reset":
            print(reset_conversation())
        elif user_input.startswith("/prefs"):
            print(update_preferences(parse_preferences(user_input[len("/prefs"):])))
        elif user_input.startswith("/"):
            print(f"❌ Unknown command: {user_input}")
        else:
            print("🤖 Assistant: ", end="", flush=True)
            print(send_message(user_input))


# Run the interactive loop when this file is executed (python test.py).
if __name__ == "__main__":
    main()
