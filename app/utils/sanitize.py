"""
INPUT SANITIZER
===============

Cleans raw user text before it is composed into a Gemini request or stored
in history. Only the literal characters < > " ' ` are removed; there is no
HTML awareness, so "Hello <script>" becomes "Hello script".
"""

import re

from config import MAX_MESSAGE_LENGTH

_STRIPPED_CHARS = re.compile(r"[<>\"'`]")


def sanitize_input(raw, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Trim, strip markup characters and cut to max_length. Non-strings give ""."""
    if not raw or not isinstance(raw, str):
        return ""
    return _STRIPPED_CHARS.sub("", raw.strip())[:max_length]
