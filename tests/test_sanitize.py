"""
Tests for the input sanitizer
"""
import pytest

from app.utils.sanitize import sanitize_input
from config import MAX_MESSAGE_LENGTH


def test_strips_angle_brackets():
    assert sanitize_input("Hello <script>") == "Hello script"


def test_trims_whitespace():
    assert sanitize_input("   hi there \n") == "hi there"


@pytest.mark.parametrize("raw", [
    "<b>bold</b>",
    "it's \"quoted\"",
    "`rm -rf` <>'\"`",
    "<" * 3000,
])
def test_output_never_contains_stripped_characters(raw):
    cleaned = sanitize_input(raw)
    assert not set(cleaned) & set("<>\"'`")
    assert len(cleaned) <= MAX_MESSAGE_LENGTH


def test_truncates_to_max_length():
    assert sanitize_input("a" * 2500) == "a" * MAX_MESSAGE_LENGTH


def test_strips_before_truncating():
    # 10 stripped characters do not count towards the limit
    assert sanitize_input("<" * 10 + "b" * 2000) == "b" * 2000


@pytest.mark.parametrize("raw", [None, "", 42, ["hi"], {"message": "hi"}])
def test_non_string_or_empty_gives_empty_string(raw):
    assert sanitize_input(raw) == ""


def test_only_markup_characters_gives_empty_string():
    assert sanitize_input("<>''") == ""
