"""
Tests for the Gemini payload composer
"""
import pytest

from app.models import Preferences, Turn
from app.services.prompt_composer import compose_payload


def prefs(**kwargs):
    return Preferences.model_validate(kwargs)


def test_contents_map_history_roles_and_append_message():
    history = [Turn(role="user", content="hi"), Turn(role="assistant", content="hello!")]

    payload = compose_payload("how are you", Preferences(), history)

    assert payload["contents"] == [
        {"role": "user", "parts": [{"text": "hi"}]},
        {"role": "model", "parts": [{"text": "hello!"}]},
        {"role": "user", "parts": [{"text": "how are you"}]},
    ]


def test_empty_history():
    payload = compose_payload("first", Preferences())

    assert payload["contents"] == [{"role": "user", "parts": [{"text": "first"}]}]


@pytest.mark.parametrize("length, tokens", [("short", 200), ("medium", 500), ("long", 1000)])
def test_max_output_tokens(length, tokens):
    payload = compose_payload("x", prefs(responseLength=length))

    assert payload["generationConfig"]["maxOutputTokens"] == tokens


def test_creativity_sets_temperature():
    payload = compose_payload("x", prefs(tone="humorous", creativity=0.9))

    assert payload["generationConfig"]["temperature"] == 0.9


@pytest.mark.parametrize("tone, temperature", [("professional", 0.2), ("humorous", 0.7), ("friendly", 0.5)])
def test_zero_creativity_falls_back_to_tone(tone, temperature):
    payload = compose_payload("x", prefs(tone=tone, creativity=0))

    assert payload["generationConfig"]["temperature"] == temperature


def test_fixed_sampling_and_safety_settings():
    payload = compose_payload("x", prefs(creativity=0.3, responseLength="short"))

    assert payload["generationConfig"]["topP"] == 0.9
    assert payload["generationConfig"]["topK"] == 40
    assert payload["safetySettings"] == [
        {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
        {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    ]


def test_composer_does_not_mutate_history():
    history = [Turn(role="user", content="hi")]
    compose_payload("again", Preferences(), history)

    assert history == [Turn(role="user", content="hi")]
