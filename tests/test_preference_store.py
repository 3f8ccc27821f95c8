"""
Tests for validated preference updates
"""
import pytest

from app.errors import ValidationError
from app.models import Preferences
from app.services.preference_store import PreferenceStore


@pytest.fixture
def preferences(store):
    return PreferenceStore(store)


@pytest.fixture
def session_id(store):
    return store.create().id


def test_defaults(preferences, session_id):
    assert preferences.get(session_id).to_api() == {
        "responseLength": "medium",
        "formality": "neutral",
        "tone": "friendly",
        "creativity": 0.5,
    }


def test_partial_update_returns_full_set(preferences, session_id):
    result = preferences.update(session_id, {"tone": "humorous", "creativity": 0.9})

    assert result.to_api() == {
        "responseLength": "medium",
        "formality": "neutral",
        "tone": "humorous",
        "creativity": 0.9,
    }
    assert preferences.get(session_id) == result


def test_numeric_string_creativity_is_accepted(preferences, session_id):
    assert preferences.update(session_id, {"creativity": "0.25"}).creativity == 0.25


@pytest.mark.parametrize("creativity", [0, 1, 0.0, 1.0])
def test_creativity_bounds_are_inclusive(preferences, session_id, creativity):
    assert preferences.update(session_id, {"creativity": creativity}).creativity == creativity


def test_unknown_keys_are_ignored(preferences, session_id):
    result = preferences.update(session_id, {"language": "fr", "formality": "formal"})

    assert result.formality == "formal"
    assert "language" not in result.to_api()


def test_one_invalid_field_rejects_whole_update(preferences, session_id):
    before = preferences.get(session_id)

    with pytest.raises(ValidationError) as exc_info:
        preferences.update(session_id, {"tone": "professional", "responseLength": "huge", "creativity": 0.1})

    assert exc_info.value.errors == [{"field": "responseLength", "msg": "Invalid responseLength value"}]
    assert preferences.get(session_id) == before


def test_every_invalid_field_is_reported(preferences, session_id):
    with pytest.raises(ValidationError) as exc_info:
        preferences.update(session_id, {"formality": "rude", "tone": "angry"})

    assert {e["field"] for e in exc_info.value.errors} == {"formality", "tone"}


@pytest.mark.parametrize("creativity", [-0.1, 1.5, "lots", True, None, float("nan")])
def test_invalid_creativity(preferences, session_id, creativity):
    with pytest.raises(ValidationError):
        preferences.update(session_id, {"creativity": creativity})

    assert preferences.get(session_id) == Preferences()


def test_non_object_update_is_rejected(preferences, session_id):
    with pytest.raises(ValidationError):
        preferences.update(session_id, ["tone", "humorous"])
