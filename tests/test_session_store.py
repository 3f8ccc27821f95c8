"""
Tests for the in-memory session store
"""
import pytest

from app.errors import SessionError
from app.models import Preferences
from app.services.session_store import require_session


def test_create_gives_unique_ids_and_defaults(store):
    first = store.create()
    second = store.create()

    assert first.id != second.id
    assert first.history == []
    assert first.preferences == Preferences()
    assert len(store) == 2


def test_get_unknown_or_empty_id_returns_none(store):
    assert store.get("missing") is None
    assert store.get(None) is None
    assert store.get("") is None


def test_sessions_are_isolated(store):
    a = store.create()
    b = store.create()
    a.history.append("x")

    assert store.get(b.id).history == []


def test_session_expires_after_inactivity(store, clock):
    session = store.create()
    clock.advance(101)

    assert store.get(session.id) is None
    assert len(store) == 0


def test_lookup_refreshes_inactivity_window(store, clock):
    session = store.create()
    clock.advance(80)
    assert store.get(session.id) is session
    clock.advance(80)

    assert store.get(session.id) is session


def test_create_sweeps_expired_sessions(store, clock):
    store.create()
    store.create()
    clock.advance(150)

    store.create()

    assert len(store) == 1


def test_sweep_keeps_live_sessions(store, clock):
    old = store.create()
    clock.advance(60)
    live = store.create()
    clock.advance(60)

    assert store.sweep() == 1
    assert store.get(old.id) is None
    assert store.get(live.id) is live


def test_destroy(store):
    session = store.create()
    store.destroy(session.id)
    store.destroy(session.id)

    assert store.get(session.id) is None


def test_require_session_raises_for_unknown_id(store):
    with pytest.raises(SessionError):
        require_session(store, "nope")
