from __future__ import annotations

import pytest

from utils import session_store


@pytest.fixture
def store(monkeypatch, generators):
    now = [0.0]
    monkeypatch.setattr(session_store, "_clock", lambda: now[0])
    monkeypatch.setattr(session_store, "TTL_SECONDS", 100)
    monkeypatch.setattr(session_store, "MAX_SESSIONS", 3)
    return now


def test_same_session_gets_same_generator(store):
    first = session_store.get_generator("a")
    store[0] = 50
    assert session_store.get_generator("a") is first


def test_expired_sessions_are_dropped(store):
    first = session_store.get_generator("a")
    session_store.get_generator("b")

    store[0] = 150
    session_store.get_generator("c")

    assert session_store.active_sessions() == 1
    assert session_store.get_generator("a") is not first


def test_access_refreshes_lifetime(store):
    first = session_store.get_generator("a")
    store[0] = 90
    session_store.get_generator("a")
    store[0] = 150
    assert session_store.get_generator("a") is first


def test_oldest_session_is_evicted_when_full(store):
    generators = {name: session_store.get_generator(name) for name in ("a", "b", "c")}
    store[0] = 1
    session_store.get_generator("a")
    session_store.get_generator("d")

    assert session_store.active_sessions() == 3
    assert session_store.get_generator("a") is generators["a"]
    assert session_store.get_generator("c") is generators["c"]
    assert session_store.get_generator("b") is not generators["b"]
