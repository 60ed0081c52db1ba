"""
Tests for durable auth token persistence.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from smart_booking.application.session import AuthSession
from smart_booking.infrastructure.store.json_store import JsonTokenStore
from smart_booking.infrastructure.store.memory_store import MemoryTokenStore


def test_json_store_survives_restart():
    """A token saved by one session is loaded by the next one."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "nested" / "auth_token.json")

        first = AuthSession(JsonTokenStore(path=path))
        assert first.token is None
        first.set_token("tok-123")

        second = AuthSession(JsonTokenStore(path=path))
        assert second.token == "tok-123"
        assert second.is_authenticated


def test_clear_removes_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "auth_token.json"
        session = AuthSession(JsonTokenStore(path=str(path)))
        session.set_token("tok-123")
        assert path.exists()

        session.clear()

        assert not path.exists()
        assert AuthSession(JsonTokenStore(path=str(path))).token is None


def test_corrupted_file_is_ignored():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "auth_token.json"
        path.write_text("{not json", encoding="utf-8")

        assert JsonTokenStore(path=str(path)).load() is None


def test_memory_store_lifecycle():
    store = MemoryTokenStore()
    session = AuthSession(store)
    assert session.token is None

    session.set_token("abc")
    assert store.load() == "abc"

    session.clear()
    assert store.load() is None
    assert not session.is_authenticated
