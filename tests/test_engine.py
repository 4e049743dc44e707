from __future__ import annotations

import sqlite3

import pytest

from bmsdup import engine as engine_mod
from bmsdup.engine import EngineState, SqlEngine
from bmsdup.errors import EngineNotReady


def test_engine_starts_uninitialized():
    engine = SqlEngine()
    assert engine.state is EngineState.UNINITIALIZED
    assert not engine.is_ready
    with pytest.raises(EngineNotReady):
        engine.open(b"anything")


def test_initialize_is_idempotent():
    engine = SqlEngine()
    engine.initialize()
    engine.initialize()
    assert engine.state is EngineState.READY
    assert engine.sqlite_version == sqlite3.sqlite_version


def test_open_after_initialize(make_lr2_db):
    engine = SqlEngine()
    engine.initialize()
    conn = engine.open(make_lr2_db([("h", "t", "", "p")]))
    try:
        assert conn.execute("SELECT COUNT(*) FROM song").fetchone()[0] == 1
    finally:
        conn.close()


def test_old_sqlite_is_refused(monkeypatch):
    monkeypatch.setattr(engine_mod.sqlite3, "sqlite_version_info", (3, 7, 0))
    engine = SqlEngine()
    with pytest.raises(EngineNotReady, match="too old"):
        engine.initialize()
    assert engine.state is EngineState.UNINITIALIZED
