"""
Pytest fixtures: in-memory LR2 and beatoraja song databases serialized to bytes.
"""
from __future__ import annotations

import logging
import sqlite3

import pytest

from bmsdup.checker import DuplicateChecker
from bmsdup.engine import SqlEngine
from bmsdup.settings import Settings

LR2_SCHEMA = """
CREATE TABLE song (
    hash TEXT,
    title TEXT,
    subtitle TEXT,
    genre TEXT,
    artist TEXT,
    path TEXT,
    type INTEGER
);
"""

BEATORAJA_SCHEMA = """
CREATE TABLE song (
    md5 TEXT NOT NULL,
    sha256 TEXT NOT NULL,
    title TEXT,
    subtitle TEXT,
    genre TEXT,
    artist TEXT,
    path TEXT,
    folder TEXT
);
"""


def build_db(schema: str, insert_sql: str, rows) -> bytes:
    conn = sqlite3.connect(":memory:")
    try:
        conn.executescript(schema)
        conn.executemany(insert_sql, rows)
        conn.commit()
        return conn.serialize()
    finally:
        conn.close()


def lr2_bytes(rows) -> bytes:
    """rows: (hash, title, subtitle, path)"""
    return build_db(LR2_SCHEMA, "INSERT INTO song(hash, title, subtitle, path) VALUES(?,?,?,?)", rows)


def beatoraja_bytes(rows) -> bytes:
    """rows: (md5, sha256, title, subtitle, path)"""
    return build_db(
        BEATORAJA_SCHEMA, "INSERT INTO song(md5, sha256, title, subtitle, path) VALUES(?,?,?,?,?)", rows
    )


@pytest.fixture
def make_lr2_db():
    return lr2_bytes


@pytest.fixture
def make_beatoraja_db():
    return beatoraja_bytes


@pytest.fixture
def settings(tmp_path):
    return Settings(app_dir=tmp_path / "appdir")


@pytest.fixture
def checker():
    c = DuplicateChecker(SqlEngine())
    c.initialize()
    return c


@pytest.fixture
def reset_bmsdup_logger():
    logger = logging.getLogger("bmsdup")
    saved = list(logger.handlers)
    logger.handlers.clear()
    yield logger
    for h in list(logger.handlers):
        h.close()
    logger.handlers[:] = saved
