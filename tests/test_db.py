from __future__ import annotations

import sqlite3

import pytest

from bmsdup import db as dbm
from bmsdup.errors import DatabaseOpenError
from bmsdup.models import DbFormat


def test_open_database_reads_serialized_bytes(make_lr2_db):
    data = make_lr2_db([("h1", "Title", "", "a.bms")])
    conn = dbm.open_database(data)
    try:
        assert dbm.count_song_entries(conn) == 1
        row = conn.execute("SELECT hash, path FROM song").fetchone()
        assert row["hash"] == "h1"
        assert row["path"] == "a.bms"
    finally:
        conn.close()


def test_open_database_rejects_empty_bytes():
    with pytest.raises(DatabaseOpenError, match="empty"):
        dbm.open_database(b"")


def test_open_database_rejects_garbage():
    with pytest.raises(DatabaseOpenError) as exc:
        dbm.open_database(b"this is not a database " * 200)
    assert str(exc.value)


def test_open_database_accepts_wal_mode_file(tmp_path):
    path = tmp_path / "songdata.db"
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("CREATE TABLE song (md5 TEXT, sha256 TEXT, title TEXT, subtitle TEXT, path TEXT)")
    conn.execute("INSERT INTO song VALUES ('m', 's', 't', '', 'p')")
    conn.commit()
    conn.close()

    mem = dbm.open_database(path.read_bytes())
    try:
        assert dbm.count_song_entries(mem) == 1
    finally:
        mem.close()


def test_ensure_song_table_requires_table():
    raw = sqlite3.connect(":memory:")
    raw.execute("CREATE TABLE folder (path TEXT)")
    data = raw.serialize()
    raw.close()
    conn = dbm.open_database(data)
    try:
        with pytest.raises(DatabaseOpenError, match="no such table: song"):
            dbm.ensure_song_table(conn, DbFormat.LR2)
    finally:
        conn.close()


def test_ensure_song_table_checks_format_columns(make_lr2_db):
    conn = dbm.open_database(make_lr2_db([("h", "t", "", "p")]))
    try:
        dbm.ensure_song_table(conn, DbFormat.LR2)
        with pytest.raises(DatabaseOpenError) as exc:
            dbm.ensure_song_table(conn, DbFormat.BEATORAJA)
        assert "md5" in str(exc.value)
        assert "sha256" in str(exc.value)
    finally:
        conn.close()


def test_fetch_duplicate_rows_concatenates_paths(make_lr2_db):
    conn = dbm.open_database(make_lr2_db([("h", "t", "", "x.bms"), ("h", "t", "", "y.bms")]))
    try:
        rows = dbm.fetch_duplicate_rows(conn, DbFormat.LR2)
    finally:
        conn.close()
    assert len(rows) == 1
    assert sorted(rows[0]["paths"].split(dbm.PATH_SEPARATOR)) == ["x.bms", "y.bms"]
