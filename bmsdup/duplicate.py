from __future__ import annotations
import sqlite3
from typing import List

from . import db as dbm
from .models import BeatorajaRecord, DbFormat, LR2Record, SongRecord


def split_paths(joined: str | None) -> tuple[str, ...]:
    if not joined:
        return ()
    return tuple(sorted(joined.split(dbm.PATH_SEPARATOR)))


def _text(value) -> str:
    return "" if value is None else str(value)


def row_to_record(row: sqlite3.Row, fmt: DbFormat) -> SongRecord:
    paths = split_paths(row["paths"])
    if fmt is DbFormat.BEATORAJA:
        return BeatorajaRecord(
            md5=_text(row["md5"]),
            sha256=_text(row["sha256"]),
            title=_text(row["title"]),
            subtitle=_text(row["subtitle"]),
            paths=paths,
        )
    return LR2Record(
        hash=_text(row["hash"]),
        title=_text(row["title"]),
        subtitle=_text(row["subtitle"]),
        paths=paths,
    )


def get_duplicates(conn: sqlite3.Connection, fmt: DbFormat) -> List[SongRecord]:
    dbm.ensure_song_table(conn, fmt)
    return [row_to_record(r, fmt) for r in dbm.fetch_duplicate_rows(conn, fmt)]
