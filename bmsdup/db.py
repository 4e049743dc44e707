from __future__ import annotations
import sqlite3

from .errors import DatabaseOpenError
from .models import DbFormat

SQLITE_HEADER = b"SQLite format 3\x00"

# Separator used by GROUP_CONCAT; not a legal character in Windows paths
PATH_SEPARATOR = "|"

REQUIRED_COLUMNS = {
    DbFormat.LR2: ("path", "title", "subtitle", "hash"),
    DbFormat.BEATORAJA: ("path", "title", "subtitle", "md5", "sha256"),
}

LR2_DUPLICATES_SQL = r"""
SELECT
    hash,
    title,
    subtitle,
    GROUP_CONCAT(path, '|') AS paths
FROM song
WHERE path <> '' AND hash <> ''
GROUP BY hash
HAVING COUNT(*) > 1
ORDER BY title, subtitle
"""

# Entries with an empty sha256 borrow max(sha256) of the entries sharing
# their md5; md5 is the key only when no such sha256 exists.
BEATORAJA_DUPLICATES_SQL = r"""
WITH entries AS (
    SELECT md5, sha256, title, subtitle, path
    FROM song
    WHERE path <> ''
),
md5_sha256 AS (
    SELECT md5, max(sha256) AS sha256
    FROM entries
    WHERE md5 <> ''
    GROUP BY md5
),
keyed AS (
    SELECT e.md5, e.sha256, e.title, e.subtitle, e.path,
           COALESCE(NULLIF(e.sha256, ''), NULLIF(m.sha256, ''), NULLIF(e.md5, '')) AS group_key
    FROM entries e
    LEFT JOIN md5_sha256 m ON m.md5 = e.md5
)
SELECT
    max(md5) AS md5,
    max(sha256) AS sha256,
    max(title) AS title,
    max(subtitle) AS subtitle,
    GROUP_CONCAT(path, '|') AS paths
FROM keyed
WHERE group_key IS NOT NULL
GROUP BY group_key
HAVING COUNT(*) > 1
ORDER BY title, subtitle
"""


def open_database(data: bytes) -> sqlite3.Connection:
    """Open a raw database image as an in-memory connection.

    SQLite only validates the header on first access, so ``sqlite_master``
    is read here to surface corrupt input as :class:`DatabaseOpenError`.
    """
    if not data:
        raise DatabaseOpenError("file is empty")
    buf = bytearray(data)
    # In-memory images cannot be opened in WAL mode; reset the read/write versions to legacy
    if buf.startswith(SQLITE_HEADER) and len(buf) >= 20 and buf[18] == 2 and buf[19] == 2:
        buf[18] = 1
        buf[19] = 1
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    try:
        conn.deserialize(bytes(buf))
        conn.execute("SELECT COUNT(*) FROM sqlite_master").fetchone()
    except sqlite3.DatabaseError as e:
        conn.close()
        raise DatabaseOpenError(str(e)) from e
    conn.row_factory = sqlite3.Row
    return conn


def song_columns(conn: sqlite3.Connection) -> list[str]:
    cur = conn.execute("PRAGMA table_info(song)")
    return [r[1] for r in cur.fetchall()]


def ensure_song_table(conn: sqlite3.Connection, fmt: DbFormat) -> None:
    cols = song_columns(conn)
    if not cols:
        raise DatabaseOpenError("no such table: song")
    missing = [c for c in REQUIRED_COLUMNS[fmt] if c not in cols]
    if missing:
        raise DatabaseOpenError(f"song table is missing column(s) for {fmt.label}: {', '.join(missing)}")


def count_song_entries(conn: sqlite3.Connection) -> int:
    cur = conn.execute("SELECT COUNT(*) FROM song")
    return int(cur.fetchone()[0])


def fetch_lr2_duplicate_rows(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    return conn.execute(LR2_DUPLICATES_SQL).fetchall()


def fetch_beatoraja_duplicate_rows(conn: sqlite3.Connection) -> list[sqlite3.Row]:
    return conn.execute(BEATORAJA_DUPLICATES_SQL).fetchall()


def fetch_duplicate_rows(conn: sqlite3.Connection, fmt: DbFormat) -> list[sqlite3.Row]:
    try:
        if fmt is DbFormat.BEATORAJA:
            return fetch_beatoraja_duplicate_rows(conn)
        return fetch_lr2_duplicate_rows(conn)
    except sqlite3.DatabaseError as e:
        raise DatabaseOpenError(str(e)) from e
