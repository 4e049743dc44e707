from __future__ import annotations
import enum
import logging
import sqlite3

from . import db as dbm
from .errors import EngineNotReady

log = logging.getLogger("bmsdup.engine")

# GROUP_CONCAT/NULLIF/CTEs and sqlite3_deserialize
MIN_SQLITE_VERSION = (3, 23, 0)


class EngineState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class SqlEngine:
    """Two-state gate in front of the embedded SQLite library."""

    def __init__(self):
        self.state = EngineState.UNINITIALIZED
        self.sqlite_version = ""

    @property
    def is_ready(self) -> bool:
        return self.state is EngineState.READY

    def initialize(self) -> None:
        if self.is_ready:
            return
        if sqlite3.sqlite_version_info < MIN_SQLITE_VERSION:
            raise EngineNotReady(
                f"SQLite {sqlite3.sqlite_version} is too old, "
                f"{'.'.join(map(str, MIN_SQLITE_VERSION))} or newer is required"
            )
        if not hasattr(sqlite3.Connection, "deserialize"):
            raise EngineNotReady("this Python build cannot open in-memory database images")
        self.sqlite_version = sqlite3.sqlite_version
        self.state = EngineState.READY
        log.info(f"SQLite engine ready (SQLite {self.sqlite_version})")

    def open(self, data: bytes) -> sqlite3.Connection:
        if not self.is_ready:
            raise EngineNotReady("SQLite engine is not initialized")
        return dbm.open_database(data)
