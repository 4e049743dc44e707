from __future__ import annotations


class BmsDupError(Exception):
    pass


class UnknownDatabaseFile(BmsDupError):
    """Raised for a file that is neither ``song.db`` nor ``songdata.db``."""

    def __init__(self, name: str):
        super().__init__(f"Unknown database file: {name}")
        self.name = name


class DatabaseOpenError(BmsDupError):
    """The bytes could not be opened as a song database."""


class EngineNotReady(BmsDupError):
    pass
