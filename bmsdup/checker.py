from __future__ import annotations
import contextlib
import enum
import logging
from pathlib import Path
from typing import Callable, List, Optional

from . import db as dbm
from .duplicate import get_duplicates
from .engine import SqlEngine
from .errors import DatabaseOpenError, EngineNotReady, UnknownDatabaseFile
from .library import library_root
from .models import SongRecord, format_for_filename

log = logging.getLogger("bmsdup.checker")

STATUS_INITIALIZING = "Initializing..."
STATUS_LOADING = "Loading..."
STATUS_DONE = "Load complete"
STATUS_FAILED = "Load failed: {error}"
ALERT_UNKNOWN_FILE = "Unknown file was uploaded"
MESSAGE_NO_DUPLICATES = "No duplicates found. Your database is clean."


class CheckerState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    LOADING = "loading"
    DONE = "done"
    FAILED = "failed"


class DuplicateChecker:
    """Runs one duplicate check per selected file and keeps its outcome.

    ``status``, ``checked`` and ``songs`` mirror what the window shows.
    ``alert`` is set only when the file name itself was rejected.
    """

    def __init__(self, engine: SqlEngine):
        self.engine = engine
        self.state = CheckerState.READY if engine.is_ready else CheckerState.UNINITIALIZED
        self.status = ""
        self.checked = False
        self.songs: List[SongRecord] = []
        self.alert: Optional[str] = None
        self.source_name: Optional[str] = None
        # Base of relative song paths; kept while the shown songs stay valid
        self.library_root: Optional[Path] = None

    @property
    def no_duplicates(self) -> bool:
        return self.checked and not self.songs

    def initialize(self) -> None:
        self.status = STATUS_INITIALIZING
        try:
            self.engine.initialize()
        except EngineNotReady as e:
            self.status = f"Initialization failed: {e}"
            raise
        self.state = CheckerState.READY
        self.status = ""

    def _reset(self, status: str, state: CheckerState) -> None:
        self.status = status
        self.checked = False
        self.songs = []
        self.library_root = None
        self.state = state

    def check(
        self, name: Optional[str], read_bytes: Callable[[], bytes], path: Optional[Path] = None
    ) -> List[SongRecord]:
        if self.state is CheckerState.UNINITIALIZED or not self.engine.is_ready:
            raise EngineNotReady("call initialize() before checking a file")
        self.alert = None
        if name is None:
            self.status = ""
            self.checked = False
            self.state = CheckerState.READY
            return self.songs

        try:
            fmt = format_for_filename(name)
        except UnknownDatabaseFile as e:
            log.warning(f"Rejected file {e.name!r}")
            self._reset(STATUS_FAILED.format(error=ALERT_UNKNOWN_FILE.lower()), CheckerState.FAILED)
            self.alert = ALERT_UNKNOWN_FILE
            return self.songs

        self.source_name = name
        self.status = STATUS_LOADING
        self.state = CheckerState.LOADING
        log.info(f"Checking {name} as {fmt.label} database")
        try:
            data = read_bytes()
            with contextlib.closing(self.engine.open(data)) as conn:
                songs = get_duplicates(conn, fmt)
                total = dbm.count_song_entries(conn)
        except (DatabaseOpenError, OSError) as e:
            log.error(f"Failed to load {name}: {e}")
            self._reset(STATUS_FAILED.format(error=e), CheckerState.FAILED)
            return self.songs

        self.songs = songs
        self.library_root = library_root(path, fmt) if path is not None else None
        self.checked = True
        self.status = STATUS_DONE
        self.state = CheckerState.DONE
        log.info(f"{name}: {len(songs)} duplicate group(s) among {total} entries")
        return self.songs

    def check_path(self, path: Optional[Path]) -> List[SongRecord]:
        if path is None:
            return self.check(None, bytes)
        path = Path(path)
        return self.check(path.name, path.read_bytes, path)
