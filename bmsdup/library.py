from __future__ import annotations
import logging
import os
from pathlib import Path, PureWindowsPath
from typing import Optional

from send2trash import send2trash

from .models import DbFormat

log = logging.getLogger("bmsdup.library")


def library_root(db_path: Path, fmt: DbFormat) -> Path:
    """Directory that relative song paths of this database are based on."""
    db_path = Path(db_path)
    if fmt is DbFormat.LR2:
        # <LR2>/LR2files/Database/song.db
        parents = db_path.parents
        if len(parents) > 2 and parents[1].name.lower() == "lr2files":
            return parents[2]
    return db_path.parent


def resolve_song_path(raw_path: str, root: Optional[Path]) -> Optional[Path]:
    """Absolute location of a stored song path, or None when it cannot be placed.

    Relative paths need a library root; drive-letter paths only exist on Windows.
    """
    if os.name != "nt" and PureWindowsPath(raw_path).drive:
        return None
    # Both players store Windows separators
    raw = raw_path.replace("\\", "/") if os.sep == "/" else raw_path
    p = Path(raw)
    if p.is_absolute():
        return p
    if root is None:
        return None
    return Path(root) / p


def trash_song_file(path: Path) -> None:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such file: {path}")
    send2trash(str(path))
    log.info(f"Moved {path} to trash")
