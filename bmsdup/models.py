from __future__ import annotations
import enum
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Union

from .errors import UnknownDatabaseFile


class DbFormat(enum.Enum):
    LR2 = "song.db"
    BEATORAJA = "songdata.db"

    @property
    def filename(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return "LR2" if self is DbFormat.LR2 else "beatoraja"


def format_for_filename(name: str) -> DbFormat:
    """Map an uploaded file name to its database format.

    Only the exact base names ``song.db`` and ``songdata.db`` are accepted;
    anything else raises :class:`UnknownDatabaseFile`.
    """
    base = PurePath(name).name
    for fmt in DbFormat:
        if base == fmt.filename:
            return fmt
    raise UnknownDatabaseFile(base)


@dataclass(frozen=True)
class LR2Record:
    hash: str
    title: str
    subtitle: str
    paths: tuple[str, ...]
    format: DbFormat = field(default=DbFormat.LR2, init=False)

    @property
    def key(self) -> str:
        return self.hash

    @property
    def lr2_hash(self) -> str:
        return self.hash

    @property
    def display_title(self) -> str:
        return f"{self.title} {self.subtitle}".strip()


@dataclass(frozen=True)
class BeatorajaRecord:
    md5: str
    sha256: str  # empty when no entry of the group carries one
    title: str
    subtitle: str
    paths: tuple[str, ...]
    format: DbFormat = field(default=DbFormat.BEATORAJA, init=False)

    @property
    def key(self) -> str:
        return self.sha256 or self.md5

    @property
    def lr2_hash(self) -> str:
        return self.md5

    @property
    def display_title(self) -> str:
        return f"{self.title} {self.subtitle}".strip()


SongRecord = Union[LR2Record, BeatorajaRecord]
