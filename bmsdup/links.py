from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .models import BeatorajaRecord, SongRecord
from .settings import Settings


@dataclass(frozen=True)
class SongLinks:
    lr2ir: str
    mocha: Optional[str]  # None when there is no sha256 to look up


def lr2ir_url(record: SongRecord, settings: Settings) -> str:
    return settings.lr2ir_url_template.format(hash=record.lr2_hash)


def mocha_url(record: SongRecord, settings: Settings) -> Optional[str]:
    if isinstance(record, BeatorajaRecord) and record.sha256:
        return settings.mocha_url_template.format(sha256=record.sha256)
    return None


def links_for(record: SongRecord, settings: Settings) -> SongLinks:
    return SongLinks(lr2ir=lr2ir_url(record, settings), mocha=mocha_url(record, settings))
