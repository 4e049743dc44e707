from __future__ import annotations
import json
from dataclasses import asdict
from typing import Iterable

from .checker import MESSAGE_NO_DUPLICATES
from .links import links_for
from .models import BeatorajaRecord, SongRecord
from .settings import Settings


def record_to_dict(record: SongRecord, settings: Settings) -> dict:
    data = asdict(record)
    data["format"] = record.format.label
    data["paths"] = list(record.paths)
    data["links"] = asdict(links_for(record, settings))
    return data


def render_json(records: Iterable[SongRecord], settings: Settings) -> str:
    return json.dumps([record_to_dict(r, settings) for r in records], ensure_ascii=False, indent=2)


def render_text(records: Iterable[SongRecord], settings: Settings) -> str:
    records = list(records)
    if not records:
        return MESSAGE_NO_DUPLICATES
    lines: list[str] = []
    for r in records:
        links = links_for(r, settings)
        lines.append(r.display_title)
        if isinstance(r, BeatorajaRecord):
            lines.append(f"  md5: {r.md5}  sha256: {r.sha256 or '-'}")
        else:
            lines.append(f"  hash: {r.hash}")
        for p in r.paths:
            lines.append(f"    {p}")
        lines.append(f"  LR2IR: {links.lr2ir}")
        lines.append(f"  Mocha: {links.mocha or '-'}")
    lines.append(f"{len(records)} duplicate group(s)")
    return "\n".join(lines)
