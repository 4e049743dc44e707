from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

LR2IR_URL_TEMPLATE = "http://www.dream-pro.info/~lavalse/LR2IR/search.cgi?mode=ranking&bmsmd5={hash}"
MOCHA_URL_TEMPLATE = "https://mocha-repository.info/song.php?sha256={sha256}"

# Fields persisted to ui_prefs.json
PREF_KEYS = ["last_dir", "window_width", "window_height", "lr2ir_url_template", "mocha_url_template", "use_trash"]

log = logging.getLogger("bmsdup.settings")


@dataclass
class Settings:
    app_dir: Path = field(default_factory=lambda: Path.home() / ".bmsdup")
    lr2ir_url_template: str = LR2IR_URL_TEMPLATE
    mocha_url_template: str = MOCHA_URL_TEMPLATE
    use_trash: bool = True  # enables "Move to Trash" on duplicate paths
    last_dir: str = ""  # start directory of the file dialog
    window_width: int = 1000
    window_height: int = 700
    log_max_bytes: int = 5 * 1024 * 1024
    log_backup_count: int = 3

    @property
    def log_path(self) -> Path:
        return self.app_dir / "bmsdup.log"

    @property
    def prefs_path(self) -> Path:
        return self.app_dir / "ui_prefs.json"


def ensure_app_dirs(settings: Settings) -> None:
    settings.app_dir.mkdir(parents=True, exist_ok=True)


def load_prefs(settings: Settings) -> Settings:
    prefs_path = settings.prefs_path
    if not prefs_path.exists():
        return settings
    try:
        data = json.loads(prefs_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning(f"Ignoring unreadable prefs file {prefs_path}: {e}")
        return settings
    if not isinstance(data, dict):
        log.warning(f"Ignoring prefs file {prefs_path}: not a JSON object")
        return settings
    for k in PREF_KEYS:
        v = data.get(k)
        if v is None:
            continue
        # keep the dataclass default type (str/int/bool)
        current = getattr(settings, k)
        if isinstance(current, bool):
            v = bool(v)
        elif isinstance(current, int):
            try:
                v = int(v)
            except (TypeError, ValueError):
                continue
        else:
            v = str(v)
        setattr(settings, k, v)
    return settings


def save_prefs(settings: Settings) -> None:
    data = {k: getattr(settings, k) for k in PREF_KEYS}
    ensure_app_dirs(settings)
    try:
        settings.prefs_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    except OSError as e:
        log.warning(f"Failed to save prefs to {settings.prefs_path}: {e}")
