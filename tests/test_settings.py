from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

from bmsdup.logs import setup_logging
from bmsdup.settings import LR2IR_URL_TEMPLATE, Settings, ensure_app_dirs, load_prefs, save_prefs


def test_prefs_round_trip(tmp_path):
    s = Settings(app_dir=tmp_path)
    s.last_dir = "/games/beatoraja"
    s.window_width = 1280
    s.use_trash = False
    save_prefs(s)

    restored = load_prefs(Settings(app_dir=tmp_path))
    assert restored.last_dir == "/games/beatoraja"
    assert restored.window_width == 1280
    assert restored.use_trash is False
    assert restored.lr2ir_url_template == LR2IR_URL_TEMPLATE


def test_missing_prefs_keep_defaults(tmp_path):
    s = load_prefs(Settings(app_dir=tmp_path / "nowhere"))
    assert s.last_dir == ""
    assert s.window_height == 700


def test_corrupt_prefs_keep_defaults(tmp_path):
    s = Settings(app_dir=tmp_path)
    s.prefs_path.write_text("{not json")
    load_prefs(s)
    assert s.window_width == 1000


def test_prefs_values_are_coerced(tmp_path):
    s = Settings(app_dir=tmp_path)
    s.prefs_path.write_text(json.dumps({"window_width": "800", "window_height": "tall", "unknown": 1}))
    load_prefs(s)
    assert s.window_width == 800
    assert s.window_height == 700
    assert not hasattr(s, "unknown")


def test_ensure_app_dirs(tmp_path):
    s = Settings(app_dir=tmp_path / "a" / "b")
    ensure_app_dirs(s)
    assert s.app_dir.is_dir()


def test_setup_logging_adds_console_and_file_handlers(tmp_path, reset_bmsdup_logger):
    s = Settings(app_dir=tmp_path)
    logger = setup_logging(s)
    assert logger is reset_bmsdup_logger
    assert logger.level == logging.INFO
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    count = len(logger.handlers)
    setup_logging(s)
    assert len(logger.handlers) == count

    logging.getLogger("bmsdup.checker").info("hello from the checker")
    for h in logger.handlers:
        h.flush()
    assert "hello from the checker" in s.log_path.read_text(encoding="utf-8")
