from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler

from .settings import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(settings: Settings) -> logging.Logger:
    logger = logging.getLogger("bmsdup")
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    # Console handler
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(ch)
    # Rotating file handler
    try:
        settings.app_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            settings.log_path, maxBytes=settings.log_max_bytes, backupCount=settings.log_backup_count, encoding="utf-8"
        )
        fh.setLevel(logging.INFO)
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(fh)
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")
    return logger
