from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from modtime.config import PROJECT_ROOT, SETTINGS, Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_handlers(settings: Settings = SETTINGS) -> list[logging.Handler]:
    log_dir = PROJECT_ROOT / settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(
        log_dir / settings.log_file,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    return [file_handler, console_handler]


def setup_logging(settings: Settings = SETTINGS) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        handlers=build_handlers(settings),
    )
