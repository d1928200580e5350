from __future__ import annotations

from logging.handlers import RotatingFileHandler

from modtime.config import Settings
from modtime.infra.logging import build_handlers


def test_file_handler_follows_settings(tmp_path) -> None:
    settings = Settings(
        database_url="sqlite://",
        log_dir=str(tmp_path / "logs"),
        log_file="timer.log",
        log_max_bytes=1024,
        log_backup_count=5,
    )

    handlers = build_handlers(settings)
    try:
        file_handler = next(h for h in handlers if isinstance(h, RotatingFileHandler))
        assert file_handler.baseFilename == str(tmp_path / "logs" / "timer.log")
        assert file_handler.maxBytes == 1024
        assert file_handler.backupCount == 5
        assert len(handlers) == 2
    finally:
        for handler in handlers:
            handler.close()
