from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    storage_key: str = "tasks"
    tick_interval_ms: int = 1000
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_file: str = "modtime.log"
    log_max_bytes: int = 2_000_000
    log_backup_count: int = 3


load_env()

DATABASE_URL = os.getenv("DATABASE_URL", "").strip() or f"sqlite:///{PROJECT_ROOT / 'modtime.db'}"

SETTINGS = Settings(
    database_url=DATABASE_URL,
    storage_key=os.getenv("STORAGE_KEY", "tasks").strip() or "tasks",
    tick_interval_ms=int(os.getenv("TICK_INTERVAL_MS", "1000")),
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    log_file=os.getenv("LOG_FILE", "modtime.log"),
    log_max_bytes=int(os.getenv("LOG_MAX_BYTES", "2000000")),
    log_backup_count=int(os.getenv("LOG_BACKUP_COUNT", "3")),
)
