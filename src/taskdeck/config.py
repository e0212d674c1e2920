"""Settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    log_level: str
    log_dir: Path
    db_path: Path
    storage_backend: str  # "sqlite" or "memory"
    host: str
    port: int

    @staticmethod
    def from_env() -> "Settings":
        backend = _env("STORAGE_BACKEND", "sqlite").lower()
        if backend not in {"sqlite", "memory"}:
            backend = "sqlite"
        return Settings(
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            log_dir=Path(_env("LOG_DIR", "./logs")).expanduser(),
            db_path=Path(_env("DB_PATH", "./data/taskdeck.db")).expanduser(),
            storage_backend=backend,
            host=_env("HOST", "127.0.0.1"),
            port=_env_int("PORT", 8000),
        )
