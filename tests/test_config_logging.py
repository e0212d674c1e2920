# tests/test_config_logging.py

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from taskdeck.config import Settings
from taskdeck.observability.logging import JsonFormatter


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LOG_LEVEL", "LOG_DIR", "DB_PATH", "STORAGE_BACKEND", "HOST", "PORT"):
        monkeypatch.delenv(name, raising=False)
    s = Settings.from_env()
    assert s.log_level == "INFO"
    assert s.db_path == Path("./data/taskdeck.db")
    assert s.storage_backend == "sqlite"
    assert s.port == 8000


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("STORAGE_BACKEND", "MEMORY")
    monkeypatch.setenv("PORT", "not-a-number")
    s = Settings.from_env()
    assert s.log_level == "DEBUG"
    assert s.db_path == tmp_path / "x.db"
    assert s.storage_backend == "memory"
    assert s.port == 8000


def test_unknown_backend_falls_back_to_sqlite(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "redis")
    assert Settings.from_env().storage_backend == "sqlite"


def test_json_formatter_includes_extras() -> None:
    record = logging.LogRecord("taskdeck.tasks", logging.INFO, __file__, 1, "task.create", None, None)
    record.category = "tasks"
    record.task_id = "123"

    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "task.create"
    assert payload["logger"] == "taskdeck.tasks"
    assert payload["level"] == "INFO"
    assert payload["category"] == "tasks"
    assert payload["task_id"] == "123"
    assert "lineno" not in payload
