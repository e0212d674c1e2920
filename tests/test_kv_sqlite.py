# tests/test_kv_sqlite.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskdeck.domain.task_models import TaskDraft
from taskdeck.infra.db.kv_sqlite import SQLiteKeyValueStorage
from taskdeck.infra.db.sqlite import BUSY_TIMEOUT_MS, make_sessionmaker, open_engine
from taskdeck.services.task_store import TaskStore


@pytest.mark.asyncio
async def test_get_set_overwrite(tmp_path: Path) -> None:
    engine = open_engine(tmp_path / "nested" / "kv.db")
    try:
        await SQLiteKeyValueStorage.create_schema(engine)
        kv = SQLiteKeyValueStorage(make_sessionmaker(engine))

        assert await kv.get("darkMode") is None
        await kv.set("darkMode", "true")
        assert await kv.get("darkMode") == "true"
        await kv.set("darkMode", "false")
        assert await kv.get("darkMode") == "false"
    finally:
        await engine.dispose()

    assert (tmp_path / "nested" / "kv.db").exists()


@pytest.mark.asyncio
async def test_connections_use_wal_and_busy_timeout(tmp_path: Path) -> None:
    engine = open_engine(tmp_path / "taskdeck.db")
    try:
        async with engine.connect() as conn:
            journal = (await conn.exec_driver_sql("PRAGMA journal_mode")).scalar()
            timeout = (await conn.exec_driver_sql("PRAGMA busy_timeout")).scalar()
    finally:
        await engine.dispose()

    assert str(journal).lower() == "wal"
    assert timeout == BUSY_TIMEOUT_MS


@pytest.mark.asyncio
async def test_task_store_survives_restart(tmp_path: Path) -> None:
    db_path = tmp_path / "taskdeck.db"

    engine = open_engine(db_path)
    await SQLiteKeyValueStorage.create_schema(engine)
    store = TaskStore(SQLiteKeyValueStorage(make_sessionmaker(engine)))
    await store.load()
    await store.add(TaskDraft(title="first"))
    await store.add(TaskDraft(title="second"))
    await engine.dispose()

    engine = open_engine(db_path)
    try:
        reopened = TaskStore(SQLiteKeyValueStorage(make_sessionmaker(engine)))
        loaded = await reopened.load()
    finally:
        await engine.dispose()

    assert [t.title for t in loaded] == ["second", "first"]
    assert loaded == store.tasks
