from __future__ import annotations
import logging
from pathlib import Path
from typing import Union

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)

BUSY_TIMEOUT_MS = 5000


def make_sqlite_url(db_path: Union[str, Path]) -> str:
    """aiosqlite URL for db_path; the parent directory is created if missing."""
    path = Path(db_path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{path.as_posix()}"


def _configure_connection(dbapi_conn, _record) -> None:
    # WAL lets the dashboard read while a write is in flight
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA journal_mode=WAL")
        cur.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    finally:
        cur.close()


def open_engine(db_path: Union[str, Path]) -> AsyncEngine:
    engine = create_async_engine(make_sqlite_url(db_path))
    event.listen(engine.sync_engine, "connect", _configure_connection)
    logger.debug("sqlite.engine", extra={"category": "system", "event": "sqlite.engine", "db_path": str(db_path)})
    return engine


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # rows are read after commit, never lazily refreshed
    return async_sessionmaker(engine, expire_on_commit=False)
