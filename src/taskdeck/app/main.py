import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskdeck.app.middleware.access_log import AccessLogMiddleware
from taskdeck.app.routes import dashboard, tasks, tasks_ws
from taskdeck.config import Settings
from taskdeck.domain.errors import TaskError
from taskdeck.infra.db.kv_memory import KeyValueStorage, MemoryKeyValueStorage
from taskdeck.infra.db.kv_sqlite import SQLiteKeyValueStorage
from taskdeck.infra.db.sqlite import make_sessionmaker, open_engine
from taskdeck.observability.logging import setup_logging
from taskdeck.services.preferences import PreferencesStore
from taskdeck.services.signals import SignalBus
from taskdeck.services.task_service import TaskService
from taskdeck.services.task_store import TaskStore
from taskdeck.services.toasts import ToastFeed

logger = logging.getLogger("taskdeck.system")


def create_app(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[KeyValueStorage] = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or Settings.from_env()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_dir)
    logger.info("system.start", extra={"category": "system", "event": "system.start"})

    app = FastAPI(title="Taskdeck")
    app.add_middleware(AccessLogMiddleware)

    # --- storage wiring ---
    engine = None
    if storage is None:
        if settings.storage_backend == "memory":
            storage = MemoryKeyValueStorage()
        else:
            engine = open_engine(settings.db_path)
            storage = SQLiteKeyValueStorage(make_sessionmaker(engine))

    signals = SignalBus()
    toasts = ToastFeed()
    store = TaskStore(storage, signals=signals)
    prefs = PreferencesStore(storage, signals=signals, toasts=toasts)
    svc = TaskService(store, toasts)

    tasks.get_service = lambda: svc
    dashboard.get_service = lambda: svc
    dashboard.get_preferences = lambda: prefs
    dashboard.get_toasts = lambda: toasts
    tasks_ws.get_store = lambda: store

    # Routers
    app.include_router(tasks.router)
    app.include_router(dashboard.router)
    app.include_router(tasks_ws.router)

    @app.exception_handler(TaskError)
    async def _task_error(request: Request, exc: TaskError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.on_event("startup")
    async def _startup():
        if engine is not None:
            await SQLiteKeyValueStorage.create_schema(engine)
            logger.info(
                "db.ready",
                extra={"category": "system", "event": "db.ready", "db_path": str(settings.db_path)},
            )
        await store.load()
        await prefs.load()

    @app.on_event("shutdown")
    async def _shutdown():
        if engine is not None:
            await engine.dispose()

    @app.get("/health")
    def health():
        return {"status": "ok", "tasks": len(store.tasks)}

    return app


def main() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "taskdeck.app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
