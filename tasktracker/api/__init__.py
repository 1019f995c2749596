"""Task Tracker REST API — FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasktracker.api.deps import (
    dispose_engine,
    get_engine,
    get_task_service,
    init_session_factory,
)
from tasktracker.api.errors import register_error_handlers
from tasktracker.api.middleware.request_id import RequestIDMiddleware
from tasktracker.api.routers import tasks
from tasktracker.core.config import Settings, get_settings
from tasktracker.core.database import init_schema
from tasktracker.core.logging import setup_logging

log = structlog.get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB, create schema, seed if empty. Shutdown: dispose engine."""
    settings: Settings = app.state.settings
    factory = init_session_factory(settings.database_url)
    await init_schema(get_engine())

    svc = get_task_service()
    async with factory() as session:
        async with session.begin():
            await svc.seed_if_empty(session)

    log.info("storage.ready", database_url=settings.database_url)
    yield
    await dispose_engine()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Task Management API",
        version="1.0.0",
        docs_url="/api-docs",
        openapi_url="/api-docs/openapi.json",
        lifespan=_lifespan,
    )
    app.state.settings = settings

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "message": "Task Management API is running",
                "environment": settings.env,
            }
        )

    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])

    return app
