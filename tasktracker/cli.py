"""CLI entry point: tasktracker.

Subcommands:
    tasktracker serve [--host H] [--port P]   # Run the API with uvicorn
    tasktracker reset                         # Replace all tasks with the seed set
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

import click
import uvicorn
from sqlalchemy.ext.asyncio import async_sessionmaker

from tasktracker.api import create_app
from tasktracker.core.config import get_settings
from tasktracker.core.database import create_engine, init_schema
from tasktracker.dao.task_dao import TaskDAO
from tasktracker.services.task_service import TaskService

BANNER = """
\033[38;5;39m\
    Task Management API v1.0.0
\033[0m
    API:          http://{host}:{port}/api/tasks
    Docs:         http://{host}:{port}/api-docs
    Health check: http://{host}:{port}/health
    Environment:  {env}
"""


async def _reset(database_url: str) -> int:
    engine = create_engine(database_url)
    try:
        await init_schema(engine)
        factory = async_sessionmaker(engine, expire_on_commit=False)
        async with factory() as session:
            async with session.begin():
                result = await TaskService(TaskDAO()).reset_to_defaults(session)
        return result.tasks_count
    finally:
        await engine.dispose()


@click.group()
def main() -> None:
    """Task Management API."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: TASKTRACKER_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (default: TASKTRACKER_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Initialise storage, seed if empty, and serve HTTP requests."""
    base = get_settings()
    settings = replace(base, host=host or base.host, port=port or base.port)
    click.echo(BANNER.format(host=settings.host, port=settings.port, env=settings.env))
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


@main.command()
@click.option("--database-url", default=None, help="Override TASKTRACKER_DATABASE_URL.")
def reset(database_url: str | None) -> None:
    """Delete every task and reinsert the default seed set."""
    url = database_url or get_settings().database_url
    count = asyncio.run(_reset(url))
    click.echo(f"Database has been reset to default state ({count} tasks)")
