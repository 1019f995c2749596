"""TaskDAO — tasks table operations."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import delete, func, literal_column, select
from sqlalchemy import exists as sa_exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.core.database import name_key, utcnow
from tasktracker.dao.base import BaseDAO
from tasktracker.models.task import Task

NAME_INDEX = "uq_tasks_name_normalized"


def new_task_id() -> str:
    return str(uuid.uuid4())


def is_duplicate_name_error(exc: IntegrityError) -> bool:
    """True if *exc* was raised by the normalized-name unique index."""
    return NAME_INDEX in str(exc.orig)


class TaskDAO(BaseDAO[Task]):
    model = Task
    immutable = frozenset({"id", "created_date"})

    async def list_all(self, session: AsyncSession) -> list[Task]:
        """All tasks, newest first; equal timestamps keep insertion order."""
        stmt = select(Task).order_by(
            Task.created_date.desc(),
            literal_column("tasks.rowid").asc(),
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def exists_by_name(
        self,
        session: AsyncSession,
        name: str,
        exclude_id: str | None = None,
    ) -> bool:
        """Name lookup that ignores surrounding whitespace and Unicode case.

        *exclude_id* skips one row so a task can keep its own name.
        """
        cond = func.name_key(Task.name) == name_key(name)
        if exclude_id is not None:
            cond = cond & (Task.id != exclude_id)
        result = await session.execute(select(sa_exists().where(cond)))
        return result.scalar_one()

    async def clear_and_reseed(
        self,
        session: AsyncSession,
        seed_records: list[dict],
        now: datetime | None = None,
    ) -> list[Task]:
        """Delete every row, then insert *seed_records* with fresh ids.

        All seeded rows share one timestamp. Runs inside the caller's
        transaction, so the swap is atomic.
        """
        now = now or utcnow()
        await session.execute(delete(Task))
        rows = [
            {
                "id": new_task_id(),
                "name": rec["name"],
                "is_done": bool(rec.get("is_done", False)),
                "created_date": now,
                "updated_time": now,
            }
            for rec in seed_records
        ]
        return await self.bulk_create(session, rows)
