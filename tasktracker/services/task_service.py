"""TaskService — task lifecycle rules (uniqueness, completion lock, seeding)."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.core.database import name_key, utcnow
from tasktracker.dao.task_dao import TaskDAO, is_duplicate_name_error, new_task_id
from tasktracker.models.task import NAME_MAX_LENGTH, Task
from tasktracker.services import (
    DuplicateTaskError,
    TaskCompletedError,
    TaskNotFoundError,
    ValidationError,
)

log = structlog.get_logger(__name__)

SEED_TASKS: tuple[dict, ...] = (
    {"name": "to make a good coffee", "is_done": False},
    {"name": "to send the invite for my b-day's party to the guys", "is_done": False},
    {"name": "To pay the credit card invoice", "is_done": True},
)

RESET_MESSAGE = "Database has been reset to default state"


@dataclass(frozen=True)
class TaskSnapshot:
    """Identity of a task captured before it was deleted."""

    id: str
    name: str
    is_done: bool


@dataclass(frozen=True)
class ResetResult:
    message: str
    tasks_count: int


def normalize_name(name: object) -> str:
    """Trim *name* and check it is 1..250 characters.

    Raises :class:`ValidationError` otherwise.
    """
    if not isinstance(name, str):
        raise ValidationError("Name is required")
    trimmed = name.strip()
    if not trimmed:
        raise ValidationError("Name is required")
    if len(trimmed) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name must not exceed {NAME_MAX_LENGTH} characters")
    return trimmed


class TaskService:
    """Stateless service owning every task mutation rule.

    The store is injected; the caller passes the session and owns the
    transaction.
    """

    def __init__(self, task_dao: TaskDAO, seed_tasks: tuple[dict, ...] = SEED_TASKS) -> None:
        self._task_dao = task_dao
        self._seed_tasks = seed_tasks

    async def list(self, session: AsyncSession) -> list[Task]:
        """Return all tasks, newest first."""
        return await self._task_dao.list_all(session)

    async def get(self, session: AsyncSession, task_id: str) -> Task:
        """Raises :class:`TaskNotFoundError` if the task does not exist."""
        task = await self._task_dao.get_by_id(session, task_id)
        if task is None:
            raise TaskNotFoundError()
        return task

    async def create(self, session: AsyncSession, name: str) -> Task:
        """Create a pending task with a trimmed, unique name."""
        trimmed = normalize_name(name)
        if await self._task_dao.exists_by_name(session, trimmed):
            raise DuplicateTaskError()

        now = utcnow()
        try:
            task = await self._task_dao.create(
                session,
                id=new_task_id(),
                name=trimmed,
                is_done=False,
                created_date=now,
                updated_time=now,
            )
        except IntegrityError as exc:
            # Lost a race against a concurrent create with the same name
            if is_duplicate_name_error(exc):
                raise DuplicateTaskError() from exc
            raise
        log.info("task.created", task_id=task.id)
        return task

    async def rename(self, session: AsyncSession, task_id: str, new_name: str) -> Task:
        """Rename a pending task.

        A completed task raises :class:`TaskCompletedError` whatever
        *new_name* is. For any other id the name is validated before the
        existence check. Renaming to the current name (ignoring case) returns
        the task untouched.
        """
        task = await self._task_dao.get_by_id(session, task_id)
        if task is not None and task.is_done:
            raise TaskCompletedError()

        trimmed = normalize_name(new_name)
        if task is None:
            raise TaskNotFoundError()
        if name_key(task.name) == name_key(trimmed):
            return task

        if await self._task_dao.exists_by_name(session, trimmed, exclude_id=task.id):
            raise DuplicateTaskError()

        try:
            updated = await self._task_dao.update(
                session, task.id, name=trimmed, updated_time=utcnow()
            )
        except IntegrityError as exc:
            if is_duplicate_name_error(exc):
                raise DuplicateTaskError() from exc
            raise
        if updated is None:
            raise TaskNotFoundError()
        log.info("task.renamed", task_id=task.id)
        return updated

    async def complete(self, session: AsyncSession, task_id: str) -> Task:
        """Mark a task done. Completing a done task only refreshes updated_time."""
        task = await self.get(session, task_id)
        updated = await self._task_dao.update(
            session, task.id, is_done=True, updated_time=utcnow()
        )
        if updated is None:
            raise TaskNotFoundError()
        log.info("task.completed", task_id=task.id)
        return updated

    async def delete(self, session: AsyncSession, task_id: str) -> TaskSnapshot:
        """Delete a task and return what it looked like beforehand."""
        task = await self.get(session, task_id)
        snapshot = TaskSnapshot(id=task.id, name=task.name, is_done=task.is_done)
        if not await self._task_dao.delete(session, task.id):
            raise TaskNotFoundError()
        log.info("task.deleted", task_id=snapshot.id)
        return snapshot

    async def reset_to_defaults(self, session: AsyncSession) -> ResetResult:
        """Replace every task with the seed set."""
        seeded = await self._task_dao.clear_and_reseed(session, list(self._seed_tasks))
        log.info("tasks.reset", tasks_count=len(seeded))
        return ResetResult(message=RESET_MESSAGE, tasks_count=len(seeded))

    async def seed_if_empty(self, session: AsyncSession) -> int:
        """Seed an empty store at startup. Returns the number of tasks inserted."""
        existing = await self._task_dao.count(session)
        if existing > 0:
            log.info("tasks.seed_skipped", existing=existing)
            return 0
        seeded = await self._task_dao.clear_and_reseed(session, list(self._seed_tasks))
        log.info("tasks.seeded", tasks_count=len(seeded))
        return len(seeded)
