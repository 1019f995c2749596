"""SQLAlchemy ORM models — one file per table."""

from tasktracker.models.task import Task

__all__ = [
    "Task",
]
