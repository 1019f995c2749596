"""tasks table."""

from datetime import datetime

from sqlalchemy import Boolean, Index, String, false, func
from sqlalchemy.orm import Mapped, mapped_column

from tasktracker.core.database import Base, UTCDateTime

NAME_MAX_LENGTH = 250


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    is_done: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def __repr__(self) -> str:
        return f"<Task id={self.id!r} name={self.name!r} is_done={self.is_done}>"


# Storage-level backstop for the case/whitespace-insensitive name rule.
# name_key() is registered on each connection by core.database.create_engine.
Index(
    "uq_tasks_name_normalized",
    func.name_key(Task.name),
    unique=True,
)
