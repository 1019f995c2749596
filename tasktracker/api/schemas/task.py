"""Task request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TaskNameRequest(BaseModel):
    """Body of POST /tasks and PUT /tasks/{id}.

    Trimming and length checks happen in the service.
    """

    name: str


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    is_done: bool
    created_date: datetime
    updated_time: datetime


class TaskActionResponse(BaseModel):
    """Confirmation returned by create / rename / delete."""

    message: str
    id: str
    name: str


class TaskCompleteResponse(TaskActionResponse):
    status: str = "DONE"


class ResetResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    tasks_count: int = Field(alias="tasksCount")
