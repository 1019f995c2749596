"""Service layer — business logic orchestration."""

import enum


class ErrorKind(str, enum.Enum):
    """Tag carried by every domain error; the API maps it to a status code."""

    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    COMPLETED = "completed"
    VALIDATION = "validation"


class ServiceError(Exception):
    """Base service exception."""

    kind: ErrorKind
    default_message: str = "service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class TaskNotFoundError(ServiceError):
    """Task id does not exist (-> HTTP 404)."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Task not found"


class DuplicateTaskError(ServiceError):
    """Another task already has an equivalent name (-> HTTP 409)."""

    kind = ErrorKind.DUPLICATE
    default_message = "A task with this name already exists"


class TaskCompletedError(ServiceError):
    """Attempted mutation of a completed task (-> HTTP 422)."""

    kind = ErrorKind.COMPLETED
    default_message = "Cannot edit a task that is marked as DONE"


class ValidationError(ServiceError):
    """Malformed input (-> HTTP 400)."""

    kind = ErrorKind.VALIDATION
    default_message = "invalid input"
