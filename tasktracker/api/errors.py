"""Unified error handling — ServiceError + RequestValidationError → JSON."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tasktracker.services import ErrorKind, ServiceError

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE: 409,
    ErrorKind.COMPLETED: 422,
    ErrorKind.VALIDATION: 400,
}

INTERNAL_ERROR_DETAIL = "internal server error"


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    status = STATUS_BY_KIND.get(exc.kind, 500)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    messages = []
    for err in errors:
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return JSONResponse(
        status_code=400,
        content={"detail": "; ".join(messages)},
    )


async def _unhandled_error_handler(_request: Request, _exc: Exception) -> JSONResponse:
    # Logged with request context by RequestIDMiddleware
    return JSONResponse(status_code=500, content={"detail": INTERNAL_ERROR_DETAIL})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
