"""
Error taxonomy and the FastAPI handlers that render it.

All errors are returned in a single envelope:

    {"success": false, "error": {"code": ..., "message": ..., "status": ...}}
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = structlog.get_logger()

_FIELD_MESSAGES = {
    "name": "Name is required",
    "topic_or_company": "At least one topic or company is required",
    "phone": "Phone number is required for iMessage/SMS delivery",
    "email": "Email is required for email delivery",
    "webhookUrl": "Webhook URL is required for webhook delivery",
}


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "status": self.status_code}


class MissingFieldError(AppError):
    """Caller input is incomplete. `field` names the first violated rule."""

    status_code = 400
    code = "MISSING_FIELD"

    def __init__(self, field: str):
        super().__init__(_FIELD_MESSAGES.get(field, f"{field} is required"))
        self.field = field

    def to_dict(self) -> dict:
        return {**super().to_dict(), "field": self.field}


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class CollaboratorError(AppError):
    """A storage or rendering dependency failed. Details stay in the logs."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, operation: str):
        super().__init__("Internal server error")
        self.operation = operation


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, CollaboratorError):
        log.error(
            "storage.failed",
            operation=exc.operation,
            path=request.url.path,
            cause=repr(exc.__cause__),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
