"""
Service error taxonomy and the HTTP handlers that render it.

Service code raises these exceptions; the handlers installed by
``install_error_handlers`` turn them into the failure envelope
``{"success": false, "error": {"kind": ..., "message": ...}}``.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dashboard_shared.schemas.common import ActionFailure, ErrorDetail

log = structlog.get_logger()


class ServiceError(Exception):
    """Base class for failures that cross the service boundary."""

    kind = "error"
    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_failure(self) -> ActionFailure:
        return ActionFailure(error=ErrorDetail(kind=self.kind, message=self.message))


class ValidationError(ServiceError):
    kind = "validation"
    status_code = 422
    default_message = "Invalid input."


class AuthenticationError(ServiceError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Authentication required."


class ForbiddenError(ServiceError):
    kind = "forbidden"
    status_code = 403
    default_message = "You are not allowed to perform this action."


class NotFoundError(ServiceError):
    """Entity absent, or not visible from the caller's organization."""

    kind = "not_found"
    status_code = 404
    default_message = "Not found."


def _failure_response(error: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_failure().model_dump(mode="json"),
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    log.info(
        "request.failed",
        kind=exc.kind,
        message=exc.message,
        path=request.url.path,
    )
    return _failure_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = None
    return _failure_response(ValidationError(message))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
