"""API errors and the JSON body every failed request returns.

Errors carry an ``X-Request-ID`` so a failed table query can be matched
with the server log lines it produced.
"""

import logging
from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class ErrorDetail(BaseModel):
    field: str | None = None
    message: str
    code: str | None = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    code: str
    status_code: int
    request_id: str
    path: str
    details: list[ErrorDetail] | None = None


class CrashLogsException(Exception):
    """Base class for errors reported to API clients."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(CrashLogsException):
    """A named resource, such as a parser, does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} '{identifier}' not found")


class BadRequestError(CrashLogsException):
    """The request is well formed but cannot be served, e.g. unrecognized report text."""

    status_code = 400
    code = "BAD_REQUEST"


def error_response(
    request: Request,
    status_code: int,
    error: str,
    code: str,
    message: str,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        code=code,
        status_code=status_code,
        request_id=getattr(request.state, "request_id", None) or str(uuid4()),
        path=request.url.path,
        details=details,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def crashlogs_exception_handler(request: Request, exc: CrashLogsException) -> JSONResponse:
    return error_response(request, exc.status_code, type(exc).__name__, exc.code, exc.message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report invalid constraints (a non-numeric uid, an unknown type) per field."""
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
            code=error["type"],
        )
        for error in exc.errors()
    ]
    # Literal 422: the status constant was renamed across Starlette releases
    return error_response(
        request, 422, "ValidationError", "VALIDATION_ERROR", "Request validation failed", details
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(
        request, exc.status_code, "HTTPException", f"HTTP_{exc.status_code}", str(exc.detail)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return error_response(
        request, 500, "InternalServerError", "INTERNAL_ERROR", "An unexpected error occurred"
    )


async def request_id_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Reuse the caller's request id or mint one, and echo it on the response."""
    request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request.state.request_id
    return response


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CrashLogsException, crashlogs_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.middleware("http")(request_id_middleware)
