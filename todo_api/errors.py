"""Error taxonomy and the single mapping from failures to JSON responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TodoApiError(Exception):
    """Base class for every failure the service knows how to report."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(TodoApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class NotFound(TodoApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Todo not found"


class RouteError(TodoApiError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not Found"


class MethodNotAllowed(RouteError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    message = "Method Not Allowed"


class StorageError(TodoApiError):
    message = "Database error"


class ConstraintViolation(StorageError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Todo violates a storage constraint"


class PoolError(TodoApiError):
    message = "Database pool error"


class PoolExhausted(PoolError):
    message = "Database pool exhausted"


class ConnectFailed(PoolError):
    message = "Database connection failed"


class SchemaInitFailed(TodoApiError):
    message = "Database schema initialization failed"


_LOCATION_MESSAGES = {
    "body": "Invalid body",
    "query": "Invalid query string",
    "path": "Invalid path parameter",
}


def status_label(status_code: int) -> str:
    return "fail" if status_code < 500 else "error"


def validation_message(errors: Sequence[Dict[str, Any]]) -> str:
    if not errors:
        return ValidationError.message
    first = errors[0]
    location: List[Any] = list(first.get("loc") or [])
    prefix = _LOCATION_MESSAGES.get(location[0] if location else "", ValidationError.message)
    if first.get("type") == "json_invalid":
        return f"{prefix}: malformed JSON"
    field = ".".join(str(part) for part in location[1:])
    if field:
        return f"{prefix}: field '{field}' {first.get('msg', 'is invalid')}"
    return f"{prefix}: {first.get('msg', 'is invalid')}"


def build_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "status": status_label(status_code)},
    )


def error_response(exc: BaseException) -> JSONResponse:
    """Translate any failure into ``(status, {"message", "status"})``.

    Known errors carry their own status and client-safe message. Framework
    rejections are classified by type. Anything else becomes a generic 500
    without the original error text.
    """
    if isinstance(exc, RequestValidationError):
        exc = ValidationError(validation_message(exc.errors()))
    elif isinstance(exc, StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            exc = RouteError()
        elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            exc = MethodNotAllowed()
        else:
            message = exc.detail if isinstance(exc.detail, str) else "Request failed"
            return build_error(exc.status_code, message)

    if isinstance(exc, TodoApiError):
        return build_error(exc.status_code, exc.message)

    return build_error(status.HTTP_500_INTERNAL_SERVER_ERROR, TodoApiError.message)


async def handle_rejection(request: Request, exc: Exception) -> JSONResponse:
    response = error_response(exc)
    if response.status_code >= 500:
        logger.error(
            "Request %s %s failed with %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc_info=exc,
        )
    else:
        logger.info(
            "Request %s %s rejected with status=%s",
            request.method,
            request.url.path,
            response.status_code,
        )
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, handle_rejection)
    app.add_exception_handler(StarletteHTTPException, handle_rejection)
    app.add_exception_handler(TodoApiError, handle_rejection)
    app.add_exception_handler(Exception, handle_rejection)
