"""JSON exception handlers.

Every error leaves the API as ``{"message": "..."}``; validation failures add
an ``errors`` object mapping dotted field paths to lists of messages. The API
never negotiates HTML, whatever the ``Accept`` header says.
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from staffdesk.core.errors.exceptions import AppException, summarize_errors


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

# Location prefixes FastAPI adds that never belong in a field name.
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class ErrorEnvelope(BaseModel):
    """Error response schema.

    Attributes:
        message: Human-readable summary of the failure
        errors: Field-level messages (validation failures only)
    """

    message: str
    errors: dict[str, list[str]] | None = None


def _field_path(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _humanize(field: str, error: dict[str, Any]) -> str:
    """Turn one pydantic error into a sentence naming the field."""
    label = field.replace("_", " ")
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    msg = str(error.get("msg", "Invalid value"))

    match error_type:
        case "missing":
            return f"The {label} field is required."
        case "string_type":
            return f"The {label} field must be a string."
        case "int_type" | "int_parsing" | "int_from_float":
            return f"The {label} field must be an integer."
        case "list_type":
            return f"The {label} field must be an array."
        case "string_too_long":
            return (
                f"The {label} field must not be greater than "
                f"{ctx.get('max_length')} characters."
            )
        case "string_too_short":
            return f"The {label} field must be at least {ctx.get('min_length')} characters."
        case "string_pattern_mismatch":
            return f"The {label} field must only contain letters, numbers, dashes, and underscores."
        case "greater_than_equal":
            return f"The {label} field must be at least {ctx.get('ge')}."
        case "value_error":
            if msg.startswith("value is not a valid email address"):
                return f"The {label} field must be a valid email address."
            reason = ctx.get("error")
            return str(reason) if reason is not None else msg.removeprefix("Value error, ")
    return msg


def _json_response(
    status_code: int,
    envelope: ErrorEnvelope,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(exclude_none=True),
        headers=headers or None,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle application-specific exceptions."""
    logger.warning(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=str(request.url.path),
    )

    return _json_response(
        exc.status_code,
        ErrorEnvelope(message=exc.message, errors=exc.errors or None),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Errors are grouped per dotted field path (``role_ids.0``) with readable
    sentences, and the top-level message repeats the first of them.
    """
    errors: dict[str, list[str]] = {}

    for error in exc.errors():
        field = _field_path(tuple(error.get("loc", ())))
        errors.setdefault(field, []).append(_humanize(field, error))

    logger.warning(
        "validation_error",
        path=str(request.url.path),
        error_count=sum(len(messages) for messages in errors.values()),
    )

    return _json_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorEnvelope(message=summarize_errors(errors), errors=errors),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method) as JSON."""
    return _json_response(
        exc.status_code,
        ErrorEnvelope(message=str(exc.detail)),
        headers=dict(exc.headers) if exc.headers else None,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Catches all unhandled exceptions and returns a generic 500 error.
    The actual error details are logged but not exposed to clients.
    """
    logger.exception(
        "unhandled_exception",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )

    return _json_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorEnvelope(message=AppException.message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Call this function during app initialization:

        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(
        StarletteHTTPException, cast("ExceptionHandler", http_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
