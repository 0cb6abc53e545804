"""Error types and exception handlers.

Response bodies:
- HTTPException: ``{"detail": "..."}`` (FastAPI default)
- invalid input: 400 ``{"detail": "Invalid input", "errors": [{"field", "message"}]}``
- anything uncaught: 500 ``{"detail": "Internal server error"}``
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from statuspage.core.structured_logging import build_log_context

logger = logging.getLogger(__name__)


class FieldValueError(ValueError):
    """A domain validation failure tied to one request field."""

    field: str = "body"


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts in front
    parts = [str(part) for part in loc]
    if parts and parts[0] in {"body", "query", "path", "header", "cookie"}:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _invalid_input(errors: list[dict[str, str]]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid input", "errors": errors},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
        for error in exc.errors()
    ]
    return _invalid_input(errors)


async def field_value_error_handler(request: Request, exc: FieldValueError):
    return _invalid_input([{"field": exc.field, "message": str(exc)}])


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error: %s",
        exc,
        exc_info=exc,
        extra=build_log_context(
            user_id=getattr(request.state, "user_id", None),
            org_id=getattr(request.state, "org_id", None),
            request_id=getattr(request.state, "request_id", None),
            route=request.url.path,
            method=request.method,
        ),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(FieldValueError, field_value_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
