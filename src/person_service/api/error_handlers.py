"""
FastAPI exception handlers that turn app-level exceptions into HTTP responses.

- Repositories raise NotFoundError / ConflictError / UnexpectedError.
- Request decoding failures (malformed JSON, wrong types, missing fields) arrive as
  FastAPI's RequestValidationError and are rendered as InvalidRequestError.
- Every response body has the same shape (see schemas.error.ErrorResponse) and
  never contains raw database text.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from person_service.exceptions.base import (
    AppError,
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    UnexpectedError,
)

logger = logging.getLogger(__name__)


def _render(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


def summarize_validation_errors(errors) -> str:
    """
    One line per problem, e.g. "nascimento: Input should be a valid date".
    The leading "body"/"query"/"path" location part is dropped.
    """
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        where = ".".join(loc)
        msg = err.get("msg", "invalid value")
        parts.append(f"{where}: {msg}" if where else msg)
    return "; ".join(parts) or "Invalid request payload"


# Handlers are intentionally tiny; the payload shape lives on the exception classes.

async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("NotFoundError for %s %s: id=%s", request.method, request.url.path, exc.resource_id)
    return _render(exc)


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    logger.info("ConflictError for %s %s: %s", request.method, request.url.path, exc.reason)
    return _render(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = summarize_validation_errors(exc.errors())
    logger.info("Request validation failed for %s %s: %s", request.method, request.url.path, detail)
    return _render(InvalidRequestError(detail))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Fallback for UnexpectedError and any other AppError subclass.
    The cause was already logged with a stack trace where it was mapped.
    """
    logger.warning("%s for %s %s", type(exc).__name__, request.method, request.url.path)
    return _render(exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s %s", request.method, request.url.path)
    return _render(UnexpectedError())


def register_exception_handlers(app: FastAPI) -> None:
    """Register all handlers on an app (called from the app factory)."""
    # Most specific first
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
