# src/person_service/core/logging/filters.py
"""
Logging filters.

- RequestIdFilter guarantees every LogRecord has a `request_id` attribute, taken from
  (in order) an explicit `extra={"request_id": ...}`, the current context (set by
  RequestIDMiddleware), or the sentinel "-". Formatters can then reference
  %(request_id)s without KeyErrors.
- RedactFilter masks record attributes whose name looks sensitive.

The request id lives in a `contextvars.ContextVar`, so it follows each request
across awaits and never leaks between concurrent requests handled on one thread.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the request id for the current context; returns a token for reset_request_id()."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """Annotates records with `request_id`; never drops a record."""

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """Replace values of sensitive-looking record attributes (e.g. passed via `extra`)."""

    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "authorization", "database_url"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
