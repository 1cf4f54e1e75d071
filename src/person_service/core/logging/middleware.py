# src/person_service/core/logging/middleware.py
"""
Request ID middleware.

Each request gets an id (the incoming `X-Request-ID` header when present and
sane, otherwise a fresh UUID4). It is stored in the request_id contextvar for
the duration of the request, so RequestIdFilter stamps it on every log record,
and echoed back in the `X-Request-ID` response header.
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Upstream ids are echoed into logs; keep them short and printable
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the current context and echoes it in the response."""

    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
