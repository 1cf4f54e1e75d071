"""
Application-level exceptions.

Repositories raise `NotFoundError`, `ConflictError` and `UnexpectedError`; the HTTP
layer raises `InvalidRequestError` when a payload cannot be decoded. Every class
carries a stable `error_type` discriminant that clients branch on, plus the HTTP
status and the `title`/`detail` strings used to build the error body.
"""

from typing import ClassVar


class AppError(Exception):
    """
    Base exception for errors that end up rendered to a client.

    - error_type: stable discriminant ("NotFound", "Conflict", ...) used by clients
    - title: short human label
    - detail: free-text explanation (diagnostics only, never matched on)
    - status_code: HTTP status the adapter should answer with
    """

    error_type: ClassVar[str] = "Unexpected"
    title: ClassVar[str] = "Internal Server Error"
    status_code: ClassVar[int] = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.detail} (type: {self.error_type})"

    def to_payload(self) -> dict:
        """
        Return the JSON-serializable error body:
            {"status": 404, "type": "NotFound", "title": "...", "detail": "..."}

        The payload never contains raw database messages, constraint names or SQL.
        """
        return {
            "status": self.status_code,
            "type": self.error_type,
            "title": self.title,
            "detail": self.detail,
        }


class RepositoryError(AppError):
    """Base for every failure a repository operation can surface."""


class NotFoundError(RepositoryError):
    """The requested entity does not exist."""

    error_type = "NotFound"
    title = "Resource not found"
    status_code = 404

    def __init__(self, resource_kind: str, resource_id: int):
        self.resource_kind = resource_kind
        self.resource_id = resource_id
        super().__init__(f"Resource '{resource_kind}' with id {resource_id} not found")


class ConflictError(RepositoryError):
    """The operation violates a uniqueness/business rule enforced by the store."""

    error_type = "Conflict"
    title = "Unprocessable entity"
    status_code = 422

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Conflict due to {reason}")


class UnexpectedError(RepositoryError):
    """Any store failure that could not be classified (connectivity, bad SQL, unknown constraint)."""

    def __init__(self, detail: str = "Unexpected error"):
        super().__init__(detail)


class InvalidRequestError(AppError):
    """Request payload could not be decoded or validated. Raised by the HTTP layer only."""

    error_type = "UnprocessableEntity"
    title = "Invalid request payload"
    status_code = 422


__all__ = [
    "AppError",
    "RepositoryError",
    "NotFoundError",
    "ConflictError",
    "UnexpectedError",
    "InvalidRequestError",
]
