r"""
Classify SQLAlchemy `IntegrityError`s by the driver's structured SQLSTATE code.

These constraint-level classes are internal labels. They are never raised to the
outside world; `mapper.py` turns them into app-level errors:

| Constraint-level (internal) | -> | App-level (external)   |
| --------------------------- | -- | ---------------------- |
| `UniqueConstraintError`     | -> | `ConflictError`        |
| everything else             | -> | `UnexpectedError`      |

Only the SQLSTATE is inspected. Error message text differs between server
versions and locales, so a missing or unrecognized code classifies as
`UnknownIntegrityError` instead of being guessed from the message.
"""
import logging
from enum import Enum
from typing import Any, Type

from sqlalchemy.exc import IntegrityError

from .base import RepositoryError

logger = logging.getLogger(__name__)

# =================================================================================================================
# Constraint-specific exceptions
# =================================================================================================================


class ConstraintViolationError(RepositoryError):
    """Base for integrity/constraint violations."""
    pass


class UniqueConstraintError(ConstraintViolationError):
    """Unique constraint / duplicate value."""
    pass


class UnknownIntegrityError(ConstraintViolationError):
    """Unrecognized (or code-less) integrity error."""
    pass


# =================================================================================================================
# Postgres error code mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
}


# =================================================================================================================
# Integrity Error Classifiers
# =================================================================================================================

def get_sqlstate(orig: Any) -> str | None:
    """
    Return the SQLSTATE carried by a DBAPI exception, or None.

    psycopg 3 and SQLAlchemy's adapted asyncpg errors expose `sqlstate`,
    psycopg2 exposes `pgcode`. The adapted asyncpg error also chains the raw
    driver exception as `__cause__`, which is consulted last.
    """
    if orig is None:
        return None

    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)

    cause = getattr(orig, "__cause__", None)
    if cause is not None and cause is not orig:
        code = getattr(cause, "sqlstate", None)
        if code:
            return str(code)

    return None


def get_constraint_name(orig: Any) -> str | None:
    """Constraint name from the driver diagnostics, for logs only."""
    diag = getattr(orig, "diag", None)
    if diag is not None:
        return getattr(diag, "constraint_name", None)
    return getattr(orig, "constraint_name", None)


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolationError], str | None]:
    """
    Classify a SQLAlchemy IntegrityError into a ConstraintViolationError subclass.

    Returns:
        A tuple of (ExceptionClass, constraint_name if available)
    """
    orig = exc.orig
    sqlstate = get_sqlstate(orig)
    constraint_name = get_constraint_name(orig)

    if sqlstate is None:
        logger.warning("Integrity error without SQLSTATE encountered", extra={"orig_type": type(orig).__name__})
        return UnknownIntegrityError, constraint_name

    exception_class = PGCODE_EXCEPTION_MAP.get(sqlstate)
    if exception_class is not None:
        logger.debug(
            "Postgres integrity diagnostic",
            extra={"sqlstate": sqlstate, "constraint_name": constraint_name},
        )
        return exception_class, constraint_name

    logger.warning(
        "Unknown Postgres integrity error code encountered",
        extra={"sqlstate": sqlstate, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name
