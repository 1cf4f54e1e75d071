"""
Map store-level failures to app-level errors.

Every repository round trip runs inside `db_error_handler(...)`. On failure the
session is rolled back and exactly one app-level error is raised:

    IntegrityError with SQLSTATE 23505  -> ConflictError(reason)
    any other IntegrityError            -> UnexpectedError
    any other store failure             -> UnexpectedError

App-level errors raised inside the block (e.g. NotFoundError) pass through untouched.
Raw driver messages are only logged at DEBUG; they never reach the raised error.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base import ConflictError, RepositoryError, UnexpectedError
from .integrity_classifier import UniqueConstraintError, classify_integrity_error

logger = logging.getLogger(__name__)


def map_integrity_error(exc: IntegrityError, *, model_name: str, conflict_reason: str) -> RepositoryError:
    """
    Translate an IntegrityError into the app-level error that should be raised.
    """
    exc_cls, constraint_name = classify_integrity_error(exc)

    if exc_cls is UniqueConstraintError:
        # Expected client-level scenario; INFO, no stack trace.
        logger.info(
            "mapper.duplicate_detected",
            extra={"model": model_name, "constraint": constraint_name},
        )
        return ConflictError(conflict_reason)

    logger.warning(
        "mapper.unhandled_integrity_error",
        extra={"model": model_name, "constraint": constraint_name, "kind": exc_cls.__name__},
    )
    logger.debug("mapper.integrity_raw", extra={"model": model_name, "raw": str(exc.orig)})
    return UnexpectedError()


async def _rollback_quietly(db: AsyncSession, model_name: str) -> None:
    try:
        await db.rollback()
    except Exception:
        logger.exception("Failed to rollback session", extra={"model": model_name})


@asynccontextmanager
async def db_error_handler(
    db: AsyncSession,
    model_name: str,
    *,
    conflict_reason: str = "uniqueness constraint violated",
) -> AsyncIterator[None]:
    """
    Usage:
        async with db_error_handler(session, "person", conflict_reason="nickname already taken"):
            ... one store round trip ...
    """
    try:
        yield
    except RepositoryError:
        raise
    except IntegrityError as exc:
        await _rollback_quietly(db, model_name)
        raise map_integrity_error(exc, model_name=model_name, conflict_reason=conflict_reason) from exc
    except Exception as exc:
        await _rollback_quietly(db, model_name)
        logger.exception("Unexpected DB error for %s", model_name, extra={"model": model_name})
        raise UnexpectedError() from exc
