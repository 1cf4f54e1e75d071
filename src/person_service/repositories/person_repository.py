"""
PostgreSQL-backed PersonRepository built on SQLAlchemy's asyncio extension.

The repository holds only the session factory (which wraps the engine's connection
pool). Each operation opens its own short-lived session, performs exactly one
store round trip inside `db_error_handler`, and releases the connection before
returning.
"""
import logging
import time
from datetime import date
from typing import Sequence

from sqlalchemy import Select, String, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from person_service.exceptions.base import NotFoundError
from person_service.exceptions.mapper import db_error_handler
from person_service.models.person import Person
from .base_repository import (
    NICKNAME_TAKEN,
    RESOURCE_KIND,
    SEARCH_RESULT_LIMIT,
    PersonRepository,
)

logger = logging.getLogger(__name__)

# Range of the BIGSERIAL id column
_BIGINT_MIN = -(2 ** 63)
_BIGINT_MAX = 2 ** 63 - 1


def build_insert_statement(nickname: str, name: str, dob: date, stacks: Sequence[str] | None):
    """INSERT ... RETURNING the full row, so the generated id needs no follow-up read."""
    return (
        insert(Person)
        .values(
            nickname=nickname,
            name=name,
            dob=dob,
            stacks=list(stacks) if stacks is not None else None,
        )
        .returning(Person)
    )


def build_search_statement(term: str) -> Select:
    """
    SELECT people whose nickname, name or any stacks element contains `term`.

    Renders roughly as:

        SELECT ... FROM person
        WHERE nickname LIKE '%' || :term || '%'
           OR name LIKE '%' || :term || '%'
           OR EXISTS (SELECT stack FROM unnest(person.stacks) AS stack
                      WHERE stack LIKE '%' || :term || '%')
        LIMIT 50

    `autoescape` escapes `%` and `_` inside the term so the match stays literal.
    This is a sequential scan over nickname, name and the unnested array: fine for
    small tables, a known limitation for large ones.
    """
    stack = func.unnest(Person.stacks, type_=String).column_valued("stack")
    stack_match = select(stack).where(stack.contains(term, autoescape=True)).exists()

    return (
        select(Person)
        .where(
            or_(
                Person.nickname.contains(term, autoescape=True),
                Person.name.contains(term, autoescape=True),
                stack_match,
            )
        )
        .limit(SEARCH_RESULT_LIMIT)
    )


class SQLAlchemyPersonRepository(PersonRepository):
    """
    PersonRepository backed by a relational store through SQLAlchemy.

    Args:
        session_factory: an `async_sessionmaker` bound to the application engine.
            It must be created with `expire_on_commit=False` so returned rows stay
            readable after their session is closed.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(
        self,
        nickname: str,
        name: str,
        dob: date,
        stacks: Sequence[str] | None = None,
    ) -> Person:
        logger.debug(
            "repo.create.start",
            extra={
                "model": RESOURCE_KIND,
                "operation": "create",
                "stacks_count": None if stacks is None else len(stacks),
            },
        )
        start = time.perf_counter()
        statement = build_insert_statement(nickname, name, dob, stacks)

        async with self.session_factory() as session:
            async with db_error_handler(session, RESOURCE_KIND, conflict_reason=NICKNAME_TAKEN):
                result = await session.execute(statement)
                person = result.scalar_one()
                await session.commit()

        logger.info(
            "repo.create.success",
            extra={
                "model": RESOURCE_KIND,
                "operation": "create",
                "id": person.id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return person

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_by_id(self, person_id: int) -> Person:
        # Ids outside the column range can never match; skip the round trip
        if not _BIGINT_MIN <= person_id <= _BIGINT_MAX:
            logger.info("repo.get_by_id.out_of_range", extra={"model": RESOURCE_KIND, "id": str(person_id)})
            raise NotFoundError(RESOURCE_KIND, person_id)

        async with self.session_factory() as session:
            async with db_error_handler(session, RESOURCE_KIND):
                result = await session.execute(select(Person).where(Person.id == person_id))
                person = result.scalar_one_or_none()

        if person is None:
            logger.info("repo.get_by_id.not_found", extra={"model": RESOURCE_KIND, "id": person_id})
            raise NotFoundError(RESOURCE_KIND, person_id)

        logger.debug("repo.get_by_id.found", extra={"model": RESOURCE_KIND, "id": person_id})
        return person

    async def search(self, term: str) -> list[Person]:
        statement = build_search_statement(term)

        async with self.session_factory() as session:
            async with db_error_handler(session, RESOURCE_KIND):
                result = await session.execute(statement)
                people = list(result.scalars().all())

        logger.debug(
            "repo.search.done",
            extra={"model": RESOURCE_KIND, "term_length": len(term), "results": len(people)},
        )
        return people

    async def count(self) -> int:
        async with self.session_factory() as session:
            async with db_error_handler(session, RESOURCE_KIND):
                result = await session.execute(select(func.count()).select_from(Person))
                total = result.scalar_one()

        logger.debug("repo.count.done", extra={"model": RESOURCE_KIND, "count": total})
        return int(total)
