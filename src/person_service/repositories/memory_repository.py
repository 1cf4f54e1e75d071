"""
In-memory PersonRepository.

A deterministic stand-in for the relational store: ids come from a counter that
starts at 1 and is never reused, and nickname uniqueness is enforced the way the
store would enforce it (at insert time, no separate existence check by callers).

None of the operations await, so each one runs to completion on the event loop
without interleaving with other requests.
"""
import logging
from datetime import date
from typing import Sequence

from person_service.exceptions.base import ConflictError, NotFoundError
from person_service.models.person import Person
from .base_repository import (
    NICKNAME_TAKEN,
    RESOURCE_KIND,
    SEARCH_RESULT_LIMIT,
    PersonRepository,
    matches_term,
)

logger = logging.getLogger(__name__)


def _detached_copy(person: Person) -> Person:
    # Callers get their own objects so they cannot mutate stored rows
    return Person(
        id=person.id,
        nickname=person.nickname,
        name=person.name,
        dob=person.dob,
        stacks=list(person.stacks) if person.stacks is not None else None,
    )


class InMemoryPersonRepository(PersonRepository):

    def __init__(self):
        self._rows: dict[int, Person] = {}
        self._by_nickname: dict[str, int] = {}
        self._next_id = 1

    async def create(
        self,
        nickname: str,
        name: str,
        dob: date,
        stacks: Sequence[str] | None = None,
    ) -> Person:
        if nickname in self._by_nickname:
            logger.info("repo.create.duplicate", extra={"model": RESOURCE_KIND, "operation": "create"})
            raise ConflictError(NICKNAME_TAKEN)

        person = Person(
            id=self._next_id,
            nickname=nickname,
            name=name,
            dob=dob,
            stacks=list(stacks) if stacks is not None else None,
        )
        self._next_id += 1
        self._rows[person.id] = person
        self._by_nickname[nickname] = person.id

        logger.info("repo.create.success", extra={"model": RESOURCE_KIND, "operation": "create", "id": person.id})
        return _detached_copy(person)

    async def get_by_id(self, person_id: int) -> Person:
        person = self._rows.get(person_id)
        if person is None:
            logger.info("repo.get_by_id.not_found", extra={"model": RESOURCE_KIND, "id": person_id})
            raise NotFoundError(RESOURCE_KIND, person_id)
        return _detached_copy(person)

    async def search(self, term: str) -> list[Person]:
        found = []
        for person in self._rows.values():
            if matches_term(person, term):
                found.append(_detached_copy(person))
                if len(found) == SEARCH_RESULT_LIMIT:
                    break
        return found

    async def count(self) -> int:
        return len(self._rows)
