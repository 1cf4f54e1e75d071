"""
Repository interface for Person records.

Callers (the HTTP layer, services, tests) depend on `PersonRepository` only, so the
backing store can be swapped without touching them: the SQLAlchemy implementation
talks to PostgreSQL, the in-memory one is a deterministic double for tests and
database-less runs.

Every operation either returns a value or raises one of the app-level errors from
`person_service.exceptions`:

| Operation    | Success               | Failures                            |
| ------------ | --------------------- | ----------------------------------- |
| `create`     | persisted `Person`    | `ConflictError`, `UnexpectedError`  |
| `get_by_id`  | `Person`              | `NotFoundError`, `UnexpectedError`  |
| `search`     | `list[Person]` (<=50) | `UnexpectedError`                   |
| `count`      | `int` (>= 0)          | `UnexpectedError`                   |
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Sequence

from person_service.models.person import Person

# Name used in NotFoundError and in log records
RESOURCE_KIND = "person"

# Hard cap on search results; there is no pagination
SEARCH_RESULT_LIMIT = 50

NICKNAME_TAKEN = "nickname already taken"


class PersonRepository(ABC):
    """
    Abstract repository for Person records.

    Implementations must be safe for concurrent use by many requests and must not
    retry failed store calls.
    """

    @abstractmethod
    async def create(
        self,
        nickname: str,
        name: str,
        dob: date,
        stacks: Sequence[str] | None = None,
    ) -> Person:
        """
        Persist a new Person and return it with its store-assigned id.

        Nickname uniqueness is decided by the store itself: a duplicate raises
        ConflictError. No existence pre-check is performed.
        """

    @abstractmethod
    async def get_by_id(self, person_id: int) -> Person:
        """Return the Person with `person_id` or raise NotFoundError."""

    @abstractmethod
    async def search(self, term: str) -> list[Person]:
        """
        Return up to SEARCH_RESULT_LIMIT people whose nickname, name or any stack
        entry contains `term` as a literal, case-sensitive substring.

        No ordering is guaranteed. An empty term matches everyone.
        """

    @abstractmethod
    async def count(self) -> int:
        """Total number of stored people."""


def matches_term(person: Person, term: str) -> bool:
    """Python rendition of the search predicate (substring on nickname, name or any stack)."""
    if term in person.nickname or term in person.name:
        return True
    return any(term in stack for stack in (person.stacks or ()))
