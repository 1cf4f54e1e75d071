"""Fixtures for repository tests."""

import uuid
from datetime import date

import pytest

from person_service.models.person import Person
from person_service.repositories.memory_repository import InMemoryPersonRepository


@pytest.fixture
def memory_repository() -> InMemoryPersonRepository:
    """A fresh, empty in-memory repository (ids start at 1)."""
    return InMemoryPersonRepository()


@pytest.fixture
def sample_person_data() -> dict:
    """
    Deterministic sample payload used by many tests.

    Returns:
        dict: keyword arguments for PersonRepository.create().
    """
    return {
        "nickname": "jose",
        "name": "José",
        "dob": date(2000, 1, 1),
        "stacks": ["Go", "Rust"],
    }


@pytest.fixture
def create_person(memory_repository: InMemoryPersonRepository):
    """
    Factory creating people with unique nicknames unless overridden.

    Usage:
        person = await create_person(name="Ana", stacks=None)
    """
    async def _create(**overrides) -> Person:
        data = {
            "nickname": f"user_{uuid.uuid4().hex[:8]}",
            "name": "Test Person",
            "dob": date(1990, 5, 17),
            "stacks": ["Python"],
        }
        data.update(overrides)
        return await memory_repository.create(**data)

    return _create


@pytest.fixture
async def created_person(create_person, sample_person_data) -> Person:
    return await create_person(**sample_person_data)


@pytest.fixture
async def multiple_people(create_person) -> list[Person]:
    """Three people with distinct names and stacks."""
    return [
        await create_person(nickname="ana", name="Ana Maria", stacks=["Python", "SQL"]),
        await create_person(nickname="bruno", name="Bruno Costa", stacks=[]),
        await create_person(nickname="carla", name="Carla Dias", stacks=None),
    ]
