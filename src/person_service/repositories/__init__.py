"""
Repository layer.

    from person_service.repositories import PersonRepository, SQLAlchemyPersonRepository
"""

from .base_repository import PersonRepository, SEARCH_RESULT_LIMIT
from .person_repository import SQLAlchemyPersonRepository
from .memory_repository import InMemoryPersonRepository

__all__ = [
    "PersonRepository",
    "SQLAlchemyPersonRepository",
    "InMemoryPersonRepository",
    "SEARCH_RESULT_LIMIT",
]
