"""
Centralized access to the database models.

    from person_service.models import Person
"""

from .person import Person

__all__ = [
    "Person",
]
