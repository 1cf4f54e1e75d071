# person_service/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # App-level errors (NotFoundError, ConflictError, UnexpectedError, ...)
# │   ├── integrity_classifier.py    # SQLSTATE-level classification of IntegrityError
# │   └── mapper.py                  # Map store failures to app-level errors

from .base import (
    AppError,
    RepositoryError,
    NotFoundError,
    ConflictError,
    UnexpectedError,
    InvalidRequestError,
)

__all__ = [
    "AppError",
    "RepositoryError",
    "NotFoundError",
    "ConflictError",
    "UnexpectedError",
    "InvalidRequestError",
]
