"""
Core pytest configuration for the entire test suite.

Only the pieces every kind of test needs live here: noisy-logger tuning, the
session-wide logging setup and the (optional) PostgreSQL engine.

Domain-specific fixtures are located in:
- tests/test_fixtures/repository_fixtures.py
- tests/test_fixtures/api_fixtures.py

PostgreSQL-backed tests run only when a test database is configured, either via
the `TEST_DATABASE_URL` environment variable or `TESTING=true` plus
`TEST_POSTGRES_DB` in the app settings. Everything else runs against the
in-memory repository.
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning
# -------------------------------
# Keep this block before importing person_service modules so collection stays quiet.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "httpx",
    "urllib3",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from person_service.config import get_settings
from person_service.core.logging.builder import setup_logging
from person_service.db.base import Base
from person_service.db.session import init_schema
from person_service.repositories.person_repository import SQLAlchemyPersonRepository

settings = get_settings()
logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install application logging for the whole test session, so formatters and
    filters (request_id, redact) behave the same as in the running service.
    """
    setup_logging(settings)
    yield


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str | None:
    """
    Determine the PostgreSQL URL used by integration tests.

    1. `TEST_DATABASE_URL` environment variable (CI override)
    2. The app's DATABASE_URL when `TESTING=True` and `TEST_POSTGRES_DB` is set
    3. None: PostgreSQL tests are skipped. The schema relies on ARRAY columns,
       so there is no SQLite fallback.
    """
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return None


TEST_DATABASE_URL = get_test_database_url()
if TEST_DATABASE_URL:
    logger.info(f"Using test DB: {safe_log_db_url(TEST_DATABASE_URL)}")


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def pg_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh schema per test: tables are created before and dropped after.

    The repository commits for real (one session per operation), so savepoint-based
    rollback isolation would not cover it; dropping the table does.
    """
    if TEST_DATABASE_URL is None:
        pytest.skip("PostgreSQL not configured (set TEST_DATABASE_URL)")

    engine = create_async_engine(TEST_DATABASE_URL, echo=False, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_schema(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def pg_session_factory(pg_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=pg_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def pg_repository(pg_session_factory) -> SQLAlchemyPersonRepository:
    return SQLAlchemyPersonRepository(pg_session_factory)


# Shared fixtures
from person_service.tests.test_fixtures.repository_fixtures import (  # noqa: E402,F401
    memory_repository,
    sample_person_data,
    create_person,
    created_person,
    multiple_people,
)
from person_service.tests.test_fixtures.api_fixtures import (  # noqa: E402,F401
    app_settings,
    app,
    client,
)
