"""
Application entry point.

`create_app()` assembles the FastAPI application: request-id middleware, exception
handlers, routes, and a lifespan that configures logging and wires the
PersonRepository implementation selected by settings. A module-level `app` is
created at import time so ASGI servers can find it:

    uvicorn person_service.main:app

Tests pass their own repository (usually InMemoryPersonRepository); the lifespan
then leaves it untouched and no database engine is created.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from person_service.api.error_handlers import register_exception_handlers
from person_service.api.routes import router
from person_service.config.settings import Settings, get_settings
from person_service.core.logging import RequestIDMiddleware, setup_logging
from person_service.db.session import DatabaseSessionManager
from person_service.repositories.base_repository import PersonRepository
from person_service.repositories.memory_repository import InMemoryPersonRepository
from person_service.repositories.person_repository import SQLAlchemyPersonRepository
from person_service.utils.logging import get_project_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    db_manager: DatabaseSessionManager | None = None
    if app.state.person_repository is None:
        if settings.STORAGE_BACKEND == "memory":
            app.state.person_repository = InMemoryPersonRepository()
        else:
            db_manager = DatabaseSessionManager.from_settings(settings)
            app.state.person_repository = SQLAlchemyPersonRepository(db_manager.session_factory)

    logger.info(
        "Person service started",
        extra={"storage_backend": type(app.state.person_repository).__name__, "env": settings.ENV},
    )
    try:
        yield
    finally:
        logger.info("Person service shutting down")
        if db_manager is not None:
            await db_manager.dispose()


def create_app(
    settings: Settings | None = None,
    repository: PersonRepository | None = None,
) -> FastAPI:
    """
    Build a configured FastAPI instance.

    Args:
        settings: defaults to get_settings().
        repository: a ready PersonRepository; when omitted the lifespan builds one
            from settings.STORAGE_BACKEND.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Person Service",
        version=get_project_version(),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.person_repository = repository

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(router)

    return app


app = create_app()
