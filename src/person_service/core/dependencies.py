from fastapi import Request

from person_service.repositories.base_repository import PersonRepository


def get_person_repository(request: Request) -> PersonRepository:
    # The app factory / lifespan stores the configured implementation on app.state
    return request.app.state.person_repository
