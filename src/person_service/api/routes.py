"""
HTTP routes for Person records.

    POST /pessoas              create            201 | 422 | 500
    GET  /pessoas/{id}         get by id         200 | 404 | 500
    GET  /pessoas?t=<term>     substring search  200 | 422 | 500
    GET  /contagem-pessoas     count (text/plain) 200 | 500

Handlers only decode input, call one repository operation and encode the result;
errors propagate to the handlers registered in api/error_handlers.py.
"""
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import PlainTextResponse

from person_service.core.dependencies import get_person_repository
from person_service.repositories.base_repository import PersonRepository
from person_service.schemas.error import ErrorResponse
from person_service.schemas.person import PersonCreate, PersonRead

router = APIRouter(tags=["pessoas"])

_UNEXPECTED = {500: {"model": ErrorResponse}}


@router.post(
    "/pessoas",
    status_code=status.HTTP_201_CREATED,
    response_model=PersonRead,
    responses={422: {"model": ErrorResponse}, **_UNEXPECTED},
)
async def create_person(
    payload: PersonCreate,
    response: Response,
    repo: PersonRepository = Depends(get_person_repository),
) -> PersonRead:
    person = await repo.create(
        nickname=payload.nickname,
        name=payload.name,
        dob=payload.dob,
        stacks=payload.stacks,
    )
    response.headers["Location"] = f"/pessoas/{person.id}"
    return PersonRead.model_validate(person)


@router.get(
    "/pessoas/{person_id}",
    response_model=PersonRead,
    responses={404: {"model": ErrorResponse}, **_UNEXPECTED},
)
async def get_person(
    person_id: int,
    repo: PersonRepository = Depends(get_person_repository),
) -> PersonRead:
    person = await repo.get_by_id(person_id)
    return PersonRead.model_validate(person)


@router.get(
    "/pessoas",
    response_model=list[PersonRead],
    responses={422: {"model": ErrorResponse}, **_UNEXPECTED},
)
async def search_people(
    t: str = Query(..., description="Substring matched against apelido, nome and stack entries"),
    repo: PersonRepository = Depends(get_person_repository),
) -> list[PersonRead]:
    people = await repo.search(t)
    return [PersonRead.model_validate(p) for p in people]


@router.get(
    "/contagem-pessoas",
    response_class=PlainTextResponse,
    responses=_UNEXPECTED,
)
async def count_people(repo: PersonRepository = Depends(get_person_repository)) -> str:
    return str(await repo.count())
