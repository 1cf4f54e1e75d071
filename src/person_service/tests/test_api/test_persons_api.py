"""HTTP behavior of the person routes, backed by the in-memory repository."""

import pytest
from fastapi.testclient import TestClient

from person_service.exceptions import AppError, InvalidRequestError, UnexpectedError
from person_service.main import create_app
from person_service.repositories import SEARCH_RESULT_LIMIT
from person_service.repositories.base_repository import PersonRepository

JOSE = {"apelido": "jose", "nome": "José", "nascimento": "2000-01-01", "stack": ["Go", "Rust"]}


def assert_error_body(resp, status: int, error_type: str):
    assert resp.status_code == status
    body = resp.json()
    assert set(body) == {"status", "type", "title", "detail"}
    assert body["status"] == status
    assert body["type"] == error_type
    return body


class TestCreatePerson:

    def test_create_returns_201_with_body_and_location(self, client):
        resp = client.post("/pessoas", json=JOSE)

        assert resp.status_code == 201
        assert resp.json() == {"id": 1, **JOSE}
        assert resp.headers["Location"] == "/pessoas/1"
        assert resp.headers["X-Request-ID"]

    def test_stack_absent_is_null(self, client):
        payload = {k: v for k, v in JOSE.items() if k != "stack"}

        resp = client.post("/pessoas", json=payload)

        assert resp.status_code == 201
        assert resp.json()["stack"] is None

    def test_empty_stack_stays_empty(self, client):
        resp = client.post("/pessoas", json={**JOSE, "stack": []})

        assert resp.json()["stack"] == []

    def test_duplicate_nickname_is_conflict(self, client):
        client.post("/pessoas", json=JOSE)

        resp = client.post("/pessoas", json={**JOSE, "nome": "Outro"})

        body = assert_error_body(resp, 422, "Conflict")
        assert body == {
            "status": 422,
            "type": "Conflict",
            "title": "Unprocessable entity",
            "detail": "Conflict due to nickname already taken",
        }

    @pytest.mark.parametrize(
        "payload",
        [
            {**JOSE, "nome": 1},
            {**JOSE, "nascimento": 20000101},
            {**JOSE, "nascimento": "01/01/2000"},
            {**JOSE, "nascimento": "946684800"},
            {**JOSE, "nascimento": "2000-01-01T00:00:00"},
            {**JOSE, "nascimento": "2000-01-01T00:00:00Z"},
            {**JOSE, "stack": [1, "Go"]},
            {"apelido": "jose", "nome": "José"},
            {},
        ],
    )
    def test_invalid_payload_is_unprocessable(self, client, payload):
        resp = client.post("/pessoas", json=payload)

        body = assert_error_body(resp, 422, "UnprocessableEntity")
        assert body["title"] == "Invalid request payload"

    def test_malformed_json_is_unprocessable(self, client):
        resp = client.post("/pessoas", content=b"{not json", headers={"Content-Type": "application/json"})

        assert_error_body(resp, 422, "UnprocessableEntity")

    def test_validation_detail_names_the_field(self, client):
        resp = client.post("/pessoas", json={**JOSE, "nome": 1})

        assert resp.json()["detail"].startswith("nome:")


class TestGetPerson:

    def test_get_existing(self, client):
        created = client.post("/pessoas", json=JOSE).json()

        resp = client.get(f"/pessoas/{created['id']}")

        assert resp.status_code == 200
        assert resp.json() == created

    def test_get_missing_is_404(self, client):
        resp = client.get("/pessoas/999")

        assert assert_error_body(resp, 404, "NotFound") == {
            "status": 404,
            "type": "NotFound",
            "title": "Resource not found",
            "detail": "Resource 'person' with id 999 not found",
        }

    def test_non_integer_id_is_unprocessable(self, client):
        assert_error_body(client.get("/pessoas/abc"), 422, "UnprocessableEntity")


class TestSearchPeople:

    def test_search_by_stack(self, client):
        client.post("/pessoas", json=JOSE)
        client.post("/pessoas", json={"apelido": "ana", "nome": "Ana", "nascimento": "1999-03-04", "stack": ["C"]})

        resp = client.get("/pessoas", params={"t": "Go"})

        assert resp.status_code == 200
        assert [p["apelido"] for p in resp.json()] == ["jose"]

    def test_no_match_is_empty_list(self, client):
        client.post("/pessoas", json=JOSE)

        resp = client.get("/pessoas", params={"t": "Haskell"})

        assert resp.status_code == 200
        assert resp.json() == []

    def test_results_are_capped(self, client):
        for i in range(SEARCH_RESULT_LIMIT + 2):
            client.post("/pessoas", json={**JOSE, "apelido": f"jose{i}"})

        resp = client.get("/pessoas", params={"t": "jose"})

        assert len(resp.json()) == SEARCH_RESULT_LIMIT

    def test_missing_term_is_unprocessable(self, client):
        body = assert_error_body(client.get("/pessoas"), 422, "UnprocessableEntity")
        assert body["detail"].startswith("t:")


class TestCountPeople:

    def test_count_is_plain_text(self, client):
        client.post("/pessoas", json=JOSE)
        client.post("/pessoas", json=JOSE)  # conflict, not counted

        resp = client.get("/contagem-pessoas")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.text == "1"

    def test_empty_store_counts_zero(self, client):
        assert client.get("/contagem-pessoas").text == "0"


class BrokenRepository(PersonRepository):
    """Every store call fails the way an unreachable database would surface."""

    async def create(self, nickname, name, dob, stacks=None):
        raise UnexpectedError()

    async def get_by_id(self, person_id):
        raise UnexpectedError()

    async def search(self, term):
        raise UnexpectedError()

    async def count(self):
        raise RuntimeError("bug outside the repository contract")


class TestUnexpectedErrors:

    @pytest.fixture
    def broken_client(self, app_settings):
        app = create_app(settings=app_settings, repository=BrokenRepository())
        with TestClient(app, raise_server_exceptions=False) as c:
            yield c

    @pytest.mark.parametrize(
        "method, url, kwargs",
        [
            ("post", "/pessoas", {"json": JOSE}),
            ("get", "/pessoas/1", {}),
            ("get", "/pessoas", {"params": {"t": "Go"}}),
        ],
    )
    def test_repository_failure_is_500(self, broken_client, method, url, kwargs):
        resp = getattr(broken_client, method)(url, **kwargs)

        assert assert_error_body(resp, 500, "Unexpected") == {
            "status": 500,
            "type": "Unexpected",
            "title": "Internal Server Error",
            "detail": "Unexpected error",
        }

    def test_uncaught_exception_renders_unexpected_body(self, broken_client):
        resp = broken_client.get("/contagem-pessoas")

        assert_error_body(resp, 500, "Unexpected")
        assert "bug outside" not in resp.text


def test_example_scenario(client):
    created = client.post("/pessoas", json=JOSE)
    assert created.status_code == 201
    assert created.json()["id"] == 1
    assert created.json()["stack"] == ["Go", "Rust"]

    assert client.post("/pessoas", json=JOSE).json()["type"] == "Conflict"
    assert 1 in [p["id"] for p in client.get("/pessoas", params={"t": "Go"}).json()]
    assert client.get("/contagem-pessoas").text == "1"


def test_lifespan_builds_memory_repository(app_settings):
    app = create_app(settings=app_settings)

    with TestClient(app) as c:
        assert c.post("/pessoas", json=JOSE).status_code == 201
        assert c.get("/contagem-pessoas").text == "1"


def test_invalid_request_renders_through_app_error_handler(app):
    async def reject():
        raise InvalidRequestError("t: required")

    app.add_api_route("/reject", reject)

    assert InvalidRequestError not in app.exception_handlers
    assert AppError in app.exception_handlers
    with TestClient(app) as c:
        body = assert_error_body(c.get("/reject"), 422, "UnprocessableEntity")
    assert body["title"] == "Invalid request payload"
    assert body["detail"] == "t: required"
