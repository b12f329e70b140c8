import pytest
from datetime import timedelta
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from patient_records.database import UserRecord
from patient_records.services.auth_service import AuthService, safe_get_session

pytestmark = pytest.mark.anyio


@pytest.mark.parametrize("path", [
    "/api/v1/session",
    "/api/v1/patients/",
    "/api/v1/patients/recent",
    "/api/v1/patients/some-id/notes",
])
async def test_anonymous_request_redirects_to_login(client, path):
    response = await client.get(path)

    assert response.status_code == 303
    assert response.headers["location"] == f"/login?redirectTo={path}"


async def test_redirect_keeps_path_but_not_query(client):
    response = await client.get("/api/v1/patients/", params={"last_name": "smith"})

    assert response.status_code == 303
    assert response.headers["location"] == "/login?redirectTo=/api/v1/patients/"


async def test_anonymous_mutation_redirects_too(client):
    response = await client.delete("/api/v1/notes/n1")

    assert response.status_code == 303
    assert response.headers["location"] == "/login?redirectTo=/api/v1/notes/n1"


async def test_valid_session_passes_session_and_user(client, practitioner, auth_headers):
    response = await client.get("/api/v1/session", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == practitioner.id
    assert body["user"]["email"] == practitioner.email
    assert body["session"]["access_token"] == auth_headers["Authorization"].split()[1]
    assert body["session"]["expires_at"] is not None


async def test_session_cookie_is_accepted(client, practitioner):
    token = AuthService.create_access_token(data={"sub": practitioner.id})

    response = await client.get("/api/v1/session", headers={"Cookie": f"access_token={token}"})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == practitioner.id


async def test_expired_token_redirects(client, practitioner):
    token = AuthService.create_access_token(data={"sub": practitioner.id}, expires_delta=timedelta(minutes=-5))

    response = await client.get("/api/v1/session", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 303


async def test_garbage_token_redirects(client):
    response = await client.get("/api/v1/session", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 303


async def test_inactive_user_redirects(client, inactive_practitioner):
    token = AuthService.create_access_token(data={"sub": inactive_practitioner.id})

    response = await client.get("/api/v1/session", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 303


async def test_login_page_echoes_return_target(client):
    response = await client.get("/login", params={"redirectTo": "/api/v1/patients/"})

    assert response.status_code == 200
    assert response.json()["redirectTo"] == "/api/v1/patients/"


class UnreachableDatabase:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


async def test_session_lookup_fault_yields_empty_context(practitioner):
    token = AuthService.create_access_token(data={"sub": practitioner.id})
    request = Request({
        "type": "http",
        "method": "GET",
        "path": "/api/v1/session",
        "query_string": b"",
        "headers": [(b"authorization", f"Bearer {token}".encode())],
    })

    context = await safe_get_session(request, UnreachableDatabase())

    assert context.session is None
    assert context.user is None


async def test_user_with_unknown_role_redirects(client, session_factory):
    async with session_factory() as session:
        record = UserRecord(
            email="legacy@clinic.org",
            hashed_password=AuthService.get_password_hash("correct-horse-battery"),
            full_name="Legacy Account",
            role="doctor",
            is_active=True,
        )
        session.add(record)
        await session.commit()
        user_id = record.id
    token = AuthService.create_access_token(data={"sub": user_id})

    response = await client.get("/api/v1/session", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 303
    assert response.headers["location"] == "/login?redirectTo=/api/v1/session"
