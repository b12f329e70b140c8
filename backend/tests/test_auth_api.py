import pytest

pytestmark = pytest.mark.anyio

CREDENTIALS = {"username": "ada@clinic.org", "password": "correct-horse-battery"}


async def test_register_then_duplicate_email(client):
    payload = {"email": "new@clinic.org", "full_name": "New Doctor", "password": "long-enough-secret"}

    created = await client.post("/api/v1/auth/register", json=payload)
    assert created.status_code == 201, created.text
    assert created.json()["role"] == "practitioner"
    assert "password" not in created.json()

    duplicate = await client.post("/api/v1/auth/register", json=payload)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Email already registered"


async def test_login_sets_session_cookie(client, practitioner):
    response = await client.post("/api/v1/auth/login", data=CREDENTIALS)

    assert response.status_code == 200, response.text
    assert response.json()["token_type"] == "bearer"
    assert "access_token=" in response.headers["set-cookie"]

    me = await client.get("/api/v1/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == practitioner.id


async def test_login_returns_to_original_page(client, practitioner):
    response = await client.post(
        "/api/v1/auth/login", data=CREDENTIALS, params={"redirectTo": "/api/v1/patients/recent"}
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/api/v1/patients/recent"

    follow = await client.get("/api/v1/patients/recent")
    assert follow.status_code == 200


async def test_login_ignores_offsite_redirect(client, practitioner):
    response = await client.post(
        "/api/v1/auth/login", data=CREDENTIALS, params={"redirectTo": "//evil.example/steal"}
    )

    assert response.status_code == 200


async def test_login_with_wrong_password(client, practitioner):
    response = await client.post("/api/v1/auth/login", data={**CREDENTIALS, "password": "nope"})

    assert response.status_code == 401


async def test_me_requires_credentials(client):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401


async def test_logout_clears_cookie(client, practitioner):
    await client.post("/api/v1/auth/login", data=CREDENTIALS)

    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 204

    after = await client.get("/api/v1/session")
    assert after.status_code == 303
