import pytest
from httpx import AsyncClient
from sqlmodel import select

from auth_service.domain.entities import User


@pytest.mark.asyncio
async def test_successful_registration(client: AsyncClient, register_user, db_session):
    """Registration returns the user view, a token pair and auth cookies"""
    response = await register_user()

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "user@example.com"
    assert data["user"]["username"] == "alice"
    assert set(data["user"]) == {"id", "email", "username"}
    assert data["access_token"]
    assert data["refresh_token"]

    assert response.cookies.get("accessToken") == data["access_token"]
    assert response.cookies.get("refreshToken") == data["refresh_token"]

    user = (await db_session.exec(select(User))).one()
    assert user.password_hash.startswith("$argon2id$")
    assert user.refresh_token_hash.startswith("$argon2id$")
    assert user.refresh_token_hash != data["refresh_token"]


@pytest.mark.asyncio
async def test_register_then_login(client: AsyncClient, register_user):
    await register_user()

    response = await client.post(
        "/auth/login", json={"email": "user@example.com", "password": "SecurePass123!"}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_duplicate_email(client: AsyncClient, register_user, db_session):
    await register_user()

    response = await register_user(username="bob")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"
    users = (await db_session.exec(select(User))).all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_duplicate_username(client: AsyncClient, register_user, db_session):
    await register_user()

    response = await register_user(email="other@example.com")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_USERNAME"
    users = (await db_session.exec(select(User))).all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_email_conflict_wins_over_username_conflict(client: AsyncClient, register_user):
    await register_user()

    response = await register_user()

    assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "username": "alice", "password": "SecurePass123!"},
        {"email": "user@example.com", "username": "al", "password": "SecurePass123!"},
        {"email": "user@example.com", "username": "alice", "password": "short"},
        {"email": "user@example.com", "password": "SecurePass123!"},
    ],
)
async def test_invalid_payload(client: AsyncClient, payload):
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 422
