"""Integration tests for authentication API endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from expense_tracker.core.security import TokenService
from expense_tracker.models.user import User
from expense_tracker.repositories.user import UserRepository

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"
PROFILE_URL = "/api/v1/auth/profile"


def registration(**overrides) -> dict:
    data = {
        "email": "newuser@example.com",
        "password": "SecurePass123!",
        "first_name": "New",
        "last_name": "User",
    }
    data.update(overrides)
    return data


class TestUserRegistration:
    """Test user registration endpoint."""

    async def test_register_success(
        self, client: AsyncClient, db_session: AsyncSession, token_service: TokenService
    ):
        response = await client.post(REGISTER_URL, json=registration())

        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert set(data["user"]) == {"id", "email", "first_name", "last_name", "role"}
        assert data["user"]["email"] == "newuser@example.com"
        assert data["user"]["role"] == "User"
        assert "password" not in response.text
        assert "password_hash" not in response.text

        claims = token_service.verify(data["token"])
        assert str(claims.user_id) == data["user"]["id"]

        user = await UserRepository(db_session).get_by_email("newuser@example.com")
        assert user is not None
        assert user.password_hash != "SecurePass123!"

    async def test_register_normalizes_email(self, client: AsyncClient):
        response = await client.post(REGISTER_URL, json=registration(email="Mixed.Case@Example.com"))

        assert response.status_code == 201
        assert response.json()["user"]["email"] == "mixed.case@example.com"

    async def test_register_duplicate_email(
        self, client: AsyncClient, db_session: AsyncSession, test_user: User
    ):
        original_hash = test_user.password_hash

        response = await client.post(
            REGISTER_URL,
            json=registration(email="TestUser@example.com", first_name="Duplicate"),
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "AUTH_001"

        user = await UserRepository(db_session).get_by_email("testuser@example.com")
        assert user.id == test_user.id
        assert user.first_name == "Test"
        assert user.password_hash == original_hash

    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not-an-email"},
            {"password": "short"},
            {"first_name": ""},
            {"last_name": "   "},
        ],
    )
    async def test_register_invalid_input(self, client: AsyncClient, overrides):
        response = await client.post(REGISTER_URL, json=registration(**overrides))

        assert response.status_code == 400
        assert response.json()["error_code"] == "VAL_001"

    async def test_register_missing_field(self, client: AsyncClient):
        data = registration()
        del data["last_name"]

        response = await client.post(REGISTER_URL, json=data)

        assert response.status_code == 400
        assert "last_name" in response.json()["message"]


class TestUserLogin:
    """Test user login endpoint."""

    async def test_login_success(self, client: AsyncClient, test_user: User):
        response = await client.post(
            LOGIN_URL, json={"email": test_user.email, "password": "password123"}
        )

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data["token"], str) and data["token"]
        assert data["user"]["id"] == str(test_user.id)
        assert data["user"]["first_name"] == "Test"

    async def test_login_is_case_insensitive_on_email(self, client: AsyncClient, test_user: User):
        response = await client.post(
            LOGIN_URL, json={"email": "TESTUSER@example.com", "password": "password123"}
        )
        assert response.status_code == 200

    async def test_wrong_password_and_unknown_email_identical(
        self, client: AsyncClient, test_user: User
    ):
        wrong_password = await client.post(
            LOGIN_URL, json={"email": test_user.email, "password": "wrongpassword"}
        )
        unknown_email = await client.post(
            LOGIN_URL, json={"email": "notexist@example.com", "password": "password123"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error_code"] == "AUTH_002"


class TestProfile:
    """Test GET /profile (requires authentication)."""

    async def test_profile_with_token_from_login(self, client: AsyncClient, test_user: User):
        login = await client.post(
            LOGIN_URL, json={"email": test_user.email, "password": "password123"}
        )
        token = login.json()["token"]

        response = await client.get(PROFILE_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {
            "id": str(test_user.id),
            "email": "testuser@example.com",
            "first_name": "Test",
            "last_name": "User",
            "role": "User",
        }

    async def test_profile_without_token(self, client: AsyncClient):
        response = await client.get(PROFILE_URL)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error_code"] == "AUTH_003"

    @pytest.mark.parametrize(
        "header", ["Bearer invalid.token.here", "NotBearer token", "Bearer"]
    )
    async def test_profile_bad_header(self, client: AsyncClient, header: str):
        response = await client.get(PROFILE_URL, headers={"Authorization": header})
        assert response.status_code == 401

    async def test_profile_expired_token(
        self, client: AsyncClient, test_user: User, token_service: TokenService
    ):
        token = token_service.issue(
            test_user.id, test_user.email, test_user.role, expires_delta=timedelta(seconds=-5)
        )
        response = await client.get(PROFILE_URL, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_profile_foreign_issuer(self, client: AsyncClient, test_user: User):
        from expense_tracker.config import settings

        foreign = TokenService(
            secret=settings.jwt_secret,
            issuer="someone-else",
            audience=settings.jwt_audience,
            expire_minutes=5,
        )
        token = foreign.issue(test_user.id, test_user.email, test_user.role)

        response = await client.get(PROFILE_URL, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_profile_user_gone(self, client: AsyncClient, token_service: TokenService):
        from uuid import uuid4

        token = token_service.issue(uuid4(), "ghost@example.com", "User")
        response = await client.get(PROFILE_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "RES_001"

