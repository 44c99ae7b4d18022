"""Tests for login and the current-user endpoint."""

import pytest
from httpx import AsyncClient

from staffdesk.core.auth.backend import create_access_token, decode_token
from tests.factories import TEST_PASSWORD, bearer


pytestmark = pytest.mark.integration

LOGIN_URL = "/api/v1/auth/login"
ME_URL = "/api/v1/auth/me"


class TestLogin:
    """Tests for POST /auth/login."""

    async def test_issues_bearer_token(self, client: AsyncClient, make_user):
        user = await make_user("analyst", email="ada@example.com")

        response = await client.post(
            LOGIN_URL, json={"email": "Ada@Example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 3600
        token_data = decode_token(body["access_token"])
        assert token_data is not None
        assert token_data.user_id == user.id

    @pytest.mark.parametrize(
        ("email", "password"),
        [
            ("ada@example.com", "wrong-password"),
            ("nobody@example.com", TEST_PASSWORD),
        ],
    )
    async def test_bad_credentials(self, client: AsyncClient, make_user, email, password):
        await make_user(email="ada@example.com")

        response = await client.post(LOGIN_URL, json={"email": email, "password": password})

        assert response.status_code == 401
        assert response.json() == {"message": "These credentials do not match our records."}


class TestMe:
    """Tests for GET /auth/me."""

    async def test_admin_profile_and_abilities(self, client: AsyncClient, admin, admin_headers):
        response = await client.get(ME_URL, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == admin.id
        assert [role["slug"] for role in body["roles"]] == ["admin"]
        assert body["permission_slugs"] == ["manage-roles", "manage-users", "view-dashboard"]
        assert body["abilities"] == {
            "view-dashboard": True,
            "manage-users": True,
            "manage-roles": True,
            "manage-settings": False,
        }
        assert "password_hash" not in body

    async def test_super_admin_holds_everything(self, client: AsyncClient, super_admin_headers):
        response = await client.get(ME_URL, headers=super_admin_headers)

        assert all(response.json()["abilities"].values())

    async def test_user_without_roles(self, client: AsyncClient, make_user):
        user = await make_user()

        response = await client.get(ME_URL, headers=bearer(user))

        assert response.status_code == 200
        assert not any(response.json()["abilities"].values())

    async def test_requires_token(self, client: AsyncClient):
        response = await client.get(ME_URL)

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthenticated."}

    async def test_rejects_malformed_token(self, client: AsyncClient):
        response = await client.get(ME_URL, headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    async def test_rejects_token_of_deleted_user(self, client: AsyncClient, system_roles):
        headers = {"Authorization": f"Bearer {create_access_token(987654)}"}

        response = await client.get(ME_URL, headers=headers)

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthenticated."}
