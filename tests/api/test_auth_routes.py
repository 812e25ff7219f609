"""Tests for login, token refresh, /me and bearer token validation."""
from datetime import UTC, datetime, timedelta

import jwt
from httpx import AsyncClient

from core.config import Settings
from core.security import JWT_ALGORITHM, create_token
from models.user import User
from tests.conftest import TEST_PASSWORD


async def _login(anon_client: AsyncClient, email: str, password: str = TEST_PASSWORD):  # noqa: ANN202
    return await anon_client.post("/auth/login", json={"email": email, "password": password})


async def test__login__returns_tokens_and_user(
    anon_client: AsyncClient,
    test_user: User,
) -> None:
    """Valid credentials yield an access token, a refresh token and the user summary."""
    response = await _login(anon_client, test_user.email)

    assert response.status_code == 200
    body = response.json()
    assert body["accessToken"]
    assert body["refreshToken"]
    assert body["user"] == {"id": str(test_user.id), "email": test_user.email, "role": "USER"}


async def test__login__access_token_authenticates(
    anon_client: AsyncClient,
    test_user: User,
) -> None:
    """The issued access token works as a Bearer token."""
    token = (await _login(anon_client, test_user.email)).json()["accessToken"]

    response = await anon_client.get("/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == test_user.email


async def test__login__wrong_password_returns_401(
    anon_client: AsyncClient,
    test_user: User,
) -> None:
    """Bad passwords are rejected with a generic message."""
    response = await _login(anon_client, test_user.email, "not-the-password")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


async def test__login__unknown_email_returns_401(
    anon_client: AsyncClient,
    test_user: User,  # noqa: ARG001
) -> None:
    """Unknown emails get the same answer as wrong passwords."""
    response = await _login(anon_client, "ghost@example.com")

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


async def test__login__disabled_user_returns_401(
    anon_client: AsyncClient,
    test_user: User,
) -> None:
    """Disabled accounts cannot log in."""
    test_user.is_disabled = True

    response = await _login(anon_client, test_user.email)

    assert response.status_code == 401


async def test__refresh__issues_new_access_token(
    anon_client: AsyncClient,
    test_user: User,
) -> None:
    """A refresh token can be exchanged for a working access token."""
    refresh_token = (await _login(anon_client, test_user.email)).json()["refreshToken"]

    response = await anon_client.post("/auth/refresh", json={"refreshToken": refresh_token})

    assert response.status_code == 200
    token = response.json()["accessToken"]
    me = await anon_client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200


async def test__refresh__rejects_access_token(
    anon_client: AsyncClient,
    test_user: User,
    test_settings: Settings,
) -> None:
    """An access token is not accepted as a refresh token."""
    access_token = create_token(str(test_user.id), test_user.role, "access", test_settings)

    response = await anon_client.post("/auth/refresh", json={"refreshToken": access_token})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


async def test__refresh__rejects_garbage(anon_client: AsyncClient) -> None:
    """Malformed refresh tokens are 401."""
    response = await anon_client.post("/auth/refresh", json={"refreshToken": "garbage"})

    assert response.status_code == 401


async def test__bearer__refresh_token_not_accepted_as_access(
    anon_client: AsyncClient,
    test_user: User,
    test_settings: Settings,
) -> None:
    """Refresh tokens cannot call the API."""
    refresh_token = create_token(str(test_user.id), test_user.role, "refresh", test_settings)

    response = await anon_client.get("/me", headers={"Authorization": f"Bearer {refresh_token}"})

    assert response.status_code == 401


async def test__bearer__expired_token_returns_401(
    anon_client: AsyncClient,
    test_user: User,
    test_settings: Settings,
) -> None:
    """Expired access tokens are rejected with a specific message."""
    token = create_token(
        str(test_user.id),
        test_user.role,
        "access",
        test_settings,
        now=datetime.now(UTC) - timedelta(hours=1),
    )

    response = await anon_client.get("/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


async def test__bearer__wrong_signature_returns_401(
    anon_client: AsyncClient,
    test_user: User,
) -> None:
    """Tokens signed with another secret are invalid."""
    token = jwt.encode(
        {
            "sub": str(test_user.id),
            "role": "USER",
            "type": "access",
            "exp": datetime.now(UTC) + timedelta(minutes=5),
        },
        "some-other-secret",
        algorithm=JWT_ALGORITHM,
    )

    response = await anon_client.get("/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


async def test__bearer__missing_token_returns_401(anon_client: AsyncClient) -> None:
    """No Authorization header is 401 with a WWW-Authenticate challenge."""
    response = await anon_client.get("/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test__me__returns_current_user(client: AsyncClient, test_user: User) -> None:
    """GET /me describes the authenticated account."""
    response = await client.get("/me")

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == str(test_user.id)
    assert user["role"] == "USER"
    assert user["isDisabled"] is False
    assert "passwordHash" not in user
