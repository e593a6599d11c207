# tests/v1/test_auth.py
"""Tests for the authentication endpoints."""

from datetime import timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from jose import jwt

from note_stash.core.settings import settings
from note_stash.db.time import utcnow
from note_stash.models import User
from note_stash.services.rate_limit import RateLimiter
from note_stash.services.tokens import TokenService

TEST_PASSWORD = "password@123"


def _register_payload(username: str = "new_user", email: str = "new_user@example.com") -> dict:
    return {"username": username, "email": email, "password": TEST_PASSWORD}


def test_register_user(client: TestClient) -> None:
    """Test successful user registration."""
    response = client.post("/api/auth/register", json=_register_payload())

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"username": "new_user", "email": "new_user@example.com"}


def test_register_response_never_contains_password(client: TestClient) -> None:
    response = client.post("/api/auth/register", json=_register_payload())

    assert "password" not in response.json()
    assert TEST_PASSWORD not in response.text


def test_register_duplicate_username(client: TestClient, test_user: User) -> None:
    response = client.post(
        "/api/auth/register",
        json=_register_payload(username=test_user.username),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error"] == "Bad Request"
    assert data["message"] == "User 'test_user' already exists."


def test_register_duplicate_email(client: TestClient, test_user: User) -> None:
    response = client.post(
        "/api/auth/register",
        json=_register_payload(email=test_user.email),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == f"User '{test_user.email}' already exists."


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        (
            {"username": "ab", "email": "ab@example.com", "password": TEST_PASSWORD},
            "username: Username must be between 3 and 50 characters",
        ),
        (
            {"username": "1user", "email": "u@example.com", "password": TEST_PASSWORD},
            "username: Username can only contain alphanumeric characters and underscores, "
            "and cannot start with an underscore or number.",
        ),
        (
            {"username": "_user", "email": "u@example.com", "password": TEST_PASSWORD},
            "username: Username can only contain alphanumeric characters and underscores, "
            "and cannot start with an underscore or number.",
        ),
        (
            {"username": "valid_user", "email": "u@example.com", "password": "12345"},
            "password: Password must be at least 6 characters",
        ),
    ],
)
def test_register_validation(client: TestClient, payload: dict, expected: str) -> None:
    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error"] == "Validation Error"
    assert data["message"] == expected


def test_register_password_with_nul_character(client: TestClient) -> None:
    payload = _register_payload()
    payload["password"] = "abc\u0000def"

    response = client.post("/api/auth/register", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["error"] == "Validation Error"
    assert data["message"] == "password: Password must not contain NUL characters"


def test_login_password_with_nul_character(client: TestClient, test_user: User) -> None:
    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": "abc\u0000def"},
    )
    unknown = client.post(
        "/api/auth/login",
        json={"username": "nobody_here", "password": "abc\u0000def"},
    )

    for result in (response, unknown):
        assert result.status_code == status.HTTP_401_UNAUTHORIZED
        assert result.json()["message"] == "Invalid username or password"


def test_register_invalid_email(client: TestClient) -> None:
    response = client.post(
        "/api/auth/register",
        json=_register_payload(email="not-an-email"),
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"].startswith("email: ")


def test_register_missing_fields(client: TestClient) -> None:
    response = client.post("/api/auth/register", json={})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    message = response.json()["message"]
    for field in ("username", "email", "password"):
        assert f"{field}: Field required" in message


def test_login_user(client: TestClient, test_user: User, token_service: TokenService) -> None:
    """Test logging in with valid credentials."""
    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["type"] == "Bearer"
    assert data["username"] == test_user.username
    assert data["email"] == test_user.email
    assert token_service.decode(data["token"]).subject == test_user.username
    assert token_service.decode(data["refreshToken"]).subject == test_user.username


def test_login_wrong_password(client: TestClient, test_user: User) -> None:
    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": "wrong-password"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid username or password"


def test_login_unknown_user_looks_like_wrong_password(client: TestClient, test_user: User) -> None:
    wrong_password = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": "wrong-password"},
    )
    unknown_user = client.post(
        "/api/auth/login",
        json={"username": "nobody_here", "password": TEST_PASSWORD},
    )

    assert unknown_user.status_code == wrong_password.status_code == 401
    assert unknown_user.json()["error"] == wrong_password.json()["error"]
    assert unknown_user.json()["message"] == wrong_password.json()["message"]


def test_login_blank_password(client: TestClient, test_user: User) -> None:
    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": ""},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "password: Password is required"


def test_refresh_returns_new_access_token(client: TestClient, test_user: User) -> None:
    login = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
    ).json()

    response = client.post("/api/auth/refresh", json={"refreshToken": login["refreshToken"]})

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["refreshToken"] == login["refreshToken"]
    assert data["username"] == test_user.username

    me = client.get("/api/user", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == status.HTTP_200_OK


def test_refresh_token_can_be_reused(client: TestClient, test_user: User) -> None:
    refresh_token = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
    ).json()["refreshToken"]

    first = client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    second = client.post("/api/auth/refresh", json={"refreshToken": refresh_token})

    assert first.status_code == second.status_code == status.HTTP_201_CREATED
    assert second.json()["refreshToken"] == refresh_token


def test_refresh_with_invalid_token(client: TestClient) -> None:
    response = client.post("/api/auth/refresh", json={"refreshToken": "invalid.token.value"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Refresh token has been expired!"


def test_refresh_with_expired_token(client: TestClient, test_user: User) -> None:
    past = int((utcnow() - timedelta(minutes=1)).timestamp())
    expired = jwt.encode(
        {"sub": test_user.username, "iat": past - 60, "exp": past},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )

    response = client.post("/api/auth/refresh", json={"refreshToken": expired})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Refresh token has been expired!"


def test_login_throttled_per_origin(client: TestClient, test_user: User) -> None:
    """The 61st login attempt from one address inside a window is rejected."""
    headers = {"X-Forwarded-For": "203.0.113.7"}
    for i in range(60):
        response = client.post(
            "/api/auth/login",
            json={"username": f"user_{i}", "password": TEST_PASSWORD},
            headers=headers,
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
        headers=headers,
    )

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    data = response.json()
    assert data["error"] == "Too Many Requests"
    assert data["status"] == 429


def test_other_origins_unaffected_by_throttled_origin(client: TestClient, test_user: User) -> None:
    for i in range(61):
        client.post(
            "/api/auth/login",
            json={"username": f"user_{i}", "password": TEST_PASSWORD},
            headers={"X-Forwarded-For": "203.0.113.7"},
        )

    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
        headers={"X-Forwarded-For": "198.51.100.1"},
    )

    assert response.status_code == status.HTTP_200_OK


def test_login_throttled_per_handle_across_origins(client: TestClient, test_user: User) -> None:
    """Guessing one handle's password from many addresses is still throttled."""
    for i in range(60):
        response = client.post(
            "/api/auth/login",
            json={"username": test_user.username, "password": "wrong-password"},
            headers={"X-Forwarded-For": f"10.0.0.{i}"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": TEST_PASSWORD},
        headers={"X-Forwarded-For": "10.0.1.1"},
    )

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS


def test_register_throttled_per_origin(client: TestClient) -> None:
    headers = {"X-Forwarded-For": "192.0.2.10"}
    for i in range(60):
        response = client.post(
            "/api/auth/register",
            json=_register_payload(username=f"user_{i}", email=f"user_{i}@example.com"),
            headers=headers,
        )
        assert response.status_code == status.HTTP_201_CREATED

    response = client.post(
        "/api/auth/register",
        json=_register_payload(username="one_too_many", email="one_too_many@example.com"),
        headers=headers,
    )

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS


def test_forwarded_for_uses_first_hop(client: TestClient, rate_limiter: RateLimiter) -> None:
    client.post(
        "/api/auth/login",
        json={"username": "someone", "password": TEST_PASSWORD},
        headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1, 10.0.0.2"},
    )

    assert rate_limiter.window("ip:203.0.113.9") is not None
    assert rate_limiter.window("ip:10.0.0.1") is None
