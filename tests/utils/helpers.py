from typing import Any

import httpx
from jose import jwt

from app.core.config import settings


def assert_token_response_valid(
    data: dict[str, Any], response: httpx.Response | None = None
) -> None:
    """Assert that a login/register response is valid.

    Tokens travel in httpOnly cookies; the JSON body only carries the user.
    """
    assert "user" in data
    assert_user_response_valid(data["user"])

    if response is not None:
        cookies = response.cookies
        assert "access_token" in cookies
        assert "refresh_token" in cookies


def assert_user_response_valid(data: dict[str, Any]) -> None:
    assert "id" in data
    assert "email" in data
    assert "full_name" in data
    assert "role" in data
    assert "hashed_password" not in data


def assert_error_envelope(response: httpx.Response, status_code: int, code: str) -> dict[str, Any]:
    """Assert the common error envelope and return its ``error`` object."""
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    error: dict[str, Any] = body["error"]
    return error


def extract_token_from_cookie(response: httpx.Response, cookie_name: str) -> str:
    """Extract JWT token from response cookies."""
    token = response.cookies.get(cookie_name)
    if not token:
        raise ValueError(f"Cookie {cookie_name} not found in response")
    return token


def decode_jwt_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def set_auth_cookies(client: httpx.AsyncClient, access_token: str, refresh_token: str) -> None:
    """Set authentication cookies on the test client."""
    client.cookies.set("access_token", access_token)
    client.cookies.set("refresh_token", refresh_token)


def set_access_token_cookie(client: httpx.AsyncClient, access_token: str) -> None:
    """Set only the access token cookie on the test client."""
    client.cookies.clear()
    client.cookies.set("access_token", access_token)
