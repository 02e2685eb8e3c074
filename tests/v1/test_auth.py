# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for signup, login and logout."""

from fastapi import status


def _signup(client, **overrides):
    payload = {
        "email": "dana@example.com",
        "password": "secret1",
        "password_confirm": "secret1",
        "display_name": "Dana",
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/signup", json=payload)


def test_signup_creates_empty_profile(client) -> None:
    """A new account starts without communities or a photo."""
    response = _signup(client)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "dana@example.com"
    assert data["user"]["display_name"] == "Dana"
    assert data["user"]["communities"] == []
    assert data["user"]["photo_url"] is None

    me = client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == data["user"]["id"]


def test_signup_rejects_mismatched_passwords(client) -> None:
    """Password confirmation must match."""
    response = _signup(client, password_confirm="secret2")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_signup_rejects_short_password(client) -> None:
    """Passwords need at least six characters."""
    response = _signup(client, password="abc", password_confirm="abc")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_signup_uses_configured_password_length(client, monkeypatch) -> None:
    """The minimum password length comes from settings."""
    from niche_communities.core.settings import settings

    monkeypatch.setattr(settings, "min_password_length", 10)
    response = _signup(client, password="secret12", password_confirm="secret12")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    response = _signup(client, password="secret1234", password_confirm="secret1234")
    assert response.status_code == status.HTTP_201_CREATED


def test_signup_duplicate_email(client, owner) -> None:
    """An e-mail address can only be registered once."""
    response = _signup(client, email="Alice@Example.com")
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "already exists" in response.json()["detail"]


def test_login(client, owner, user_password) -> None:
    """Valid credentials return a token for the account."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@example.com", "password": user_password},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["id"] == owner.id


def test_login_wrong_password(client, owner) -> None:
    """Wrong credentials are rejected without saying which part was wrong."""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@example.com", "password": "not-it"},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Invalid e-mail or password"


def test_logout_revokes_token(client, owner_headers) -> None:
    """A token stops working after logout."""
    assert client.get("/api/v1/users/me", headers=owner_headers).status_code == 200

    response = client.post("/api/v1/auth/logout", headers=owner_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    response = client.get("/api/v1/users/me", headers=owner_headers)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_invalid_token(client) -> None:
    """Garbage tokens are rejected."""
    response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_missing_token(client) -> None:
    """Requests without credentials are rejected."""
    response = client.get("/api/v1/users/me")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
