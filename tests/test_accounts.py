"""Test account registration, login and the auth gate."""
import uuid

import pytest

from core.errors import ValidationFailed
from core.security import create_access_token
from verticals.accounts.repository import UserRepository
from verticals.accounts.rules import validate_login, validate_registration

PASSWORD = "Secret123"


def test_registration_rules_normalize():
    data = validate_registration(
        {"name": "  Ada ", "email": "Ada@Example.com", "password": "Secret123"}
    )
    assert data.name == "Ada"
    assert data.email == "ada@example.com"


def test_registration_rules_report_each_field():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"name": "A", "email": "nope", "password": "short"})
    assert exc_info.value.fields == ["name", "email", "password"]


def test_password_needs_mixed_characters():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_registration({"name": "Ada", "email": "ada@example.com", "password": "alllowercase1"})
    assert "uppercase" in exc_info.value.errors[0][1]


def test_password_byte_limit():
    with pytest.raises(ValidationFailed):
        validate_registration({"name": "Ada", "email": "ada@example.com", "password": "Aa1" + "x" * 70})


def test_login_requires_password():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_login({"email": "ada@example.com"})
    assert exc_info.value.errors == [("password", "Password is required")]


@pytest.mark.asyncio
async def test_register_and_me(client):
    resp = await client.post(
        "/api/register",
        json={"name": "Ada", "email": "ada@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["user"]["email"] == "ada@example.com"
    assert "password_hash" not in body["user"]
    assert "token" in resp.cookies

    client.cookies.clear()
    me = await client.get("/api/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == body["user"]["id"]


@pytest.mark.asyncio
async def test_cookie_authenticates(client):
    await client.post(
        "/api/register",
        json={"name": "Ada", "email": "ada@example.com", "password": PASSWORD},
    )
    me = await client.get("/api/me")
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_duplicate_email(client, register):
    await register("ada@example.com")
    resp = await client.post(
        "/api/register",
        json={"name": "Ada Two", "email": "ADA@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "User already exists with this email"


@pytest.mark.asyncio
async def test_login(client, register):
    await register("ada@example.com")

    ok = await client.post("/api/login", json={"email": "ada@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["token"]

    bad = await client.post("/api/login", json={"email": "ada@example.com", "password": "Wrong123"})
    assert bad.status_code == 401
    assert bad.json() == {"success": False, "message": "Invalid credentials"}

    unknown = await client.post("/api/login", json={"email": "who@example.com", "password": PASSWORD})
    assert unknown.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client):
    await client.post(
        "/api/register",
        json={"name": "Ada", "email": "ada@example.com", "password": PASSWORD},
    )
    resp = await client.post("/api/logout")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out successfully"
    assert (await client.get("/api/me")).status_code == 401


@pytest.mark.asyncio
async def test_token_for_missing_user(client):
    token = create_access_token(str(uuid.uuid4()))
    resp = await client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "No user found with this token"


@pytest.mark.asyncio
async def test_duplicate_email_caught_by_unique_index(client, register, monkeypatch):
    await register("ada@example.com")

    async def lookup_misses(self, email):
        return None

    # Simulates a concurrent registration that passed the lookup first.
    monkeypatch.setattr(UserRepository, "get_by_email", lookup_misses)
    resp = await client.post(
        "/api/register",
        json={"name": "Ada Two", "email": "ada@example.com", "password": PASSWORD},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "User already exists with this email"
    assert body["errors"] == [{"field": "email", "message": "User already exists with this email"}]
