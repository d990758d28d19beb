"""Tests for signup, login and bearer-token authentication."""

import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import JWTError

from portfolai.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from tests.conftest import SAMPLE_USER_ID

pytestmark = pytest.mark.anyio

SIGNUP = {"email": "New.Advisor@Example.com", "password": "hunter22", "full_name": " Nia Advisor "}


def test_password_hash_round_trip():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_token_subject_round_trip():
    token = create_access_token({"sub": str(SAMPLE_USER_ID)})
    assert decode_access_token(token)["sub"] == str(SAMPLE_USER_ID)


def test_expired_token_is_rejected():
    token = create_access_token({"sub": str(SAMPLE_USER_ID)}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(JWTError):
        decode_access_token(token)


async def test_signup_returns_token_and_profile(anon_client: AsyncClient):
    resp = await anon_client.post("/api/auth/signup", json=SIGNUP)
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "new.advisor@example.com"
    assert body["user"]["full_name"] == "Nia Advisor"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]


async def test_signup_duplicate_email_is_400(anon_client: AsyncClient):
    assert (await anon_client.post("/api/auth/signup", json=SIGNUP)).status_code == 201
    again = await anon_client.post(
        "/api/auth/signup", json={**SIGNUP, "email": "new.advisor@example.com"}
    )
    assert again.status_code == 400
    assert again.json()["message"] == "User already exists with this email."


async def test_signup_short_password_is_rejected(anon_client: AsyncClient):
    resp = await anon_client.post("/api/auth/signup", json={**SIGNUP, "password": "12345"})
    assert resp.status_code == 422


async def test_login_then_me(anon_client: AsyncClient):
    await anon_client.post("/api/auth/signup", json=SIGNUP)

    login = await anon_client.post(
        "/api/auth/login", json={"email": "new.advisor@example.com", "password": "hunter22"}
    )
    assert login.status_code == 200
    token = login.json()["token"]

    me = await anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new.advisor@example.com"


async def test_login_wrong_password_is_401(anon_client: AsyncClient):
    await anon_client.post("/api/auth/signup", json=SIGNUP)
    resp = await anon_client.post(
        "/api/auth/login", json={"email": "new.advisor@example.com", "password": "not-it"}
    )
    assert resp.status_code == 401


async def test_login_unknown_email_is_401(anon_client: AsyncClient):
    resp = await anon_client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "whatever"}
    )
    assert resp.status_code == 401


async def test_token_scopes_requests_to_its_owner(anon_client: AsyncClient):
    token = (await anon_client.post("/api/auth/signup", json=SIGNUP)).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    created = await anon_client.post("/api/clients", json={"name": "Jane Doe"}, headers=headers)
    assert created.status_code == 201

    other = (
        await anon_client.post(
            "/api/auth/signup",
            json={"email": "second@example.com", "password": "hunter22", "full_name": "Second"},
        )
    ).json()["token"]
    resp = await anon_client.get(
        f"/api/clients/{created.json()['id']}", headers={"Authorization": f"Bearer {other}"}
    )
    assert resp.status_code == 404


async def test_missing_token_is_401(anon_client: AsyncClient):
    resp = await anon_client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Access denied. No token provided."


async def test_garbage_token_is_401(anon_client: AsyncClient):
    resp = await anon_client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401


async def test_token_for_deleted_user_is_401(anon_client: AsyncClient):
    token = create_access_token({"sub": str(uuid.uuid4())})
    resp = await anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
