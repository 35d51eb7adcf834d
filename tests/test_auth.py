"""Tests for authentication endpoints"""

import pytest

from conftest import auth_headers


@pytest.mark.asyncio
async def test_register_and_login(client, test_db):
    """Register a diner, log in and read the profile"""
    response = await client.post(
        "/auth/register",
        json={"email": "joana@example.com", "password": "segredo1", "full_name": "Joana Reis"},
    )
    assert response.status_code == 201
    assert response.json()["role"] == "user"

    login = await client.post(
        "/auth/login",
        data={"username": "joana@example.com", "password": "segredo1"},
    )
    assert login.status_code == 200
    tokens = login.json()
    assert tokens["token_type"] == "bearer"

    me = await client.get(
        "/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )
    assert me.status_code == 200
    assert me.json()["email"] == "joana@example.com"


@pytest.mark.asyncio
async def test_register_operator(client, test_db):
    response = await client.post(
        "/auth/register",
        json={
            "email": "dono@restaurante.pt",
            "password": "segredo1",
            "full_name": "Dono",
            "role": "restaurant_owner",
        },
    )

    assert response.status_code == 201
    assert response.json()["role"] == "restaurant_owner"


@pytest.mark.asyncio
async def test_cannot_self_register_as_admin(client, test_db):
    response = await client.post(
        "/auth/register",
        json={"email": "root@example.com", "password": "segredo1", "full_name": "Root", "role": "admin"},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_duplicate_email(client, test_user):
    response = await client.post(
        "/auth/register",
        json={"email": test_user.email, "password": "segredo1", "full_name": "Ana Again"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_wrong_password(client, test_user):
    response = await client.post(
        "/auth/login",
        data={"username": test_user.email, "password": "wrong"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotates_token(client, test_user):
    login = await client.post(
        "/auth/login",
        data={"username": test_user.email, "password": "testpass123"},
    )
    refresh_token = login.json()["refresh_token"]

    refreshed = await client.post("/auth/refresh", json={"refresh_token": refresh_token})
    assert refreshed.status_code == 200
    assert refreshed.json()["refresh_token"] != refresh_token

    reused = await client.post("/auth/refresh", json={"refresh_token": refresh_token})
    assert reused.status_code == 401


@pytest.mark.asyncio
async def test_inactive_user_rejected(client, test_db, test_user):
    test_user.is_active = False
    await test_db.commit()

    response = await client.get("/auth/me", headers=auth_headers(test_user))

    assert response.status_code == 401
