from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import Identity
from tests.utils.api_helpers import bearer, register


@pytest.mark.asyncio
async def test_me(client: AsyncClient, test_data):
    registered = await register(client, test_data.get_copy("registration"))

    response = await client.get("/auth/me", headers=bearer(registered["accessToken"]))

    assert response.status_code == 200
    assert response.json()["identity"] == registered["identity"]


@pytest.mark.asyncio
async def test_me_rejects_invalid_token(client: AsyncClient):
    response = await client.get("/auth/me", headers=bearer("garbage"))

    assert response.status_code == 401
    assert response.json()["kind"] == "AuthenticationError"


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, test_data, clock):
    registered = await register(client, test_data.get_copy("registration"))
    clock.advance(timedelta(minutes=15))

    response = await client.get("/auth/me", headers=bearer(registered["accessToken"]))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_for_deleted_identity(client: AsyncClient, test_data, db_session):
    registered = await register(client, test_data.get_copy("registration"))
    identity = (await db_session.exec(select(Identity))).one()
    await db_session.delete(identity)
    await db_session.commit()

    response = await client.get("/auth/me", headers=bearer(registered["accessToken"]))

    assert response.status_code == 404
    assert response.json()["kind"] == "NotFoundError"


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, test_data):
    registered = await register(client, test_data.get_copy("registration"))
    headers = bearer(registered["accessToken"])

    response = await client.put(
        "/auth/profile", headers=headers, json=test_data.get_copy("profile_update")
    )

    assert response.status_code == 200
    identity = response.json()["identity"]
    assert identity["displayName"] == "Renamed User"
    assert identity["avatarRef"] == "avatars/user.png"
    assert identity["email"] == "user@acme.com"

    cleared = await client.put("/auth/profile", headers=headers, json={"avatarRef": ""})
    assert cleared.json()["identity"]["avatarRef"] is None
    assert cleared.json()["identity"]["displayName"] == "Renamed User"


@pytest.mark.asyncio
async def test_update_profile_too_long(client: AsyncClient, test_data):
    registered = await register(client, test_data.get_copy("registration"))

    response = await client.put(
        "/auth/profile",
        headers=bearer(registered["accessToken"]),
        json={"avatarRef": "x" * 501},
    )

    assert response.status_code == 422
    assert "avatarRef" in response.json()["errors"]
