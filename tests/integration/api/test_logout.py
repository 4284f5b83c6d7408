import pytest
from httpx import AsyncClient

from tests.utils.api_helpers import bearer, login, register


@pytest.mark.asyncio
async def test_logout_revokes_session_refresh_token(client: AsyncClient, test_data):
    registered = await register(client, test_data.get_copy("registration"))

    response = await client.post(
        "/auth/logout", headers=bearer(registered["accessToken"])
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    refresh = await client.post(
        "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
    )
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_after_rotation_revokes_current_token(
    client: AsyncClient, test_data
):
    """The access token names the original record; its chain's live token goes"""
    registered = await register(client, test_data.get_copy("registration"))
    rotated = (
        await client.post(
            "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
        )
    ).json()

    response = await client.post(
        "/auth/logout", headers=bearer(registered["accessToken"])
    )

    assert response.status_code == 200
    refresh = await client.post(
        "/auth/refresh", json={"refreshToken": rotated["refreshToken"]}
    )
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_leaves_other_sessions_alone(client: AsyncClient, test_data):
    first = await register(client, test_data.get_copy("registration"))
    second = await login(client, "user@acme.com", "SecurePass123")

    await client.post("/auth/logout", headers=bearer(first["accessToken"]))

    refresh = await client.post(
        "/auth/refresh", json={"refreshToken": second["refreshToken"]}
    )
    assert refresh.status_code == 200


@pytest.mark.asyncio
async def test_logout_with_body_refresh_token(client: AsyncClient, test_data):
    first = await register(client, test_data.get_copy("registration"))
    second = await login(client, "user@acme.com", "SecurePass123")

    response = await client.post(
        "/auth/logout",
        headers=bearer(first["accessToken"]),
        json={"refreshToken": second["refreshToken"]},
    )

    assert response.status_code == 200
    for token in (first["refreshToken"], second["refreshToken"]):
        refresh = await client.post("/auth/refresh", json={"refreshToken": token})
        assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_is_idempotent(client: AsyncClient, test_data):
    registered = await register(client, test_data.get_copy("registration"))
    headers = bearer(registered["accessToken"])

    assert (await client.post("/auth/logout", headers=headers)).status_code == 200
    assert (await client.post("/auth/logout", headers=headers)).status_code == 200


@pytest.mark.asyncio
async def test_logout_requires_access_token(client: AsyncClient):
    response = await client.post("/auth/logout")

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_ACCESS_TOKEN"


@pytest.mark.asyncio
async def test_logout_all(client: AsyncClient, test_data):
    first = await register(client, test_data.get_copy("registration"))
    second = await login(client, "user@acme.com", "SecurePass123")

    response = await client.post("/auth/logout-all", headers=bearer(first["accessToken"]))

    assert response.status_code == 200
    assert response.json()["revokedCount"] == 2
    for token in (first["refreshToken"], second["refreshToken"]):
        refresh = await client.post("/auth/refresh", json={"refreshToken": token})
        assert refresh.status_code == 401
