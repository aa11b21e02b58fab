import pytest
from httpx import AsyncClient

from src.domain.entities import Role
from tests.fixtures.api_client import bearer, login


@pytest.mark.asyncio
async def test_change_password_ends_sessions(client: AsyncClient, seed):
    """Change password

    Given a logged-in user with a temporary password
    When they change it with the correct current password
    Then the old password stops working and the new one works
    And their existing refresh token is revoked
    And must_reset_password is cleared
    """
    tenant = await seed.tenant()
    await seed.user("new@example.com", [(tenant, Role.waiter)], must_reset_password=True)
    tokens = (await login(client, "new@example.com")).json()
    assert tokens["must_reset_password"] is True

    response = await client.post(
        "/auth/change-password",
        json={"current_password": "Secret123", "new_password": "Fresh4567"},
        headers=bearer(tokens["access_token"]),
    )

    assert response.status_code == 200
    refresh = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401
    assert (await login(client, "new@example.com")).status_code == 401
    relogin = await login(client, "new@example.com", password="Fresh4567")
    assert relogin.status_code == 200
    assert relogin.json()["must_reset_password"] is False


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient, seed):
    tenant = await seed.tenant()
    await seed.user("waiter@example.com", [(tenant, Role.waiter)])
    tokens = (await login(client, "waiter@example.com")).json()

    response = await client.post(
        "/auth/change-password",
        json={"current_password": "Nope12345", "new_password": "Fresh4567"},
        headers=bearer(tokens["access_token"]),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PASSWORD_INCORRECT"


@pytest.mark.asyncio
async def test_change_password_too_weak(client: AsyncClient, seed):
    tenant = await seed.tenant()
    await seed.user("waiter@example.com", [(tenant, Role.waiter)])
    tokens = (await login(client, "waiter@example.com")).json()

    response = await client.post(
        "/auth/change-password",
        json={"current_password": "Secret123", "new_password": "alllowercase"},
        headers=bearer(tokens["access_token"]),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PASSWORD_WEAK"


@pytest.mark.asyncio
async def test_password_reset_round_trip(client: AsyncClient, seed, notifier):
    """Forgotten password

    Given a user with an open session
    When they request a reset and complete it with the delivered token
    Then they can log in with the new password
    And the old session is gone
    And the token cannot be used a second time
    """
    tenant = await seed.tenant()
    await seed.user("forgetful@example.com", [(tenant, Role.cashier)])
    tokens = (await login(client, "forgetful@example.com")).json()

    requested = await client.post(
        "/auth/password-reset/request", json={"email": "forgetful@example.com"}
    )

    assert requested.status_code == 202
    assert len(notifier.sent) == 1
    email, token = notifier.sent[0]
    assert email == "forgetful@example.com"

    completed = await client.post(
        "/auth/password-reset/complete", json={"token": token, "new_password": "Remember99"}
    )

    assert completed.status_code == 200
    assert (await login(client, "forgetful@example.com", password="Remember99")).status_code == 200
    refresh = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401

    reused = await client.post(
        "/auth/password-reset/complete", json={"token": token, "new_password": "Another99"}
    )
    assert reused.status_code == 410
    assert reused.json()["error"]["code"] == "PASSWORD_RESET_USED"


@pytest.mark.asyncio
async def test_password_reset_unknown_email_looks_accepted(client: AsyncClient, seed, notifier):
    """Unknown email gets the same answer as a known one"""
    tenant = await seed.tenant()
    await seed.user("known@example.com", [(tenant, Role.waiter)])

    known = await client.post("/auth/password-reset/request", json={"email": "known@example.com"})
    unknown = await client.post("/auth/password-reset/request", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 202
    assert known.json() == unknown.json()
    assert [email for email, _ in notifier.sent] == ["known@example.com"]


@pytest.mark.asyncio
async def test_password_reset_request_rate_limited(client: AsyncClient, seed):
    tenant = await seed.tenant()
    await seed.user("known@example.com", [(tenant, Role.waiter)])

    first = await client.post("/auth/password-reset/request", json={"email": "known@example.com"})
    second = await client.post("/auth/password-reset/request", json={"email": "known@example.com"})

    assert first.status_code == 202
    assert second.status_code == 429
    assert "Retry-After" in second.headers


@pytest.mark.asyncio
async def test_password_reset_with_bogus_token(client: AsyncClient):
    response = await client.post(
        "/auth/password-reset/complete", json={"token": "bogus", "new_password": "Remember99"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PASSWORD_RESET_INVALID"
