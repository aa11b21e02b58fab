from datetime import timedelta

import pytest
from httpx import AsyncClient

from src.domain.base import utcnow
from src.domain.entities import Role, Session
from tests.fixtures.api_client import login

PURGE_URL = "/admin/maintenance/purge-expired"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_purge_requires_admin_key(client: AsyncClient):
    missing = await client.post(PURGE_URL)
    wrong = await client.post(PURGE_URL, headers={"X-Admin-API-Key": "guess"})

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_purge_removes_expired_sessions(client: AsyncClient, seed, db_session):
    """Housekeeping

    Given one live session and one session past its expiry
    When the scheduler calls the purge endpoint with the admin key
    Then only the expired session is deleted
    """
    tenant = await seed.tenant()
    user = await seed.user("waiter@example.com", [(tenant, Role.waiter)])
    assert (await login(client, "waiter@example.com")).status_code == 200
    db_session.add(
        Session(
            user_id=user.id,
            tenant_id=tenant.id,
            refresh_token_hash="stale-digest",
            expires_at=utcnow() - timedelta(days=1),
        )
    )
    await db_session.commit()

    response = await client.post(PURGE_URL, headers={"X-Admin-API-Key": "test-admin-key"})

    assert response.status_code == 200
    data = response.json()
    assert data["sessions_deleted"] == 1
    assert data["reset_tokens_deleted"] == 0
    assert data["auth_events_deleted"] == 0
