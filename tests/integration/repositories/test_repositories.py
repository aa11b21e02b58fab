from datetime import timedelta
from uuid import uuid4

import pytest
import pytest_asyncio

from src.adapter.repositories.auth_event_repository import AuthEventRepository
from src.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.repositories.user_repository import UserRepository
from src.adapter.repositories.user_tenant_role_repository import UserTenantRoleRepository
from src.domain.base import utcnow
from src.domain.entities import (
    AuthEvent,
    AuthEventType,
    PasswordResetToken,
    Role,
    Session,
    Tenant,
    User,
    UserTenantRole,
)


@pytest_asyncio.fixture
async def world(db_session):
    """Two tenants and one user holding a role in each"""
    north = await TenantRepository(db_session).create(Tenant(name="North", slug="north"))
    south = await TenantRepository(db_session).create(Tenant(name="South", slug="south"))
    user = await UserRepository(db_session).create(
        User(email="roamer@example.com", password_hash="x", first_name="Ro", last_name="Amer")
    )
    roles = UserTenantRoleRepository(db_session)
    await roles.create(UserTenantRole(user_id=user.id, tenant_id=north.id, role=Role.manager))
    await roles.create(UserTenantRole(user_id=user.id, tenant_id=south.id, role=Role.waiter))
    await db_session.commit()
    return user, north, south


def new_session(user, tenant, expires_in=timedelta(days=1)):
    return Session(
        user_id=user.id,
        tenant_id=tenant.id,
        refresh_token_hash=uuid4().hex,
        expires_at=utcnow() + expires_in,
    )


@pytest.mark.asyncio
async def test_tenant_lookup_by_slug(db_session, world):
    tenants = TenantRepository(db_session)

    assert (await tenants.get_by_slug("north")).name == "North"
    assert await tenants.get_by_slug("west") is None
    assert await tenants.exists_by_slug("south") is True
    assert await tenants.exists_by_slug("west") is False


@pytest.mark.asyncio
async def test_user_loaded_with_tenants(db_session, world):
    user, north, south = world

    loaded = await UserRepository(db_session).get_by_email_with_tenants("roamer@example.com")

    assert loaded.id == user.id
    assert {r.tenant.slug: r.role for r in loaded.tenant_roles} == {
        "north": Role.manager,
        "south": Role.waiter,
    }
    assert loaded.role_for_tenant(south.id) == Role.waiter


@pytest.mark.asyncio
async def test_role_bindings(db_session, world):
    user, north, south = world
    roles = UserTenantRoleRepository(db_session)

    assert len(await roles.list_by_user(user.id)) == 2
    assert [r.role for r in await roles.list_by_tenant(north.id)] == [Role.manager]

    assert await roles.delete_by_user_and_tenant(user.id, north.id) is True
    assert await roles.delete_by_user_and_tenant(user.id, north.id) is False

    remaining = await roles.list_by_user(user.id)
    assert [r.tenant_id for r in remaining] == [south.id]
    assert await roles.delete(remaining[0].id) is True
    assert await roles.list_by_user(user.id) == []


@pytest.mark.asyncio
async def test_session_revocation(db_session, world):
    """Revoke is compare-and-set; tenant-scoped revoke leaves other tenants alone"""
    user, north, south = world
    sessions = SessionRepository(db_session)
    first = await sessions.create(new_session(user, north))
    second = await sessions.create(new_session(user, north))
    elsewhere = await sessions.create(new_session(user, south))
    await sessions.create(new_session(user, south, expires_in=timedelta(seconds=-1)))

    assert await sessions.count_active_for_user(user.id) == 3

    assert await sessions.revoke(first.id) is True
    assert await sessions.revoke(first.id) is False
    assert await sessions.revoke_by_token_hash(second.refresh_token_hash) is True
    assert await sessions.revoke_by_token_hash(second.refresh_token_hash) is False

    assert await sessions.revoke_all_for_user_in_tenant(user.id, north.id) == 0
    assert await sessions.count_active_for_user(user.id) == 1
    assert await sessions.revoke_all_for_user(user.id) == 2

    found = await sessions.get_by_token_hash(elsewhere.refresh_token_hash)
    assert found.is_revoked()
    assert await sessions.delete_expired() == 1


@pytest.mark.asyncio
async def test_auth_event_queries(db_session, world):
    user, north, _ = world
    events = AuthEventRepository(db_session)
    now = utcnow()
    for minutes_ago in (1, 2, 3):
        await events.create(
            AuthEvent(
                user_id=user.id,
                tenant_id=north.id,
                event_type=AuthEventType.login_failed,
                ip_address="10.0.0.1",
                created_at=now - timedelta(minutes=minutes_ago),
            )
        )
    await events.create(
        AuthEvent(
            user_id=user.id,
            tenant_id=north.id,
            event_type=AuthEventType.login_success,
            ip_address="10.0.0.1",
            created_at=now - timedelta(days=100),
        )
    )

    page, total = await events.find_by_user(user.id, offset=0, limit=2)
    assert total == 4
    assert len(page) == 2
    assert page[0].created_at > page[1].created_at

    _, tenant_total = await events.find_by_tenant(north.id, offset=0, limit=10)
    assert tenant_total == 4
    _, success_total = await events.find_by_type(AuthEventType.login_success, offset=0, limit=10)
    assert success_total == 1

    recent = await events.find_by_user_and_type_since(
        user.id, AuthEventType.login_failed, now - timedelta(minutes=2, seconds=30)
    )
    assert len(recent) == 2
    assert (
        await events.count_recent_by_ip_and_type_since(
            "10.0.0.1", AuthEventType.login_failed, now - timedelta(hours=1)
        )
        == 3
    )

    assert await events.delete_older_than(now - timedelta(days=90)) == 1


@pytest.mark.asyncio
async def test_reset_tokens(db_session, world):
    user, _, _ = world
    tokens = PasswordResetTokenRepository(db_session)
    live = await tokens.create(
        PasswordResetToken(user_id=user.id, token_hash="a" * 64, expires_at=utcnow() + timedelta(hours=1))
    )
    await tokens.create(
        PasswordResetToken(user_id=user.id, token_hash="b" * 64, expires_at=utcnow() - timedelta(minutes=1))
    )

    assert await tokens.count_recent_for_user(user.id, utcnow() - timedelta(minutes=5)) == 2
    assert await tokens.mark_used(live.id) is True
    assert await tokens.mark_used(live.id) is False
    assert (await tokens.get_by_token_hash("a" * 64)).is_used()

    assert await tokens.delete_expired() == 1
    assert await tokens.delete_for_user(user.id) == 1
    assert await tokens.get_by_token_hash("a" * 64) is None
