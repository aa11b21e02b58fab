from uuid import uuid4

import pytest

from src.app.use_cases.users.dtos import UpdateUserCommand
from src.app.use_cases.users.update_user_use_case import UpdateUserUseCase
from src.domain.entities import AuthEventType, Role, UserTenantRole
from tests.fixtures.entities import make_user


@pytest.fixture
def target(mock_uow):
    tenant_id = uuid4()
    user = make_user(first_name="Ana", last_name="Lopez")
    mock_uow.users.get_by_id.return_value = user
    mock_uow.user_tenant_roles.get_by_user_and_tenant.return_value = UserTenantRole(
        user_id=user.id, tenant_id=tenant_id, role=Role.waiter
    )
    return user, tenant_id


def update(user, tenant_id, **fields):
    return UpdateUserCommand(user_id=user.id, tenant_id=tenant_id, updated_by=uuid4(), **fields)


@pytest.mark.asyncio
async def test_partial_update_leaves_other_fields(mock_uow, target):
    # Arrange
    user, tenant_id = target

    # Act
    result = await UpdateUserUseCase(mock_uow).execute(
        update(user, tenant_id, last_name="Garcia"), Role.manager
    )

    # Assert
    assert result.is_ok()
    assert user.first_name == "Ana"
    assert user.last_name == "Garcia"
    assert user.is_active is True
    assert result.value.role == Role.waiter
    mock_uow.sessions.revoke_all_for_user.assert_not_called()
    mock_uow.auth_events.create.assert_not_called()


@pytest.mark.asyncio
async def test_deactivation_revokes_sessions(mock_uow, target):
    # Arrange
    user, tenant_id = target

    # Act
    result = await UpdateUserUseCase(mock_uow).execute(
        update(user, tenant_id, is_active=False), Role.manager
    )

    # Assert
    assert result.is_ok()
    assert user.is_active is False
    mock_uow.sessions.revoke_all_for_user.assert_called_once_with(user.id)
    event = mock_uow.auth_events.create.call_args.args[0]
    assert event.event_type == AuthEventType.account_disabled


@pytest.mark.asyncio
async def test_reactivation_emits_enabled(mock_uow, target):
    # Arrange
    user, tenant_id = target
    user.is_active = False

    # Act
    result = await UpdateUserUseCase(mock_uow).execute(
        update(user, tenant_id, is_active=True), Role.manager
    )

    # Assert
    assert result.is_ok()
    mock_uow.sessions.revoke_all_for_user.assert_not_called()
    event = mock_uow.auth_events.create.call_args.args[0]
    assert event.event_type == AuthEventType.account_enabled


@pytest.mark.asyncio
async def test_cannot_update_peer(mock_uow, target):
    # Arrange
    user, tenant_id = target

    # Act
    result = await UpdateUserUseCase(mock_uow).execute(
        update(user, tenant_id, first_name="X"), Role.waiter
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "CANNOT_MANAGE_ROLE"
    assert user.first_name == "Ana"


@pytest.mark.asyncio
async def test_user_without_role_in_tenant_skips_check(mock_uow, target):
    # Arrange
    user, tenant_id = target
    mock_uow.user_tenant_roles.get_by_user_and_tenant.return_value = None

    # Act
    result = await UpdateUserUseCase(mock_uow).execute(
        update(user, tenant_id, first_name="Eva"), Role.viewer
    )

    # Assert
    assert result.is_ok()
    assert result.value.role is None
    assert user.first_name == "Eva"


@pytest.mark.asyncio
async def test_unknown_user(mock_uow):
    # Arrange
    mock_uow.users.get_by_id.return_value = None

    # Act
    result = await UpdateUserUseCase(mock_uow).execute(
        UpdateUserCommand(user_id=uuid4(), tenant_id=uuid4(), updated_by=uuid4()), Role.owner
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
