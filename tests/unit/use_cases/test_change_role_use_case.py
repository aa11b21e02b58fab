from uuid import uuid4

import pytest

from src.app.use_cases.users.change_role_use_case import ChangeRoleUseCase
from src.app.use_cases.users.dtos import ChangeRoleCommand
from src.domain.entities import AuthEventType, Role, UserTenantRole


@pytest.fixture
def binding(mock_uow):
    tenant_role = UserTenantRole(user_id=uuid4(), tenant_id=uuid4(), role=Role.waiter)
    mock_uow.user_tenant_roles.get_by_user_and_tenant.return_value = tenant_role
    return tenant_role


def change_to(binding, role):
    return ChangeRoleCommand(
        user_id=binding.user_id, tenant_id=binding.tenant_id, role=role, updated_by=uuid4()
    )


@pytest.mark.asyncio
async def test_manager_promotes_waiter_to_cashier(mock_uow, binding):
    # Act
    result = await ChangeRoleUseCase(mock_uow).execute(change_to(binding, Role.cashier), Role.manager)

    # Assert
    assert result.is_ok()
    assert result.value.old_role == Role.waiter
    assert result.value.new_role == Role.cashier
    assert binding.role == Role.cashier
    mock_uow.user_tenant_roles.update.assert_called_once_with(binding)
    event = mock_uow.auth_events.create.call_args.args[0]
    assert event.event_type == AuthEventType.role_changed
    assert event.event_metadata["old_role"] == "waiter"
    assert event.event_metadata["new_role"] == "cashier"


@pytest.mark.asyncio
async def test_cannot_assign_own_level(mock_uow, binding):
    # Act
    result = await ChangeRoleUseCase(mock_uow).execute(change_to(binding, Role.manager), Role.manager)

    # Assert
    assert result.is_err()
    assert result.error.code == "CANNOT_ASSIGN_ROLE"
    mock_uow.user_tenant_roles.get_by_user_and_tenant.assert_not_called()


@pytest.mark.asyncio
async def test_cannot_demote_peer(mock_uow, binding):
    """Assignable new role, but the current role is not below the caller"""
    # Arrange
    binding.role = Role.manager

    # Act
    result = await ChangeRoleUseCase(mock_uow).execute(change_to(binding, Role.viewer), Role.manager)

    # Assert
    assert result.is_err()
    assert result.error.code == "CANNOT_MANAGE_ROLE"
    assert binding.role == Role.manager
    mock_uow.user_tenant_roles.update.assert_not_called()


@pytest.mark.asyncio
async def test_user_not_in_tenant(mock_uow):
    # Arrange
    mock_uow.user_tenant_roles.get_by_user_and_tenant.return_value = None

    # Act
    result = await ChangeRoleUseCase(mock_uow).execute(
        ChangeRoleCommand(user_id=uuid4(), tenant_id=uuid4(), role=Role.viewer, updated_by=uuid4()),
        Role.owner,
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "USER_NOT_IN_TENANT"
