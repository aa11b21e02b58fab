from uuid import uuid4

import pytest

from src.app.use_cases.auth.change_password_use_case import ChangePasswordUseCase
from src.app.use_cases.auth.dtos import ChangePasswordCommand
from src.domain.entities import AuthEventType
from tests.fixtures.entities import make_user


def command_for(user, current="Secret123", new="BetterPass9"):
    return ChangePasswordCommand(
        user_id=user.id, current_password=current, new_password=new, ip_address="10.0.0.1"
    )


@pytest.mark.asyncio
async def test_change_password_success(mock_uow, mock_password_hasher):
    """New hash stored, must_reset cleared, every session revoked"""
    # Arrange
    user = make_user(must_reset_password=True)
    mock_uow.users.get_by_id.return_value = user
    mock_uow.sessions.revoke_all_for_user.return_value = 2

    # Act
    result = await ChangePasswordUseCase(mock_uow, mock_password_hasher).execute(command_for(user))

    # Assert
    assert result.is_ok()
    assert "All other sessions have been invalidated" in result.value.message
    assert user.password_hash == "hashed::BetterPass9"
    assert user.must_reset_password is False
    mock_uow.users.update.assert_called_once_with(user)
    mock_uow.sessions.revoke_all_for_user.assert_called_once_with(user.id)
    event = mock_uow.auth_events.create.call_args.args[0]
    assert event.event_type == AuthEventType.password_changed
    assert event.event_metadata == {"sessions_revoked": 2}


@pytest.mark.asyncio
async def test_wrong_current_password(mock_uow, mock_password_hasher):
    # Arrange
    user = make_user()
    mock_uow.users.get_by_id.return_value = user

    # Act
    result = await ChangePasswordUseCase(mock_uow, mock_password_hasher).execute(
        command_for(user, current="Nope1234")
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "PASSWORD_INCORRECT"
    mock_uow.users.update.assert_not_called()
    mock_uow.sessions.revoke_all_for_user.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("weak", ["short1A", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"])
async def test_weak_new_password(mock_uow, mock_password_hasher, weak):
    # Arrange
    user = make_user()
    mock_uow.users.get_by_id.return_value = user

    # Act
    result = await ChangePasswordUseCase(mock_uow, mock_password_hasher).execute(
        command_for(user, new=weak)
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "PASSWORD_WEAK"
    assert user.password_hash == "hashed::Secret123"


@pytest.mark.asyncio
async def test_unknown_user(mock_uow, mock_password_hasher):
    # Arrange
    mock_uow.users.get_by_id.return_value = None

    # Act
    result = await ChangePasswordUseCase(mock_uow, mock_password_hasher).execute(
        ChangePasswordCommand(user_id=uuid4(), current_password="x", new_password="BetterPass9")
    )

    # Assert
    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
