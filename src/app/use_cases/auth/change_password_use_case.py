"""
Change Password Use Case

Authenticated password change that invalidates every session.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_service import IPasswordHasher, validate_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.entities import AuthEventType
from .dtos import ChangePasswordCommand, MessageResponse


class ChangePasswordUseCase:
    """
    Use case for changing the caller's own password.

    Business Rules:
    - Current password must verify (PASSWORD_INCORRECT otherwise)
    - New password must be at least 8 chars with upper, lower and digit
    - Clears must_reset_password
    - Revokes every session of the user, including the current one
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(self, command: ChangePasswordCommand) -> Result[MessageResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(command.user_id)
            if user is None:
                return Return.err(errors.USER_NOT_FOUND)

            if not self.password_hasher.verify(command.current_password, user.password_hash):
                return Return.err(errors.PASSWORD_INCORRECT)

            validation = validate_password(command.new_password)
            if validation.is_err():
                return Return.err(validation.error)

            user.password_hash = self.password_hasher.hash(command.new_password)
            user.must_reset_password = False
            await self.uow.users.update(user)

            revoked_count = await self.uow.sessions.revoke_all_for_user(user.id)

            await self.uow.commit()

            await record_event(
                self.uow,
                AuthEventType.password_changed,
                user_id=command.user_id,
                ip_address=command.ip_address,
                metadata={"sessions_revoked": revoked_count},
            )

            return Return.ok(
                MessageResponse(
                    message="Password changed successfully. All other sessions have been invalidated."
                )
            )
