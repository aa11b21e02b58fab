"""
Complete Password Reset Use Case

Consumes a reset token and sets a new password.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_service import IPasswordHasher, hash_token, validate_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.entities import AuthEventType
from .dtos import CompletePasswordResetCommand, MessageResponse


class CompletePasswordResetUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - New password strength is checked before the token is looked up
    - Token is found by its SHA-256 digest
    - Used beats expired: a used-and-expired token reports PASSWORD_RESET_USED
    - On success: new hash, must_reset_password cleared, token marked used,
      every session revoked
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(self, command: CompletePasswordResetCommand) -> Result[MessageResponse]:
        validation = validate_password(command.new_password)
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            reset_token = await self.uow.password_reset_tokens.get_by_token_hash(
                hash_token(command.token)
            )
            if reset_token is None:
                return Return.err(errors.PASSWORD_RESET_INVALID)

            if reset_token.is_used():
                return Return.err(errors.PASSWORD_RESET_USED)
            if reset_token.is_expired():
                return Return.err(errors.PASSWORD_RESET_EXPIRED)

            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None:
                return Return.err(errors.PASSWORD_RESET_INVALID)

            if not await self.uow.password_reset_tokens.mark_used(reset_token.id):
                # Consumed concurrently
                await self.uow.rollback()
                return Return.err(errors.PASSWORD_RESET_USED)

            user.password_hash = self.password_hasher.hash(command.new_password)
            user.must_reset_password = False
            await self.uow.users.update(user)

            user_id = user.id
            revoked_count = await self.uow.sessions.revoke_all_for_user(user_id)

            await self.uow.commit()

            await record_event(
                self.uow,
                AuthEventType.password_reset_completed,
                user_id=user_id,
                ip_address=command.ip_address,
                metadata={"sessions_revoked": revoked_count},
            )

            return Return.ok(MessageResponse(message="Password has been reset successfully."))
