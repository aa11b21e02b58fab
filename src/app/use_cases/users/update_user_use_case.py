"""
Update User Use Case

Partial profile update and activation toggle.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserInfo
from src.domain import errors
from src.domain.entities import AuthEventType, Role
from .dtos import UpdateUserCommand


class UpdateUserUseCase:
    """
    Use case for updating a user's profile.

    Business Rules:
    - Caller must outrank the target's current role in the tenant; the
      check is skipped when the target holds no role there
    - Only fields present in the command are changed
    - Deactivation revokes every session and emits account_disabled
    - Reactivation emits account_enabled
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: UpdateUserCommand, caller_role: Role) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id(command.user_id)
            if user is None:
                return Return.err(errors.USER_NOT_FOUND)

            tenant_role = await self.uow.user_tenant_roles.get_by_user_and_tenant(
                command.user_id, command.tenant_id
            )
            target_role = tenant_role.role if tenant_role else None
            if target_role is not None and not caller_role.can_manage(target_role):
                return Return.err(errors.CANNOT_MANAGE_ROLE)

            if command.first_name is not None:
                user.first_name = command.first_name
            if command.last_name is not None:
                user.last_name = command.last_name

            activation_event = None
            if command.is_active is not None and command.is_active != user.is_active:
                user.is_active = command.is_active
                if command.is_active:
                    activation_event = AuthEventType.account_enabled
                else:
                    activation_event = AuthEventType.account_disabled
                    await self.uow.sessions.revoke_all_for_user(user.id)

            user = await self.uow.users.update(user)
            await self.uow.commit()

            response = UserInfo.of(user, target_role, command.tenant_id if target_role else None)

            if activation_event is not None:
                await record_event(
                    self.uow,
                    activation_event,
                    user_id=command.user_id,
                    tenant_id=command.tenant_id,
                    ip_address=command.ip_address,
                    metadata={"updated_by": str(command.updated_by)},
                )

            return Return.ok(response)
