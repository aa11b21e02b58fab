"""
Change User Role Use Case

Handles changing a user's role within a tenant.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.entities import AuthEventType, Role
from .dtos import ChangeRoleCommand, ChangeRoleResponse


class ChangeRoleUseCase:
    """
    Use case for changing a user's role within a tenant.

    Business Rules:
    - Caller must outrank the new role (CANNOT_ASSIGN_ROLE)
    - Target must already hold a role in the tenant (USER_NOT_IN_TENANT);
      first-time grants go through user creation
    - Caller must outrank the target's current role (CANNOT_MANAGE_ROLE)
    - Existing access tokens keep the old role until they are refreshed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: ChangeRoleCommand, caller_role: Role
    ) -> Result[ChangeRoleResponse]:
        if not caller_role.can_assign(command.role):
            return Return.err(errors.CANNOT_ASSIGN_ROLE)

        async with self.uow:
            tenant_role = await self.uow.user_tenant_roles.get_by_user_and_tenant(
                command.user_id, command.tenant_id
            )
            if tenant_role is None:
                return Return.err(errors.USER_NOT_IN_TENANT)

            if not caller_role.can_manage(tenant_role.role):
                return Return.err(errors.CANNOT_MANAGE_ROLE)

            old_role = tenant_role.role
            tenant_role.role = command.role
            await self.uow.user_tenant_roles.update(tenant_role)

            await self.uow.commit()

            await record_event(
                self.uow,
                AuthEventType.role_changed,
                user_id=command.user_id,
                tenant_id=command.tenant_id,
                ip_address=command.ip_address,
                metadata={
                    "old_role": old_role.value,
                    "new_role": command.role.value,
                    "updated_by": str(command.updated_by),
                },
            )

            return Return.ok(
                ChangeRoleResponse(
                    user_id=command.user_id,
                    tenant_id=command.tenant_id,
                    old_role=old_role,
                    new_role=command.role,
                )
            )
