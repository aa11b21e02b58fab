"""
Get User Use Case
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import UserInfo
from src.domain import errors


class GetUserUseCase:
    """
    Use case for reading one user.

    Business Rules:
    - Only users holding a role in the caller's tenant are visible;
      anyone else is reported as USER_NOT_FOUND
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, tenant_id: UUID) -> Result[UserInfo]:
        async with self.uow:
            user = await self.uow.users.get_by_id_with_tenants(user_id)
            if user is None:
                return Return.err(errors.USER_NOT_FOUND)

            role = user.role_for_tenant(tenant_id)
            if role is None:
                return Return.err(errors.USER_NOT_FOUND)

            return Return.ok(UserInfo.of(user, role, tenant_id))
