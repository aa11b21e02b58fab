"""
Load Context Use Case

Loads current user and tenant context for an authenticated request.
"""

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.dtos import AuthContext, MeResponse, TenantInfo
from src.domain import errors


class LoadContextUseCase:
    """
    Use case for loading current user and tenant context.

    Business Rules:
    - Token claims provide user_id and tenant_id
    - User must exist and be active
    - Tenant must exist and be active
    - Role is read from the database, not from the token
    - Lists every tenant the user holds a role in
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, context: AuthContext) -> Result[MeResponse]:
        """
        Execute load context use case.

        Args:
            context: Identity resolved from the access token

        Returns:
            Result with MeResponse, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_id_with_tenants(context.user_id)
            if user is None:
                return Return.err(errors.USER_NOT_FOUND)
            if not user.can_login():
                return Return.err(errors.ACCOUNT_DISABLED)

            current = None
            tenants = []
            for tenant_role in user.tenant_roles:
                if tenant_role.tenant is None:
                    continue
                tenants.append(TenantInfo.of(tenant_role.tenant, tenant_role.role))
                if tenant_role.tenant_id == context.tenant_id:
                    current = tenant_role

            if current is None:
                return Return.err(errors.USER_NOT_IN_TENANT)
            if not current.tenant.is_active:
                return Return.err(errors.TENANT_INACTIVE)

            return Return.ok(
                MeResponse(
                    id=user.id,
                    email=user.email,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    role=current.role,
                    tenant_id=current.tenant_id,
                    tenant_name=current.tenant.name,
                    must_reset_password=user.must_reset_password,
                    tenants=tenants,
                )
            )
