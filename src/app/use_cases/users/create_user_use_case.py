"""
Create User Use Case

Creates a user with a temporary password and binds them to a tenant.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_service import IPasswordHasher, generate_temporary_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.entities import AuthEventType, Role, User, UserTenantRole
from .dtos import CreateUserCommand, CreateUserResponse


class CreateUserUseCase:
    """
    Use case for creating a user inside the caller's tenant.

    Business Rules:
    - Caller must outrank the assigned role (strictly greater level)
    - Email must be globally unique
    - User starts active with must_reset_password=True
    - Temporary password is returned exactly once and never stored in plaintext
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self, command: CreateUserCommand, caller_role: Role
    ) -> Result[CreateUserResponse]:
        if not caller_role.can_assign(command.role):
            return Return.err(errors.CANNOT_ASSIGN_ROLE)

        async with self.uow:
            if await self.uow.users.exists_by_email(command.email):
                return Return.err(errors.EMAIL_EXISTS)

            tenant = await self.uow.tenants.get_by_id(command.tenant_id)
            if tenant is None:
                return Return.err(errors.TENANT_NOT_FOUND)

            temporary_password = generate_temporary_password()

            user = await self.uow.users.create(
                User(
                    email=command.email,
                    password_hash=self.password_hasher.hash(temporary_password),
                    first_name=command.first_name,
                    last_name=command.last_name,
                    is_active=True,
                    must_reset_password=True,
                )
            )
            await self.uow.user_tenant_roles.create(
                UserTenantRole(user_id=user.id, tenant_id=tenant.id, role=command.role)
            )

            await self.uow.commit()

            response = CreateUserResponse(
                id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                role=command.role,
                tenant_id=command.tenant_id,
                temporary_password=temporary_password,
                must_reset_password=user.must_reset_password,
                created_at=user.created_at,
            )

            await record_event(
                self.uow,
                AuthEventType.account_created,
                user_id=response.id,
                tenant_id=command.tenant_id,
                ip_address=command.ip_address,
                metadata={"created_by": str(command.created_by), "role": command.role.value},
            )

            return Return.ok(response)
