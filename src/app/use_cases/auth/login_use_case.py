"""
Login Use Case

Authenticates a user and issues a tenant-scoped token pair.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_service import IPasswordHasher
from src.app.services.rate_limiter import IRateLimiter
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.base import utcnow
from src.domain.entities import AuthEventType, Session, UserTenantRole
from .dtos import LoginCommand, LoginResponse, TenantInfo

UNKNOWN_CLIENT = "unknown"


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Rate limited per client IP before any lookup
    - Unknown email and wrong password return the same INVALID_CREDENTIALS
      error; only the audit log tells them apart
    - Password is verified even when the user does not exist (dummy hash)
    - Disabled accounts cannot log in
    - One tenant role: auto-selected; several: tenant_id required, otherwise
      TENANT_REQUIRED carries the candidate tenants and no tokens are issued
    - Selected tenant must be active
    - Refresh token is stored only as a digest in a new Session
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_service: ITokenService,
        password_hasher: IPasswordHasher,
        rate_limiter: IRateLimiter,
    ):
        self.uow = uow
        self.token_service = token_service
        self.password_hasher = password_hasher
        self.rate_limiter = rate_limiter

    async def _login_failed(self, command: LoginCommand, reason: str, user=None) -> None:
        metadata = {"email": command.email, "reason": reason}
        await record_event(
            self.uow,
            AuthEventType.login_failed,
            user_id=user.id if user else None,
            ip_address=command.ip_address,
            user_agent=command.user_agent,
            metadata=metadata,
        )

    def _select_tenant_role(
        self, tenant_roles: list, tenant_id
    ) -> Result[UserTenantRole]:
        if not tenant_roles:
            return Return.err(errors.USER_NOT_IN_TENANT)

        # A single role is always auto-selected; tenant_id only picks among several
        if len(tenant_roles) == 1:
            return Return.ok(tenant_roles[0])

        if tenant_id is not None:
            for tenant_role in tenant_roles:
                if tenant_role.tenant_id == tenant_id:
                    return Return.ok(tenant_role)
            return Return.err(errors.USER_NOT_IN_TENANT)

        options = [
            TenantInfo.of(tr.tenant, tr.role).model_dump(mode="json")
            for tr in tenant_roles
            if tr.tenant is not None
        ]
        return Return.err(errors.TENANT_REQUIRED.with_details(tenants=options))

    async def execute(self, command: LoginCommand) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            command: Email, password, optional tenant_id and client metadata

        Returns:
            Result with LoginResponse containing tokens, user and tenant, or Error
        """
        rate_key = command.ip_address or UNKNOWN_CLIENT

        async with self.uow:
            if not self.rate_limiter.allow(rate_key):
                await self._login_failed(command, "rate_limit_exceeded")
                return Return.err(
                    errors.RATE_LIMIT_EXCEEDED.with_details(
                        retry_after=self.rate_limiter.retry_after(rate_key)
                    )
                )

            user = await self.uow.users.get_by_email_with_tenants(command.email)

            if user is None:
                # Keep response time close to the wrong-password path
                self.password_hasher.dummy_verify(command.password)
                await self._login_failed(command, "user_not_found")
                return Return.err(errors.INVALID_CREDENTIALS)

            if not self.password_hasher.verify(command.password, user.password_hash):
                await self._login_failed(command, "invalid_password", user)
                return Return.err(errors.INVALID_CREDENTIALS)

            if not user.can_login():
                await self._login_failed(command, "account_disabled", user)
                return Return.err(errors.ACCOUNT_DISABLED)

            selection = self._select_tenant_role(list(user.tenant_roles), command.tenant_id)
            if selection.is_err():
                return Return.err(selection.error)
            tenant_role = selection.value

            tenant = tenant_role.tenant
            if tenant is None:
                return Return.err(errors.TENANT_NOT_FOUND)
            if not tenant.is_active:
                return Return.err(errors.TENANT_INACTIVE)

            pair, refresh_token_hash = self.token_service.generate_token_pair(
                user.id, tenant.id, user.email, tenant_role.role
            )

            session = Session(
                user_id=user.id,
                tenant_id=tenant.id,
                refresh_token_hash=refresh_token_hash,
                device_info=command.user_agent,
                ip_address=command.ip_address,
                expires_at=self.token_service.refresh_token_expiry(utcnow()),
            )
            session = await self.uow.sessions.create(session)

            await self.uow.commit()

            response = LoginResponse.build(pair, session.id, user, tenant, tenant_role.role)

            await record_event(
                self.uow,
                AuthEventType.login_success,
                user_id=user.id,
                tenant_id=tenant.id,
                ip_address=command.ip_address,
                user_agent=command.user_agent,
                metadata={"session_id": str(session.id)},
            )

            return Return.ok(response)
