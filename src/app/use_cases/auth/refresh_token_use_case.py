"""
Refresh Token Use Case

Exchanges a refresh token for a new token pair, rotating the session.
"""

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_service import hash_token
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.base import utcnow
from src.domain.entities import AuthEventType, Session
from .dtos import RefreshCommand, RefreshTokenResponse


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh tokens are one-time use: every refresh revokes the old
      session and creates a new one in the same transaction
    - The old session is revoked with a compare-and-set, so of two
      concurrent refreshes with the same token only one succeeds
    - Revoked session -> SESSION_REVOKED, expired -> TOKEN_EXPIRED
    - Role is re-read from the tenant binding, so role changes apply on
      the next refresh
    - User must still be active and the tenant must still be active
    """

    def __init__(self, uow: UnitOfWork, token_service: ITokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, command: RefreshCommand) -> Result[RefreshTokenResponse]:
        async with self.uow:
            session = await self.uow.sessions.get_by_token_hash(hash_token(command.refresh_token))
            if session is None:
                return Return.err(errors.REFRESH_TOKEN_INVALID)

            now = utcnow()
            if session.is_revoked():
                return Return.err(errors.SESSION_REVOKED)
            if session.is_expired(now):
                return Return.err(errors.TOKEN_EXPIRED)

            user = await self.uow.users.get_by_id(session.user_id)
            if user is None:
                return Return.err(errors.USER_NOT_FOUND)
            if not user.can_login():
                return Return.err(errors.ACCOUNT_DISABLED)

            tenant_role = await self.uow.user_tenant_roles.get_by_user_and_tenant(
                session.user_id, session.tenant_id
            )
            if tenant_role is None:
                return Return.err(errors.USER_NOT_IN_TENANT)

            tenant = await self.uow.tenants.get_by_id(session.tenant_id)
            if tenant is None:
                return Return.err(errors.TENANT_NOT_FOUND)
            if not tenant.is_active:
                return Return.err(errors.TENANT_INACTIVE)

            pair, refresh_token_hash = self.token_service.generate_token_pair(
                user.id, tenant.id, user.email, tenant_role.role
            )

            # Revoke first: losing the race fails closed instead of forking sessions
            if not await self.uow.sessions.revoke(session.id):
                await self.uow.rollback()
                return Return.err(errors.SESSION_REVOKED)

            new_session = await self.uow.sessions.create(
                Session(
                    user_id=user.id,
                    tenant_id=tenant.id,
                    refresh_token_hash=refresh_token_hash,
                    device_info=command.user_agent,
                    ip_address=command.ip_address,
                    expires_at=self.token_service.refresh_token_expiry(now),
                )
            )

            await self.uow.commit()

            response = RefreshTokenResponse(**pair.model_dump(), session_id=new_session.id)

            await record_event(
                self.uow,
                AuthEventType.token_refresh,
                user_id=user.id,
                tenant_id=tenant.id,
                ip_address=command.ip_address,
                user_agent=command.user_agent,
                metadata={
                    "old_session_id": str(session.id),
                    "new_session_id": str(new_session.id),
                },
            )

            return Return.ok(response)
