"""
Logout Use Case

Revokes the session behind one refresh token.
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_service import hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthEventType


class LogoutUseCase:
    """
    Use case for logging out a single session.

    Business Rules:
    - Idempotent: unknown, garbage or already revoked tokens succeed silently
    - Only an actual revocation is audited
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, refresh_token: str, ip_address: Optional[str] = None) -> Result[None]:
        async with self.uow:
            session = await self.uow.sessions.get_by_token_hash(hash_token(refresh_token))
            if session is None or session.is_revoked():
                return Return.ok(None)

            user_id, tenant_id, session_id = session.user_id, session.tenant_id, session.id
            revoked = await self.uow.sessions.revoke(session_id)
            await self.uow.commit()

            if revoked:
                await record_event(
                    self.uow,
                    AuthEventType.logout,
                    user_id=user_id,
                    tenant_id=tenant_id,
                    ip_address=ip_address,
                    metadata={"session_id": str(session_id)},
                )

            return Return.ok(None)
