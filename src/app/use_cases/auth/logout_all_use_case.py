"""
Logout All Use Case

Revokes every live session of a user.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthEventType
from .dtos import LogoutAllResponse


class LogoutAllUseCase:
    """
    Use case for revoking all sessions of a user.

    Business Rules:
    - Revokes every non-revoked session in every tenant
    - Emits a single session_revoked event with scope=all_sessions
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        ip_address: Optional[str] = None,
        tenant_id: Optional[UUID] = None,
    ) -> Result[LogoutAllResponse]:
        async with self.uow:
            revoked_count = await self.uow.sessions.revoke_all_for_user(user_id)
            await self.uow.commit()

            await record_event(
                self.uow,
                AuthEventType.session_revoked,
                user_id=user_id,
                tenant_id=tenant_id,
                ip_address=ip_address,
                metadata={"scope": "all_sessions", "revoked_count": revoked_count},
            )

            return Return.ok(LogoutAllResponse(revoked_count=revoked_count))
