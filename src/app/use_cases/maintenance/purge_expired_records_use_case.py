"""
Use Case: Purge Expired Records

Deletes expired sessions, expired password reset tokens and audit events
past the retention window. Meant to be triggered by an external scheduler.
"""

import logging
from datetime import timedelta

from pydantic import BaseModel

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class PurgeExpiredRecordsResponse(BaseModel):
    """Response DTO for PurgeExpiredRecordsUseCase"""

    sessions_deleted: int
    reset_tokens_deleted: int
    auth_events_deleted: int


class PurgeExpiredRecordsUseCase:
    """
    Remove records that no longer serve any purpose.

    Business Logic:
    1. Delete sessions whose expires_at has passed (revoked or not)
    2. Delete password reset tokens whose expires_at has passed
    3. Delete auth events older than the retention window
    4. Commit once and report the counts
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, audit_retention_days: int) -> Result[PurgeExpiredRecordsResponse]:
        now = utcnow()
        cutoff = now - timedelta(days=audit_retention_days)

        async with self.uow:
            sessions_deleted = await self.uow.sessions.delete_expired(now)
            tokens_deleted = await self.uow.password_reset_tokens.delete_expired(now)
            events_deleted = await self.uow.auth_events.delete_older_than(cutoff)

            await self.uow.commit()

        logger.info(
            "Purged %d sessions, %d reset tokens, %d auth events",
            sessions_deleted,
            tokens_deleted,
            events_deleted,
        )

        return Return.ok(
            PurgeExpiredRecordsResponse(
                sessions_deleted=sessions_deleted,
                reset_tokens_deleted=tokens_deleted,
                auth_events_deleted=events_deleted,
            )
        )
