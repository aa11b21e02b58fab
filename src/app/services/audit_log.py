"""
Audit Log

Fire-and-forget recording of AuthEvents. The event is committed on its
own so it survives even when the triggering operation failed, and a
failing write is logged but never propagated.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthEvent, AuthEventType

logger = logging.getLogger(__name__)


async def record_event(
    uow: UnitOfWork,
    event_type: AuthEventType,
    *,
    user_id: Optional[UUID] = None,
    tenant_id: Optional[UUID] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    event = AuthEvent(
        user_id=user_id,
        tenant_id=tenant_id,
        event_type=event_type,
        ip_address=ip_address,
        user_agent=user_agent,
        event_metadata=metadata or None,
    )
    try:
        await uow.auth_events.create(event)
        await uow.commit()
    except Exception:
        logger.exception("Failed to record auth event %s", event_type.value)
        await uow.rollback()
