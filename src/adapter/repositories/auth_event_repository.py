from datetime import datetime
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.auth_event_repository import IAuthEventRepository
from src.domain.entities import AuthEvent, AuthEventType


class AuthEventRepository(IAuthEventRepository):
    """AuthEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: AuthEvent) -> AuthEvent:
        """Append an audit event (immutable)"""
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def _paginate(self, condition, offset: int, limit: int) -> Tuple[List[AuthEvent], int]:
        count_stmt = select(func.count()).select_from(AuthEvent).where(condition)
        total = (await self.session.exec(count_stmt)).one()

        stmt = (
            select(AuthEvent)
            .where(condition)
            .order_by(AuthEvent.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def find_by_user(
        self, user_id: UUID, offset: int, limit: int
    ) -> Tuple[List[AuthEvent], int]:
        return await self._paginate(AuthEvent.user_id == user_id, offset, limit)

    async def find_by_tenant(
        self, tenant_id: UUID, offset: int, limit: int
    ) -> Tuple[List[AuthEvent], int]:
        return await self._paginate(AuthEvent.tenant_id == tenant_id, offset, limit)

    async def find_by_type(
        self, event_type: AuthEventType, offset: int, limit: int
    ) -> Tuple[List[AuthEvent], int]:
        return await self._paginate(AuthEvent.event_type == event_type, offset, limit)

    async def find_by_user_and_type_since(
        self, user_id: UUID, event_type: AuthEventType, since: datetime
    ) -> List[AuthEvent]:
        stmt = (
            select(AuthEvent)
            .where(
                AuthEvent.user_id == user_id,
                AuthEvent.event_type == event_type,
                AuthEvent.created_at >= since,
            )
            .order_by(AuthEvent.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_recent_by_ip_and_type_since(
        self, ip_address: str, event_type: AuthEventType, since: datetime
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(AuthEvent)
            .where(
                AuthEvent.ip_address == ip_address,
                AuthEvent.event_type == event_type,
                AuthEvent.created_at >= since,
            )
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def delete_older_than(self, cutoff: datetime) -> int:
        stmt = delete(AuthEvent).where(AuthEvent.created_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
