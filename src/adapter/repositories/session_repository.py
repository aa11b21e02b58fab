from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.base import utcnow
from src.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        """Get session by refresh token digest (indexed lookup)"""
        stmt = select(Session).where(Session.refresh_token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def revoke(self, session_id: UUID) -> bool:
        """Revoke a session; the revoked_at IS NULL guard makes this a compare-and-set"""
        stmt = (
            update(Session)
            .where(Session.id == session_id, Session.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_by_token_hash(self, token_hash: str) -> bool:
        stmt = (
            update(Session)
            .where(Session.refresh_token_hash == token_hash, Session.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke all active sessions for a user"""
        stmt = (
            update(Session)
            .where(Session.user_id == user_id, Session.revoked_at.is_(None))
            .values(revoked_at=utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def revoke_all_for_user_in_tenant(self, user_id: UUID, tenant_id: UUID) -> int:
        """Revoke all active sessions for a user in one tenant"""
        stmt = (
            update(Session)
            .where(
                Session.user_id == user_id,
                Session.tenant_id == tenant_id,
                Session.revoked_at.is_(None),
            )
            .values(revoked_at=utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        stmt = delete(Session).where(Session.expires_at <= (now or utcnow()))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_active_for_user(self, user_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Session)
            .where(
                Session.user_id == user_id,
                Session.revoked_at.is_(None),
                Session.expires_at > utcnow(),
            )
        )
        result = await self.session.exec(stmt)
        return result.one()
