from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.base import utcnow
from src.domain.entities import User, UserTenantRole


def _with_tenants(stmt):
    # populate_existing so users already in the identity map still get their roles loaded
    return stmt.options(
        selectinload(User.tenant_roles).selectinload(UserTenantRole.tenant)
    ).execution_options(populate_existing=True)


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id_with_tenants(self, user_id: UUID) -> Optional[User]:
        stmt = _with_tenants(select(User).where(User.id == user_id))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email_with_tenants(self, email: str) -> Optional[User]:
        stmt = _with_tenants(select(User).where(User.email == email))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email).limit(1)
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def list_by_tenant(
        self, tenant_id: UUID, offset: int, limit: int
    ) -> Tuple[List[User], int]:
        """List users with a role in the tenant, oldest account first"""
        count_stmt = (
            select(func.count())
            .select_from(UserTenantRole)
            .where(UserTenantRole.tenant_id == tenant_id)
        )
        total = (await self.session.exec(count_stmt)).one()

        stmt = _with_tenants(
            select(User)
            .join(UserTenantRole, UserTenantRole.user_id == User.id)
            .where(UserTenantRole.tenant_id == tenant_id)
            .order_by(User.created_at, User.email)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total
