from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_tenant_role_repository import IUserTenantRoleRepository
from src.domain.base import utcnow
from src.domain.entities import UserTenantRole


class UserTenantRoleRepository(IUserTenantRoleRepository):
    """UserTenantRole repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_and_tenant(
        self, user_id: UUID, tenant_id: UUID
    ) -> Optional[UserTenantRole]:
        """Get role binding by user and tenant"""
        stmt = select(UserTenantRole).where(
            UserTenantRole.user_id == user_id, UserTenantRole.tenant_id == tenant_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user_tenant_role: UserTenantRole) -> UserTenantRole:
        """Create a new role binding"""
        self.session.add(user_tenant_role)
        await self.session.flush()
        await self.session.refresh(user_tenant_role)
        return user_tenant_role

    async def update(self, user_tenant_role: UserTenantRole) -> UserTenantRole:
        """Update existing role binding"""
        user_tenant_role.updated_at = utcnow()
        self.session.add(user_tenant_role)
        await self.session.flush()
        await self.session.refresh(user_tenant_role)
        return user_tenant_role

    async def delete(self, user_tenant_role_id: UUID) -> bool:
        stmt = delete(UserTenantRole).where(UserTenantRole.id == user_tenant_role_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_user_and_tenant(self, user_id: UUID, tenant_id: UUID) -> bool:
        stmt = delete(UserTenantRole).where(
            UserTenantRole.user_id == user_id, UserTenantRole.tenant_id == tenant_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def list_by_user(self, user_id: UUID) -> List[UserTenantRole]:
        """Get all role bindings for a user"""
        stmt = select(UserTenantRole).where(UserTenantRole.user_id == user_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_by_tenant(self, tenant_id: UUID) -> List[UserTenantRole]:
        """Get all role bindings in a tenant"""
        stmt = select(UserTenantRole).where(UserTenantRole.tenant_id == tenant_id)
        result = await self.session.exec(stmt)
        return list(result.all())
