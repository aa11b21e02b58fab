from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import UserTenantRole


class IUserTenantRoleRepository(ABC):
    """UserTenantRole repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_tenant(
        self, user_id: UUID, tenant_id: UUID
    ) -> Optional[UserTenantRole]:
        """Get the role binding of a user in a tenant"""
        pass

    @abstractmethod
    async def create(self, user_tenant_role: UserTenantRole) -> UserTenantRole:
        """Create a new role binding"""
        pass

    @abstractmethod
    async def update(self, user_tenant_role: UserTenantRole) -> UserTenantRole:
        """Update existing role binding"""
        pass

    @abstractmethod
    async def delete(self, user_tenant_role_id: UUID) -> bool:
        """Delete a role binding by ID. Returns True if a row was deleted."""
        pass

    @abstractmethod
    async def delete_by_user_and_tenant(self, user_id: UUID, tenant_id: UUID) -> bool:
        """Remove a user from a tenant. Returns True if a row was deleted."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UUID) -> List[UserTenantRole]:
        """All role bindings of a user"""
        pass

    @abstractmethod
    async def list_by_tenant(self, tenant_id: UUID) -> List[UserTenantRole]:
        """All role bindings inside a tenant"""
        pass
