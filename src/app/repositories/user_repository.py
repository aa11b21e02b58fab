from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        pass

    @abstractmethod
    async def get_by_id_with_tenants(self, user_id: UUID) -> Optional[User]:
        """Get user by ID with tenant roles (and their tenants) eagerly loaded"""
        pass

    @abstractmethod
    async def get_by_email_with_tenants(self, email: str) -> Optional[User]:
        """Get user by email with tenant roles (and their tenants) eagerly loaded"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check whether a user with this email exists"""
        pass

    @abstractmethod
    async def list_by_tenant(
        self, tenant_id: UUID, offset: int, limit: int
    ) -> Tuple[List[User], int]:
        """List users holding a role in the tenant. Returns (page, total count)."""
        pass
