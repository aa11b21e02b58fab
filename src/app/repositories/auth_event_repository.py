from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Tuple
from uuid import UUID

from src.domain.entities import AuthEvent, AuthEventType


class IAuthEventRepository(ABC):
    """AuthEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, event: AuthEvent) -> AuthEvent:
        """Append an audit event"""
        pass

    @abstractmethod
    async def find_by_user(
        self, user_id: UUID, offset: int, limit: int
    ) -> Tuple[List[AuthEvent], int]:
        """Events of a user, newest first. Returns (page, total count)."""
        pass

    @abstractmethod
    async def find_by_tenant(
        self, tenant_id: UUID, offset: int, limit: int
    ) -> Tuple[List[AuthEvent], int]:
        """Events of a tenant, newest first. Returns (page, total count)."""
        pass

    @abstractmethod
    async def find_by_type(
        self, event_type: AuthEventType, offset: int, limit: int
    ) -> Tuple[List[AuthEvent], int]:
        """Events of one type, newest first. Returns (page, total count)."""
        pass

    @abstractmethod
    async def find_by_user_and_type_since(
        self, user_id: UUID, event_type: AuthEventType, since: datetime
    ) -> List[AuthEvent]:
        """Events of one type for a user created at or after `since`"""
        pass

    @abstractmethod
    async def count_recent_by_ip_and_type_since(
        self, ip_address: str, event_type: AuthEventType, since: datetime
    ) -> int:
        """Count events of one type from an IP created at or after `since`"""
        pass

    @abstractmethod
    async def delete_older_than(self, cutoff: datetime) -> int:
        """Delete events created before the cutoff. Returns count of deleted rows."""
        pass
