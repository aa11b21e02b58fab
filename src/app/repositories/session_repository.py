from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[Session]:
        """
        Get session by refresh token digest.

        Revoked and expired sessions are returned too; callers decide
        which error to report.
        """
        pass

    @abstractmethod
    async def revoke(self, session_id: UUID) -> bool:
        """
        Revoke a session if it is not revoked yet.

        Returns True only for the caller that performed the revocation,
        which makes it safe to use as a compare-and-set during rotation.
        """
        pass

    @abstractmethod
    async def revoke_by_token_hash(self, token_hash: str) -> bool:
        """Revoke the session holding this refresh token digest"""
        pass

    @abstractmethod
    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke all active sessions for a user. Returns count of revoked sessions."""
        pass

    @abstractmethod
    async def revoke_all_for_user_in_tenant(self, user_id: UUID, tenant_id: UUID) -> int:
        """Revoke all active sessions for a user in one tenant. Returns count."""
        pass

    @abstractmethod
    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        """Delete sessions past their expiry. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def count_active_for_user(self, user_id: UUID) -> int:
        """Count non-revoked, non-expired sessions for a user"""
        pass
