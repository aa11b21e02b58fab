from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        pass

    @abstractmethod
    async def mark_used(self, token_id: UUID) -> bool:
        """Mark a token as used. Returns False if it was already used."""
        pass

    @abstractmethod
    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        """Delete tokens past their expiry. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def delete_for_user(self, user_id: UUID) -> int:
        """Delete every reset token of a user. Returns count of deleted rows."""
        pass

    @abstractmethod
    async def count_recent_for_user(self, user_id: UUID, since: datetime) -> int:
        """Count tokens issued to a user since the given time"""
        pass
