from abc import ABC, abstractmethod
from datetime import datetime

from src.domain.entities import User


class IPasswordResetNotifier(ABC):
    """Delivers a freshly issued reset token to its owner (email, SMS, ...)"""

    @abstractmethod
    async def send_reset_token(self, user: User, token: str, expires_at: datetime) -> None:
        pass
