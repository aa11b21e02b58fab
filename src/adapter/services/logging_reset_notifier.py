import logging
from datetime import datetime

from src.app.services.password_reset_notifier import IPasswordResetNotifier
from src.domain.entities import User

logger = logging.getLogger(__name__)


class LoggingPasswordResetNotifier(IPasswordResetNotifier):
    """Default notifier: records that a token was issued, never the token itself"""

    async def send_reset_token(self, user: User, token: str, expires_at: datetime) -> None:
        logger.info(
            "Password reset token issued for user %s (expires %s)",
            user.id,
            expires_at.isoformat(),
        )
