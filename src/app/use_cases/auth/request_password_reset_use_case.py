"""
Request Password Reset Use Case

Issues a single-use reset token without revealing whether the email exists.
"""

import logging
from datetime import timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_log import record_event
from src.app.services.password_reset_notifier import IPasswordResetNotifier
from src.app.services.password_service import generate_reset_token
from src.app.services.rate_limiter import IRateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.domain import errors
from src.domain.base import utcnow
from src.domain.entities import AuthEventType, PasswordResetToken
from .dtos import MessageResponse

logger = logging.getLogger(__name__)

RESET_TOKEN_TTL = timedelta(hours=1)
ACCEPTED_MESSAGE = "If the email exists, a reset link has been sent."


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Rate limited per email address
    - Same response whether or not the email exists (no enumeration);
      the audit event still records found=true/false
    - Token: 32 random bytes, URL-safe, stored only as SHA-256 digest
    - Token expires after one hour
    - The plain token goes to the notifier and is never stored
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rate_limiter: IRateLimiter,
        notifier: IPasswordResetNotifier,
        token_ttl: timedelta = RESET_TOKEN_TTL,
    ):
        self.uow = uow
        self.rate_limiter = rate_limiter
        self.notifier = notifier
        self.token_ttl = token_ttl

    async def execute(
        self, email: str, ip_address: Optional[str] = None
    ) -> Result[MessageResponse]:
        if not self.rate_limiter.allow(email):
            return Return.err(
                errors.RATE_LIMIT_EXCEEDED.with_details(
                    retry_after=self.rate_limiter.retry_after(email)
                )
            )

        response = MessageResponse(message=ACCEPTED_MESSAGE)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                await record_event(
                    self.uow,
                    AuthEventType.password_reset_requested,
                    ip_address=ip_address,
                    metadata={"email": email, "found": False},
                )
                return Return.ok(response)

            plain_token, token_hash = generate_reset_token()
            expires_at = utcnow() + self.token_ttl
            await self.uow.password_reset_tokens.create(
                PasswordResetToken(
                    user_id=user.id,
                    token_hash=token_hash,
                    expires_at=expires_at,
                )
            )
            await self.uow.commit()

            try:
                await self.notifier.send_reset_token(user, plain_token, expires_at)
            except Exception:
                # Delivery failure must not reveal that the account exists
                logger.exception("Failed to deliver password reset token for user %s", user.id)

            await record_event(
                self.uow,
                AuthEventType.password_reset_requested,
                user_id=user.id,
                ip_address=ip_address,
                metadata={"found": True},
            )

            return Return.ok(response)
