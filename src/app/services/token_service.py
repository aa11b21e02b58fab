"""
Token Service

Interface for signed access tokens and opaque refresh tokens, plus the
value objects that cross the boundary.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Tuple
from uuid import UUID

from pydantic import BaseModel

from libs.result import Result
from src.domain.entities import Role

TOKEN_TYPE = "Bearer"


@dataclass(frozen=True)
class TokenSettings:
    """Issuer/audience and lifetimes used when minting tokens"""

    issuer: str = "solobueno-erp"
    audience: List[str] = field(default_factory=lambda: ["solobueno-api"])
    access_token_ttl: timedelta = timedelta(minutes=60)
    refresh_token_ttl: timedelta = timedelta(days=30)


class TokenPair(BaseModel):
    """Access token plus the refresh token that renews it"""

    access_token: str
    refresh_token: str
    token_type: str = TOKEN_TYPE
    expires_in: int
    expires_at: datetime


class TokenClaims(BaseModel):
    """Verified claims of an access token"""

    user_id: UUID
    tenant_id: UUID
    role: Role
    email: str
    issuer: str
    audience: List[str]
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    token_id: str


class ITokenService(ABC):
    """Access/refresh token issuance and validation - application layer"""

    @property
    @abstractmethod
    def settings(self) -> TokenSettings:
        pass

    @abstractmethod
    def generate_access_token(
        self, user_id: UUID, tenant_id: UUID, email: str, role: Role
    ) -> Tuple[str, datetime]:
        """Sign an access token. Returns (token, expires_at)."""
        pass

    @abstractmethod
    def generate_refresh_token(self) -> str:
        """Opaque high-entropy refresh token; never a structured token"""
        pass

    @abstractmethod
    def generate_token_pair(
        self, user_id: UUID, tenant_id: UUID, email: str, role: Role
    ) -> Tuple[TokenPair, str]:
        """Returns the pair and the digest of its refresh token for storage"""
        pass

    @abstractmethod
    def validate_token(self, token: str) -> Result[TokenClaims]:
        """
        Verify an access token.

        Errors are TOKEN_MALFORMED (unparseable), TOKEN_EXPIRED (good
        signature, past expiry) or TOKEN_INVALID (anything else).
        """
        pass

    def refresh_token_expiry(self, now: datetime) -> datetime:
        return now + self.settings.refresh_token_ttl
