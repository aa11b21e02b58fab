"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.services.token_service import TokenClaims, TokenPair
from src.domain.entities import Role, Tenant, User


# ============================================================================
# Command DTOs
# ============================================================================


class LoginCommand(BaseModel):
    """Credentials plus client metadata for a login attempt"""

    email: str
    password: str
    tenant_id: Optional[UUID] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class RefreshCommand(BaseModel):
    refresh_token: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class ChangePasswordCommand(BaseModel):
    user_id: UUID
    current_password: str
    new_password: str
    ip_address: Optional[str] = None


class CompletePasswordResetCommand(BaseModel):
    token: str
    new_password: str
    ip_address: Optional[str] = None


# ============================================================================
# Shared / nested models
# ============================================================================


class TenantInfo(BaseModel):
    """Tenant the user belongs to, with the role held there"""

    id: UUID
    name: str
    slug: str
    role: Role

    @classmethod
    def of(cls, tenant: Tenant, role: Role) -> "TenantInfo":
        return cls(id=tenant.id, name=tenant.name, slug=tenant.slug, role=role)


class UserInfo(BaseModel):
    """User as exposed to clients (never includes the password hash)"""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Optional[Role] = None
    tenant_id: Optional[UUID] = None
    is_active: bool
    must_reset_password: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def of(
        cls, user: User, role: Optional[Role] = None, tenant_id: Optional[UUID] = None
    ) -> "UserInfo":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=role,
            tenant_id=tenant_id,
            is_active=user.is_active,
            must_reset_password=user.must_reset_password,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthContext(BaseModel):
    """Identity resolved from a validated access token, passed explicitly to use cases"""

    user_id: UUID
    tenant_id: UUID
    role: Role
    email: str
    claims: TokenClaims

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "AuthContext":
        return cls(
            user_id=claims.user_id,
            tenant_id=claims.tenant_id,
            role=claims.role,
            email=claims.email,
            claims=claims,
        )


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int
    expires_at: datetime
    session_id: UUID
    user: UserInfo
    tenant: TenantInfo
    role: Role
    must_reset_password: bool

    @classmethod
    def build(
        cls, pair: TokenPair, session_id: UUID, user: User, tenant: Tenant, role: Role
    ) -> "LoginResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
            expires_at=pair.expires_at,
            session_id=session_id,
            user=UserInfo.of(user, role, tenant.id),
            tenant=TenantInfo.of(tenant, role),
            role=role,
            must_reset_password=user.must_reset_password,
        )


class RefreshTokenResponse(TokenPair):
    """Rotated token pair"""

    session_id: UUID


class LogoutAllResponse(BaseModel):
    revoked_count: int


class MeResponse(BaseModel):
    """Current user, tenant and role, plus every tenant the user can switch to"""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    tenant_id: UUID
    tenant_name: str
    must_reset_password: bool
    tenants: List[TenantInfo]


class MessageResponse(BaseModel):
    message: str
