"""Entity builders shared by unit and integration tests."""

from datetime import timedelta
from uuid import uuid4

from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken, Role, Session, Tenant, User, UserTenantRole


def make_tenant(name="Acme Bistro", slug=None, is_active=True, **kwargs) -> Tenant:
    return Tenant(
        name=name,
        slug=slug or f"tenant-{uuid4().hex[:8]}",
        is_active=is_active,
        **kwargs,
    )


def make_user(email="user@example.com", password_hash="hashed::Secret123", **kwargs) -> User:
    kwargs.setdefault("first_name", "Ana")
    kwargs.setdefault("last_name", "Lopez")
    return User(email=email, password_hash=password_hash, **kwargs)


def bind(user: User, tenant: Tenant, role: Role) -> UserTenantRole:
    """Attach a tenant role to an in-memory user (relationships included)."""
    tenant_role = UserTenantRole(user_id=user.id, tenant_id=tenant.id, role=role)
    tenant_role.tenant = tenant
    user.tenant_roles.append(tenant_role)
    return tenant_role


def make_session(user_id, tenant_id, refresh_token_hash="digest", expires_in=timedelta(days=30), **kwargs) -> Session:
    return Session(
        user_id=user_id,
        tenant_id=tenant_id,
        refresh_token_hash=refresh_token_hash,
        expires_at=utcnow() + expires_in,
        **kwargs,
    )


def make_reset_token(user_id, token_hash="digest", expires_in=timedelta(hours=1), **kwargs) -> PasswordResetToken:
    return PasswordResetToken(
        user_id=user_id,
        token_hash=token_hash,
        expires_at=utcnow() + expires_in,
        **kwargs,
    )
