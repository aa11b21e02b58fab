"""
UserTenantRole Entity

Binds one user to one tenant with exactly one role.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from src.domain.base import utcnow
from .enums import Role

if TYPE_CHECKING:
    from .tenant import Tenant
    from .user import User


class UserTenantRole(SQLModel, table=True):
    """
    UserTenantRole entity - a user's role inside a tenant.

    Business Rules:
    - (user_id, tenant_id) is unique: one role per user per tenant
    - Created with the user or by an explicit grant
    - Updated on role change, deleted when the user leaves the tenant
    """

    __tablename__ = "user_tenant_roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    role: Role = Field(nullable=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    user: Optional["User"] = Relationship(back_populates="tenant_roles")
    tenant: Optional["Tenant"] = Relationship()

    __table_args__ = (
        Index("idx_user_tenant_role_user_tenant", "user_id", "tenant_id", unique=True),
    )
