"""
User Entity

Represents a person who can hold roles in multiple tenants.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from src.domain.base import utcnow
from .enums import Role

if TYPE_CHECKING:
    from .user_tenant_role import UserTenantRole


class User(SQLModel, table=True):
    """
    User entity - a person who can hold one role in each of several tenants.

    Business Rules:
    - Email is unique across all tenants
    - Password stored as an Argon2id PHC string
    - Accounts are created with a temporary password and must_reset_password=True
    - Users are never hard-deleted; deactivation flips is_active
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=255)

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)

    is_active: bool = Field(default=True)
    must_reset_password: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    tenant_roles: list["UserTenantRole"] = Relationship(back_populates="user")

    def can_login(self) -> bool:
        return self.is_active

    def role_for_tenant(self, tenant_id: UUID) -> Optional[Role]:
        """Role held in the tenant; requires tenant_roles to be loaded."""
        for tenant_role in self.tenant_roles:
            if tenant_role.tenant_id == tenant_id:
                return tenant_role.role
        return None
