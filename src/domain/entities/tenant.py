"""
Tenant Entity

Represents an isolated business (restaurant, branch) using the system.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class Tenant(SQLModel, table=True):
    """
    Tenant entity - isolated business entity.

    Business Rules:
    - Slug is unique and URL-safe
    - An inactive tenant blocks login and token refresh for all its members
    - Read-only from the authentication flows
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    slug: str = Field(unique=True, index=True, max_length=100)

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
