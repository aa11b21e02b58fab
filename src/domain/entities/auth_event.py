"""
AuthEvent Entity

Append-only log of authentication and authorization events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow
from .enums import AuthEventType


class AuthEvent(SQLModel, table=True):
    """
    AuthEvent entity - immutable audit record.

    Business Rules:
    - Never updated; removed only by the retention purge
    - user_id and tenant_id are nullable (failed logins, unknown emails)
    - Writing an event must never fail the operation that triggered it
    """

    __tablename__ = "auth_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)
    tenant_id: Optional[UUID] = Field(default=None, index=True)

    event_type: AuthEventType = Field(nullable=False)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_auth_event_created_at", "created_at"),
        Index("idx_auth_event_type_created", "event_type", "created_at"),
        Index("idx_auth_event_ip_type", "ip_address", "event_type"),
    )
