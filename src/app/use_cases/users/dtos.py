"""
User Management Use Case DTOs

Commands carry the caller's identity explicitly; the caller's role is
passed separately to each use case for the authorization checks.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.app.use_cases.auth.dtos import UserInfo
from src.domain.entities import Role


class CreateUserCommand(BaseModel):
    tenant_id: UUID
    email: str
    first_name: str = ""
    last_name: str = ""
    role: Role
    created_by: UUID
    ip_address: Optional[str] = None


class UpdateUserCommand(BaseModel):
    """Partial update: fields left as None are not touched"""

    user_id: UUID
    tenant_id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: Optional[bool] = None
    updated_by: UUID
    ip_address: Optional[str] = None


class ChangeRoleCommand(BaseModel):
    user_id: UUID
    tenant_id: UUID
    role: Role
    updated_by: UUID
    ip_address: Optional[str] = None


class CreateUserResponse(BaseModel):
    """Returned once: the temporary password cannot be retrieved again"""

    id: UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    tenant_id: UUID
    temporary_password: str
    must_reset_password: bool
    created_at: datetime


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class UserListResponse(BaseModel):
    data: List[UserInfo]
    pagination: Pagination


class ChangeRoleResponse(BaseModel):
    user_id: UUID
    tenant_id: UUID
    old_role: Role
    new_role: Role
