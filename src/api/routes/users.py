"""
User Management Routes

All endpoints act inside the caller's tenant (taken from the access token)
and require at least the manager role.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.utils.client_info import client_ip
from src.app.services.password_service import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import AuthContext, UserInfo
from src.app.use_cases.users import (
    ChangeRoleCommand,
    ChangeRoleResponse,
    ChangeRoleUseCase,
    CreateUserCommand,
    CreateUserResponse,
    CreateUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
    UserListResponse,
)
from src.depends import get_password_hasher, get_unit_of_work, require_role
from src.domain import errors
from src.domain.entities import Role

router = APIRouter(prefix="/users", tags=["Users"])

require_manager = require_role(Role.manager)


def _parse_role(value: str) -> Role:
    try:
        return Role.parse(value)
    except ValueError:
        raise ClientError(
            errors.INVALID_ROLE.with_details(role=value),
            status_code=status.HTTP_400_BAD_REQUEST,
        ) from None


class CreateUserRequest(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., description="Role in the caller's tenant")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateUserResponse)
async def create_user(
    request: CreateUserRequest,
    http_request: Request,
    context: AuthContext = Depends(require_manager),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Create User

    Creates a user in the caller's tenant with a temporary password, which
    is returned only in this response.

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: INSUFFICIENT_ROLE, CANNOT_ASSIGN_ROLE
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: EMAIL_EXISTS
    """
    command = CreateUserCommand(
        tenant_id=context.tenant_id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        role=_parse_role(request.role),
        created_by=context.user_id,
        ip_address=client_ip(http_request),
    )

    result = await CreateUserUseCase(uow, password_hasher).execute(command, context.role)

    if result.is_err():
        error = result.error
        if error.code == "CANNOT_ASSIGN_ROLE":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "EMAIL_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=UserListResponse)
async def list_users(
    page: int = Query(1),
    limit: int = Query(20),
    context: AuthContext = Depends(require_manager),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Users

    Paginated users of the caller's tenant. Out-of-range page/limit values
    fall back to the defaults.
    """
    result = await ListUsersUseCase(uow).execute(context.tenant_id, page=page, limit=limit)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


@router.get("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserInfo)
async def get_user(
    user_id: UUID,
    context: AuthContext = Depends(require_manager),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get User

    Raises:
        - 404 Not Found: USER_NOT_FOUND (also for users of other tenants)
    """
    result = await GetUserUseCase(uow).execute(user_id, context.tenant_id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class UpdateUserRequest(BaseModel):
    """Fields left out (or null) are not changed"""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


@router.patch("/{user_id}", status_code=status.HTTP_200_OK, response_model=UserInfo)
async def update_user(
    user_id: UUID,
    request: UpdateUserRequest,
    http_request: Request,
    context: AuthContext = Depends(require_manager),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update User

    Partial update of name and active flag. Deactivating a user ends all
    of their sessions.

    Raises:
        - 403 Forbidden: CANNOT_MANAGE_ROLE
        - 404 Not Found: USER_NOT_FOUND
    """
    command = UpdateUserCommand(
        user_id=user_id,
        tenant_id=context.tenant_id,
        first_name=request.first_name,
        last_name=request.last_name,
        is_active=request.is_active,
        updated_by=context.user_id,
        ip_address=client_ip(http_request),
    )

    result = await UpdateUserUseCase(uow).execute(command, context.role)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "CANNOT_MANAGE_ROLE":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class ChangeRoleRequest(BaseModel):
    role: str = Field(..., description="New role in the caller's tenant")


@router.patch("/{user_id}/role", status_code=status.HTTP_200_OK, response_model=ChangeRoleResponse)
async def change_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    http_request: Request,
    context: AuthContext = Depends(require_manager),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change User Role

    The new role applies to the user's next login or token refresh.

    Raises:
        - 400 Bad Request: INVALID_ROLE
        - 403 Forbidden: CANNOT_ASSIGN_ROLE, CANNOT_MANAGE_ROLE
        - 404 Not Found: USER_NOT_IN_TENANT
    """
    command = ChangeRoleCommand(
        user_id=user_id,
        tenant_id=context.tenant_id,
        role=_parse_role(request.role),
        updated_by=context.user_id,
        ip_address=client_ip(http_request),
    )

    result = await ChangeRoleUseCase(uow).execute(command, context.role)

    if result.is_err():
        error = result.error
        if error.code in ("CANNOT_ASSIGN_ROLE", "CANNOT_MANAGE_ROLE"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "USER_NOT_IN_TENANT":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
