"""
User Management Use Cases

All user-related business logic.
"""

from .load_context_use_case import LoadContextUseCase
from .create_user_use_case import CreateUserUseCase
from .get_user_use_case import GetUserUseCase
from .list_users_use_case import ListUsersUseCase
from .update_user_use_case import UpdateUserUseCase
from .change_role_use_case import ChangeRoleUseCase
from .dtos import (
    CreateUserCommand,
    UpdateUserCommand,
    ChangeRoleCommand,
    CreateUserResponse,
    UserListResponse,
    Pagination,
    ChangeRoleResponse,
)

__all__ = [
    # Use Cases
    "LoadContextUseCase",
    "CreateUserUseCase",
    "GetUserUseCase",
    "ListUsersUseCase",
    "UpdateUserUseCase",
    "ChangeRoleUseCase",
    # DTOs - Commands
    "CreateUserCommand",
    "UpdateUserCommand",
    "ChangeRoleCommand",
    # DTOs - Responses
    "CreateUserResponse",
    "UserListResponse",
    "Pagination",
    "ChangeRoleResponse",
]
