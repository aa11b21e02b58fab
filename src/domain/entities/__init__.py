"""
Auth Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AuthEventType, Role

# Export all entities
from .user import User
from .tenant import Tenant
from .user_tenant_role import UserTenantRole
from .session import Session
from .password_reset_token import PasswordResetToken
from .auth_event import AuthEvent

__all__ = [
    # Enums
    "AuthEventType",
    "Role",
    # Entities
    "User",
    "Tenant",
    "UserTenantRole",
    "Session",
    "PasswordResetToken",
    "AuthEvent",
]
