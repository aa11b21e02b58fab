"""
Auth Domain Enums

Role hierarchy and audit event types.
"""

from enum import Enum


_ROLE_LEVELS = {
    "owner": 100,
    "admin": 90,
    "manager": 70,
    "cashier": 50,
    "waiter": 40,
    "kitchen": 30,
    "viewer": 10,
}


class Role(str, Enum):
    """
    Role held by a user inside one tenant.

    Roles form a total order by level. A role may manage or assign only
    roles with a strictly lower level, so nobody can act on peers or
    escalate themselves.
    """

    owner = "owner"
    admin = "admin"
    manager = "manager"
    cashier = "cashier"
    waiter = "waiter"
    kitchen = "kitchen"
    viewer = "viewer"

    @property
    def level(self) -> int:
        return _ROLE_LEVELS[self.value]

    def can_manage(self, other: "Role") -> bool:
        return self.level > other.level

    def can_assign(self, other: "Role") -> bool:
        return self.level > other.level

    def at_least(self, other: "Role") -> bool:
        return self.level >= other.level

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Strict parse; unknown role strings raise ValueError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(r.value for r in cls)
            raise ValueError(f"Invalid role: {value}. Must be one of: {allowed}") from None


class AuthEventType(str, Enum):
    """Security-relevant state transitions recorded in the audit log"""

    login_success = "login_success"
    login_failed = "login_failed"
    logout = "logout"
    token_refresh = "token_refresh"
    password_changed = "password_changed"
    password_reset_requested = "password_reset_requested"
    password_reset_completed = "password_reset_completed"
    account_created = "account_created"
    account_disabled = "account_disabled"
    account_enabled = "account_enabled"
    role_changed = "role_changed"
    session_revoked = "session_revoked"
