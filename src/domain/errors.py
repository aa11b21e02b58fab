"""
Auth Domain Errors

Canonical error values returned by use cases. Codes are stable and are
mapped to HTTP statuses only in the API layer.
"""

from libs.result import Error

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")
ACCOUNT_DISABLED = Error("ACCOUNT_DISABLED", "Account is disabled")

TOKEN_EXPIRED = Error("TOKEN_EXPIRED", "Token has expired")
TOKEN_INVALID = Error("TOKEN_INVALID", "Token is invalid")
TOKEN_MALFORMED = Error("TOKEN_MALFORMED", "Token is malformed")

SESSION_REVOKED = Error("SESSION_REVOKED", "Session has been revoked")
SESSION_NOT_FOUND = Error("SESSION_NOT_FOUND", "Session not found")
REFRESH_TOKEN_INVALID = Error("REFRESH_TOKEN_INVALID", "Refresh token is invalid")

INSUFFICIENT_ROLE = Error("INSUFFICIENT_ROLE", "Insufficient role for this operation")
CANNOT_ASSIGN_ROLE = Error("CANNOT_ASSIGN_ROLE", "You cannot assign this role")
CANNOT_MANAGE_ROLE = Error("CANNOT_MANAGE_ROLE", "You cannot manage users with this role")
INVALID_ROLE = Error("INVALID_ROLE", "Invalid role")

TENANT_REQUIRED = Error(
    "TENANT_REQUIRED", "User belongs to multiple tenants. Please specify tenant_id."
)
TENANT_NOT_FOUND = Error("TENANT_NOT_FOUND", "Tenant not found")
TENANT_INACTIVE = Error("TENANT_INACTIVE", "Tenant is inactive")
USER_NOT_IN_TENANT = Error("USER_NOT_IN_TENANT", "User does not belong to this tenant")

EMAIL_EXISTS = Error("EMAIL_EXISTS", "Email already exists")
USER_NOT_FOUND = Error("USER_NOT_FOUND", "User not found")

PASSWORD_WEAK = Error(
    "PASSWORD_WEAK",
    "Password must be at least 8 characters and contain uppercase, lowercase and a digit",
)
PASSWORD_INCORRECT = Error("PASSWORD_INCORRECT", "Current password is incorrect")
PASSWORD_RESET_EXPIRED = Error("PASSWORD_RESET_EXPIRED", "Password reset token has expired")
PASSWORD_RESET_USED = Error("PASSWORD_RESET_USED", "Password reset token has already been used")
PASSWORD_RESET_INVALID = Error("PASSWORD_RESET_INVALID", "Password reset token is invalid")

RATE_LIMIT_EXCEEDED = Error("RATE_LIMIT_EXCEEDED", "Too many requests. Please try again later.")
