from datetime import timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.api.utils.client_info import client_ip, user_agent
from src.app.services.password_reset_notifier import IPasswordResetNotifier
from src.app.services.password_service import IPasswordHasher
from src.app.services.rate_limiter import IRateLimiter
from src.app.services.token_service import ITokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthContext,
    ChangePasswordCommand,
    ChangePasswordUseCase,
    CompletePasswordResetCommand,
    CompletePasswordResetUseCase,
    LoginCommand,
    LoginResponse,
    LoginUseCase,
    LogoutAllResponse,
    LogoutAllUseCase,
    LogoutUseCase,
    MeResponse,
    MessageResponse,
    RefreshCommand,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    RequestPasswordResetUseCase,
)
from src.app.use_cases.users import LoadContextUseCase
from src.depends import (
    get_config,
    get_current_user,
    get_login_rate_limiter,
    get_password_hasher,
    get_reset_notifier,
    get_reset_rate_limiter,
    get_token_service,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    tenant_id is only needed when the user belongs to several tenants.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")
    tenant_id: Optional[UUID] = Field(None, description="Tenant to log into")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: ITokenService = Depends(get_token_service),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    rate_limiter: IRateLimiter = Depends(get_login_rate_limiter),
):
    """
    User Login

    Authenticates the user and opens a session in one tenant.

    Raises:
        - 400 Bad Request: TENANT_REQUIRED (body lists the tenants), USER_NOT_IN_TENANT
        - 401 Unauthorized: INVALID_CREDENTIALS, ACCOUNT_DISABLED, TENANT_INACTIVE
        - 404 Not Found: TENANT_NOT_FOUND
        - 429 Too Many Requests: RATE_LIMIT_EXCEEDED (Retry-After header)
        - 500 Internal Server Error: Server error
    """
    command = LoginCommand(
        email=request.email,
        password=request.password,
        tenant_id=request.tenant_id,
        ip_address=client_ip(http_request),
        user_agent=user_agent(http_request),
    )

    use_case = LoginUseCase(uow, token_service, password_hasher, rate_limiter)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("TENANT_REQUIRED", "USER_NOT_IN_TENANT"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVALID_CREDENTIALS", "ACCOUNT_DISABLED", "TENANT_INACTIVE"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "RATE_LIMIT_EXCEEDED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshTokenResponse)
async def refresh(
    request: RefreshRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: ITokenService = Depends(get_token_service),
):
    """
    Refresh Tokens

    Rotates the refresh token: the presented token stops working and a new
    pair is issued with the role currently held in the tenant.

    Raises:
        - 401 Unauthorized: any refresh failure
        - 500 Internal Server Error: Server error
    """
    command = RefreshCommand(
        refresh_token=request.refresh_token,
        ip_address=client_ip(http_request),
        user_agent=user_agent(http_request),
    )

    result = await RefreshTokenUseCase(uow, token_service).execute(command)

    if result.is_err():
        error = result.error
        if error.code in (
            "REFRESH_TOKEN_INVALID",
            "SESSION_REVOKED",
            "TOKEN_EXPIRED",
            "USER_NOT_FOUND",
            "ACCOUNT_DISABLED",
            "USER_NOT_IN_TENANT",
            "TENANT_NOT_FOUND",
            "TENANT_INACTIVE",
        ):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    return result.value


class LogoutRequest(BaseModel):
    refresh_token: str = Field("", description="Refresh token of the session to end")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: LogoutRequest,
    http_request: Request,
    context: AuthContext = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Revokes the session behind the refresh token. Unknown, already revoked
    or empty tokens succeed as well.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
    """
    if request.refresh_token:
        result = await LogoutUseCase(uow).execute(
            request.refresh_token, ip_address=client_ip(http_request)
        )
        if result.is_err():
            raise ServerError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout-all", status_code=status.HTTP_200_OK, response_model=LogoutAllResponse)
async def logout_all(
    http_request: Request,
    context: AuthContext = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout Everywhere

    Revokes every session of the caller, in all tenants.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
    """
    result = await LogoutAllUseCase(uow).execute(
        context.user_id, ip_address=client_ip(http_request), tenant_id=context.tenant_id
    )
    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def me(
    context: AuthContext = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User

    Returns the caller with the tenant and role of this token, plus every
    tenant the user can switch to.

    Raises:
        - 401 Unauthorized: Invalid token or ACCOUNT_DISABLED
        - 403 Forbidden: USER_NOT_IN_TENANT, TENANT_INACTIVE
        - 404 Not Found: USER_NOT_FOUND
    """
    result = await LoadContextUseCase(uow).execute(context)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "ACCOUNT_DISABLED":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code in ("USER_NOT_IN_TENANT", "TENANT_INACTIVE"):
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


@router.post("/change-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    http_request: Request,
    context: AuthContext = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Change Password

    Requires the current password. Every session of the user is revoked
    afterwards, so clients must log in again.

    Raises:
        - 400 Bad Request: PASSWORD_INCORRECT, PASSWORD_WEAK
        - 401 Unauthorized: Missing or invalid access token
        - 404 Not Found: USER_NOT_FOUND
    """
    command = ChangePasswordCommand(
        user_id=context.user_id,
        current_password=request.current_password,
        new_password=request.new_password,
        ip_address=client_ip(http_request),
    )

    result = await ChangePasswordUseCase(uow, password_hasher).execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("PASSWORD_INCORRECT", "PASSWORD_WEAK"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class PasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="Email of the account to reset")


@router.post(
    "/password-reset/request",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=MessageResponse,
)
async def request_password_reset(
    request: PasswordResetRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    rate_limiter: IRateLimiter = Depends(get_reset_rate_limiter),
    notifier: IPasswordResetNotifier = Depends(get_reset_notifier),
    config=Depends(get_config),
):
    """
    Request Password Reset

    Always answers 202 with the same message, whether or not the email
    belongs to an account.

    Raises:
        - 429 Too Many Requests: RATE_LIMIT_EXCEEDED (Retry-After header)
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        rate_limiter,
        notifier,
        token_ttl=timedelta(minutes=config.PASSWORD_RESET_TTL_MINUTES),
    )
    result = await use_case.execute(request.email, ip_address=client_ip(http_request))

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMIT_EXCEEDED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


class CompletePasswordResetRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Token from the reset link")
    new_password: str = Field(..., min_length=1)


@router.post(
    "/password-reset/complete",
    status_code=status.HTTP_200_OK,
    response_model=MessageResponse,
)
async def complete_password_reset(
    request: CompletePasswordResetRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Complete Password Reset

    Sets a new password using a single-use reset token and revokes every
    session of the user.

    Raises:
        - 400 Bad Request: PASSWORD_WEAK, PASSWORD_RESET_INVALID
        - 410 Gone: PASSWORD_RESET_EXPIRED, PASSWORD_RESET_USED
    """
    command = CompletePasswordResetCommand(
        token=request.token,
        new_password=request.new_password,
        ip_address=client_ip(http_request),
    )

    result = await CompletePasswordResetUseCase(uow, password_hasher).execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("PASSWORD_WEAK", "PASSWORD_RESET_INVALID"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("PASSWORD_RESET_EXPIRED", "PASSWORD_RESET_USED"):
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value
