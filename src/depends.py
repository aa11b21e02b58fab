from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.password_reset_notifier import IPasswordResetNotifier
from src.app.services.password_service import IPasswordHasher
from src.app.services.rate_limiter import IRateLimiter
from src.app.services.token_service import ITokenService
from src.app.use_cases.auth import AuthContext, ValidateTokenUseCase
from src.domain import errors
from src.domain.entities import Role

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

MISSING_CREDENTIALS = Error("UNAUTHORIZED", "Authorization header is required")


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


# Process-wide services are built once in create_app and kept on app.state


def get_token_service(request: Request) -> ITokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> IPasswordHasher:
    return request.app.state.password_hasher


def get_login_rate_limiter(request: Request) -> IRateLimiter:
    return request.app.state.login_rate_limiter


def get_reset_rate_limiter(request: Request) -> IRateLimiter:
    return request.app.state.reset_rate_limiter


def get_reset_notifier(request: Request) -> IPasswordResetNotifier:
    return request.app.state.reset_notifier


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: ITokenService = Depends(get_token_service),
) -> AuthContext:
    """
    Dependency to extract and verify the access token from the Authorization header.

    Returns:
        AuthContext with user_id, tenant_id, role and email from the token

    Raises:
        ClientError: 401 if the header is missing or the token is malformed,
        invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise ClientError(MISSING_CREDENTIALS, status_code=status.HTTP_401_UNAUTHORIZED)

    result = ValidateTokenUseCase(token_service).execute(credentials.credentials)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)

    return result.value


def require_role(min_role: Role):
    """
    Dependency factory: the caller's role must be at least min_role.

    Raises:
        ClientError: 403 INSUFFICIENT_ROLE
    """

    async def dependency(context: AuthContext = Depends(get_current_user)) -> AuthContext:
        if not context.role.at_least(min_role):
            raise ClientError(
                errors.INSUFFICIENT_ROLE.with_details(required_role=min_role.value),
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return context

    return dependency


def get_config(request: Request):
    return request.app.state.config
