import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from src.adapter.services.argon2_password_hasher import Argon2PasswordHasher
from src.adapter.services.jwt_token_service import JwtTokenService
from src.adapter.services.key_manager import KeyManager
from src.adapter.services.logging_reset_notifier import LoggingPasswordResetNotifier
from src.adapter.services.memory_rate_limiter import MemoryRateLimiter
from src.app.services.rate_limiter import LOGIN_POLICY, PASSWORD_RESET_POLICY, RateLimitPolicy
from src.app.services.token_service import TokenSettings
from .error import ClientError, ServerError, error_body

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = error_body(exc.base_error)
    logger.warning("Client error: %s %s", exc.base_error.code, request.url.path)

    headers = None
    retry_after = exc.base_error.details.get("retry_after")
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}

    return JSONResponse(
        status_code=exc.status_code, content={"error": error_dict}, headers=headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error("Server error: %s", exc.base_error.code)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def log_requests(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


def _token_settings(config) -> TokenSettings:
    return TokenSettings(
        issuer=config.JWT_ISSUER,
        audience=list(config.JWT_AUDIENCE),
        access_token_ttl=timedelta(minutes=config.ACCESS_TOKEN_TTL_MINUTES),
        refresh_token_ttl=timedelta(days=config.REFRESH_TOKEN_TTL_DAYS),
    )


def _install_services(app: FastAPI, config) -> None:
    """Build the process-wide services the request dependencies hand out."""
    app.state.config = config
    app.state.token_service = JwtTokenService(
        KeyManager.from_config(config), settings=_token_settings(config)
    )
    app.state.password_hasher = Argon2PasswordHasher(
        memory_cost=config.ARGON2_MEMORY_COST,
        time_cost=config.ARGON2_TIME_COST,
        parallelism=config.ARGON2_PARALLELISM,
    )
    app.state.login_rate_limiter = MemoryRateLimiter(
        RateLimitPolicy(
            max_requests=config.LOGIN_RATE_LIMIT,
            window_seconds=config.LOGIN_RATE_WINDOW_SECONDS,
            key_prefix=LOGIN_POLICY.key_prefix,
        )
    )
    app.state.reset_rate_limiter = MemoryRateLimiter(
        RateLimitPolicy(
            max_requests=config.RESET_RATE_LIMIT,
            window_seconds=config.RESET_RATE_WINDOW_SECONDS,
            key_prefix=PASSWORD_RESET_POLICY.key_prefix,
        )
    )
    app.state.reset_notifier = LoggingPasswordResetNotifier()


def create_app(ApplicationConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.AUTO_CREATE_TABLES:
            from src.depends import engine

            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Database tables ensured")
        yield
        app.state.login_rate_limiter.close()
        app.state.reset_rate_limiter.close()

    app = FastAPI(title="Auth Service", version="0.1.0", lifespan=lifespan)

    _install_services(app, ApplicationConfig)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(log_requests)

    from src.api.routes import admin, auth, health_check, users

    prefix = ApplicationConfig.API_PREFIX or ""
    app.include_router(health_check.router, prefix=prefix, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(users.router, prefix=prefix, tags=["Users"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
