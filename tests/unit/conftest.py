from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.token_service import TokenPair

REPOSITORY_METHODS = {
    "users": [
        "get_by_id",
        "get_by_email",
        "get_by_id_with_tenants",
        "get_by_email_with_tenants",
        "create",
        "update",
        "exists_by_email",
        "list_by_tenant",
    ],
    "tenants": ["get_by_id", "get_by_slug", "create", "update", "exists_by_slug"],
    "user_tenant_roles": [
        "get_by_user_and_tenant",
        "create",
        "update",
        "delete",
        "delete_by_user_and_tenant",
        "list_by_user",
        "list_by_tenant",
    ],
    "sessions": [
        "create",
        "get_by_id",
        "get_by_token_hash",
        "revoke",
        "revoke_by_token_hash",
        "revoke_all_for_user",
        "revoke_all_for_user_in_tenant",
        "delete_expired",
        "count_active_for_user",
    ],
    "password_reset_tokens": [
        "create",
        "get_by_token_hash",
        "mark_used",
        "delete_expired",
        "delete_for_user",
        "count_recent_for_user",
    ],
    "auth_events": [
        "create",
        "find_by_user",
        "find_by_tenant",
        "find_by_type",
        "find_by_user_and_type_since",
        "count_recent_by_ip_and_type_since",
        "delete_older_than",
    ],
}


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories; create/update echo their argument"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    for repo_name, methods in REPOSITORY_METHODS.items():
        repo = MagicMock()
        for method in methods:
            setattr(repo, method, AsyncMock())
        setattr(uow, repo_name, repo)

    for repo_name in ("users", "tenants", "user_tenant_roles", "sessions", "password_reset_tokens", "auth_events"):
        repo = getattr(uow, repo_name)
        repo.create.side_effect = lambda entity: entity
        if hasattr(repo, "update"):
            repo.update.side_effect = lambda entity: entity

    return uow


@pytest.fixture
def token_pair():
    return TokenPair(
        access_token="access-token",
        refresh_token="refresh-token",
        expires_in=3600,
        expires_at=datetime(2030, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def mock_token_service(token_pair):
    service = MagicMock()
    service.generate_token_pair.return_value = (token_pair, "refresh-token-digest")
    service.refresh_token_expiry.side_effect = lambda now: now + timedelta(days=30)
    return service


@pytest.fixture
def mock_password_hasher():
    hasher = MagicMock()
    hasher.hash.side_effect = lambda password: f"hashed::{password}"
    hasher.verify.side_effect = lambda password, hashed: hashed == f"hashed::{password}"
    return hasher


@pytest.fixture
def mock_rate_limiter():
    limiter = MagicMock()
    limiter.allow.return_value = True
    limiter.retry_after.return_value = 42
    return limiter
