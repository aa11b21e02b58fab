from abc import ABC, abstractmethod

from src.app.repositories.auth_event_repository import IAuthEventRepository
from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import IUserRepository
from src.app.repositories.user_tenant_role_repository import IUserTenantRoleRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    tenants: ITenantRepository
    user_tenant_roles: IUserTenantRoleRepository
    sessions: ISessionRepository
    password_reset_tokens: IPasswordResetTokenRepository
    auth_events: IAuthEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
