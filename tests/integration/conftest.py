import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_unit_of_work
from src.domain.entities import Tenant, User, UserTenantRole
from tests.fixtures.api_client import DEFAULT_PASSWORD, CapturingNotifier

_SIGNING_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)


class IntegrationConfig(ApplicationConfig):
    API_PREFIX = ""
    AUTO_CREATE_TABLES = False
    ENABLE_LOGGING_MIDDLEWARE = False
    ADMIN_API_KEY = "test-admin-key"
    JWT_PRIVATE_KEY = _SIGNING_KEY.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    JWT_PRIVATE_KEY_FILE = None
    JWT_PUBLIC_KEY = None
    JWT_PUBLIC_KEY_FILE = None
    ARGON2_MEMORY_COST = 8
    ARGON2_TIME_COST = 1
    ARGON2_PARALLELISM = 1
    LOGIN_RATE_LIMIT = 5
    LOGIN_RATE_WINDOW_SECONDS = 60
    RESET_RATE_LIMIT = 1
    RESET_RATE_WINDOW_SECONDS = 300


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def app(db_session):
    from src.api.app import create_app

    app = create_app(IntegrationConfig)
    app.state.reset_notifier = CapturingNotifier()

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    yield app

    # ASGITransport does not run the lifespan
    app.state.login_rate_limiter.close()
    app.state.reset_rate_limiter.close()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def notifier(app) -> CapturingNotifier:
    return app.state.reset_notifier


class Seeder:
    """Writes tenants and users straight to the database"""

    def __init__(self, session: AsyncSession, password_hasher):
        self.session = session
        self.password_hasher = password_hasher

    async def tenant(self, name="Acme Bistro", is_active=True) -> Tenant:
        tenant = Tenant(name=name, slug=name.lower().replace(" ", "-"), is_active=is_active)
        self.session.add(tenant)
        await self.session.commit()
        # Detach so the unit of work's rollback cannot expire it
        self.session.expunge(tenant)
        return tenant

    async def user(
        self,
        email,
        roles,
        password=DEFAULT_PASSWORD,
        is_active=True,
        must_reset_password=False,
    ) -> User:
        """roles: list of (tenant, Role) pairs"""
        user = User(
            email=email,
            password_hash=self.password_hasher.hash(password),
            first_name="Test",
            last_name="User",
            is_active=is_active,
            must_reset_password=must_reset_password,
        )
        self.session.add(user)
        await self.session.flush()
        for tenant, role in roles:
            self.session.add(UserTenantRole(user_id=user.id, tenant_id=tenant.id, role=role))
        await self.session.commit()
        # Detach so the unit of work's rollback cannot expire it
        self.session.expunge(user)
        return user


@pytest.fixture
def seed(app, db_session) -> Seeder:
    return Seeder(db_session, app.state.password_hasher)
