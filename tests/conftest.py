"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from uuid import uuid4

# Disable rate limiting and use SQLite in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from core import background
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, UserModel
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


@pytest.fixture(scope="session")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="session")
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def uow_factory(session_factory: async_sessionmaker[AsyncSession]) -> UowFactory:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def create_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[str]]:
    """Insert a user row and return its (unique) ID.

    The database lives for the whole session, so every test gets fresh IDs.
    """

    async def _create(name: str = "User", **fields: object) -> str:
        user_id = f"{name.lower()}-{uuid4().hex[:8]}"
        async with session_factory() as session:
            session.add(
                UserModel(id=user_id, email=f"{user_id}@example.com", name=name, **fields)
            )
            await session.commit()
        return user_id

    return _create


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_headers(auth_provider: JWTAuthProvider) -> Callable[[str], dict[str, str]]:
    """Build authorization headers for a user ID."""

    def _headers(user_id: str) -> dict[str, str]:
        token = auth_provider.create_token(
            TokenUser(id=user_id, email=f"{user_id}@example.com", name=user_id)
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client against the default app (no overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(
    uow_factory: UowFactory,
    auth_provider: JWTAuthProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client wired to the in-memory database.

    Services are rebuilt around the test Unit of Work factory and the auth
    provider is swapped for one using the test secret. Callers pass their
    own headers from ``auth_headers``.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_dm_service,
        get_friend_service,
        get_invite_service,
        get_member_service,
        get_project_service,
    )
    from domain.services.dm_service import DMService
    from domain.services.friend_service import FriendService
    from domain.services.invite_service import InviteService
    from domain.services.member_service import MemberService
    from domain.services.project_service import ProjectService
    from main import create_app

    app = create_app()
    dm_service = DMService(uow_factory)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_dm_service] = lambda: dm_service
    app.dependency_overrides[get_friend_service] = lambda: FriendService(
        uow_factory, dm_service=dm_service
    )
    app.dependency_overrides[get_invite_service] = lambda: InviteService(
        uow_factory, base_url="https://projecting.test"
    )
    app.dependency_overrides[get_member_service] = lambda: MemberService(uow_factory)
    app.dependency_overrides[get_project_service] = lambda: ProjectService(uow_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    await background.drain(timeout=5)
    app.dependency_overrides.clear()
