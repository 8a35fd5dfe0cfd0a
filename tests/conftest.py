"""
Test infrastructure for the Blog Writer API.

Strategy
--------
- SQLite in-memory via aiosqlite so the suite needs no running Postgres.
- StaticPool makes every session share the one in-memory connection;
  a new connection would see an empty database.
- The app's get_db dependency is overridden so every request uses the
  test session factory.
- All tables are created before each test and dropped after.
- The caller identity is supplied the way the upstream auth layer does
  it in production: through the ``X-User-Id`` header.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.dependencies import CurrentUser
from app.main import app

# ---------------------------------------------------------------------------
# Test database engine
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


def auth_headers(user_id: str) -> dict[str, str]:
    return {settings.AUTH_USER_HEADER: user_id}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live session for service-layer tests."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """An httpx client wired to the app, without any caller identity."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def alice() -> CurrentUser:
    return CurrentUser(id="user-alice")


@pytest.fixture
def bob() -> CurrentUser:
    return CurrentUser(id="user-bob")


@pytest.fixture
def alice_headers(alice: CurrentUser) -> dict[str, str]:
    return auth_headers(alice.id)


@pytest.fixture
def bob_headers(bob: CurrentUser) -> dict[str, str]:
    return auth_headers(bob.id)


@pytest.fixture
def session_factory() -> async_sessionmaker:
    """The test session factory, for tests that need several sessions at once."""
    return async_session_test
