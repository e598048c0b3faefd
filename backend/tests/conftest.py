import uuid
from collections.abc import AsyncGenerator, Iterator
from datetime import UTC, datetime, timedelta

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from pomodoro_api.core.auth import hash_secret
from pomodoro_api.core.config import settings
from pomodoro_api.models import Base
from pomodoro_api.models.user import User

# In-memory SQLite shared across sessions through a single connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_JWT_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow

TEST_EMAIL = "test@example.com"
TEST_PASSWORD = "correct-horse"  # nosec B105

# Lowest cost bcrypt accepts; keeps hashing fast in tests
_TEST_BCRYPT_ROUNDS = 4


def create_test_jwt(
    user_id: uuid.UUID,
    *,
    secret: str = TEST_JWT_SECRET,
    expires_delta: timedelta | None = None,
    iat: datetime | None = None,
) -> str:
    """Create a signed JWT shaped like the ones the API issues.

    Args:
        user_id: User UUID to encode in the ``id`` claim.
        secret: Signing secret (must match settings.jwt_secret in tests).
        expires_delta: Time until expiration. Defaults to 1 hour.
        iat: Issued-at time. Defaults to now.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "id": str(user_id),
        "exp": now + (expires_delta or timedelta(hours=1)),
        "iat": iat or now,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def auth_settings() -> Iterator[None]:
    """Pin the signing secret and a cheap bcrypt cost for every test."""
    original_secret = settings.jwt_secret
    original_rounds = settings.bcrypt_rounds
    settings.jwt_secret = SecretStr(TEST_JWT_SECRET)
    settings.bcrypt_rounds = _TEST_BCRYPT_ROUNDS

    yield

    settings.jwt_secret = original_secret
    settings.bcrypt_rounds = original_rounds


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a user with the default timer settings and a known password."""
    user = User(
        email=TEST_EMAIL,
        name="Test User",
        password_hash=hash_secret(TEST_PASSWORD),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Second user for cross-user isolation tests."""
    user = User(
        email="other@example.com",
        password_hash=hash_secret(TEST_PASSWORD),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def unauthenticated_client(
    db_engine: AsyncEngine,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the test database, without a token.

    The app lifespan is not run, so no startup sweep touches the real
    database.
    """
    from pomodoro_api.core.database import get_db
    from pomodoro_api.main import app

    test_session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Same transaction handling as get_db, against the test engine
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    unauthenticated_client: AsyncClient,
    test_user: User,
) -> AsyncClient:
    """Client that sends a valid bearer access token for test_user."""
    token = create_test_jwt(test_user.id)
    unauthenticated_client.headers["Authorization"] = f"Bearer {token}"
    return unauthenticated_client
