import os
from pathlib import Path

ENV_TEST_PATH = Path(__file__).parents[1] / ".env.test"


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key, value)


# Settings are read at import time; configure the environment first.
_load_env_file(ENV_TEST_PATH)
os.environ.setdefault("JWT_SECRET", "test-secret-key-not-for-production-use-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from expense_tracker.config import settings
from expense_tracker.core.security import TokenService, hash_password
from expense_tracker.db.session import build_engine, get_db
from expense_tracker.main import app
from expense_tracker.models.base import BaseModel
from expense_tracker.models.user import User
from expense_tracker.repositories.user import UserRepository

# In-memory SQLite by default so the suite runs without a database server.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

TEST_PASSWORD = "password123"


@pytest.fixture
async def test_engine():
    """Engine with a fresh schema for each test."""
    is_sqlite = TEST_DATABASE_URL.startswith("sqlite")
    engine = build_engine(
        TEST_DATABASE_URL,
        **({"poolclass": StaticPool} if is_sqlite else {}),
    )

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    if not is_sqlite:
        async with engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """Provide test database session."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a registered user with a known password."""
    repo = UserRepository(db_session)
    return await repo.create(
        User(
            email="testuser@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            first_name="Test",
            last_name="User",
        )
    )


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second user, for ownership checks."""
    repo = UserRepository(db_session)
    return await repo.create(
        User(
            email="other@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            first_name="Other",
            last_name="Person",
        )
    )


def bearer(token_service: TokenService, user: User) -> dict[str, str]:
    token = token_service.issue(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(token_service: TokenService, test_user: User) -> dict[str, str]:
    """Authorization header with a valid token for test_user."""
    return bearer(token_service, test_user)


@pytest.fixture
def other_headers(token_service: TokenService, other_user: User) -> dict[str, str]:
    return bearer(token_service, other_user)


@pytest.fixture
async def client(db_session: AsyncSession):
    """Provide test client with database override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
