"""
Pytest Configuration and Fixtures

Shared test fixtures for unit and API tests.
"""

import os

# Settings are read at import time, so point them at SQLite before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "local")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import configure_mappers

from edpsych.core.database import _engine_kwargs, get_db
from edpsych.core.models import Base, User, UserRole
from edpsych.core.security import create_access_token, hash_password
from edpsych.main import app

# Ensure all mappers are configured
configure_mappers()

TEST_PASSWORD = "Secur3-pass!"  # pragma: allowlist secret


@pytest.fixture
async def async_engine():
    """Create async engine for testing."""
    database_url = os.environ["DATABASE_URL"]
    engine = create_async_engine(database_url, echo=False, **_engine_kwargs(database_url))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncSession:
    """Create database session for testing."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session


@pytest.fixture
async def client(db_session):
    """Create test client with database dependency override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(
    db: AsyncSession,
    *,
    email: str,
    role: UserRole = UserRole.TEACHER,
    name: str = "Test User",
    tenant_id: str | None = None,
) -> User:
    """Persist a user with the shared test password."""
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(TEST_PASSWORD),
        role=role.value,
        tenant_id=tenant_id,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for `user`."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
async def admin(db_session) -> User:
    return await make_user(db_session, email="admin@school.org.uk", role=UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
async def teacher(db_session) -> User:
    return await make_user(db_session, email="teacher@school.org.uk", name="Tom Teacher")


@pytest.fixture
async def other_teacher(db_session) -> User:
    return await make_user(db_session, email="other@school.org.uk", name="Olive Other")


@pytest.fixture
async def psychologist(db_session) -> User:
    return await make_user(
        db_session,
        email="ep@school.org.uk",
        role=UserRole.EDUCATIONAL_PSYCHOLOGIST,
        name="Erin Psych",
    )


@pytest.fixture
async def student(db_session) -> User:
    return await make_user(
        db_session, email="student@school.org.uk", role=UserRole.STUDENT, name="Sam Student"
    )


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def teacher_headers(teacher) -> dict[str, str]:
    return auth_headers(teacher)


@pytest.fixture
def other_headers(other_teacher) -> dict[str, str]:
    return auth_headers(other_teacher)


@pytest.fixture
def psychologist_headers(psychologist) -> dict[str, str]:
    return auth_headers(psychologist)


@pytest.fixture
def student_headers(student) -> dict[str, str]:
    return auth_headers(student)
