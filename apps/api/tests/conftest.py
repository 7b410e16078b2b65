"""
Shared test fixtures.

The environment is switched to test mode before the application package
is imported so settings never point at a real database, and rate limiting
stays off.
"""

import os

os.environ["PYTHON_ENV"] = "test"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from classroom.models import Base  # noqa: E402
from classroom.modules.subjects.repository import SubjectRepository  # noqa: E402
from classroom.modules.users.models import UserRole  # noqa: E402
from classroom.modules.users.repository import UserRepository  # noqa: E402


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


# =============================================================================
# SQLite-backed database
# =============================================================================


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    Async SQLite engine with the full schema.

    pysqlite's own transaction handling is disabled so SAVEPOINT works,
    and foreign keys are enforced so ON DELETE CASCADE/RESTRICT behave
    like PostgreSQL.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'classroom.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    """A session on the SQLite test database."""
    async with session_maker() as session:
        yield session


# =============================================================================
# Record factories
# =============================================================================


@pytest_asyncio.fixture
async def teacher(db_session):
    user = await UserRepository.create(
        db_session,
        name="Dana Okafor",
        email="dana.okafor@springfield.edu",
        role=UserRole.TEACHER,
        department="Mathematics",
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def student(db_session):
    user = await UserRepository.create(
        db_session,
        name="Lena Fischer",
        email="lena.fischer@springfield.edu",
        role=UserRole.STUDENT,
        department="Mathematics",
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def subject(db_session):
    created = await SubjectRepository.create(
        db_session,
        name="Linear Algebra",
        code="MATH201",
        department="Mathematics",
    )
    await db_session.commit()
    return created
