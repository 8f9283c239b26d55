"""
Pytest configuration and shared fixtures.

Tests run against a throwaway SQLite file per test (aiosqlite) unless
marked ``db``, which targets the PostgreSQL database in DATABASE_URL and
is skipped by default.
"""

import os
import tempfile

# Settings require DATABASE_URL at import time
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'lead_reconciler_test.db')}",
)

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from lead_reconciler.db.base import Base
from lead_reconciler.models import Collection, User


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires the PostgreSQL database in DATABASE_URL")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)


def _enable_sqlite_savepoints(engine) -> None:
    """Let pysqlite/aiosqlite honour SAVEPOINT the way PostgreSQL does."""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    _enable_sqlite_savepoints(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def owner(db) -> User:
    user = User(email="owner@example.com", name="Owner")
    db.add(user)
    await db.flush()
    return user


@pytest_asyncio.fixture
async def other_owner(db) -> User:
    user = User(email="other@example.com", name="Other")
    db.add(user)
    await db.flush()
    return user


@pytest_asyncio.fixture
async def collection(db, owner) -> Collection:
    target = Collection(owner_user_id=owner.id, name="Prospects")
    db.add(target)
    await db.flush()
    return target


@pytest_asyncio.fixture
async def second_collection(db, owner) -> Collection:
    target = Collection(owner_user_id=owner.id, name="Event attendees")
    db.add(target)
    await db.flush()
    return target
