"""
Core pytest configuration for the entire test suite.

Only the database plumbing shared by every test area lives here. Domain
fixtures (users, messages, services) are in `tests/test_fixtures/` and are
re-exported at the bottom of this module so every test can use them.
"""

from __future__ import annotations

import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "aiosqlite",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine,
)

from gamerlink.database.base import Base
from gamerlink import models  # noqa: F401 (registers every table on Base.metadata)

logger = logging.getLogger(__name__)


def safe_log_db_url(db_url: str) -> str:
    """Drop credentials from a database URL before logging it."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    1. `TEST_DATABASE_URL` (CI override, e.g. a throwaway Postgres)
    2. an in-memory SQLite database, one per test
    """
    return os.getenv("TEST_DATABASE_URL") or "sqlite+aiosqlite:///:memory:"


TEST_DATABASE_URL = get_test_database_url()
logger.info("Using test DB: %s", safe_log_db_url(TEST_DATABASE_URL))


def _make_engine(url: str) -> AsyncEngine:
    if not url.startswith("sqlite"):
        return create_async_engine(url, pool_pre_ping=True)

    # One shared connection so every session sees the same in-memory database
    engine = create_async_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN itself.
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh schema per test."""
    engine = _make_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
async def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    fake,
    base_repo,
    user_repository,
    message_repository,
    notification_repository,
    play_request_repository,
    sample_user_data,
    create_user,
    created_user,
    multiple_users,
    alice,
    bob,
    carol,
)
from .test_fixtures.service_fixtures import (  # noqa: E402,F401
    recording_sink,
    test_settings,
    messaging_service,
    recording_messaging_service,
    notification_service,
    play_request_service,
)
