"""Shared pytest fixtures for all test suites."""

import os
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from eacledger.config import Settings
from eacledger.db.inmemory import InMemoryRecordStore
from eacledger.db.models import Base
from eacledger.db.sql_store import SqlRecordStore
from eacledger.documents.attachments import AttachmentManager
from eacledger.identity import Principal, StaticIdentityProvider
from eacledger.storage.inmemory import InMemoryObjectStore
from tests.doubles import RecordingMetrics


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env, no environment)."""
    return Settings(_env_file=None)


@pytest.fixture
def principal() -> Principal:
    """Signed-in test user."""
    return Principal(
        user_id=uuid.UUID("00000000-0000-0000-0000-000000000002"), email="user@example.com"
    )


@pytest.fixture
def identity(principal: Principal) -> StaticIdentityProvider:
    """Identity provider with a signed-in user."""
    return StaticIdentityProvider(principal)


@pytest.fixture
def anonymous() -> StaticIdentityProvider:
    """Identity provider with nobody signed in."""
    return StaticIdentityProvider(None)


@pytest.fixture
def records() -> InMemoryRecordStore:
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def objects() -> InMemoryObjectStore:
    """Empty in-memory object store."""
    return InMemoryObjectStore()


@pytest.fixture
def metrics() -> RecordingMetrics:
    """Metrics double."""
    return RecordingMetrics()


@pytest.fixture
def manager(
    records: InMemoryRecordStore,
    objects: InMemoryObjectStore,
    identity: StaticIdentityProvider,
    settings: Settings,
    metrics: RecordingMetrics,
) -> AttachmentManager:
    """Attachment manager over in-memory stores."""
    return AttachmentManager(
        records, objects, identity=identity, settings=settings, metrics=metrics
    )


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created.

    StaticPool keeps the single in-memory database alive across sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sql_store(sqlite_engine: AsyncEngine) -> SqlRecordStore:
    """SqlRecordStore over the SQLite engine."""
    return SqlRecordStore(async_sessionmaker(bind=sqlite_engine, expire_on_commit=False))


@pytest_asyncio.fixture
async def postgres_store() -> AsyncGenerator[SqlRecordStore, None]:
    """SqlRecordStore over a real PostgreSQL database.

    Requires EAC_DATABASE_URL to point at PostgreSQL. Tests using this fixture
    should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("EAC_DATABASE_URL")
    if not database_url:
        pytest.skip("EAC_DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"EAC_DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield SqlRecordStore(async_sessionmaker(bind=engine, expire_on_commit=False))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
