"""Service test fixtures - async DB, stores, controller, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager patched so the readiness probe sees the test engine
    - app.state services built per test (ASGITransport does not run the lifespan)
    - Controller fixtures driven by ManualPhaseTimer never sleep for real

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection, so
      the schema created here is the one the store sees
    - Fake DatabaseSessionManager built via __new__: skips engine creation from a URL
    - Controller unit tests use InMemoryCoreStore (no IO suspension points), so a
      few event-loop yields are enough to reach the next timer wait
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

import app.infrastructure.database as db_module
from app.core.core_lifecycle import seed_prime_core
from app.core.records import utc_now
from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.main import app
from app.services.chat_service import ChatService
from app.services.core_store import SqlCoreStore, seed_defaults
from app.services.in_memory_store import InMemoryCoreStore
from app.services.lifecycle_controller import LifecycleController
from app.services.phase_timer import ManualPhaseTimer

PHASE_DELAY_MS = 2000


class FixedChoice:
    """rng double: always picks the element at `index` (3 = the empty remark)."""

    def __init__(self, index: int = 3):
        self.index = index

    def choice(self, seq):
        return seq[self.index]


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_db_manager(test_engine):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
async def sql_store(test_db_manager):
    return SqlCoreStore(test_db_manager)


@pytest.fixture
async def seeded_sql_store(sql_store):
    await seed_defaults(sql_store)
    return sql_store


@pytest.fixture
def memory_store():
    """In-memory store holding the seeded prime core."""
    return InMemoryCoreStore(cores=[seed_prime_core(utc_now())])


@pytest.fixture
def manual_timer():
    return ManualPhaseTimer()


@pytest.fixture
async def controller(memory_store, manual_timer):
    ctrl = LifecycleController(
        memory_store, timer=manual_timer, phase_delay_ms=PHASE_DELAY_MS,
    )
    yield ctrl
    await ctrl.shutdown()


@pytest.fixture
async def client(seeded_sql_store, test_db_manager):
    """FastAPI test client over the seeded SQL store, zero phase delay."""
    original_manager = db_module.db_manager
    db_module.db_manager = test_db_manager

    ctrl = LifecycleController(seeded_sql_store, phase_delay_ms=0)
    app.state.controller = ctrl
    app.state.chat_service = ChatService(seeded_sql_store, rng=FixedChoice())

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    await ctrl.shutdown()
    del app.state.controller
    del app.state.chat_service
    db_module.db_manager = original_manager
