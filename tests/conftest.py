import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("CREATE_SCHEMA_ON_STARTUP", "false")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notekeeper.db.base import Base
from notekeeper.db.models import User as UserModel
from notekeeper.domains.identity.entities import ActorContext, Role
from notekeeper.domains.notes.services import NoteService
from notekeeper.infrastructure.cache import CacheLayer, MemoryCache


class FakeClock:
    """Управляемые часы для проверки TTL"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


ALICE = ActorContext(user_id=1, role=Role.USER)
BOB = ActorContext(user_id=2, role=Role.USER)
CAROL = ActorContext(user_id=3, role=Role.USER)
ADMIN = ActorContext(user_id=4, role=Role.ADMIN)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def users(session_factory):
    async with session_factory() as session:
        session.add_all([
            UserModel(id=1, email="alice@example.com", username="alice", role="user"),
            UserModel(id=2, email="bob@example.com", username="bob", role="user"),
            UserModel(id=3, email="carol@example.com", username="carol", role="user"),
            UserModel(id=4, email="admin@example.com", username="admin", role="admin"),
        ])
        await session.commit()


@pytest_asyncio.fixture
async def session(session_factory, users):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return MemoryCache(clock=clock)


@pytest.fixture
def cache(memory_cache):
    return CacheLayer(memory_cache, ttl_seconds=3600)


@pytest.fixture
def service(session, cache):
    return NoteService(session, cache)
