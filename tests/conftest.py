"""
Shared test fixtures.

- FakeClock: controllable clock so expiry can be tested without sleeping
- link_store: parametrized over the in-memory and SQLite-backed stores
- service: LinkService on top of link_store and the fake clock
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from linktracker.db.session import create_engine, init_models
from linktracker.services.link_service import LinkService
from linktracker.store import InMemoryLinkStore, SQLLinkStore

START_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""
    
    def __init__(self, now: datetime = START_TIME):
        self.now = now
    
    def __call__(self) -> datetime:
        return self.now
    
    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class SequenceGenerator:
    """Id generator returning a scripted sequence of ids."""
    
    def __init__(self, *ids: str):
        self.ids = list(ids)
        self.calls = 0
    
    def generate(self) -> str:
        self.calls += 1
        return self.ids.pop(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return InMemoryLinkStore()


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")
    await init_models(engine)
    store = SQLLinkStore(engine, max_retries=50)
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def link_store(request, tmp_path):
    """Every store implementation, so contract tests run against each."""
    if request.param == "memory":
        yield InMemoryLinkStore()
        return
    
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")
    await init_models(engine)
    store = SQLLinkStore(engine, max_retries=50)
    yield store
    await store.close()


@pytest.fixture
def service(link_store, clock):
    return LinkService(link_store, clock=clock)
