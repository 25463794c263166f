from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from models import Match
from core.match_manager import MatchManager
from core.match_store import InMemoryMatchStore
from core.sql_match_store import SqlMatchStore
from scoreboard import Scoreboard

# Create in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeClock:
    """Each call returns a time one minute after the previous one."""

    def __init__(self, start=datetime(2026, 6, 11, 18, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock()


@pytest.fixture(name="memory_store")
def memory_store_fixture():
    return InMemoryMatchStore()


@pytest.fixture(name="sql_store")
def sql_store_fixture():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield SqlMatchStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="store", params=["memory", "sql"])
def store_fixture(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture(name="manager")
def manager_fixture(store, clock):
    return MatchManager(store, clock=clock)


@pytest.fixture(name="scoreboard")
def scoreboard_fixture(store, clock):
    return Scoreboard(store, clock=clock)


@pytest.fixture(name="register")
def register_fixture(store):
    """Pre-register fixtures the way an external scheduler would."""
    def _register(*pairs):
        return [store.save(Match.between(home, away)) for home, away in pairs]
    return _register
