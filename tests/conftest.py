"""
PyTest configuration and shared fixtures for the SiteKeeper test suite.
"""
import os

# Keep test runs from writing rotating log files into the working tree
os.environ.setdefault("LOG_TO_FILE", "false")

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from sitekeeper.core.logging import get_logger
from sitekeeper.security.key_service import RecoveryKeyService
from sitekeeper.security.passwords import BcryptPasswordHasher
from sitekeeper.storage.memory import InMemoryKeyStore
from sitekeeper.storage.sql import SqlOptionStore

# Configure root handlers before pytest attaches its capture handlers
logger = get_logger("tests")


class FakeClock:
    """Controllable time source"""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    """Cheapest bcrypt cost to keep the suite fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def memory_store() -> InMemoryKeyStore:
    return InMemoryKeyStore()


@pytest.fixture
def key_service(memory_store, hasher, clock) -> RecoveryKeyService:
    """Recovery key service over an empty in-memory store."""
    return RecoveryKeyService(memory_store, hasher, clock=clock)


@pytest.fixture
def test_engine():
    """Create an in-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(test_engine) -> SqlOptionStore:
    return SqlOptionStore(engine=test_engine)
