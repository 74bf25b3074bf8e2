"""Pytest configuration and fixtures."""

import pytest

from link_registry.common.logging_config import setup_logging
from link_registry.environment import ManualClock, StaticAuthenticator
from link_registry.keygen import KeyGenerator
from link_registry.registry import Registry
from link_registry.store.memory import MemoryLinkStore


class FakeTime:
    """Monotonic time source that only moves when told to."""
    
    def __init__(self, start: float = 1000.0):
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    """Ledger clock at a fixed sequence and timestamp."""
    return ManualClock(sequence=12345, timestamp=1_700_000_000)


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def store(fake_time):
    """In-memory link store driven by fake time."""
    return MemoryLinkStore(time_source=fake_time)


@pytest.fixture
def authenticator():
    """Trusts the two test identities."""
    return StaticAuthenticator(["alice", "bob"])


@pytest.fixture
def registry(store, clock, authenticator, logger):
    """Create registry instance."""
    return Registry(
        store=store,
        clock=clock,
        authenticator=authenticator,
        key_generator=KeyGenerator(),
        logger=logger,
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/x",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
