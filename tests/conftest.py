"""Pytest configuration and fixtures."""

import pytest
from typing import Optional

from shortlinks.common.logging_config import setup_logging
from shortlinks.errors import PersistenceError
from shortlinks.service import URLShortenerService
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.store import InMemoryBackend, RecordStore

START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""
    
    def __init__(self, start: int = START_MS):
        self.now = start
    
    def __call__(self) -> int:
        return self.now
    
    def advance(self, minutes: float = 0, ms: int = 0) -> int:
        self.now += int(minutes * 60_000) + ms
        return self.now


class RecordingBackend(InMemoryBackend):
    """In-memory backend that remembers every write."""
    
    def __init__(self):
        super().__init__()
        self.writes = []
    
    async def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        await super().set(key, value)


class FailingBackend(InMemoryBackend):
    """In-memory backend whose reads and/or writes can be switched off."""
    
    def __init__(self, fail_reads: bool = False, fail_writes: bool = False, fail_keys: Optional[set] = None):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.fail_keys = fail_keys
    
    def _should_fail(self, key: str) -> bool:
        return self.fail_keys is None or key in self.fail_keys
    
    async def get(self, key: str):
        if self.fail_reads and self._should_fail(key):
            raise PersistenceError("read failed")
        return await super().get(key)
    
    async def set(self, key: str, value: str) -> None:
        if self.fail_writes and self._should_fail(key):
            raise PersistenceError("quota exceeded")
        await super().set(key, value)
    
    async def delete(self, key: str) -> bool:
        if self.fail_writes and self._should_fail(key):
            raise PersistenceError("delete failed")
        return await super().delete(key)
    
    async def ping(self) -> bool:
        return not (self.fail_reads or self.fail_writes)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def store(backend, clock, logger) -> RecordStore:
    """Create record store over an in-memory backend."""
    return RecordStore(backend, clock=clock, logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(store, short_code_generator, clock, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
