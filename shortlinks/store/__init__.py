"""Persistence layer for URL shortener."""

from .base import KeyValueBackend
from .memory import InMemoryBackend
from .file_backend import JSONFileBackend
from .redis_backend import RedisBackend
from .factory import create_backend
from .models import UrlRecord, ClickEvent, ReferrerInfo, ApproxLocation
from .record_store import RecordStore, StoreResult, SweepResult

__all__ = [
    "KeyValueBackend",
    "InMemoryBackend",
    "JSONFileBackend",
    "RedisBackend",
    "create_backend",
    "UrlRecord",
    "ClickEvent",
    "ReferrerInfo",
    "ApproxLocation",
    "RecordStore",
    "StoreResult",
    "SweepResult",
]
