"""Record store: URL records and click analytics over a key-value backend."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..common.clock import Clock, now_ms
from ..errors import PersistenceError
from .base import KeyValueBackend
from .models import ClickEvent, UrlRecord

DEFAULT_RECORDS_KEY = "shortened_urls"
DEFAULT_ANALYTICS_KEY = "analytics"


@dataclass
class StoreResult:
    """Outcome of a store write."""

    ok: bool
    error: Optional[str] = None
    duplicate: bool = False

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class SweepResult:
    """Outcome of an expiry sweep, counted under the store lock."""

    survivors: List[UrlRecord] = field(default_factory=list)
    removed: int = 0


class RecordStore:
    """Persists the record collection and the analytics map.

    Records live as one JSON array under ``records_key`` and clicks as one
    JSON object (short code -> list of events) under ``analytics_key``.
    Every mutation reads the whole value, changes it and writes it back,
    so mutations are serialized with a lock.

    Backend failures never escape: reads fall back to empty values and
    writes report a failed StoreResult.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        clock: Optional[Clock] = None,
        key_prefix: str = "",
        records_key: str = DEFAULT_RECORDS_KEY,
        analytics_key: str = DEFAULT_ANALYTICS_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize record store.

        Args:
            backend: Key-value backend holding the data
            clock: Millisecond clock, defaults to wall-clock time
            key_prefix: Prefix prepended to both storage keys
            records_key: Key of the record collection
            analytics_key: Key of the analytics map
            logger: Optional logger
        """
        self.backend = backend
        self.clock = clock or now_ms
        self.records_key = f"{key_prefix}{records_key}"
        self.analytics_key = f"{key_prefix}{analytics_key}"
        self.logger = logger or logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    async def _read(self, key: str, default: Any) -> Any:
        raw = await self.backend.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError as e:
            raise PersistenceError(f"Corrupt value under '{key}': {e}") from e

    async def _write(self, key: str, value: Any) -> int:
        serialized = json.dumps(value, separators=(",", ":"))
        await self.backend.set(key, serialized)
        self.logger.debug(f"Stored {key} ({len(serialized)} bytes)")
        return len(serialized)

    async def _load_records(self) -> List[UrlRecord]:
        data = await self._read(self.records_key, [])
        try:
            return [UrlRecord.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Malformed record in '{self.records_key}': {e}") from e

    async def _load_analytics(self) -> Dict[str, List[ClickEvent]]:
        data = await self._read(self.analytics_key, {})
        try:
            return {
                code: [ClickEvent.from_dict(event) for event in events]
                for code, events in data.items()
            }
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Malformed analytics in '{self.analytics_key}': {e}") from e

    async def _save_records(self, records: List[UrlRecord]) -> None:
        await self._write(self.records_key, [r.to_dict() for r in records])

    async def save_record(self, record: UrlRecord) -> StoreResult:
        """Append a record to the persisted collection.

        Args:
            record: The record to store

        Returns:
            StoreResult; not ok if the short code is taken or the write failed
        """
        async with self._lock:
            try:
                records = await self._load_records()
                if any(r.short_code == record.short_code for r in records):
                    self.logger.warning(f"Refusing duplicate short code: {record.short_code}")
                    return StoreResult(
                        False, f"Short code '{record.short_code}' already exists", duplicate=True
                    )
                records.append(record)
                await self._save_records(records)
            except PersistenceError as e:
                self.logger.error(f"Failed to save record {record.short_code}: {e}")
                return StoreResult(False, str(e))

        self.logger.debug(f"Saved record {record.short_code}")
        return StoreResult(True)

    async def list_records(self) -> List[UrlRecord]:
        """Return every persisted record in storage order, expired ones included."""
        try:
            return await self._load_records()
        except PersistenceError as e:
            self.logger.error(f"Failed to read records: {e}")
            return []

    async def get_record(self, short_code: str) -> Optional[UrlRecord]:
        """Find the record for a short code."""
        for record in await self.list_records():
            if record.short_code == short_code:
                return record
        return None

    async def sweep_expired(self, now: Optional[int] = None) -> SweepResult:
        """Remove every record whose validity window has passed.

        Args:
            now: Current time in milliseconds (defaults to the store clock)

        Returns:
            SweepResult with the surviving records and how many were
            removed. Nothing counts as removed when the read or the
            write fails; a failed write leaves every record in place.
        """
        now = self.clock() if now is None else now

        async with self._lock:
            try:
                records = await self._load_records()
            except PersistenceError as e:
                self.logger.error(f"Failed to read records for sweep: {e}")
                return SweepResult()

            survivors = [r for r in records if not r.is_expired(now)]
            removed = len(records) - len(survivors)

            if removed:
                try:
                    await self._save_records(survivors)
                except PersistenceError as e:
                    self.logger.error(f"Failed to persist swept records: {e}")
                    return SweepResult(records, 0)
                self.logger.info(
                    f"Cleaned up expired URLs: removed={removed}, remaining={len(survivors)}"
                )

        return SweepResult(survivors, removed)

    async def record_click(self, short_code: str, event: ClickEvent) -> StoreResult:
        """Append a click event to the list kept for a short code.

        Does not check that the code exists or is still valid.
        """
        async with self._lock:
            try:
                analytics = await self._read(self.analytics_key, {})
                analytics.setdefault(short_code, []).append(event.to_dict())
                await self._write(self.analytics_key, analytics)
            except (PersistenceError, AttributeError) as e:
                self.logger.error(f"Failed to record click for {short_code}: {e}")
                return StoreResult(False, str(e))

        return StoreResult(True)

    async def get_analytics(self) -> Dict[str, List[ClickEvent]]:
        """Return the full short code -> click events map."""
        try:
            return await self._load_analytics()
        except PersistenceError as e:
            self.logger.error(f"Failed to read analytics: {e}")
            return {}

    async def get_clicks(self, short_code: str) -> List[ClickEvent]:
        """Return the click events for one short code."""
        return (await self.get_analytics()).get(short_code, [])

    async def clear_all(self) -> StoreResult:
        """Erase both the record collection and the analytics map."""
        async with self._lock:
            try:
                await self.backend.delete(self.records_key)
                await self.backend.delete(self.analytics_key)
            except PersistenceError as e:
                self.logger.error(f"Failed to clear store: {e}")
                return StoreResult(False, str(e))

        self.logger.info("All data cleared")
        return StoreResult(True)

    async def health_check(self) -> bool:
        return await self.backend.ping()

    async def close(self) -> None:
        await self.backend.close()
