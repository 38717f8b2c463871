"""Business logic service for URL shortener."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .common.clock import MS_PER_MINUTE, Clock, now_ms
from .common.validators import (
    DEFAULT_VALIDITY_MINUTES,
    ShortenEntry,
    validate_entry,
)
from .errors import PersistenceError, ShortenerError, ValidationError
from .geolocation import DEFAULT_TIMEOUT_SECONDS
from .resolver import ClientContext, RedirectResolver, ResolveOutcome
from .shortcode import ShortCodeGenerator
from .store.models import ClickEvent, UrlRecord
from .store.record_store import RecordStore


@dataclass
class BatchResult:
    """Outcome of a batch submission, keyed by entry index."""

    created: Dict[int, UrlRecord] = field(default_factory=dict)
    errors: Dict[int, ShortenerError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class URLShortenerService:
    """Service layer for URL shortening business logic."""

    def __init__(
        self,
        store: RecordStore,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Clock] = None,
        enable_custom_codes: bool = True,
        max_collision_retries: int = 5,
        max_batch_size: int = 5,
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        geolocation_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize URL shortener service.

        Args:
            store: Record store
            short_code_generator: Optional short code generator
            logger: Optional logger
            clock: Millisecond clock, defaults to the store's clock
            enable_custom_codes: Whether to allow custom short codes
            max_collision_retries: Maximum retries on collision
            max_batch_size: Maximum number of entries per submission
            default_validity_minutes: Validity used when an entry has none
            geolocation_timeout_seconds: Bound on waiting for a client location
        """
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or store.clock
        self.enable_custom_codes = enable_custom_codes
        self.max_collision_retries = max_collision_retries
        self.max_batch_size = max_batch_size
        self.default_validity_minutes = default_validity_minutes
        self.resolver = RedirectResolver(
            store,
            clock=self.clock,
            geolocation_timeout=geolocation_timeout_seconds,
            logger=self.logger,
        )

    async def create_short_urls(self, entries: Sequence[ShortenEntry]) -> BatchResult:
        """Create short URLs for a batch of entries.

        Expired records are swept first. Each entry is validated on its
        own, so one bad entry does not block the others; records created
        earlier in the batch count for code uniqueness.

        Args:
            entries: Submitted entries

        Returns:
            BatchResult with created records and errors by entry index

        Raises:
            ValidationError: If the batch is empty or too large
        """
        if not entries:
            raise ValidationError("urls", "At least one URL is required")
        if len(entries) > self.max_batch_size:
            raise ValidationError(
                "urls", f"At most {self.max_batch_size} URLs can be shortened at once"
            )

        existing = (await self.store.sweep_expired(self.clock())).survivors
        result = BatchResult()

        for index, entry in enumerate(entries):
            try:
                record = await self._create_one(entry, index, existing)
            except ShortenerError as e:
                result.errors[index] = e
                continue
            existing.append(record)
            result.created[index] = record

        if result.errors:
            self.logger.warning(
                "URL shortening failed for some entries: "
                + ", ".join(f"{i}: {e}" for i, e in sorted(result.errors.items()))
            )

        return result

    async def create_short_url(
        self,
        original_url: str,
        validity_minutes: Any = None,
        custom_short_code: Optional[str] = None,
    ) -> UrlRecord:
        """Create a single short URL.

        Args:
            original_url: The original long URL
            validity_minutes: Minutes until expiry (default applies if None)
            custom_short_code: Optional custom short code

        Returns:
            The created record

        Raises:
            ValidationError: If validation fails or the custom code exists
            PersistenceError: If the record could not be stored
        """
        entry = ShortenEntry(
            original_url=original_url,
            validity_minutes=validity_minutes,
            custom_short_code=custom_short_code,
            use_custom=bool(custom_short_code),
        )
        result = await self.create_short_urls([entry])
        if 0 in result.errors:
            raise result.errors[0]
        return result.created[0]

    async def _create_one(
        self,
        entry: ShortenEntry,
        index: int,
        existing: List[UrlRecord],
    ) -> UrlRecord:
        if entry.wants_custom_code and not self.enable_custom_codes:
            raise ValidationError(
                "custom_short_code", "Custom short codes are not enabled", index
            )

        validated = validate_entry(
            entry,
            existing,
            index=index,
            default_validity_minutes=self.default_validity_minutes,
        )

        if validated.custom_short_code:
            short_code = validated.custom_short_code
        else:
            short_code = self.generator.generate_unique(
                {r.short_code for r in existing}, attempts=self.max_collision_retries
            )

        created_at = self.clock()
        record = UrlRecord(
            id=uuid.uuid4().hex,
            original_url=validated.original_url,
            short_code=short_code,
            created_at=created_at,
            expires_at=created_at + validated.validity_minutes * MS_PER_MINUTE,
            validity_minutes=validated.validity_minutes,
            is_custom=validated.custom_short_code is not None,
        )

        saved = await self.store.save_record(record)
        if not saved:
            # Another request claimed the code after validation
            if saved.duplicate and record.is_custom:
                raise ValidationError(
                    "custom_short_code", "This shortcode is already in use", index, duplicate=True
                )
            raise PersistenceError(f"Failed to save short URL: {saved.error}")

        self.logger.info(
            f"Created short URL: {short_code} -> {record.original_url} "
            f"(expires_at={record.expires_at})"
        )
        return record

    async def resolve(
        self,
        short_code: str,
        client_context: Optional[ClientContext] = None,
        now: Optional[int] = None,
    ) -> ResolveOutcome:
        """Resolve a short code and record the click if it is valid."""
        return await self.resolver.resolve(short_code, now=now, client_context=client_context)

    async def list_records(self) -> List[UrlRecord]:
        """List every stored record, expired ones included, in storage order."""
        return await self.store.list_records()

    async def get_record(self, short_code: str) -> Optional[UrlRecord]:
        return await self.store.get_record(short_code)

    async def get_analytics(self, short_code: str) -> List[ClickEvent]:
        """Click events recorded for a short code (empty if none)."""
        return await self.store.get_clicks(short_code)

    async def sweep_expired(self, now: Optional[int] = None) -> int:
        """Remove expired records.

        Returns:
            Number of records removed
        """
        return (await self.store.sweep_expired(now)).removed

    async def clear_all(self) -> bool:
        """Erase every record and all analytics.

        Raises:
            PersistenceError: If the store could not be cleared
        """
        result = await self.store.clear_all()
        if not result:
            raise PersistenceError(f"Failed to clear data: {result.error}")
        return True

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics.

        Returns:
            Dictionary with statistics
        """
        now = self.clock()
        records = await self.store.list_records()
        analytics = await self.store.get_analytics()

        return {
            "total_urls": len(records),
            "active_urls": sum(1 for r in records if not r.is_expired(now)),
            "custom_urls": sum(1 for r in records if r.is_custom),
            "total_clicks": sum(len(events) for events in analytics.values()),
            "store_backend": self.store.backend.name,
            "custom_codes_enabled": self.enable_custom_codes,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check."""
        store_healthy = await self.store.health_check()
        return {
            "store": store_healthy,
            "overall": store_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
