"""Redirect resolution: short code -> destination, with click tracking."""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .common.clock import Clock, now_ms
from .errors import ExpiredError, NotFoundError
from .geolocation import DEFAULT_TIMEOUT_SECONDS, LocationProvider, acquire_location
from .store.models import ClickEvent, ReferrerInfo, UrlRecord
from .store.record_store import RecordStore


class ResolveStatus(str, enum.Enum):
    LOOKING_UP = "looking_up"
    FOUND_VALID = "found_valid"
    FOUND_EXPIRED = "found_expired"
    NOT_FOUND = "not_found"


@dataclass
class ClientContext:
    """Request metadata captured when a visitor follows a short URL."""

    referrer: Optional[str] = None
    user_agent: str = ""
    location_provider: Optional[LocationProvider] = None


@dataclass
class ResolveOutcome:
    """Result of one resolution attempt."""

    status: ResolveStatus
    short_code: str
    record: Optional[UrlRecord] = None
    click: Optional[ClickEvent] = None
    click_recorded: bool = False

    @property
    def original_url(self) -> Optional[str]:
        if self.status is ResolveStatus.FOUND_VALID:
            return self.record.original_url
        return None

    def raise_for_status(self) -> str:
        """Return the destination URL or raise the matching error.

        Raises:
            NotFoundError: Unknown short code
            ExpiredError: Short code past its validity window
        """
        if self.status is ResolveStatus.NOT_FOUND:
            raise NotFoundError(self.short_code)
        if self.status is ResolveStatus.FOUND_EXPIRED:
            raise ExpiredError(self.short_code)
        return self.original_url


class RedirectResolver:
    """Looks up short codes and records clicks on successful lookups."""

    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Clock] = None,
        geolocation_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.clock = clock or now_ms
        self.geolocation_timeout = geolocation_timeout
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(
        self,
        short_code: str,
        now: Optional[int] = None,
        client_context: Optional[ClientContext] = None,
    ) -> ResolveOutcome:
        """Resolve a short code.

        Expired records are reported but left in place; only a sweep
        removes them. A failure to record the click is logged and does
        not affect the returned destination.

        Args:
            short_code: The short code to look up
            now: Current time in milliseconds (defaults to the clock)
            client_context: Referrer, user agent and optional location source

        Returns:
            ResolveOutcome with status NOT_FOUND, FOUND_EXPIRED or FOUND_VALID
        """
        now = self.clock() if now is None else now
        context = client_context or ClientContext()

        self.logger.info(f"Redirect attempt initiated: {short_code}")

        records = await self.store.list_records()
        record = next((r for r in records if r.short_code == short_code), None)

        if record is None:
            self.logger.warning(f"Short URL not found: {short_code}")
            return ResolveOutcome(ResolveStatus.NOT_FOUND, short_code)

        if record.is_expired(now):
            self.logger.warning(
                f"Short URL expired: {short_code} (expires_at={record.expires_at}, now={now})"
            )
            return ResolveOutcome(ResolveStatus.FOUND_EXPIRED, short_code, record=record)

        location = await acquire_location(
            context.location_provider,
            timeout=self.geolocation_timeout,
            logger=self.logger,
        )
        click = ClickEvent(
            timestamp=now,
            referrer_info=ReferrerInfo(
                referrer=context.referrer or "Direct",
                user_agent=context.user_agent or "",
                timestamp=now,
            ),
            approx_location=location,
        )

        try:
            recorded = bool(await self.store.record_click(short_code, click))
        except Exception as e:
            self.logger.error(f"Click tracking failed for {short_code}: {e}")
            recorded = False

        if not recorded:
            self.logger.warning(f"Redirecting {short_code} without recording the click")

        self.logger.info(f"Redirect successful: {short_code} -> {record.original_url}")
        return ResolveOutcome(
            ResolveStatus.FOUND_VALID,
            short_code,
            record=record,
            click=click,
            click_recorded=recorded,
        )
