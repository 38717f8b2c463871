"""Best-effort client location acquisition."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .store.models import ApproxLocation

LocationProvider = Callable[[], Awaitable[Optional[ApproxLocation]]]

DEFAULT_TIMEOUT_SECONDS = 5.0


def fixed_location(latitude: float, longitude: float, accuracy: float) -> LocationProvider:
    """Provider for coordinates the client already reported."""
    location = ApproxLocation.from_coordinates(latitude, longitude, accuracy)

    async def provide() -> Optional[ApproxLocation]:
        return location

    return provide


async def acquire_location(
    provider: Optional[LocationProvider],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    logger: Optional[logging.Logger] = None,
) -> Optional[ApproxLocation]:
    """Wait at most ``timeout`` seconds for a location.

    Args:
        provider: Coroutine factory yielding a location or None
        timeout: Upper bound on the wait in seconds
        logger: Optional logger

    Returns:
        The location, or None if there is no provider, it timed out or failed
    """
    logger = logger or logging.getLogger(__name__)
    if provider is None:
        return None

    try:
        location = await asyncio.wait_for(provider(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Location unavailable: timed out after {timeout}s")
        return None
    except Exception as e:
        logger.warning(f"Location access denied or failed: {e}")
        return None

    if location is not None:
        logger.debug(f"Location obtained: {location}")
    return location
