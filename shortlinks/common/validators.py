"""Validation utilities for URL shortener."""

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from ..errors import ValidationError

MIN_SHORT_CODE_LENGTH = 3
MAX_SHORT_CODE_LENGTH = 20
MAX_VALIDITY_MINUTES = 24 * 60
DEFAULT_VALIDITY_MINUTES = 30

_SHORT_CODE_RE = re.compile(r"^[A-Za-z0-9]+$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


@dataclass
class ShortenEntry:
    """One URL submitted for shortening."""

    original_url: str
    validity_minutes: Any = None
    custom_short_code: Optional[str] = None
    use_custom: bool = False

    @property
    def wants_custom_code(self) -> bool:
        return bool(self.use_custom and self.custom_short_code)


@dataclass
class ValidatedEntry:
    """An entry that passed every check."""

    original_url: str
    validity_minutes: int
    custom_short_code: Optional[str] = None


def normalize_url(raw: str) -> str:
    """Prepend https:// when the URL has no http:// or https:// prefix.

    Args:
        raw: URL as typed by the user

    Returns:
        URL with a scheme prefix
    """
    if not raw.startswith(("http://", "https://")):
        return f"https://{raw}"
    return raw


def is_valid_url(candidate: Any) -> bool:
    """Check that a string is an absolute http(s) URL.

    Args:
        candidate: The URL to validate

    Returns:
        True if the URL parses with an http/https scheme and a host
    """
    if not candidate or not isinstance(candidate, str):
        return False

    # urlparse silently drops tabs and newlines
    if any(ord(ch) < 0x20 or ch == "\x7f" for ch in candidate):
        return False

    try:
        result = urlparse(candidate)
        # Accessing port validates it
        result.port
    except ValueError:
        return False

    # Spaces are allowed in path and query, never in the host
    if any(ch.isspace() for ch in result.netloc):
        return False

    return result.scheme in ("http", "https") and bool(result.hostname)


def is_valid_short_code(code: Any) -> bool:
    """Check short code syntax: 3-20 ASCII letters or digits."""
    if not code or not isinstance(code, str):
        return False
    if not MIN_SHORT_CODE_LENGTH <= len(code) <= MAX_SHORT_CODE_LENGTH:
        return False
    return bool(_SHORT_CODE_RE.match(code))


def is_short_code_unique(code: str, existing_records: Iterable) -> bool:
    """Check that no existing record already uses the short code.

    Args:
        code: Candidate short code
        existing_records: Records currently in the store

    Returns:
        True if the code is free
    """
    return not any(record.short_code == code for record in existing_records)


def parse_validity_minutes(value: Any) -> Optional[int]:
    """Parse a validity duration to an integer number of minutes.

    Accepts ints, integral floats and integer strings. Returns None for
    anything else, booleans included.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value.strip())
    return None


def is_valid_validity_minutes(value: Any) -> bool:
    """Check that a validity duration is between 1 minute and 24 hours."""
    minutes = parse_validity_minutes(value)
    return minutes is not None and 0 < minutes <= MAX_VALIDITY_MINUTES


def validate_entry(
    entry: ShortenEntry,
    existing_records: Iterable,
    index: Optional[int] = None,
    default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
) -> ValidatedEntry:
    """Run every check on one submitted entry, stopping at the first failure.

    Order: required URL, normalization, URL syntax, custom code syntax,
    custom code uniqueness, validity bounds.

    Args:
        entry: The submitted entry
        existing_records: Records the custom code must not collide with
        index: Position of the entry in its batch
        default_validity_minutes: Used when the entry has no validity

    Returns:
        The normalized entry

    Raises:
        ValidationError: For the first check that fails
    """
    raw_url = (entry.original_url or "").strip()
    if not raw_url:
        raise ValidationError("original_url", "URL is required", index)

    normalized = normalize_url(raw_url)
    if not is_valid_url(normalized):
        raise ValidationError("original_url", "Please enter a valid URL", index)

    custom_code = None
    if entry.wants_custom_code:
        custom_code = entry.custom_short_code
        if not is_valid_short_code(custom_code):
            raise ValidationError(
                "custom_short_code",
                "Shortcode must be 3-20 alphanumeric characters",
                index,
            )
        if not is_short_code_unique(custom_code, existing_records):
            raise ValidationError(
                "custom_short_code",
                "This shortcode is already in use",
                index,
                duplicate=True,
            )

    validity = entry.validity_minutes
    if validity is None:
        validity = default_validity_minutes
    if not is_valid_validity_minutes(validity):
        raise ValidationError(
            "validity_minutes",
            "Validity must be between 1 minute and 24 hours",
            index,
        )

    return ValidatedEntry(
        original_url=normalized,
        validity_minutes=parse_validity_minutes(validity),
        custom_short_code=custom_code,
    )
