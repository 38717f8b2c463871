"""Common utilities for URL shortener."""

from .validators import (
    ShortenEntry,
    ValidatedEntry,
    is_valid_url,
    normalize_url,
    is_valid_short_code,
    is_short_code_unique,
    is_valid_validity_minutes,
    validate_entry,
)
from .logging_config import setup_logging
from .url_builder import build_short_url, format_time_remaining, sort_records_for_display

__all__ = [
    "ShortenEntry",
    "ValidatedEntry",
    "is_valid_url",
    "normalize_url",
    "is_valid_short_code",
    "is_short_code_unique",
    "is_valid_validity_minutes",
    "validate_entry",
    "setup_logging",
    "build_short_url",
    "format_time_remaining",
    "sort_records_for_display",
]
