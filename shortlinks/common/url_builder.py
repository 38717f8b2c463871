"""URL building and display helpers for URL shortener."""

from typing import Iterable, List

from .clock import MS_PER_MINUTE

MS_PER_HOUR = 60 * 60 * 1000


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Absolute short URL, e.g. ``https://sho.rt/s/abc123`` for path prefix ``s``."""
    parts = [base_url.rstrip("/"), path_prefix.strip("/"), short_code]
    return "/".join(part for part in parts if part)


def format_time_remaining(expires_at: int, now: int) -> str:
    """Human readable time left, e.g. '2h 5m', '7m' or 'Expired'."""
    remaining = expires_at - now
    if remaining <= 0:
        return "Expired"
    
    hours, rest = divmod(remaining, MS_PER_HOUR)
    minutes = rest // MS_PER_MINUTE
    
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def sort_records_for_display(records: Iterable) -> List:
    """Newest first."""
    return sorted(records, key=lambda r: r.created_at, reverse=True)
