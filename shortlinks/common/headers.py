"""Request header helpers: public base URL and redirect client context."""

import math
from typing import Dict, Optional

from ..geolocation import fixed_location
from ..resolver import ClientContext

FORWARDED_HEADERS = {
    "forwarded_proto": "x-forwarded-proto",
    "forwarded_host": "x-forwarded-host",
    "forwarded_for": "x-forwarded-for",
}

LATITUDE_HEADER = "x-client-latitude"
LONGITUDE_HEADER = "x-client-longitude"
ACCURACY_HEADER = "x-client-accuracy"


def _lower(headers: Dict[str, str]) -> Dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Pick the X-Forwarded-* values set by a reverse proxy (None when absent)."""
    lowered = _lower(headers)
    return {field: lowered.get(header) for field, header in FORWARDED_HEADERS.items()}


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Public base URL that short URLs are built on.

    Proxy headers win over the request's own scheme and host, which win
    over the configured fallback.
    """
    forwarded = extract_forwarded_headers(headers)
    candidates = [
        (forwarded["forwarded_proto"], forwarded["forwarded_host"]),
        (request_scheme, request_host),
    ]
    for scheme, host in candidates:
        if scheme and host:
            return f"{scheme}://{host}"
    return fallback_base_url.rstrip("/")


def client_context_from_headers(headers: Dict[str, str]) -> ClientContext:
    """Build the click context for a redirect request.
    
    Coordinates are taken from X-Client-Latitude / X-Client-Longitude /
    X-Client-Accuracy when the client sent all of them as numbers.
    
    Args:
        headers: Request headers
        
    Returns:
        ClientContext with referrer, user agent and optional location source
    """
    headers_lower = _lower(headers)
    
    provider = None
    try:
        latitude = float(headers_lower[LATITUDE_HEADER])
        longitude = float(headers_lower[LONGITUDE_HEADER])
        accuracy = float(headers_lower.get(ACCURACY_HEADER, "0"))
    except (KeyError, ValueError, OverflowError):
        pass
    else:
        finite = all(math.isfinite(v) for v in (latitude, longitude, accuracy))
        if finite and -90 <= latitude <= 90 and -180 <= longitude <= 180 and accuracy >= 0:
            provider = fixed_location(latitude, longitude, accuracy)
    
    return ClientContext(
        referrer=headers_lower.get("referer") or headers_lower.get("referrer") or None,
        user_agent=headers_lower.get("user-agent", ""),
        location_provider=provider,
    )
