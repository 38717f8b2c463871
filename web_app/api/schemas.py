"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Any, List, Optional


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten; https:// is added when no scheme is given", max_length=2048)
    validity_minutes: Optional[Any] = Field(None, description="Minutes until the short URL expires (1-1440, default 30)")
    custom_code: Optional[str] = Field(None, description="Optional custom short code (3-20 alphanumeric characters)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "example.com/very/long/path/to/resource",
                    "validity_minutes": 30,
                    "custom_code": None
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity_minutes": 120,
                    "custom_code": "myrepo"
                }
            ]
        }
    }


class BatchEntry(BaseModel):
    """One entry of a batch submission."""

    original_url: str = Field("", max_length=2048)
    validity_minutes: Optional[Any] = None
    custom_short_code: Optional[str] = None
    use_custom: bool = False


class BatchShortenRequest(BaseModel):
    """Request to shorten several URLs at once."""

    urls: List[BatchEntry] = Field(..., description="Entries to shorten")


class ShortURLResponse(BaseModel):
    """A stored short URL."""

    id: str
    short_code: str
    short_url: str
    original_url: str
    created_at: int = Field(..., description="Creation time (ms since epoch)")
    expires_at: int = Field(..., description="Expiry time (ms since epoch)")
    validity_minutes: int
    is_custom: bool
    expired: bool
    time_remaining: str
    click_count: Optional[int] = None


class EntryError(BaseModel):
    """Error for one batch entry."""

    index: Optional[int]
    field: str
    message: str


class BatchShortenResponse(BaseModel):
    """Response to a batch submission."""

    results: List[ShortURLResponse]
    errors: List[EntryError]


class ReferrerInfoResponse(BaseModel):
    referrer: str
    user_agent: str
    timestamp: int


class LocationResponse(BaseModel):
    latitude: float
    longitude: float
    accuracy: int


class ClickEventResponse(BaseModel):
    """One recorded click."""

    timestamp: int
    referrer_info: ReferrerInfoResponse
    approx_location: Optional[LocationResponse] = None


class AnalyticsResponse(BaseModel):
    short_code: str
    total_clicks: int
    clicks: List[ClickEventResponse]


class SweepResponse(BaseModel):
    removed: int
    remaining: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Store status")
    timestamp: int = Field(..., description="Check timestamp (ms since epoch)")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_urls: int
    active_urls: int
    custom_urls: int
    total_clicks: int
    store_backend: str
    custom_codes_enabled: bool
