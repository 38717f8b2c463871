"""Data models for URL shortener."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class UrlRecord:
    """Represents one shortened URL in the store."""

    id: str
    original_url: str
    short_code: str
    created_at: int
    expires_at: int
    validity_minutes: int
    is_custom: bool = False

    def is_expired(self, now: int) -> bool:
        """Check whether the validity window has passed.

        Args:
            now: Current time in milliseconds

        Returns:
            True if expires_at <= now
        """
        return self.expires_at <= now

    def to_dict(self) -> dict:
        """Convert to the persisted camelCase layout."""
        return {
            "id": self.id,
            "originalUrl": self.original_url,
            "shortCode": self.short_code,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
            "validityMinutes": self.validity_minutes,
            "isCustom": self.is_custom,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UrlRecord":
        """Create from the persisted layout."""
        validity = data.get("validityMinutes", data.get("validity"))
        return cls(
            id=str(data["id"]),
            original_url=data["originalUrl"],
            short_code=data["shortCode"],
            created_at=int(data["createdAt"]),
            expires_at=int(data["expiresAt"]),
            validity_minutes=int(validity),
            is_custom=bool(data.get("isCustom", False)),
        )


@dataclass
class ReferrerInfo:
    """Where a click came from."""

    referrer: str
    user_agent: str
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "referrer": self.referrer,
            "userAgent": self.user_agent,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReferrerInfo":
        return cls(
            referrer=data.get("referrer") or "Direct",
            user_agent=data.get("userAgent", ""),
            timestamp=int(data.get("timestamp", 0)),
        )


@dataclass
class ApproxLocation:
    """Coarse client location."""

    latitude: float
    longitude: float
    accuracy: int

    @classmethod
    def from_coordinates(
        cls,
        latitude: float,
        longitude: float,
        accuracy: float,
    ) -> "ApproxLocation":
        """Build a location rounded to two decimals and whole meters."""
        return cls(
            latitude=round(float(latitude), 2),
            longitude=round(float(longitude), 2),
            accuracy=int(round(float(accuracy))),
        )

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ApproxLocation":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            accuracy=int(data["accuracy"]),
        )


@dataclass
class ClickEvent:
    """One recorded visit to a short code."""

    timestamp: int
    referrer_info: ReferrerInfo
    approx_location: Optional[ApproxLocation] = field(default=None)

    def to_dict(self) -> dict:
        """Convert to the persisted camelCase layout."""
        data = {
            "timestamp": self.timestamp,
            "referrerInfo": self.referrer_info.to_dict(),
        }
        if self.approx_location is not None:
            data["approxLocation"] = self.approx_location.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ClickEvent":
        """Create from the persisted layout."""
        location = data.get("approxLocation")
        return cls(
            timestamp=int(data["timestamp"]),
            referrer_info=ReferrerInfo.from_dict(data.get("referrerInfo") or {}),
            approx_location=ApproxLocation.from_dict(location) if location else None,
        )
