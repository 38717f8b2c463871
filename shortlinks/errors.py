"""Error types for the URL shortener."""

from typing import Optional


class ShortenerError(Exception):
    """Base class for URL shortener errors."""


class ValidationError(ShortenerError, ValueError):
    """A user-correctable problem with one submitted entry."""
    
    def __init__(
        self,
        field: str,
        message: str,
        index: Optional[int] = None,
        duplicate: bool = False,
    ):
        """Initialize validation error.
        
        Args:
            field: Name of the offending input field
            message: Human readable message
            index: Position of the entry in a batch submission
            duplicate: True when the short code is already taken
        """
        super().__init__(message)
        self.field = field
        self.message = message
        self.index = index
        self.duplicate = duplicate
    
    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "field": self.field,
            "message": self.message,
        }


class NotFoundError(ShortenerError):
    """Unknown short code."""
    
    def __init__(self, short_code: str):
        super().__init__(f"Short URL '{short_code}' not found")
        self.short_code = short_code


class ExpiredError(ShortenerError):
    """Known short code whose validity window has passed."""
    
    def __init__(self, short_code: str):
        super().__init__(f"Short URL '{short_code}' has expired")
        self.short_code = short_code


class PersistenceError(ShortenerError):
    """Underlying key-value store read or write failure."""


class ShortCodeGenerationError(ShortenerError):
    """No free short code could be produced."""
