"""Short code generation."""

import logging
import random
import string
import uuid
from typing import Container, Optional

from .errors import ShortCodeGenerationError

# Base62, case-sensitive
ALPHABET = string.ascii_letters + string.digits


def encode_base62(num: int) -> str:
    """Encode a non-negative integer with the base62 alphabet (0 -> 'a')."""
    if num == 0:
        return ALPHABET[0]

    digits = []
    while num:
        num, digit = divmod(num, len(ALPHABET))
        digits.append(ALPHABET[digit])
    return "".join(reversed(digits))


class ShortCodeGenerator:
    """Produces alphanumeric codes that do not clash with codes in use."""

    def __init__(
        self,
        default_length: int = 6,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize short code generator.

        Args:
            default_length: Length of generated codes
            rng: Random source, seed it for reproducible codes
            logger: Optional logger
        """
        self.default_length = default_length
        self.rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)

    def generate_random(self, length: Optional[int] = None) -> str:
        """Draw a code uniformly from the alphabet."""
        return "".join(self.rng.choices(ALPHABET, k=length or self.default_length))

    def generate_from_uuid(self, length: Optional[int] = None) -> str:
        """Take the leading characters of a base62-encoded random UUID."""
        return encode_base62(uuid.uuid4().int)[: length or self.default_length]

    def generate_unique(self, taken: Container[str], attempts: int = 5) -> str:
        """Generate a code not contained in ``taken``.

        Random codes are tried ``attempts`` times; after that one
        UUID-derived code two characters longer is tried.

        Args:
            taken: Codes currently in use
            attempts: Number of random draws before the fallback

        Returns:
            A free short code

        Raises:
            ShortCodeGenerationError: If every candidate was taken
        """
        for attempt in range(1, attempts + 1):
            code = self.generate_random()
            if code not in taken:
                self.logger.debug(f"Generated code after {attempt} attempts: {code}")
                return code

        code = self.generate_from_uuid(self.default_length + 2)
        if code not in taken:
            self.logger.warning(f"Random codes exhausted, using UUID-derived code {code}")
            return code

        raise ShortCodeGenerationError(
            f"Unable to generate a unique short code after {attempts + 1} attempts"
        )
