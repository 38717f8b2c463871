"""Time helpers. All stored timestamps are integer milliseconds since the epoch."""

import time
from typing import Callable

Clock = Callable[[], int]

MS_PER_MINUTE = 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)
