"""Identity token derivation for newly registered objects."""

import re
import threading
import time
from typing import Callable, Optional

TOKEN_PREFIX = "QR"

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Uppercase the name and collapse whitespace runs into single underscores."""
    return _WHITESPACE.sub("_", name.strip().upper())


class IdentityCodec:
    """Derives ``QR_<NAME>_<stamp>`` tokens.

    The stamp is epoch milliseconds, bumped past the previous stamp whenever
    the clock has not advanced, so it is strictly increasing per codec even
    for identical names registered in the same millisecond.
    """

    def __init__(self, clock_ms: Optional[Callable[[], int]] = None):
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._last_stamp = 0
        self._lock = threading.Lock()

    def next_stamp(self) -> int:
        with self._lock:
            stamp = max(self._clock_ms(), self._last_stamp + 1)
            self._last_stamp = stamp
            return stamp

    def generate(self, name: str) -> str:
        """Return a fresh token for ``name``.

        Callers are expected to reject empty names first.
        """
        normalized = normalize_name(name)
        return f"{TOKEN_PREFIX}_{normalized}_{self.next_stamp()}"
