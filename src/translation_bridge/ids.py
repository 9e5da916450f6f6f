"""Identifier and timestamp source.

``IdFactory`` is the only process-wide mutable state in the bridge. It is
passed into the app factory and from there into the transformers and the
stream encoder, so tests can supply a seeded random source and a fixed clock.
"""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable

_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_SUFFIX_LENGTH = 10


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


class IdFactory:
    """Generates ``<prefix>-<base36 time>-<random suffix>`` identifiers.

    Safe to share between concurrent requests: draws from the random source
    are serialised by a lock. Collisions are cosmetic, never relied upon.

    Args:
        rng:   Random source. Defaults to a fresh ``random.Random()``.
        clock: Returns the current time in epoch seconds (float).
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock
        self._lock = threading.Lock()

    def new_id(self, prefix: str = "chatcmpl") -> str:
        stamp = _base36(int(self._clock() * 1_000_000_000))
        with self._lock:
            suffix = "".join(self._rng.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
        return f"{prefix or 'chatcmpl'}-{stamp}-{suffix}"

    def now(self) -> int:
        """Current time as integer epoch seconds."""
        return int(self._clock())
