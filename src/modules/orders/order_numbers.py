"""Order number generation.

Format: ``ORD-<epoch-millis>-<seq>-<rand>``.  ``seq`` separates numbers
issued within the same millisecond in this process; ``rand`` separates
processes that share a millisecond.
"""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable, Optional

from modules.orders.constants import ORDER_NUMBER_PREFIX


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def _random_suffix() -> str:
    return secrets.token_hex(2).upper()


class OrderNumberGenerator:
    """Thread-safe generator of strictly increasing ``(millis, seq)`` pairs.

    A clock that stalls or steps backwards keeps the last millisecond and
    bumps the sequence, so numbers never repeat within a process.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        suffix: Optional[Callable[[], str]] = None,
    ) -> None:
        self._clock = clock or _epoch_millis
        self._suffix = suffix or _random_suffix
        self._lock = threading.Lock()
        self._last_millis = -1
        self._seq = 0

    def next(self) -> str:
        with self._lock:
            millis = self._clock()
            if millis > self._last_millis:
                self._last_millis = millis
                self._seq = 0
            else:
                self._seq += 1
            millis, seq = self._last_millis, self._seq
        return f"{ORDER_NUMBER_PREFIX}-{millis}-{seq:03d}-{self._suffix()}"


default_generator = OrderNumberGenerator()


def generate_order_number() -> str:
    return default_generator.next()
