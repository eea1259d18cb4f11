"""Latency instrumentation for awaited operations."""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


class LatencyMeter:
    """Measures the wall-clock duration of the last awaited operation.

    Each logical operation owns its own meter so that timings of different
    operations never overwrite each other.  :attr:`ms` is ``None`` until
    the first measurement and is replaced, not accumulated, afterwards.

    Example::

        meter = LatencyMeter()
        products = await meter.measure(lambda: client.list())
        print(meter.ms)
    """

    def __init__(self) -> None:
        self.ms: Optional[float] = None

    async def measure(self, producer: Callable[[], Awaitable[T]]) -> T:
        """Await *producer()* and record how long it took.

        The duration is recorded once the producer settles, whether it
        returned or raised.  Exceptions propagate unchanged.
        """
        start = time.perf_counter()
        try:
            return await producer()
        finally:
            self.ms = max(0.0, (time.perf_counter() - start) * 1000.0)
