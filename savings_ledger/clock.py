"""
Ledger clocks. Time is whole unix seconds so accrual math stays integral.
"""

import threading
import time


class SystemClock:
    """Wall-clock time, truncated to the second"""

    def __call__(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to"""

    def __init__(self, start: int = 0):
        self._now = start
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self._now

    def set(self, timestamp: int) -> None:
        with self._lock:
            self._now = timestamp

    def advance(self, seconds: int) -> int:
        with self._lock:
            self._now += seconds
            return self._now
