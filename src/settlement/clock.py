"""Clock — внешний источник "now" для rate limiter.

"now" сэмплируется один раз на операцию. Единица: целые unix seconds.
"""

import time
from abc import ABC, abstractmethod

from src.core.math.checked_arithmetic import validate_non_negative_int


class Clock(ABC):
    @abstractmethod
    def now(self) -> int:
        ...


class SystemClock(Clock):
    """Wall clock (time.time, усечённый до секунд)."""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """Ручные часы для тестов и симуляций.

    Момент 0 совпадает с маркером "никогда не действовал", поэтому
    RateLimiter.record отклоняет его: buy/sell при now == 0 откатываются.
    """

    def __init__(self, start: int = 0):
        validate_non_negative_int(start, "start")
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, ts: int) -> None:
        validate_non_negative_int(ts, "ts")
        self._now = ts

    def advance(self, seconds: int) -> int:
        """Сдвиг вперёд на seconds, возвращает новое now."""
        validate_non_negative_int(seconds, "seconds")
        self._now += seconds
        return self._now
