"""Delay schedules between retry attempts.

- ExponentialBackoff: doubling (by default) delays up to a cap
- ConstantBackoff: same delay every time, mostly for tests
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Delay source for the retry loop.

    `attempt` counts retries from 0, so the first retry waits `delay(0)`.
    """

    def delay(self, attempt: int) -> float: ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """initial_delay * multiplier**attempt seconds, never above max_delay.

    With the defaults the schedule is 2s, 4s, 8s, 16s, 16s... The optional
    jitter scales each delay by a random factor in [0.5, 1.5).

    Example:
        >>> [ExponentialBackoff().delay(n) for n in range(5)]
        [2.0, 4.0, 8.0, 16.0, 16.0]
    """

    initial_delay: float = 2.0
    max_delay: float = 16.0
    multiplier: float = 2.0
    jitter: bool = False

    def delay(self, attempt: int) -> float:
        capped = min(self.initial_delay * self.multiplier ** attempt, self.max_delay)
        if not self.jitter:
            return capped
        return capped * random.uniform(0.5, 1.5)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    seconds: float = 1.0

    def delay(self, attempt: int) -> float:
        return self.seconds
