"""Backoff strategies for retry policies.

Provides pluggable delay calculation between attempts:
- ExponentialBackoff: factor ** attempt seconds, optionally scaled and capped
- ConstantBackoff: Fixed delay
- LinearBackoff: Linear growth with cap

Every strategy is a pure function of the attempt index, so a policy's wait
sequence is fully determined by its configuration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from .clock import Clock

# Called after a retry has been decided: (attempt index, clock) -> blocks
SleepStrategy: TypeAlias = "Callable[[int, Clock], None]"


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Attempt numbers are 0-indexed: the wait after the first failed attempt
    is ``delay(0)``.
    """

    def delay(self, attempt: int) -> float:
        """Calculate delay in seconds for given attempt number.

        Args:
            attempt: 0-indexed attempt number that just failed

        Returns:
            Delay in seconds before the next attempt
        """
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff.

    Delay = min(base * (factor ^ attempt), max_delay)

    With the defaults the sequence is 1, 2, 4, 8, ... seconds. Non-integer
    factors are supported; the power is computed as a float.

    Attributes:
        factor: Exponential growth factor (default: 2.0)
        base: Delay for attempt 0 in seconds (default: 1.0)
        max_delay: Optional cap in seconds
    """

    factor: float = 2.0
    base: float = 1.0
    max_delay: float | None = None

    def __post_init__(self) -> None:
        if self.factor <= 0 or self.base < 0:
            raise ValueError(f"ExponentialBackoff needs factor > 0 and base >= 0, got {self.factor=}, {self.base=}")

    def delay(self, attempt: int) -> float:
        try:
            d = self.base * float(self.factor) ** attempt
        except OverflowError:
            # Past float range; any cap is smaller
            d = math.inf if self.base else 0.0
        return d if self.max_delay is None else min(d, self.max_delay)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between attempts.

    Attributes:
        delay_seconds: Fixed delay in seconds (default: 1.0)
    """

    delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.delay_seconds < 0:
            raise ValueError(f"ConstantBackoff delay must be >= 0, got {self.delay_seconds}")

    def delay(self, attempt: int) -> float:
        return self.delay_seconds


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """Linear backoff with cap.

    Delay = min(base + (increment * attempt), max_delay)
    """

    base: float = 1.0
    increment: float = 1.0
    max_delay: float = 30.0

    def delay(self, attempt: int) -> float:
        return min(self.base + (self.increment * attempt), self.max_delay)


@dataclass(frozen=True, slots=True)
class BackoffSleep:
    """Sleep strategy that waits ``backoff.delay(attempt)`` on the engine's clock."""

    backoff: Backoff

    def __call__(self, attempt: int, clock: Clock) -> None:
        clock.sleep(self.backoff.delay(attempt))
