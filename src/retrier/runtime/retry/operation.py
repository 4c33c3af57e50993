"""The unit of work a Retrier re-invokes.

Every operation is driven the same way: it is called with an ``Attempt``
describing the invocation. Plain zero-argument callables and callables
wanting ``(index, previous_start)`` are adapted into that one shape when the
Retrier is built, so the engine never inspects what it was given.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from retrier.foundation.errors import InvalidOperationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Attempt:
    """Metadata for one invocation.

    Attributes:
        index: 0-based attempt number
        previous_start: Clock time at which the previous attempt started,
            None on the first attempt
    """

    index: int
    previous_start: float | None = None

    @property
    def is_first(self) -> bool:
        return self.index == 0


@dataclass(frozen=True)
class Operation(Generic[T]):
    """An operation bound to a Retrier. Raising means failure, returning means success."""

    fn: Callable[[Attempt], T]
    name: str

    def __call__(self, attempt: Attempt) -> T:
        return self.fn(attempt)

    @classmethod
    def simple(cls, fn: Callable[[], T]) -> Operation[T]:
        """Bind a zero-argument callable; the attempt metadata is dropped."""
        _require_callable(fn)
        return cls(lambda _attempt: fn(), _name_of(fn))

    @classmethod
    def full(cls, fn: Callable[[int, float | None], T]) -> Operation[T]:
        """Bind a callable taking ``(index, previous_start)``."""
        _require_callable(fn)
        return cls(lambda attempt: fn(attempt.index, attempt.previous_start), _name_of(fn))


def _require_callable(fn: object) -> None:
    if fn is None or not callable(fn):
        raise InvalidOperationError(f"Retrier needs a callable operation, got {fn!r}")


def _name_of(fn: object) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or type(fn).__name__
