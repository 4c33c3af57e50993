"""Retry classifiers: predicates deciding whether a failure may be retried.

A classifier is any callable ``(exc) -> bool``. It must be pure: the engine
may consult it once per failed attempt and expects the same answer for the
same exception.

- retry_on_all: every failure is retryable (the default)
- Whitelist: retry only failures matching an allowed error
- Blacklist: retry everything except failures matching a denied error
- Transient: retry failures whose cause chain looks transient (timeouts,
  network errors, rate limiting)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeAlias

from retrier.foundation.errors import (
    DEFAULT_RETRYABLE,
    ConfigurationError,
    ErrorCode,
    ErrorEntry,
    classify_exception,
    error_matches,
    is_error,
    iter_causes,
)

Classifier: TypeAlias = Callable[[BaseException], bool]


def retry_on_all(exc: BaseException | None) -> bool:
    """Retry check that retries on all errors."""
    return exc is not None


def _entries(entries: tuple[ErrorEntry, ...]) -> tuple[ErrorEntry, ...]:
    for e in entries:
        if not isinstance(e, BaseException) and not (isinstance(e, type) and issubclass(e, BaseException)):
            raise ConfigurationError(f"expected an exception instance or class, got {e!r}")
    return entries


@dataclass(frozen=True, slots=True, init=False)
class Whitelist:
    """Retry only failures that match one of the allowed errors.

    Each entry is tried in order and the first match wins:

    1. identity: the entry is the failure or one of its causes, or, for an
       exception class, the failure or a cause is an instance of it;
    2. message: for an exception instance, some exception along the cause
       chain has the entry's message as its message or as a substring of it.

    Message containment is deliberately loose: an allowed ``"really long
    error"`` matches a failure reading ``"my really long error"``. An empty
    whitelist never matches, so the first failure is terminal.

    Example:
        >>> check = Whitelist(TimeoutError, ValueError("bad gateway"))
        >>> check(RuntimeError("upstream: bad gateway"))
        True
    """

    errors: tuple[ErrorEntry, ...]

    def __init__(self, *errors: ErrorEntry) -> None:
        object.__setattr__(self, "errors", _entries(errors))

    def __call__(self, exc: BaseException) -> bool:
        return any(error_matches(exc, e) for e in self.errors)


@dataclass(frozen=True, slots=True, init=False)
class Blacklist:
    """Retry every failure except those identical to, or instances of, a denied error.

    Only identity along the cause chain is considered; messages are never
    compared. An empty blacklist retries unconditionally.
    """

    errors: tuple[ErrorEntry, ...]

    def __init__(self, *errors: ErrorEntry) -> None:
        object.__setattr__(self, "errors", _entries(errors))

    def __call__(self, exc: BaseException) -> bool:
        return not any(is_error(exc, e) for e in self.errors)


@dataclass(frozen=True, slots=True)
class Transient:
    """Retry failures whose cause chain classifies into one of ``codes``.

    Uses classify_exception, which inspects exception types (TimeoutError,
    ConnectionError) and falls back to pattern matching on type name and
    message.
    """

    codes: frozenset[ErrorCode] = DEFAULT_RETRYABLE

    def __call__(self, exc: BaseException) -> bool:
        return any(classify_exception(node) in self.codes for node in iter_causes(exc))
