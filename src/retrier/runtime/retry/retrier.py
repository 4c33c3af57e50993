"""The retry engine.

A Retrier binds one operation to one RetryPolicy and runs the attempt loop:

    execute -> (success: stop) -> classify -> wait -> execute ...

bounded by the policy's attempt budget. Failures are data: ``try_`` returns
``Err(exc)`` with the exact exception the last attempt raised, never a
wrapper. Only ``Exception`` subclasses count as failures; KeyboardInterrupt,
SystemExit and errors raised by the classifier, sleep strategy or on_retry
callback propagate.

Example:
    >>> retrier = Retrier.new(fetch, with_retries(5), with_whitelist(TimeoutError))
    >>> result = retrier.try_()
    >>> if result.is_err():
    ...     log.error("gave up: %s", result.unwrap_err())
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, Generic, ParamSpec, TypeVar

from retrier.foundation.errors import Err, InvalidOperationError, Ok, Result

from .operation import Attempt, Operation
from .policy import Option, RetryDefaults, RetryPolicy, build_policy

T = TypeVar("T")
P = ParamSpec("P")

logger = logging.getLogger("retrier.retry")


class Retrier(Generic[T]):
    """Runs an operation until it succeeds, its failure is not retryable, or attempts run out.

    Build one with ``Retrier.new`` (zero-argument operation) or
    ``Retrier.new_full`` (operation taking the attempt index and the previous
    attempt's start time). The policy is fixed at construction and the engine
    keeps no state between ``try_`` calls, but one instance must not be used
    from several threads at once.
    """

    __slots__ = ("_operation", "_policy")

    def __init__(self, operation: Operation[T], policy: RetryPolicy | None = None) -> None:
        if not isinstance(operation, Operation):
            raise InvalidOperationError(
                f"Retrier needs an Operation, got {operation!r}; use Retrier.new() or Retrier.new_full()"
            )
        self._operation = operation
        self._policy = policy if policy is not None else build_policy()

    @classmethod
    def new(cls, fn: Callable[[], T], *options: Option, defaults: RetryDefaults | None = None) -> Retrier[T]:
        """Retrier for a zero-argument operation.

        With no options it retries every failure with exponential backoff
        (1s, 2s, 4s, ...) for the default number of attempts.

        Raises:
            InvalidOperationError: fn is not callable
            ConfigurationError: an option supplied an invalid value
        """
        return cls(Operation.simple(fn), build_policy(*options, defaults=defaults))

    @classmethod
    def new_full(
        cls, fn: Callable[[int, float | None], T], *options: Option, defaults: RetryDefaults | None = None,
    ) -> Retrier[T]:
        """Retrier for an operation called as ``fn(index, previous_start)``.

        ``index`` is the 0-based attempt number; ``previous_start`` is the
        clock time at which the previous attempt started, None on the first.
        """
        return cls(Operation.full(fn), build_policy(*options, defaults=defaults))

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    @property
    def operation(self) -> Operation[T]:
        return self._operation

    def try_(self) -> Result[T, Exception]:
        """Run the attempt loop.

        Returns:
            Ok(return value) from the first successful attempt, or Err with
            the last failure once attempts are exhausted or the failure is
            classified as non-retryable.
        """
        policy = self._policy
        clock, last = policy.clock, policy.max_attempts - 1
        name = policy.name or self._operation.name
        previous_start: float | None = None

        for i in range(policy.max_attempts):
            started = clock.now()
            try:
                value = self._operation(Attempt(i, previous_start))
            except Exception as exc:
                error = exc
            else:
                if i:
                    logger.debug(f"[{name}] Succeeded on attempt {i + 1}/{policy.max_attempts}",
                                 extra={"operation": name, "attempt": i + 1})
                return Ok(value)
            previous_start = started

            if i == last:
                logger.warning(
                    f"[{name}] Giving up after {i + 1} attempt(s): {type(error).__name__}: {error}",
                    extra={"operation": name, "attempt": i + 1, "reason": "exhausted"},
                )
                break
            if not policy.classifier(error):
                logger.warning(
                    f"[{name}] Attempt {i + 1}/{policy.max_attempts} failed with non-retryable "
                    f"{type(error).__name__}: {error}",
                    extra={"operation": name, "attempt": i + 1, "reason": "not_retryable"},
                )
                break

            logger.info(
                f"[{name}] Attempt {i + 1}/{policy.max_attempts} failed ({type(error).__name__}: {error}); retrying",
                extra={"operation": name, "attempt": i + 1, "max_attempts": policy.max_attempts},
            )
            if policy.on_retry is not None:
                policy.on_retry(i, error)
            policy.sleep_strategy(i, clock)

        return Err(error)

    def call(self) -> T:
        """Run the attempt loop and return the value, re-raising the terminal failure unmodified."""
        result = self.try_()
        if result.is_ok():
            return result.unwrap()
        raise result.unwrap_err()

    def __repr__(self) -> str:
        return f"Retrier({self._policy.name or self._operation.name}, max_attempts={self._policy.max_attempts})"


def retrying(*options: Option) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator retrying every call of the wrapped function with a policy built from options.

    The policy is built once, at decoration time. Calls return the wrapped
    function's value or raise its last failure.

    Example:
        >>> @retrying(with_retries(3), with_whitelist(ConnectionError))
        ... def fetch(url: str) -> bytes:
        ...     return client.get(url).content
    """
    policy = build_policy(*options)

    def decorator(fn: Callable[P, T]) -> Callable[P, T]:
        op_name = getattr(fn, "__qualname__", type(fn).__name__)

        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation: Operation[T] = Operation(lambda _attempt: fn(*args, **kwargs), op_name)
            return Retrier(operation, policy).call()

        return wrapper

    return decorator
