"""Retrier - retry-with-backoff execution engine.

Re-invokes a fallible operation until it succeeds, its attempt budget runs
out, or its failure is classified as non-retryable. Classification, waiting
and time are all pluggable, so the same engine serves network clients, RPC
callers and tests that assert exact wait sequences.

Quick Start:
    >>> from retrier import Retrier
    >>>
    >>> retrier = Retrier.new(fetch_prices)  # 4 attempts, waits 1s, 2s, 4s
    >>> result = retrier.try_()
    >>> if result.is_err():
    ...     print("gave up:", result.unwrap_err())

Options (applied in order, later ones win):
    >>> from retrier import with_retries, with_whitelist, with_constant_backoff
    >>>
    >>> retrier = Retrier.new(
    ...     fetch_prices,
    ...     with_retries(10),
    ...     with_whitelist(TimeoutError, ConnectionError("reset by peer")),
    ...     with_constant_backoff(0.5),
    ... )
    >>> prices = retrier.call()  # returns the value or raises the last failure

Attempt metadata:
    >>> def fetch(index: int, previous_start: float | None) -> bytes:
    ...     return client.get(url, headers={"X-Attempt": str(index)}).content
    >>> Retrier.new_full(fetch).call()

Decorator:
    >>> @retrying(with_retries(3), with_exp_backoff(1.5))
    ... def load(path: str) -> bytes: ...

Testing:
    >>> from retrier.testing import MockClock
    >>> clock = MockClock()
    >>> Retrier.new(flaky, with_clock(clock)).try_()
    >>> clock.sleeps
    [1.0, 2.0, 4.0]
"""

from __future__ import annotations

from .foundation.config import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_ATTEMPTS,
    RetrierSettings,
    clear_settings_cache,
    get_settings,
)
from .foundation.errors import (
    ConfigurationError,
    Err,
    ErrorCode,
    InvalidOperationError,
    Ok,
    Result,
    RetrierError,
    cause_chain,
    classify_exception,
    error_matches,
)
from .runtime.observability import configure_from_settings, configure_logging
from .runtime.retry import (
    Attempt,
    Backoff,
    BackoffSleep,
    Blacklist,
    Clock,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    Operation,
    PolicyBuilder,
    Retrier,
    RetryDefaults,
    RetryPolicy,
    SystemClock,
    Transient,
    Whitelist,
    build_policy,
    derive,
    retry_on_all,
    retrying,
    with_backoff,
    with_blacklist,
    with_clock,
    with_constant_backoff,
    with_exp_backoff,
    with_name,
    with_on_retry,
    with_policy,
    with_retries,
    with_retry_check,
    with_sleep_strategy,
    with_whitelist,
)

__version__ = "0.1.0"

__all__ = [
    # Engine
    "Retrier", "retrying", "Attempt", "Operation",
    # Policy & options
    "RetryPolicy", "RetryDefaults", "PolicyBuilder", "build_policy", "derive",
    "with_retries", "with_backoff", "with_exp_backoff", "with_constant_backoff", "with_sleep_strategy",
    "with_whitelist", "with_blacklist", "with_retry_check", "with_clock", "with_name", "with_on_retry",
    "with_policy",
    # Classifiers
    "retry_on_all", "Whitelist", "Blacklist", "Transient",
    # Backoff
    "Backoff", "BackoffSleep", "ExponentialBackoff", "ConstantBackoff", "LinearBackoff",
    # Clocks
    "Clock", "SystemClock",
    # Errors
    "Result", "Ok", "Err", "RetrierError", "ConfigurationError", "InvalidOperationError",
    "ErrorCode", "classify_exception", "cause_chain", "error_matches",
    # Config
    "RetrierSettings", "get_settings", "clear_settings_cache", "DEFAULT_MAX_ATTEMPTS", "DEFAULT_BACKOFF_FACTOR",
    # Logging
    "configure_logging", "configure_from_settings",
]
