"""Retry engine: policies, classifiers, backoff strategies and the Retrier.

Example:
    >>> from retrier.runtime.retry import Retrier, with_retries, with_whitelist
    >>>
    >>> retrier = Retrier.new(
    ...     fetch_quote,
    ...     with_retries(5),
    ...     with_whitelist(TimeoutError, ConnectionError),
    ... )
    >>> result = retrier.try_()
    >>> quote = result.unwrap_or(None)
"""

from .backoff import (
    Backoff,
    BackoffSleep,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    SleepStrategy,
)
from .classify import Blacklist, Classifier, Transient, Whitelist, retry_on_all
from .clock import SYSTEM_CLOCK, Clock, SystemClock
from .operation import Attempt, Operation
from .policy import (
    PACKAGE_DEFAULTS,
    Option,
    PolicyBuilder,
    RetryDefaults,
    RetryPolicy,
    build_policy,
    derive,
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
from .retrier import Retrier, retrying

__all__ = [
    # Engine
    "Retrier",
    "retrying",
    "Attempt",
    "Operation",
    # Policy
    "RetryPolicy",
    "RetryDefaults",
    "PACKAGE_DEFAULTS",
    "PolicyBuilder",
    "Option",
    "build_policy",
    "derive",
    # Options
    "with_retries",
    "with_backoff",
    "with_exp_backoff",
    "with_constant_backoff",
    "with_sleep_strategy",
    "with_whitelist",
    "with_blacklist",
    "with_retry_check",
    "with_clock",
    "with_name",
    "with_on_retry",
    "with_policy",
    # Classifiers
    "Classifier",
    "retry_on_all",
    "Whitelist",
    "Blacklist",
    "Transient",
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "ConstantBackoff",
    "LinearBackoff",
    "BackoffSleep",
    "SleepStrategy",
    # Clocks
    "Clock",
    "SystemClock",
    "SYSTEM_CLOCK",
]
