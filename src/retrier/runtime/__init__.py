"""Runtime - Execution flow and monitoring.

Contains: retry, observability.
"""

from __future__ import annotations

from .observability import configure_from_settings, configure_logging
from .retry import (
    Attempt,
    Blacklist,
    Clock,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    Retrier,
    RetryPolicy,
    SystemClock,
    Transient,
    Whitelist,
    build_policy,
    retry_on_all,
    retrying,
)

__all__ = [
    # Retry
    "Retrier", "retrying", "Attempt", "RetryPolicy", "build_policy",
    "retry_on_all", "Whitelist", "Blacklist", "Transient",
    "ExponentialBackoff", "ConstantBackoff", "LinearBackoff",
    "Clock", "SystemClock",
    # Observability
    "configure_logging", "configure_from_settings",
]
