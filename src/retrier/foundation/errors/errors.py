"""Error types and exception classification for the retry engine.

Operation failures are never wrapped by the engine: they travel as data inside
a Result. The exceptions defined here only signal misuse of the engine itself.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache


class RetrierError(Exception):
    """Base class for errors raised by retrier itself."""


class ConfigurationError(RetrierError, ValueError):
    """A retry policy was assembled from invalid options."""


class InvalidOperationError(RetrierError, TypeError):
    """A Retrier was built without a callable operation."""


class ErrorCode(StrEnum):
    """Coarse failure categories used for transient-error classification."""
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_PARAMS = "INVALID_PARAMS"
    PARSE_ERROR = "PARSE_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


# Flattened pattern -> code mapping, checked in insertion order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "timedout": ErrorCode.TIMEOUT,
    "connection": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "unreachable": ErrorCode.NETWORK_ERROR,
    "ratelimit": ErrorCode.RATE_LIMITED,
    "toomanyrequests": ErrorCode.RATE_LIMITED,
    "throttl": ErrorCode.RATE_LIMITED,
    "permission": ErrorCode.PERMISSION_DENIED,
    "forbidden": ErrorCode.PERMISSION_DENIED,
    "parse": ErrorCode.PARSE_ERROR,
    "json": ErrorCode.PARSE_ERROR,
    "decode": ErrorCode.PARSE_ERROR,
    "validation": ErrorCode.INVALID_PARAMS,
    "value": ErrorCode.INVALID_PARAMS,
    "notfound": ErrorCode.NOT_FOUND,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES)

# Builtin exception types that map to a code regardless of message
_TYPE_CODES: dict[type[BaseException], ErrorCode] = {
    TimeoutError: ErrorCode.TIMEOUT,
    ConnectionError: ErrorCode.NETWORK_ERROR,
    PermissionError: ErrorCode.PERMISSION_DENIED,
    FileNotFoundError: ErrorCode.NOT_FOUND,
}

DEFAULT_RETRYABLE: frozenset[ErrorCode] = frozenset({
    ErrorCode.RATE_LIMITED,
    ErrorCode.TIMEOUT,
    ErrorCode.NETWORK_ERROR,
})


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    haystack = exc_key.lower().replace("_", "").replace(" ", "")
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via its type, then pattern matching on name/message."""
    for exc_type, code in _TYPE_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return _classify_cached(f"{type(exc).__name__} {exc}")
