"""Foundation - Core building blocks for retrier.

Contains: error handling, config, testing.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "Result", "Ok", "Err",
    "RetrierError", "ConfigurationError", "InvalidOperationError",
    "ErrorCode", "DEFAULT_RETRYABLE", "classify_exception",
    "cause_chain", "error_matches",
    # Config
    "RetrierSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
    "DEFAULT_MAX_ATTEMPTS", "DEFAULT_BACKOFF_FACTOR",
    # Testing
    "MockClock", "ScriptedOperation",
]


def __getattr__(name: str):
    """Lazy imports to keep the testing helpers out of normal imports."""
    if name in ("MockClock", "ScriptedOperation"):
        from . import testing
        return getattr(testing, name)
    if name in ("RetrierSettings", "RetrySettings", "LoggingSettings", "get_settings", "clear_settings_cache",
                "DEFAULT_MAX_ATTEMPTS", "DEFAULT_BACKOFF_FACTOR"):
        from . import config
        return getattr(config, name)
    if name in __all__:
        from . import errors
        return getattr(errors, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
