"""Error handling for retrier.

- Result/Ok/Err: outcome of a retried operation, failures carried as data
- RetrierError hierarchy: misuse of the engine (bad options, no operation)
- ErrorCode/classify_exception: coarse categories for transient-error retry
- cause_chain/error_matches: walking an exception's explicit __cause__ chain
"""

from .chain import ErrorEntry, cause_chain, error_matches, is_error, iter_causes, message_matches, unwrap
from .errors import (
    DEFAULT_RETRYABLE,
    ConfigurationError,
    ErrorCode,
    InvalidOperationError,
    RetrierError,
    classify_exception,
)
from .result import Err, Ok, Result

__all__ = [
    # Result monad
    "Result", "Ok", "Err",
    # Engine errors
    "RetrierError", "ConfigurationError", "InvalidOperationError",
    # Classification
    "ErrorCode", "DEFAULT_RETRYABLE", "classify_exception",
    # Cause chains
    "ErrorEntry", "unwrap", "iter_causes", "cause_chain", "is_error", "message_matches", "error_matches",
]
