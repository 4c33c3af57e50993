"""Testing helpers: MockClock and ScriptedOperation.

Re-exports retrier.foundation.testing for shorter imports.
"""

from .foundation.testing import Call, MockClock, ScriptedOperation

__all__ = ["Call", "MockClock", "ScriptedOperation"]
