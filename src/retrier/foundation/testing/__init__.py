"""Testing utilities for code built on retrier.

Provides a virtual clock and scripted operations so retry behavior can be
asserted exactly, without real waiting.
"""

from .mock import Call, MockClock, ScriptedOperation

__all__ = ["Call", "MockClock", "ScriptedOperation"]
