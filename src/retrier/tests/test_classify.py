"""Tests for retry classifiers and cause-chain matching."""

from __future__ import annotations

import pytest

from retrier import Retrier, with_blacklist, with_clock, with_retries, with_retry_check, with_whitelist
from retrier.foundation.errors import (
    ConfigurationError,
    ErrorCode,
    cause_chain,
    classify_exception,
    error_matches,
    is_error,
)
from retrier.runtime.retry import Blacklist, Transient, Whitelist, retry_on_all
from retrier.testing import MockClock, ScriptedOperation


def _raise_from(outer: BaseException, cause: BaseException) -> BaseException:
    try:
        raise outer from cause
    except BaseException as exc:  # noqa: BLE001 - test helper
        return exc


def _raise_during(outer: BaseException, context: BaseException) -> BaseException:
    try:
        try:
            raise context
        except BaseException:
            raise outer  # noqa: B904 - implicit chaining is the point
    except BaseException as exc:  # noqa: BLE001 - test helper
        return exc


# ═════════════════════════════════════════════════════════════════════════════
# Cause chains
# ═════════════════════════════════════════════════════════════════════════════


def test_cause_chain_explicit() -> None:
    root = KeyError("k")
    outer = _raise_from(ValueError("v"), root)

    assert cause_chain(outer) == (outer, root)


def test_cause_chain_ignores_implicit_context() -> None:
    """An error raised while handling another is not caused by it."""
    outer = _raise_during(ValueError("v"), KeyError("k"))

    assert cause_chain(outer) == (outer,)


def test_cause_chain_suppressed_context() -> None:
    try:
        try:
            raise KeyError("k")
        except KeyError:
            raise ValueError("v") from None
    except ValueError as exc:
        outer = exc

    assert cause_chain(outer) == (outer,)


def test_cause_chain_three_levels() -> None:
    root = OSError("disk")
    middle = _raise_from(RuntimeError("read failed"), root)
    outer = _raise_from(ValueError("load failed"), middle)

    assert cause_chain(outer) == (outer, middle, root)


def test_cause_chain_stops_on_cycle() -> None:
    a, b = ValueError("a"), ValueError("b")
    a.__cause__, b.__cause__ = b, a

    assert cause_chain(a) == (a, b)


def test_is_error_identity_and_class() -> None:
    root = TimeoutError("slow")
    outer = _raise_from(RuntimeError("wrapped"), root)

    assert is_error(outer, root)
    assert is_error(outer, TimeoutError)
    assert is_error(outer, OSError)  # TimeoutError subclasses OSError
    assert not is_error(outer, TimeoutError("slow"))
    assert not is_error(outer, KeyError)


def test_error_matches_message_only_for_instances() -> None:
    exc = RuntimeError("connection refused")

    assert error_matches(exc, RuntimeError("connection refused"))
    assert error_matches(exc, ValueError("refused"))
    assert not error_matches(exc, ConnectionRefusedError)


# ═════════════════════════════════════════════════════════════════════════════
# Retry-on-all
# ═════════════════════════════════════════════════════════════════════════════


def test_retry_on_all() -> None:
    assert retry_on_all(ValueError())
    assert retry_on_all(Exception())
    assert not retry_on_all(None)


# ═════════════════════════════════════════════════════════════════════════════
# Whitelist
# ═════════════════════════════════════════════════════════════════════════════


def test_simple_whitelist(clock: MockClock) -> None:
    e = ValueError("my error")
    op = ScriptedOperation.always_failing(e)

    result = Retrier.new(op, with_clock(clock), with_retries(5), with_whitelist(e)).try_()

    assert result.unwrap_err() is e
    op.assert_called_times(5)
    assert clock.sleeps == [1, 2, 4, 8]


def test_whitelist_redefined_errors(clock: MockClock) -> None:
    """A fresh exception with the same message matches an allowed instance."""
    calls = 0

    def op() -> None:
        nonlocal calls
        calls += 1
        raise ValueError("my error")

    result = Retrier.new(op, with_clock(clock), with_retries(5), with_whitelist(ValueError("my error"))).try_()

    assert str(result.unwrap_err()) == "my error"
    assert calls == 5
    assert clock.sleeps == [1, 2, 4, 8]


def test_empty_whitelist_stops_after_first_failure(clock: MockClock) -> None:
    e = ValueError("my error")
    op = ScriptedOperation.always_failing(e)

    result = Retrier.new(op, with_clock(clock), with_retries(5), with_whitelist()).try_()

    assert result.unwrap_err() is e
    op.assert_called_times(1)
    assert clock.num_sleeps == 0


def test_whitelist_wrapped_error(clock: MockClock) -> None:
    """The allowed error is the cause of the failure."""
    e = ValueError("my error")
    calls = 0

    def op() -> None:
        nonlocal calls
        calls += 1
        raise RuntimeError(f"error {e}") from e

    result = Retrier.new(op, with_clock(clock), with_retries(5), with_whitelist(e)).try_()

    assert result.unwrap_err().__cause__ is e
    assert calls == 5
    assert clock.sleeps == [1, 2, 4, 8]


def test_whitelist_substring_error(clock: MockClock) -> None:
    calls = 0

    def op() -> None:
        nonlocal calls
        calls += 1
        raise ValueError("my really long error")

    result = Retrier.new(
        op, with_clock(clock), with_retries(5), with_whitelist(ValueError("really long error")),
    ).try_()

    assert str(result.unwrap_err()) == "my really long error"
    assert calls == 5
    assert clock.sleeps == [1, 2, 4, 8]


def test_whitelist_matches_message_of_inner_cause() -> None:
    inner = OSError("socket closed by peer")
    outer = _raise_from(RuntimeError("request failed"), inner)

    assert Whitelist(ConnectionError("closed by peer"))(outer)


def test_whitelist_ignores_message_of_implicit_context() -> None:
    outer = _raise_during(RuntimeError("cleanup failed"), OSError("broken pipe"))

    assert not Whitelist(OSError("broken pipe"))(outer)


def test_whitelist_does_not_retry_error_raised_while_handling_allowed_one(clock: MockClock) -> None:
    calls: list[int] = []

    def op() -> None:
        calls.append(1)
        try:
            raise KeyError("missing")
        except KeyError:
            raise PermissionError("denied")  # noqa: B904

    result = Retrier.new(op, with_clock(clock), with_retries(3), with_whitelist(KeyError)).try_()

    assert isinstance(result.unwrap_err(), PermissionError)
    assert len(calls) == 1
    assert clock.num_sleeps == 0


def test_whitelist_message_is_not_reversed() -> None:
    """The allowed message must be contained in the failure's, not the other way around."""
    assert not Whitelist(ValueError("my really long error"))(ValueError("long error"))


def test_whitelist_class_entries() -> None:
    check = Whitelist(TimeoutError, ConnectionError)

    assert check(TimeoutError())
    assert check(ConnectionResetError("reset"))
    assert check(_raise_from(RuntimeError("wrapped"), TimeoutError()))
    assert not check(ValueError("TimeoutError"))


def test_whitelist_entries_in_order() -> None:
    check = Whitelist(KeyError, ValueError("bad gateway"))

    assert check(RuntimeError("502 bad gateway"))
    assert not check(RuntimeError("503 unavailable"))


def test_whitelist_rejects_non_exceptions() -> None:
    with pytest.raises(ConfigurationError):
        Whitelist("timeout")  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError):
        with_whitelist(int)  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError):
        with_blacklist(42)  # type: ignore[arg-type]


def test_whitelist_is_pure() -> None:
    check = Whitelist(ValueError("x"))
    exc = ValueError("x marks the spot")

    assert [check(exc) for _ in range(3)] == [True, True, True]


# ═════════════════════════════════════════════════════════════════════════════
# Blacklist
# ═════════════════════════════════════════════════════════════════════════════


def test_blacklisted_instance_stops(clock: MockClock) -> None:
    e = ValueError("fatal")
    op = ScriptedOperation.always_failing(e)

    result = Retrier.new(op, with_clock(clock), with_retries(5), with_blacklist(e)).try_()

    assert result.unwrap_err() is e
    op.assert_called_times(1)
    assert clock.num_sleeps == 0


def test_blacklist_ignores_messages(clock: MockClock) -> None:
    """Identity only: an equal message on a different instance is still retried."""
    op = ScriptedOperation.always_failing(ValueError("fatal"))

    Retrier.new(op, with_clock(clock), with_retries(5), with_blacklist(ValueError("fatal"))).try_()

    op.assert_called_times(5)


def test_empty_blacklist_retries_everything(clock: MockClock) -> None:
    op = ScriptedOperation.always_failing(ValueError("x"))

    Retrier.new(op, with_clock(clock), with_retries(5), with_blacklist()).try_()

    op.assert_called_times(5)
    assert clock.num_sleeps == 4


def test_blacklist_does_not_stop_error_raised_while_handling_denied_one(clock: MockClock) -> None:
    denied = KeyError("fatal")
    calls: list[int] = []

    def op() -> None:
        calls.append(1)
        try:
            raise denied
        except KeyError:
            raise TimeoutError("slow")  # noqa: B904

    result = Retrier.new(op, with_clock(clock), with_retries(3), with_blacklist(denied)).try_()

    assert isinstance(result.unwrap_err(), TimeoutError)
    assert len(calls) == 3
    assert clock.num_sleeps == 2


def test_blacklist_class_and_cause() -> None:
    check = Blacklist(PermissionError)

    assert not check(PermissionError("denied"))
    assert not check(_raise_from(RuntimeError("wrapped"), PermissionError("denied")))
    assert check(TimeoutError())


# ═════════════════════════════════════════════════════════════════════════════
# Transient & custom
# ═════════════════════════════════════════════════════════════════════════════


def test_classify_exception() -> None:
    assert classify_exception(TimeoutError()) == ErrorCode.TIMEOUT
    assert classify_exception(ConnectionRefusedError()) == ErrorCode.NETWORK_ERROR
    assert classify_exception(PermissionError()) == ErrorCode.PERMISSION_DENIED
    assert classify_exception(RuntimeError("rate limit exceeded")) == ErrorCode.RATE_LIMITED
    assert classify_exception(RuntimeError("429 Too Many Requests")) == ErrorCode.RATE_LIMITED
    assert classify_exception(RuntimeError("boom")) == ErrorCode.EXTERNAL_SERVICE_ERROR


def test_transient_classifier() -> None:
    check = Transient()

    assert check(TimeoutError())
    assert check(ConnectionResetError())
    assert check(_raise_from(RuntimeError("request failed"), TimeoutError()))
    assert not check(ValueError("bad input"))
    assert Transient(frozenset({ErrorCode.PERMISSION_DENIED}))(PermissionError())


def test_custom_classifier_used_verbatim(clock: MockClock) -> None:
    seen: list[BaseException] = []

    def only_first(exc: BaseException) -> bool:
        seen.append(exc)
        return len(seen) < 2

    op = ScriptedOperation.always_failing(ValueError("x"))
    Retrier.new(op, with_clock(clock), with_retries(5), with_retry_check(only_first)).try_()

    op.assert_called_times(2)
    assert clock.num_sleeps == 1
