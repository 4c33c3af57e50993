"""Retry policy configuration and the option-based builder.

A RetryPolicy bundles everything the engine consults between attempts: the
attempt budget, the classifier, the sleep strategy and the clock. Policies are
frozen once built.

Policies are usually assembled from options, applied in order so that a later
option overrides an earlier one writing the same field:

    >>> policy = build_policy(with_retries(5), with_constant_backoff(0.5))
    >>> policy.max_attempts
    5

Fields no option sets are filled from a RetryDefaults record, which by default
reads RETRIER_RETRY_* settings (falling back to DEFAULT_MAX_ATTEMPTS and
DEFAULT_BACKOFF_FACTOR).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Annotated, Callable, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from retrier.foundation.config import DEFAULT_BACKOFF_FACTOR, DEFAULT_MAX_ATTEMPTS
from retrier.foundation.errors import ConfigurationError, ErrorEntry

from .backoff import Backoff, BackoffSleep, ConstantBackoff, ExponentialBackoff
from .classify import Blacklist, Whitelist, retry_on_all
from .clock import SYSTEM_CLOCK, Clock

if TYPE_CHECKING:
    from retrier.foundation.config import RetrySettings


class RetryPolicy(BaseModel):
    """Immutable retry configuration for one Retrier.

    Attributes:
        max_attempts: Total invocations allowed, first attempt included (>= 1)
        classifier: Decides whether a failure may be retried
        sleep_strategy: Called with (attempt index, clock) to wait before the next attempt
        clock: Time source for timestamps and sleeping
        name: Label used in log records (defaults to the operation's name)
        on_retry: Optional callback ``(attempt index, failure)`` fired before each wait
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Clock protocol
        extra="forbid",
        revalidate_instances="never",
    )

    max_attempts: Annotated[int, Field(ge=1)] = DEFAULT_MAX_ATTEMPTS
    classifier: Callable[[BaseException], bool] = Field(default=retry_on_all, repr=False)
    sleep_strategy: Callable[[int, Clock], None] = Field(
        default_factory=lambda: BackoffSleep(ExponentialBackoff(DEFAULT_BACKOFF_FACTOR)), repr=False,
    )
    clock: Clock = Field(default=SYSTEM_CLOCK, repr=False)
    name: str | None = None
    on_retry: Callable[[int, BaseException], None] | None = Field(default=None, exclude=True, repr=False)

    @property
    def retries(self) -> int:
        """Retries after the first attempt."""
        return self.max_attempts - 1


@dataclass(frozen=True, slots=True)
class RetryDefaults:
    """Values used for policy fields that no option set."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR

    @classmethod
    def from_settings(cls, settings: RetrySettings | None = None) -> RetryDefaults:
        """Defaults from RETRIER_RETRY_* settings (the cached global settings if none given)."""
        if settings is None:
            from retrier.foundation.config import get_settings
            settings = get_settings().retry
        return cls(max_attempts=settings.max_attempts, backoff_factor=settings.backoff_factor)


PACKAGE_DEFAULTS = RetryDefaults()


@dataclass(slots=True)
class PolicyBuilder:
    """Mutable draft of a RetryPolicy. Options write into it; ``build`` fills the gaps."""

    max_attempts: int | None = None
    classifier: Callable[[BaseException], bool] | None = None
    sleep_strategy: Callable[[int, Clock], None] | None = None
    clock: Clock | None = None
    name: str | None = None
    on_retry: Callable[[int, BaseException], None] | None = None

    def apply(self, *options: Option) -> PolicyBuilder:
        for option in options:
            option(self)
        return self

    def build(self, defaults: RetryDefaults = PACKAGE_DEFAULTS) -> RetryPolicy:
        """Freeze the draft into a RetryPolicy, filling unset fields from defaults.

        Raises:
            ConfigurationError: an option supplied an invalid value
        """
        try:
            return RetryPolicy(
                max_attempts=defaults.max_attempts if self.max_attempts is None else self.max_attempts,
                classifier=retry_on_all if self.classifier is None else self.classifier,
                sleep_strategy=self.sleep_strategy if self.sleep_strategy is not None else BackoffSleep(
                    ExponentialBackoff(defaults.backoff_factor)
                ),
                clock=SYSTEM_CLOCK if self.clock is None else self.clock,
                name=self.name,
                on_retry=self.on_retry,
            )
        except ValidationError as e:
            raise ConfigurationError(f"invalid retry policy: {_describe(e)}") from e

    @classmethod
    def from_policy(cls, policy: RetryPolicy) -> PolicyBuilder:
        """Start a draft from an existing policy, e.g. to derive a variant of it."""
        return cls(**{f.name: getattr(policy, f.name) for f in fields(cls)})


Option: TypeAlias = Callable[[PolicyBuilder], PolicyBuilder]


def _describe(e: ValidationError) -> str:
    return "; ".join(f"{'.'.join(map(str, err['loc'])) or 'policy'}: {err['msg']}" for err in e.errors())


def build_policy(*options: Option, defaults: RetryDefaults | None = None) -> RetryPolicy:
    """Apply options in order to an empty draft and build the policy.

    Args:
        *options: Option functions such as with_retries(5)
        defaults: Values for unset fields (default: from settings)
    """
    return PolicyBuilder().apply(*options).build(defaults or RetryDefaults.from_settings())


# ─────────────────────────────────────────────────────────────────────────────
# Options
# ─────────────────────────────────────────────────────────────────────────────


def _setter(**values: object) -> Option:
    def option(builder: PolicyBuilder) -> PolicyBuilder:
        for k, v in values.items():
            setattr(builder, k, v)
        return builder
    return option


def with_retries(max_attempts: int) -> Option:
    """Set the total number of attempts, the first one included."""
    return _setter(max_attempts=max_attempts)


def with_backoff(backoff: Backoff) -> Option:
    """Wait ``backoff.delay(i)`` seconds after failed attempt ``i``."""
    return _setter(sleep_strategy=BackoffSleep(backoff))


def with_exp_backoff(factor: float) -> Option:
    """Exponential backoff: sleep ``factor ** i`` seconds after failed attempt ``i``."""
    return with_backoff(ExponentialBackoff(factor))


def with_constant_backoff(seconds: float) -> Option:
    """Sleep the same number of seconds between every pair of attempts."""
    return with_backoff(ConstantBackoff(seconds))


def with_sleep_strategy(strategy: Callable[[int, Clock], None]) -> Option:
    """Custom sleep strategy, called with the attempt index and the policy's clock.

    It runs only after a retry has been decided and is responsible for
    performing the wait itself, normally through ``clock.sleep``.
    """
    return _setter(sleep_strategy=strategy)


def with_whitelist(*errors: ErrorEntry) -> Option:
    """Retry only failures matching one of ``errors``. See Whitelist for the matching rules."""
    return _setter(classifier=Whitelist(*errors))


def with_blacklist(*errors: ErrorEntry) -> Option:
    """Retry all failures except those identical to, or instances of, one of ``errors``."""
    return _setter(classifier=Blacklist(*errors))


def with_retry_check(check: Callable[[BaseException], bool]) -> Option:
    """Custom predicate deciding whether a failure should be retried."""
    return _setter(classifier=check)


def with_clock(clock: Clock) -> Option:
    """Custom time source. Use this to mock out the time calls a Retrier makes."""
    return _setter(clock=clock)


def with_name(name: str) -> Option:
    """Label used in log records instead of the operation's name."""
    return _setter(name=name)


def with_on_retry(callback: Callable[[int, BaseException], None]) -> Option:
    """Callback fired with (attempt index, failure) after a retry is decided, before waiting."""
    return _setter(on_retry=callback)


def with_policy(policy: RetryPolicy) -> Option:
    """Copy every field of an existing policy into the draft."""
    def option(builder: PolicyBuilder) -> PolicyBuilder:
        source = PolicyBuilder.from_policy(policy)
        for f in fields(PolicyBuilder):
            setattr(builder, f.name, getattr(source, f.name))
        return builder
    return option


def derive(policy: RetryPolicy, *options: Option) -> RetryPolicy:
    """New policy from an existing one with options applied on top."""
    return PolicyBuilder.from_policy(policy).apply(*options).build()
