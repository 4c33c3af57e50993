"""Cause-chain traversal and error matching.

A failure's cause chain is the failure itself followed by each exception it
was explicitly raised from (``raise ... from cause``, i.e. ``__cause__``).
The implicit ``__context__`` link, set when an error is raised while another
is being handled, is not part of the chain. Matching walks this one sequence
instead of probing for several unwrap conventions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterator

ErrorEntry: TypeAlias = "BaseException | type[BaseException]"


def unwrap(exc: BaseException) -> BaseException | None:
    """Return the explicit cause of exc, or None at the root."""
    return exc.__cause__


def iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield exc then each nested cause. Stops on cycles."""
    seen: set[int] = set()
    node: BaseException | None = exc
    while node is not None and id(node) not in seen:
        seen.add(id(node))
        yield node
        node = unwrap(node)


def cause_chain(exc: BaseException) -> tuple[BaseException, ...]:
    """Materialized cause chain, outermost first, root cause last."""
    return tuple(iter_causes(exc))


def is_error(exc: BaseException, entry: ErrorEntry) -> bool:
    """Identity match: entry is a node of the chain, or a class one node is an instance of."""
    if isinstance(entry, type):
        return any(isinstance(node, entry) for node in iter_causes(exc))
    return any(node is entry for node in iter_causes(exc))


def message_matches(exc: BaseException, entry: BaseException) -> bool:
    """True when some chain node's message equals or contains entry's message."""
    needle = str(entry)
    return any(needle in str(node) for node in iter_causes(exc))


def error_matches(exc: BaseException, entry: ErrorEntry) -> bool:
    """Layered match used by whitelists: identity first, then message containment."""
    if is_error(exc, entry):
        return True
    return not isinstance(entry, type) and message_matches(exc, entry)
