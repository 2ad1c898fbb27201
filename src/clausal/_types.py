"""Core protocols and type aliases for clausal.

- Guard is the erased guard type: any value can act as a guard, its shape
  decides how it is tested (see clausal._guards.match_guard)
- GuardMatcher is the port implemented by composite guards (combinators)
- Handler is the implementation body a clause routes to
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeAlias, runtime_checkable

# Reserved characters of the raw guard shapes.
CAPABILITY_PREFIX = "#"
PREDICATE_MARKER = "?"

# Any value is a guard; its runtime shape selects the matching rule.
Guard: TypeAlias = Any

# Handlers receive the receiver first, then the call's own arguments.
Handler: TypeAlias = Callable[..., Any]


@runtime_checkable
class GuardMatcher(Protocol):
    """A guard that knows how to test itself against a value.

    ``ctx`` is the receiver of the dispatched call. Composite guards pass it
    through to their children so named predicates and bound callables can
    read receiver state.
    """

    def matches(self, value: Any, ctx: Any, /) -> bool: ...
