"""Guard composition — Boolean logic over guards.

Either, FullMatch and Negated compose guards with short-circuit evaluation
against a single value. Exact and Bound cover the two cases the raw guard
shapes cannot express: matching a class object itself, and predicates that
need the receiver.

FullMatch is not a sequence guard: ``full_match(int, "#bit_length")``
tests one value twice, while ``[int, "#bit_length"]`` tests a two-element
sequence.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from clausal._guards import match_guard
from clausal._types import Guard

MAX_DEPTH = 32


@dataclass(frozen=True, slots=True)
class Anything:
    """Matches every value."""

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Nothing:
    """Matches no value."""

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return False


ANY = Anything()
NOTHING = Nothing()


@dataclass(frozen=True, slots=True)
class Either:
    """Any guard must match (logical OR).

    Short-circuits on the first match. Empty Either never matches.
    """

    guards: tuple[Guard, ...]

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return any(match_guard(g, value, ctx) for g in self.guards)


@dataclass(frozen=True, slots=True)
class FullMatch:
    """All guards must match the same value (logical AND).

    Short-circuits on the first miss. Empty FullMatch always matches.
    """

    guards: tuple[Guard, ...]

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return all(match_guard(g, value, ctx) for g in self.guards)


@dataclass(frozen=True, slots=True)
class Negated:
    """Inverts the result of the inner guard (logical NOT)."""

    guard: Guard

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return not match_guard(self.guard, value, ctx)


@dataclass(frozen=True, slots=True)
class Exact:
    """Equality with a fixed value, whatever its shape.

    ``Exact(int)`` matches the class ``int`` and not ``2``;
    ``Exact("#tag")`` matches the string ``"#tag"`` rather than probing
    for a ``tag`` attribute.
    """

    value: Any

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return bool(self.value == value)


@dataclass(frozen=True, slots=True)
class Bound:
    """A predicate that receives the receiver explicitly.

    The function is called as ``fn(ctx, value)`` so its body can consult
    receiver state without being rebound to it.
    """

    fn: Callable[[Any, Any], Any]

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return bool(self.fn(ctx, value))


def either(*guards: Guard) -> Guard:
    """Match a value if any of ``guards`` matches it.

    Emulates sum types: ``either(int, list)`` matches ``2`` and ``[2]``.

    - Empty -> NOTHING
    - Single -> the guard itself
    - Multiple -> Either(guards)
    """
    if not guards:
        return NOTHING
    if len(guards) == 1:
        return guards[0]
    return Either(guards)


def full_match(*guards: Guard) -> Guard:
    """Match a value only if every one of ``guards`` matches it.

    ``full_match(int, "#bit_length")`` matches ints that also expose
    ``bit_length``. Symmetric with either().
    """
    if not guards:
        return ANY
    if len(guards) == 1:
        return guards[0]
    return FullMatch(guards)


def negated(guard: Guard) -> Negated:
    return Negated(guard)


def exact(value: Any) -> Exact:
    """Match only values equal to ``value`` itself."""
    return Exact(value)


def bound(fn: Callable[[Any, Any], Any]) -> Bound:
    """Wrap a two-argument ``fn(receiver, value)`` predicate as a guard."""
    return Bound(fn)


def guard_depth(guard: Guard) -> int:
    """Calculate the nesting depth of a guard tree."""
    match guard:
        case Either(guards=gs) | FullMatch(guards=gs):
            return 1 + max((guard_depth(g) for g in gs), default=0)
        case Negated(guard=inner):
            return 1 + guard_depth(inner)
        case list():
            return 1 + max((guard_depth(g) for g in guard), default=0)
        case _:
            return 1
