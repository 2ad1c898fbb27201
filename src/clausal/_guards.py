"""Guard evaluation — the algebra behind every clause.

match_guard() tests one guard against one candidate value. The guard's
runtime shape selects the rule:

| Shape                         | Matches when                                   |
|-------------------------------|------------------------------------------------|
| GuardMatcher (combinators)    | ``guard.matches(value, ctx)``                  |
| class or PEP 604 union        | ``isinstance(value, guard)``                   |
| Symbol ending in ``?``        | ``ctx.<name>(value)`` is truthy                |
| Symbol                        | ``guard == value``                             |
| compiled regex                | value is a str and the pattern is found in it |
| list                          | same-length sequence, pairwise match           |
| str starting with ``#``       | value has the named attribute                  |
| other callable                | ``guard(value)`` is truthy                     |
| anything else                 | ``guard == value``                             |

Guards never raise on their own. Exceptions come from user predicates and
from a named predicate the receiver does not define; both propagate.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from types import UnionType
from typing import Any

from clausal._types import CAPABILITY_PREFIX, PREDICATE_MARKER, Guard, GuardMatcher


class DispatchError(Exception):
    """Base class for all clausal errors."""


class GuardError(DispatchError):
    """A guard is malformed and can never be evaluated."""


@dataclass(frozen=True, slots=True)
class Symbol:
    """A symbolic name used as a guard.

    With a trailing ``?`` the symbol names a predicate method on the
    receiver: ``Symbol("is_even?")`` calls ``receiver.is_even(value)``.
    Without the marker it is an ordinary value compared by equality.
    """

    name: str

    @property
    def is_predicate(self) -> bool:
        return self.name.endswith(PREDICATE_MARKER)

    @property
    def method_name(self) -> str:
        """The receiver attribute a predicate symbol resolves to."""
        return self.name.removesuffix(PREDICATE_MARKER)


def sym(name: str) -> Symbol:
    """Shorthand for ``Symbol(name)``."""
    return Symbol(name)


def match_guard(guard: Guard, value: Any, ctx: Any = None) -> bool:
    """Test ``guard`` against ``value`` with ``ctx`` as the receiver."""
    match guard:
        case type() | UnionType():
            return isinstance(value, guard)
        case GuardMatcher():
            return guard.matches(value, ctx)
        case Symbol() if guard.is_predicate:
            # AttributeError on a missing method is deliberate: a typo in a
            # predicate name must not read as "no match".
            return bool(getattr(ctx, guard.method_name)(value))
        case re.Pattern():
            return isinstance(value, str) and guard.search(value) is not None
        case list():
            return match_sequence(guard, value, ctx)
        case str() if guard.startswith(CAPABILITY_PREFIX):
            return hasattr(value, guard.removeprefix(CAPABILITY_PREFIX))
        case Symbol():
            return guard == value
        case _ if callable(guard):
            return bool(guard(value))
        case _:
            return bool(guard == value)


def match_sequence(guards: list[Guard], value: Any, ctx: Any = None) -> bool:
    """Match a list of guards element-wise against a sequence value.

    Strings and bytes are not sequences here. Lengths must be equal.
    """
    if not is_sequence(value) or len(guards) != len(value):
        return False
    return all(match_guard(g, v, ctx) for g, v in zip(guards, value, strict=True))


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )
