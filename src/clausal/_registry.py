"""Clause registries — one per (host type, operation name).

- RegistryBuilder(name) → .clause()/.default() → .build() → Registry (immutable)
- Clause order is registration order and is never changed
- A later default silently replaces an earlier one

Example::

    builder = RegistryBuilder("describe")
    builder.clause(lambda self, x: "int", int)
    builder.clause(lambda self, x: "str", str)
    builder.default(lambda self, x: "other")
    registry = builder.build()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from clausal._combinators import MAX_DEPTH, guard_depth
from clausal._guards import DispatchError, GuardError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from clausal._types import Guard, Handler

logger = logging.getLogger(__name__)

MAX_CLAUSES = 256

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class RegistrationError(DispatchError):
    """A clause or default could not be registered."""


class TooManyClausesError(DispatchError):
    """An operation has too many clauses (width-based limit)."""

    def __init__(self, operation: str, count: int, max_: int) -> None:
        self.operation = operation
        self.count = count
        self.max = max_
        super().__init__(
            f"too many clauses for {operation!r}: {count} exceeds maximum {max_}"
        )


class GuardTooDeepError(GuardError):
    """A guard tree nests deeper than MAX_DEPTH."""

    def __init__(self, depth: int, max_: int) -> None:
        self.depth = depth
        self.max = max_
        super().__init__(
            f"guard depth {depth} exceeds maximum allowed depth {max_}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Clause
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Clause:
    """One guarded implementation of an operation.

    Matches a call only when the call has exactly ``len(positional)``
    positional arguments, exactly the keys of ``named`` as keyword
    arguments, and every guard matches its argument.

    Depth validation runs automatically at construction time.
    """

    positional: tuple[Guard, ...]
    named: Mapping[str, Guard]
    handler: Handler

    def __post_init__(self) -> None:
        object.__setattr__(self, "positional", tuple(self.positional))
        object.__setattr__(self, "named", MappingProxyType(dict(self.named)))
        if not callable(self.handler):
            msg = f"clause handler must be callable, got {type(self.handler).__name__}"
            raise RegistrationError(msg)
        self.validate()

    def validate(self) -> None:
        """Raises GuardTooDeepError if any guard exceeds MAX_DEPTH."""
        d = self.depth()
        if d > MAX_DEPTH:
            raise GuardTooDeepError(d, MAX_DEPTH)

    def depth(self) -> int:
        guards = (*self.positional, *self.named.values())
        return max((guard_depth(g) for g in guards), default=0)

    @property
    def arity(self) -> int:
        return len(self.positional)


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable, ordered clause list of one operation plus its default.

    Constructed via RegistryBuilder. Resolve calls against it with
    clausal.resolve() or clausal.dispatch().
    """

    name: str
    clauses: tuple[Clause, ...] = ()
    default: Handler | None = None

    @property
    def clause_count(self) -> int:
        return len(self.clauses)

    @property
    def has_default(self) -> bool:
        return self.default is not None


class RegistryBuilder:
    """Builder for a single operation's Registry.

    Append clauses and set the default, then call build() to freeze.
    Nothing can be registered once the builder is sealed.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._clauses: list[Clause] = []
        self._default: Handler | None = None
        self._sealed = False

    def clause(
        self, handler: Handler, *guards: Guard, **named_guards: Guard
    ) -> RegistryBuilder:
        """Append a clause. Earlier clauses take precedence."""
        self._check_open()
        self._clauses.append(Clause(guards, named_guards, handler))
        return self

    def default(self, handler: Handler) -> RegistryBuilder:
        """Set the fallback handler, replacing any earlier one."""
        self._check_open()
        if not callable(handler):
            msg = f"default handler must be callable, got {type(handler).__name__}"
            raise RegistrationError(msg)
        self._default = handler
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def build(self, *, seal: bool = False) -> Registry:
        """Freeze the clauses registered so far into a Registry.

        With ``seal=True`` the builder rejects any further registration.
        """
        if len(self._clauses) > MAX_CLAUSES:
            raise TooManyClausesError(self.name, len(self._clauses), MAX_CLAUSES)
        self._sealed = self._sealed or seal
        logger.debug(
            "built registry %r: %d clause(s), default=%s",
            self.name,
            len(self._clauses),
            self._default is not None,
        )
        return Registry(
            name=self.name, clauses=tuple(self._clauses), default=self._default
        )

    def _check_open(self) -> None:
        if self._sealed:
            msg = f"operation {self.name!r} is sealed; no further registration"
            raise RegistrationError(msg)
