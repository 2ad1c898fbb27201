"""Dispatch engine — first-match-wins clause resolution.

- Clauses are tried in registration order; later matches are never consulted
- Arity and keyword key set must match exactly, otherwise the clause is skipped
- The default is the Registry-level fallback
- With neither, ResolutionError is raised

There is no "most specific wins" ranking. Callers express specificity by
registering narrower clauses first.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from clausal._guards import DispatchError, match_guard

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from clausal._registry import Clause, Registry
    from clausal._types import Handler

logger = logging.getLogger(__name__)


class ResolutionError(DispatchError):
    """No clause matched and the operation has no default.

    Carries a snapshot of the attempted call for diagnosis.
    """

    def __init__(
        self, operation: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        self.operation = operation
        self.call_args = args
        self.call_kwargs = kwargs
        parts = [repr(a) for a in args]
        parts.extend(f"{k}={v!r}" for k, v in kwargs.items())
        super().__init__(
            f"no matching {operation!r} clause for arguments ({', '.join(parts)})"
        )


def clause_matches(
    clause: Clause,
    args: Sequence[Any],
    kwargs: Mapping[str, Any],
    ctx: Any = None,
) -> bool:
    """Check whether a call fits a clause.

    The shape check (positional count, keyword key set) runs before any
    guard so guards never see calls of the wrong shape.
    """
    if len(args) != len(clause.positional):
        return False
    if kwargs.keys() != clause.named.keys():
        return False
    if not all(
        match_guard(g, a, ctx) for g, a in zip(clause.positional, args, strict=True)
    ):
        return False
    return all(match_guard(g, kwargs[k], ctx) for k, g in clause.named.items())


def resolve(
    registry: Registry,
    args: Sequence[Any],
    kwargs: Mapping[str, Any] | None = None,
    ctx: Any = None,
) -> Handler:
    """Select the handler for a call.

    Returns the handler of the first matching clause, else the default.

    Raises:
        ResolutionError: No clause matches and no default is registered.
    """
    kwargs = {} if kwargs is None else kwargs
    for index, clause in enumerate(registry.clauses):
        if clause_matches(clause, args, kwargs, ctx):
            logger.debug("%s: clause #%d matched", registry.name, index)
            return clause.handler
    if registry.default is not None:
        logger.debug("%s: no clause matched, using default", registry.name)
        return registry.default
    raise ResolutionError(registry.name, tuple(args), dict(kwargs))


def invoke(
    handler: Handler,
    receiver: Any,
    args: Sequence[Any],
    kwargs: Mapping[str, Any] | None = None,
) -> Any:
    """Apply a resolved handler to the receiver and the original arguments.

    ``kwargs=None`` and an empty mapping produce the same call.
    """
    return handler(receiver, *args, **(kwargs or {}))


def dispatch(
    registry: Registry,
    receiver: Any,
    args: Sequence[Any],
    kwargs: Mapping[str, Any] | None = None,
) -> Any:
    """Resolve a call against ``registry`` and invoke the chosen handler.

    The receiver doubles as the context for named predicates and bound
    guards.
    """
    handler = resolve(registry, args, kwargs, receiver)
    return invoke(handler, receiver, args, kwargs)
