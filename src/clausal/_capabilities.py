"""Capability guards — match on what a value exposes.

Supporting only checks presence. Having also reads each attribute (calling
it with no arguments when it is a method) and compares the result.

A missing attribute is a non-match for both, unlike a named predicate
Symbol, where a missing receiver method raises.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from clausal._types import CAPABILITY_PREFIX

_MISSING = object()


@dataclass(frozen=True, slots=True)
class Supporting:
    """The value exposes every named attribute.

    ``Supporting(("__iter__",))`` matches lists and dicts, not ints.
    """

    names: tuple[str, ...]

    def matches(self, value: Any, ctx: Any, /) -> bool:
        return all(hasattr(value, name) for name in self.names)


@dataclass(frozen=True, slots=True)
class Having:
    """Each named attribute exists and yields the expected result.

    Callable attributes are invoked without arguments, so
    ``Having({"__len__": 0})`` matches empty containers and
    ``Having({"real": 3})`` matches ``3`` and ``3.0``.
    """

    properties: MappingProxyType[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def matches(self, value: Any, ctx: Any, /) -> bool:
        for name, expected in self.properties.items():
            attr = getattr(value, name, _MISSING)
            if attr is _MISSING:
                return False
            if _is_invocable(value, attr):
                attr = attr()
            if attr != expected:
                return False
        return True


def _is_invocable(owner: Any, attr: Any) -> bool:
    # Classes are read, not instantiated. On a class candidate only bound
    # methods (classmethods) take no arguments.
    if isinstance(attr, type) or not callable(attr):
        return False
    if isinstance(owner, type):
        return inspect.ismethod(attr)
    return True


def _strip_prefix(name: str) -> str:
    return name.removeprefix(CAPABILITY_PREFIX)


def having(**expected: Any) -> Having:
    """Match values whose named properties produce the expected results.

    Names may carry the ``#`` capability prefix when passed through
    ``**{"#name": ...}``; it is ignored.
    """
    return Having(
        MappingProxyType({_strip_prefix(k): v for k, v in expected.items()})
    )


def supporting(*names: str) -> Supporting:
    """Match values that expose every one of ``names``."""
    return Supporting(tuple(_strip_prefix(n) for n in names))
