"""Test utilities for clausal.

Provides convenience handlers for tests and examples. These are NOT a
domain integration; they exist to reduce boilerplate when exploring
clausal with config-driven tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from clausal._loader import LoaderBuilder


@dataclass(frozen=True, slots=True)
class Constant:
    """A handler that ignores its arguments and returns a fixed value.

    >>> from clausal import RegistryBuilder, dispatch
    >>> from clausal.testing import Constant
    >>> registry = RegistryBuilder("kind").clause(Constant("int"), int).build()
    >>> dispatch(registry, None, (5,))
    'int'
    """

    value: Any

    def __call__(self, receiver: Any, /, *args: Any, **kwargs: Any) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Echo:
    """A handler that returns the call's arguments as ``(args, kwargs)``."""

    def __call__(
        self, receiver: Any, /, *args: Any, **kwargs: Any
    ) -> tuple[tuple[Any, ...], dict[str, Any]]:
        return args, kwargs


def register(builder: LoaderBuilder) -> LoaderBuilder:
    """Register the test-domain handlers.

    Type URLs:
    - clausal.test.v1.Constant, config: { "value": <any> }
    - clausal.test.v1.Echo, no config
    """
    builder.handler("clausal.test.v1.Constant", _constant_factory)
    return builder.handler("clausal.test.v1.Echo", lambda cfg: Echo())


def _constant_factory(config: dict[str, Any]) -> Constant:
    if "value" not in config:
        msg = "Constant requires a 'value' field"
        raise ValueError(msg)
    return Constant(value=config["value"])
