"""Host-type integration — operations declared in a class body.

Example::

    class Shapes(Dispatching):
        describe = operation()

        @describe.clause(int)
        def describe(self, x):
            return "int"

        @describe.clause(str)
        def describe(self, x):
            return "str"

        @describe.default
        def describe(self, x):
            return "other"

    Shapes().describe(5)               # "int"
    Shapes().dispatch("describe", 3.0) # "other"

Each decorator appends to the operation's RegistryBuilder and hands the same
Operation back, so rebinding the name keeps it dispatch-enabled. When the
class is created the registry is sealed and, for Dispatching subclasses,
recorded in the class's DispatchTable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType, MethodType
from typing import TYPE_CHECKING, Any, ClassVar

from clausal._engine import dispatch
from clausal._guards import DispatchError
from clausal._registry import Registry, RegistrationError, RegistryBuilder

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from clausal._types import Guard, Handler

logger = logging.getLogger(__name__)


class UnknownOperationError(DispatchError):
    """An operation name was not found in a DispatchTable."""

    def __init__(self, operation: str, available: list[str]) -> None:
        self.operation = operation
        self.available = sorted(available)
        if self.available:
            msg = (
                f"unknown operation: {operation!r} "
                f"(declared: {', '.join(self.available)})"
            )
        else:
            msg = f"unknown operation: {operation!r} (no operations are declared)"
        super().__init__(msg)


@dataclass(frozen=True, slots=True)
class DispatchTable:
    """Immutable mapping of operation name to Registry, owned by one type."""

    _registries: MappingProxyType[str, Registry] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_registries(cls, registries: Mapping[str, Registry]) -> DispatchTable:
        return cls(MappingProxyType(dict(registries)))

    def registry(self, operation: str) -> Registry:
        """Raises UnknownOperationError for undeclared names."""
        try:
            return self._registries[operation]
        except KeyError:
            raise UnknownOperationError(operation, list(self._registries)) from None

    def dispatch(
        self,
        receiver: Any,
        operation: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        return dispatch(self.registry(operation), receiver, args, kwargs)

    def contains(self, operation: str) -> bool:
        return operation in self._registries

    def operation_names(self) -> list[str]:
        """Return all declared operation names (sorted)."""
        return sorted(self._registries)

    def __len__(self) -> int:
        return len(self._registries)


class Operation:
    """A dispatch-enabled operation declared in a class body.

    Acts as a descriptor: ``instance.op(*args, **kwargs)`` resolves against
    the sealed registry with the instance as receiver.
    """

    def __init__(self, name: str | None = None) -> None:
        self._builder = RegistryBuilder(name or "<operation>")
        self._registry: Registry | None = None
        self.name = name
        self.owner: type | None = None

    def clause(
        self, *guards: Guard, **named_guards: Guard
    ) -> Callable[[Handler], Operation]:
        """Decorator: register the decorated function as a guarded clause."""

        def decorate(handler: Handler) -> Operation:
            self._builder.clause(handler, *guards, **named_guards)
            return self

        return decorate

    def default(self, handler: Handler) -> Operation:
        """Decorator: register the decorated function as the fallback."""
        self._builder.default(handler)
        return self

    def __set_name__(self, owner: type, name: str) -> None:
        if self.owner is owner:
            # Same operation bound under a second name in one class body.
            return
        if self.owner is not None:
            msg = (
                f"operation {self.name!r} already belongs to "
                f"{self.owner.__qualname__}; declare a new operation() "
                f"in {owner.__qualname__}"
            )
            raise RegistrationError(msg)
        self.owner = owner
        if self.name is None:
            self.name = name
            self._builder.name = name
        self._registry = self._builder.build(seal=True)
        logger.debug(
            "sealed operation %s.%s with %d clause(s)",
            owner.__qualname__,
            self.name,
            self._registry.clause_count,
        )

    @property
    def registry(self) -> Registry:
        if self._registry is None:
            msg = f"operation {self.name!r} is not bound to a class yet"
            raise RegistrationError(msg)
        return self._registry

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return MethodType(self, instance)

    def __call__(self, receiver: Any, /, *args: Any, **kwargs: Any) -> Any:
        return dispatch(self.registry, receiver, args, kwargs)

    def __repr__(self) -> str:
        owner = self.owner.__qualname__ if self.owner is not None else "?"
        return f"<Operation {owner}.{self.name}>"


def operation(name: str | None = None) -> Operation:
    """Declare an operation; its name defaults to the attribute name."""
    return Operation(name)


class Dispatching:
    """Base for host types that own a DispatchTable.

    Subclasses inherit their parents' registries. Declaring an operation of
    the same name replaces the inherited one; clauses are not merged.
    """

    __dispatch_table__: ClassVar[DispatchTable] = DispatchTable()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        registries: dict[str, Registry] = {}
        for base in reversed(cls.__mro__[1:]):
            table = base.__dict__.get("__dispatch_table__")
            if isinstance(table, DispatchTable):
                registries.update(table._registries)
        for value in cls.__dict__.values():
            if isinstance(value, Operation) and value.owner is cls:
                registries[value.name] = value.registry
        cls.__dispatch_table__ = DispatchTable.from_registries(registries)

    def dispatch(self, operation: str, /, *args: Any, **kwargs: Any) -> Any:
        """Explicit entry point: route ``operation`` by name."""
        return type(self).__dispatch_table__.dispatch(self, operation, args, kwargs)
