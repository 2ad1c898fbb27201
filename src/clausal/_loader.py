"""Loader for config-driven dispatch tables.

- LoaderBuilder → .build() → Loader (immutable)
- Types, guard factories and handler factories are registered by name
- Factories are plain callables: (config: dict) → Guard or Handler
- load_table() walks the config tree and constructs runtime registries

Example::

    builder = LoaderBuilder()
    register_builtin_types(builder)
    builder.handler("app.v1.Describe", lambda cfg: make_handler(cfg["label"]))
    loader = builder.build()

    config = parse_table_config(yaml.safe_load(text))
    table = loader.load_table(config)
    table.dispatch(receiver, "describe", (5,))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType, NoneType
from typing import TYPE_CHECKING, Any, TypeAlias

from clausal._capabilities import having, supporting
from clausal._combinators import ANY, either, exact, full_match, negated
from clausal._config import (
    AllGuardConfig,
    AnyGuardConfig,
    CapabilityGuardConfig,
    CustomGuardConfig,
    EitherGuardConfig,
    ExactGuardConfig,
    HavingGuardConfig,
    LiteralGuardConfig,
    NotGuardConfig,
    PredicateGuardConfig,
    RegexGuardConfig,
    SequenceGuardConfig,
    SupportingGuardConfig,
    TypeGuardConfig,
)
from clausal._guards import DispatchError, GuardError, Symbol
from clausal._operation import DispatchTable
from clausal._pattern import pattern
from clausal._registry import RegistryBuilder
from clausal._types import CAPABILITY_PREFIX

if TYPE_CHECKING:
    from collections.abc import Callable

    from clausal._config import (
        ClauseConfig,
        GuardConfig,
        OperationConfig,
        TableConfig,
        TypedConfig,
    )
    from clausal._registry import Registry
    from clausal._types import Guard, Handler

logger = logging.getLogger(__name__)

MAX_GUARDS_PER_COMPOUND = 256

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownNameError(DispatchError):
    """A type name or type_url was not found in the loader."""

    def __init__(self, name: str, kind: str, available: list[str]) -> None:
        self.name = name
        self.kind = kind
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown {kind}: {name!r} (registered: {registered})"
        else:
            msg = f"unknown {kind}: {name!r} (no {kind}s are registered)"
        super().__init__(msg)


class InvalidConfigError(DispatchError):
    """A config payload was malformed or semantically invalid."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class TooManyGuardsError(DispatchError):
    """Compound guard has too many children (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(
            f"too many guards in compound: {count} exceeds maximum {max_}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

GuardFactory: TypeAlias = "Callable[[dict[str, Any]], Guard]"
HandlerFactory: TypeAlias = "Callable[[dict[str, Any]], Handler]"

_BUILTIN_TYPES: dict[str, type] = {
    "int": int,
    "float": float,
    "str": str,
    "bytes": bytes,
    "bool": bool,
    "list": list,
    "tuple": tuple,
    "dict": dict,
    "set": set,
    "NoneType": NoneType,
}


class LoaderBuilder:
    """Builder for constructing a Loader.

    Register types, guard factories and handler factories, then call
    build() to produce an immutable Loader.
    """

    def __init__(self) -> None:
        self._types: dict[str, type] = {}
        self._guard_factories: dict[str, GuardFactory] = {}
        self._handler_factories: dict[str, HandlerFactory] = {}

    def type(self, name: str, cls: type) -> LoaderBuilder:
        """Register a class under the name used by ``{type: <name>}``."""
        self._types[name] = cls
        return self

    def guard(self, type_url: str, factory: GuardFactory) -> LoaderBuilder:
        """Register a custom guard factory with a type URL."""
        self._guard_factories[type_url] = factory
        return self

    def handler(self, type_url: str, factory: HandlerFactory) -> LoaderBuilder:
        """Register a handler factory with a type URL."""
        self._handler_factories[type_url] = factory
        return self

    def build(self) -> Loader:
        """Freeze the loader. No further registration is possible."""
        return Loader(
            _types=MappingProxyType(dict(self._types)),
            _guard_factories=MappingProxyType(dict(self._guard_factories)),
            _handler_factories=MappingProxyType(dict(self._handler_factories)),
        )


def register_builtin_types(builder: LoaderBuilder) -> LoaderBuilder:
    """Register the builtin scalar and container types by their names."""
    for name, cls in _BUILTIN_TYPES.items():
        builder.type(name, cls)
    return builder


# ═══════════════════════════════════════════════════════════════════════════════
# Loader
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Loader:
    """Immutable set of types and factories.

    Constructed via LoaderBuilder. Use load_table() to compile config into
    a runtime DispatchTable.
    """

    _types: MappingProxyType[str, type] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _guard_factories: MappingProxyType[str, GuardFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _handler_factories: MappingProxyType[str, HandlerFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load_table(self, config: TableConfig) -> DispatchTable:
        """Load a DispatchTable from configuration.

        Raises:
            UnknownNameError: type name or type_url not registered
            InvalidConfigError: factory rejected its payload
            TooManyGuardsError: too many compound guard children
            TooManyClausesError: too many clauses in one operation
            GuardError: malformed guard (bad regex, too deep)
        """
        registries = {op.name: self.load_registry(op) for op in config.operations}
        logger.debug("loaded dispatch table with %d operation(s)", len(registries))
        return DispatchTable.from_registries(registries)

    def load_registry(self, config: OperationConfig) -> Registry:
        builder = RegistryBuilder(config.name)
        for clause in config.clauses:
            self._load_clause(builder, clause)
        if config.default is not None:
            builder.default(self._load_handler(config.default))
        return builder.build(seal=True)

    def load_guard(self, config: GuardConfig) -> Guard:
        """Compile a single guard config into a runtime guard."""
        match config:
            case TypeGuardConfig(name=name):
                cls = self._types.get(name)
                if cls is None:
                    raise UnknownNameError(name, "type", list(self._types))
                return cls
            case ExactGuardConfig(value=value):
                return exact(value)
            case LiteralGuardConfig(value=value):
                # Literals compare by equality only: lists must not become
                # sequence guards nor "#" strings capability probes.
                if isinstance(value, (list, dict)) or (
                    isinstance(value, str) and value.startswith(CAPABILITY_PREFIX)
                ):
                    return exact(value)
                return value
            case RegexGuardConfig(pattern=regex):
                return pattern(regex)
            case PredicateGuardConfig(name=name):
                return Symbol(name)
            case CapabilityGuardConfig(name=name):
                return CAPABILITY_PREFIX + name.removeprefix(CAPABILITY_PREFIX)
            case SequenceGuardConfig(guards=children):
                return [self.load_guard(g) for g in children]
            case EitherGuardConfig(guards=children):
                return either(*self._load_compound(children))
            case AllGuardConfig(guards=children):
                return full_match(*self._load_compound(children))
            case NotGuardConfig(guard=inner):
                return negated(self.load_guard(inner))
            case HavingGuardConfig(properties=props):
                return having(**props)
            case SupportingGuardConfig(names=names):
                return supporting(*names)
            case AnyGuardConfig():
                return ANY
            case CustomGuardConfig(typed_config=tc):
                factory = self._guard_factories.get(tc.type_url)
                if factory is None:
                    raise UnknownNameError(
                        tc.type_url, "guard", list(self._guard_factories)
                    )
                return _call_factory(factory, tc)
            case _:  # pragma: no cover
                msg = f"unknown guard config type: {type(config).__name__}"
                raise InvalidConfigError(msg)

    @property
    def type_count(self) -> int:
        return len(self._types)

    def contains_type(self, name: str) -> bool:
        return name in self._types

    def contains_handler(self, type_url: str) -> bool:
        return type_url in self._handler_factories

    def type_names(self) -> list[str]:
        """Return all registered type names (sorted)."""
        return sorted(self._types)

    def handler_type_urls(self) -> list[str]:
        """Return all registered handler type URLs (sorted)."""
        return sorted(self._handler_factories)

    # ── Private loading methods ────────────────────────────────────────────

    def _load_clause(self, builder: RegistryBuilder, config: ClauseConfig) -> None:
        args = [self.load_guard(g) for g in config.args]
        kwargs = {k: self.load_guard(g) for k, g in config.kwargs.items()}
        builder.clause(self._load_handler(config.handler), *args, **kwargs)

    def _load_compound(self, children: tuple[GuardConfig, ...]) -> list[Guard]:
        if len(children) > MAX_GUARDS_PER_COMPOUND:
            raise TooManyGuardsError(len(children), MAX_GUARDS_PER_COMPOUND)
        return [self.load_guard(g) for g in children]

    def _load_handler(self, config: TypedConfig) -> Handler:
        factory = self._handler_factories.get(config.type_url)
        if factory is None:
            raise UnknownNameError(
                config.type_url, "handler", list(self._handler_factories)
            )
        return _call_factory(factory, config)


def _call_factory(factory: Callable[[dict[str, Any]], Any], config: TypedConfig) -> Any:
    try:
        return factory(config.config)
    except GuardError:
        raise
    except Exception as e:
        raise InvalidConfigError(str(e)) from e
