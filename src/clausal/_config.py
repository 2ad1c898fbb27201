"""Config types for data-driven dispatch tables.

Config-driven construction path:
  dict → parse_table_config() → TableConfig → Loader.load_table() → DispatchTable

Relationship to runtime types:

| Config type            | Runtime type                      |
|------------------------|-----------------------------------|
| TableConfig            | DispatchTable                     |
| OperationConfig        | Registry                          |
| ClauseConfig           | Clause                            |
| GuardConfig            | Guard (raw shape or combinator)   |
| TypedConfig            | handler / custom guard factory    |

Guard configs are single-key mappings::

    {type: int}                 {exact: 3}          {literal: "x"}
    {regex: "^a+"}              {predicate: "is_even?"}
    {capability: "__iter__"}    {sequence: [...]}   {either: [...]}
    {all: [...]}                {not: {...}}        {having: {__len__: 0}}
    {supporting: [...]}         {any: true}
    {custom: {type_url: ..., config: {...}}}

A bare scalar is shorthand for ``{literal: <scalar>}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypedConfig:
    """Reference to a registered factory with its configuration.

    - type_url identifies the registered factory (handler or guard)
    - config carries the factory-specific payload
    """

    type_url: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TypeGuardConfig:
    """Instance-of check against a registered type name."""

    name: str


@dataclass(frozen=True, slots=True)
class ExactGuardConfig:
    value: Any


@dataclass(frozen=True, slots=True)
class LiteralGuardConfig:
    value: Any


@dataclass(frozen=True, slots=True)
class RegexGuardConfig:
    pattern: str


@dataclass(frozen=True, slots=True)
class PredicateGuardConfig:
    """Symbol guard; a trailing ``?`` makes it a receiver predicate."""

    name: str


@dataclass(frozen=True, slots=True)
class CapabilityGuardConfig:
    name: str


@dataclass(frozen=True, slots=True)
class SequenceGuardConfig:
    guards: tuple[GuardConfig, ...]


@dataclass(frozen=True, slots=True)
class EitherGuardConfig:
    guards: tuple[GuardConfig, ...]


@dataclass(frozen=True, slots=True)
class AllGuardConfig:
    guards: tuple[GuardConfig, ...]


@dataclass(frozen=True, slots=True)
class NotGuardConfig:
    guard: GuardConfig


@dataclass(frozen=True, slots=True)
class HavingGuardConfig:
    properties: dict[str, Any]


@dataclass(frozen=True, slots=True)
class SupportingGuardConfig:
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AnyGuardConfig:
    """Matches every argument."""


@dataclass(frozen=True, slots=True)
class CustomGuardConfig:
    """Guard built by a factory registered on the loader."""

    typed_config: TypedConfig


GuardConfig: TypeAlias = (
    TypeGuardConfig
    | ExactGuardConfig
    | LiteralGuardConfig
    | RegexGuardConfig
    | PredicateGuardConfig
    | CapabilityGuardConfig
    | SequenceGuardConfig
    | EitherGuardConfig
    | AllGuardConfig
    | NotGuardConfig
    | HavingGuardConfig
    | SupportingGuardConfig
    | AnyGuardConfig
    | CustomGuardConfig
)


@dataclass(frozen=True, slots=True)
class ClauseConfig:
    args: tuple[GuardConfig, ...]
    kwargs: dict[str, GuardConfig]
    handler: TypedConfig


@dataclass(frozen=True, slots=True)
class OperationConfig:
    name: str
    clauses: tuple[ClauseConfig, ...]
    default: TypedConfig | None = None


@dataclass(frozen=True, slots=True)
class TableConfig:
    """Configuration for a DispatchTable.

    Deserializes from JSON/YAML dicts and can be loaded into a runtime
    DispatchTable via Loader.load_table().
    """

    operations: tuple[OperationConfig, ...]


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_SCALARS = (str, int, float, bool, type(None))


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


def parse_table_config(data: dict[str, Any]) -> TableConfig:
    """Parse a dict into a TableConfig.

    This is the main entry point for config loading.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_operations = data.get("operations")
    if raw_operations is None:
        msg = "missing required field 'operations'"
        raise ConfigParseError(msg)
    if not isinstance(raw_operations, dict):
        msg = f"'operations' must be a dict, got {type(raw_operations).__name__}"
        raise ConfigParseError(msg)

    return TableConfig(
        operations=tuple(
            _parse_operation(name, op) for name, op in raw_operations.items()
        )
    )


def _parse_operation(name: Any, data: Any) -> OperationConfig:
    if not isinstance(name, str):
        msg = f"operation name must be a string, got {type(name).__name__}"
        raise ConfigParseError(msg)
    if not isinstance(data, dict):
        msg = f"operation {name!r} must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_clauses = data.get("clauses", [])
    if not isinstance(raw_clauses, list):
        msg = f"operation {name!r} 'clauses' must be a list, got {type(raw_clauses).__name__}"
        raise ConfigParseError(msg)

    default = None
    if "default" in data:
        default = _parse_typed_config(data["default"])

    return OperationConfig(
        name=name,
        clauses=tuple(_parse_clause(c) for c in raw_clauses),
        default=default,
    )


def _parse_clause(data: Any) -> ClauseConfig:
    if not isinstance(data, dict):
        msg = f"clause must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if "handler" not in data:
        msg = "clause missing required field 'handler'"
        raise ConfigParseError(msg)

    raw_args = data.get("args", [])
    if not isinstance(raw_args, list):
        msg = f"clause 'args' must be a list, got {type(raw_args).__name__}"
        raise ConfigParseError(msg)
    raw_kwargs = data.get("kwargs", {})
    if not isinstance(raw_kwargs, dict):
        msg = f"clause 'kwargs' must be a dict, got {type(raw_kwargs).__name__}"
        raise ConfigParseError(msg)

    return ClauseConfig(
        args=tuple(parse_guard_config(g) for g in raw_args),
        kwargs={str(k): parse_guard_config(g) for k, g in raw_kwargs.items()},
        handler=_parse_typed_config(data["handler"]),
    )


def parse_guard_config(data: Any) -> GuardConfig:
    """Parse a single guard config (a single-key dict or a scalar)."""
    if isinstance(data, _SCALARS):
        return LiteralGuardConfig(value=data)
    if not isinstance(data, dict):
        msg = f"guard must be a dict or scalar, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if len(data) != 1:
        msg = f"guard must have exactly one key, got keys: {sorted(map(str, data))}"
        raise ConfigParseError(msg)

    [(kind, value)] = data.items()
    match kind:
        case "type":
            return TypeGuardConfig(name=_expect_str(kind, value))
        case "exact":
            return ExactGuardConfig(value=value)
        case "literal":
            return LiteralGuardConfig(value=value)
        case "regex":
            return RegexGuardConfig(pattern=_expect_str(kind, value))
        case "predicate":
            return PredicateGuardConfig(name=_expect_str(kind, value))
        case "capability":
            return CapabilityGuardConfig(name=_expect_str(kind, value))
        case "sequence":
            return SequenceGuardConfig(guards=_parse_guard_list(kind, value))
        case "either":
            return EitherGuardConfig(guards=_parse_guard_list(kind, value))
        case "all":
            return AllGuardConfig(guards=_parse_guard_list(kind, value))
        case "not":
            return NotGuardConfig(guard=parse_guard_config(value))
        case "having":
            if not isinstance(value, dict):
                msg = f"'having' must be a dict, got {type(value).__name__}"
                raise ConfigParseError(msg)
            return HavingGuardConfig(properties=dict(value))
        case "supporting":
            if not isinstance(value, list) or not all(isinstance(n, str) for n in value):
                msg = "'supporting' must be a list of strings"
                raise ConfigParseError(msg)
            return SupportingGuardConfig(names=tuple(value))
        case "any":
            if value is not True:
                msg = f"'any' must be true, got {value!r}"
                raise ConfigParseError(msg)
            return AnyGuardConfig()
        case "custom":
            return CustomGuardConfig(typed_config=_parse_typed_config(value))
        case _:
            msg = f"unknown guard kind: {kind!r}"
            raise ConfigParseError(msg)


def _parse_guard_list(kind: str, value: Any) -> tuple[GuardConfig, ...]:
    if not isinstance(value, list):
        msg = f"{kind!r} must be a list, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return tuple(parse_guard_config(g) for g in value)


def _expect_str(kind: str, value: Any) -> str:
    if not isinstance(value, str):
        msg = f"{kind!r} value must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _parse_typed_config(data: Any) -> TypedConfig:
    """Parse a typed config dict."""
    if not isinstance(data, dict):
        msg = f"typed_config must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "type_url" not in data:
        msg = "typed_config missing required field 'type_url'"
        raise ConfigParseError(msg)

    type_url = data["type_url"]
    if not isinstance(type_url, str):
        msg = f"type_url must be a string, got {type(type_url).__name__}"
        raise ConfigParseError(msg)

    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)

    return TypedConfig(type_url=type_url, config=config)
