"""Tests for config-driven table loading (clausal._loader).

Validates the builder → frozen loader → load_table pipeline.
"""

from __future__ import annotations

from typing import Any

import pytest

from clausal import (
    ANY,
    MAX_GUARDS_PER_COMPOUND,
    DispatchTable,
    GuardError,
    InvalidConfigError,
    Loader,
    LoaderBuilder,
    ResolutionError,
    Symbol,
    TooManyGuardsError,
    UnknownNameError,
    match_guard,
    parse_guard_config,
    parse_table_config,
    register_builtin_types,
)
from clausal.testing import register

CONSTANT = "clausal.test.v1.Constant"


def _handler(value: str) -> dict[str, Any]:
    return {"type_url": CONSTANT, "config": {"value": value}}


class TestLoaderBuilder:
    def test_registers_and_freezes(self) -> None:
        loader = LoaderBuilder().type("complex", complex).build()
        assert loader.type_count == 1
        assert loader.contains_type("complex")
        assert not loader.contains_type("int")

    def test_builtin_types(self) -> None:
        loader = register_builtin_types(LoaderBuilder()).build()
        assert loader.type_names() == sorted(
            ["int", "float", "str", "bytes", "bool", "list", "tuple", "dict", "set", "NoneType"]
        )

    def test_register_helper(self) -> None:
        loader = register(LoaderBuilder()).build()
        assert loader.contains_handler(CONSTANT)
        assert loader.handler_type_urls() == [
            "clausal.test.v1.Constant",
            "clausal.test.v1.Echo",
        ]


class TestLoadGuard:
    def _loader(self) -> Loader:
        builder = register_builtin_types(LoaderBuilder())
        builder.guard("test.v1.Even", lambda cfg: lambda x: x % 2 == 0)
        return builder.build()

    def _load(self, data: Any) -> Any:
        return self._loader().load_guard(parse_guard_config(data))

    def test_type(self) -> None:
        assert self._load({"type": "int"}) is int

    def test_unknown_type(self) -> None:
        with pytest.raises(UnknownNameError) as exc_info:
            self._load({"type": "Decimal"})
        assert exc_info.value.kind == "type"
        assert "int" in exc_info.value.available

    def test_literal_capability_string_stays_literal(self) -> None:
        guard = self._load({"literal": "#tag"})
        assert match_guard(guard, "#tag") is True
        assert match_guard(guard, "tagged") is False

    def test_literal_list_compares_by_equality(self) -> None:
        guard = self._load({"literal": ["#upper"]})
        assert match_guard(guard, ["#upper"]) is True
        assert match_guard(guard, ["abc"]) is False
        assert match_guard(self._load({"literal": [1, 2]}), (1, 2)) is False

    def test_capability(self) -> None:
        guard = self._load({"capability": "upper"})
        assert guard == "#upper"
        assert match_guard(guard, "s") is True

    def test_predicate(self, parity: Any) -> None:
        guard = self._load({"predicate": "is_even?"})
        assert guard == Symbol("is_even?")
        assert match_guard(guard, 4, parity) is True
        assert match_guard(guard, 3, parity) is False

    def test_sequence(self) -> None:
        guard = self._load({"sequence": [{"type": "int"}, {"type": "str"}]})
        assert guard == [int, str]

    def test_compound(self) -> None:
        guard = self._load({"either": [{"exact": 0}, {"all": [{"type": "int"}, {"not": 1}]}]})
        assert match_guard(guard, 0) is True
        assert match_guard(guard, 2) is True
        assert match_guard(guard, 1) is False

    def test_any(self) -> None:
        assert self._load({"any": True}) is ANY

    def test_regex(self) -> None:
        guard = self._load({"regex": "^a+$"})
        assert match_guard(guard, "aaa") is True
        assert match_guard(guard, "ab") is False

    def test_invalid_regex_is_guard_error(self) -> None:
        with pytest.raises(GuardError):
            self._load({"regex": "(a"})

    def test_custom_guard(self) -> None:
        guard = self._load({"custom": {"type_url": "test.v1.Even"}})
        assert match_guard(guard, 2) is True
        assert match_guard(guard, 3) is False

    def test_unknown_custom_guard(self) -> None:
        with pytest.raises(UnknownNameError, match="unknown guard"):
            self._load({"custom": {"type_url": "test.v1.Odd"}})

    def test_too_many_guards_in_compound(self) -> None:
        data = {"either": [i for i in range(MAX_GUARDS_PER_COMPOUND + 1)]}
        with pytest.raises(TooManyGuardsError):
            self._load(data)


class TestLoadTable:
    def test_describe_table(self, loader: Loader) -> None:
        config = parse_table_config(
            {
                "operations": {
                    "describe": {
                        "clauses": [
                            {"args": [{"type": "int"}], "handler": _handler("int")},
                            {"args": [{"type": "str"}], "handler": _handler("str")},
                        ],
                        "default": _handler("other"),
                    }
                }
            }
        )
        table = loader.load_table(config)
        assert isinstance(table, DispatchTable)
        assert table.dispatch(None, "describe", (5,)) == "int"
        assert table.dispatch(None, "describe", ("x",)) == "str"
        assert table.dispatch(None, "describe", (3.14,)) == "other"

    def test_kwargs_clause(self, loader: Loader) -> None:
        config = parse_table_config(
            {
                "operations": {
                    "greet": {
                        "clauses": [
                            {
                                "args": [{"type": "str"}],
                                "kwargs": {"loud": True},
                                "handler": _handler("LOUD"),
                            }
                        ]
                    }
                }
            }
        )
        table = loader.load_table(config)
        assert table.dispatch(None, "greet", ("hi",), {"loud": True}) == "LOUD"
        with pytest.raises(ResolutionError):
            table.dispatch(None, "greet", ("hi",))

    def test_unknown_handler(self, loader: Loader) -> None:
        config = parse_table_config(
            {"operations": {"op": {"default": {"type_url": "nope.v1.Handler"}}}}
        )
        with pytest.raises(UnknownNameError, match="unknown handler"):
            loader.load_table(config)

    def test_factory_failure_is_invalid_config(self, loader: Loader) -> None:
        config = parse_table_config(
            {"operations": {"op": {"default": {"type_url": CONSTANT}}}}
        )
        with pytest.raises(InvalidConfigError, match="value"):
            loader.load_table(config)

    def test_loaded_registries_are_sealed(self, loader: Loader) -> None:
        config = parse_table_config(
            {"operations": {"op": {"clauses": [{"args": [1], "handler": _handler("one")}]}}}
        )
        registry = loader.load_table(config).registry("op")
        assert registry.clause_count == 1
        assert not registry.has_default
