"""Tests for clause registries (clausal._registry).

Validates the builder → frozen registry pipeline.
"""

from types import MappingProxyType

import pytest

from clausal import (
    MAX_CLAUSES,
    MAX_DEPTH,
    Clause,
    GuardTooDeepError,
    RegistrationError,
    Registry,
    RegistryBuilder,
    TooManyClausesError,
    negated,
)
from clausal.testing import Constant


class TestClause:
    def test_normalizes_containers(self) -> None:
        c = Clause([int, str], {"flag": bool}, Constant("x"))
        assert c.positional == (int, str)
        assert isinstance(c.named, MappingProxyType)
        assert dict(c.named) == {"flag": bool}
        assert c.arity == 2

    def test_named_is_read_only(self) -> None:
        c = Clause((), {"flag": bool}, Constant("x"))
        with pytest.raises(TypeError):
            c.named["other"] = int  # type: ignore[index]

    def test_handler_must_be_callable(self) -> None:
        with pytest.raises(RegistrationError):
            Clause((int,), {}, "not a handler")

    def test_depth_limit(self) -> None:
        guard: object = int
        for _ in range(MAX_DEPTH):
            guard = negated(guard)
        with pytest.raises(GuardTooDeepError) as exc_info:
            Clause((guard,), {}, Constant("x"))
        assert exc_info.value.depth == MAX_DEPTH + 1

    def test_depth_at_limit_ok(self) -> None:
        guard: object = int
        for _ in range(MAX_DEPTH - 1):
            guard = negated(guard)
        assert Clause((guard,), {}, Constant("x")).depth() == MAX_DEPTH


class TestRegistryBuilder:
    def test_preserves_registration_order(self) -> None:
        first, second, third = Constant(1), Constant(2), Constant(3)
        registry = (
            RegistryBuilder("op")
            .clause(first, int)
            .clause(second, str)
            .clause(third, float)
            .build()
        )
        assert [c.handler for c in registry.clauses] == [first, second, third]
        assert registry.clause_count == 3

    def test_named_guards_recorded(self) -> None:
        registry = RegistryBuilder("op").clause(Constant(1), int, flag=bool).build()
        [clause] = registry.clauses
        assert clause.positional == (int,)
        assert dict(clause.named) == {"flag": bool}

    def test_default_replaced_silently(self) -> None:
        earlier, later = Constant("a"), Constant("b")
        registry = RegistryBuilder("op").default(earlier).default(later).build()
        assert registry.default is later
        assert registry.has_default

    def test_no_default(self) -> None:
        registry = RegistryBuilder("op").build()
        assert registry.default is None
        assert not registry.has_default

    def test_default_must_be_callable(self) -> None:
        with pytest.raises(RegistrationError):
            RegistryBuilder("op").default(42)

    def test_build_snapshot_is_immutable(self) -> None:
        builder = RegistryBuilder("op").clause(Constant(1), int)
        registry = builder.build()
        builder.clause(Constant(2), str)
        assert registry.clause_count == 1
        assert builder.build().clause_count == 2

    def test_sealed_rejects_registration(self) -> None:
        builder = RegistryBuilder("op")
        builder.build(seal=True)
        assert builder.sealed
        with pytest.raises(RegistrationError, match="sealed"):
            builder.clause(Constant(1), int)
        with pytest.raises(RegistrationError):
            builder.default(Constant(2))

    def test_too_many_clauses(self) -> None:
        builder = RegistryBuilder("op")
        for i in range(MAX_CLAUSES + 1):
            builder.clause(Constant(i), i)
        with pytest.raises(TooManyClausesError) as exc_info:
            builder.build()
        assert exc_info.value.count == MAX_CLAUSES + 1
        assert exc_info.value.operation == "op"

    def test_registry_is_frozen(self) -> None:
        registry = Registry("op")
        with pytest.raises(AttributeError):
            registry.name = "other"  # type: ignore[misc]
