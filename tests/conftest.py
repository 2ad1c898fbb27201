"""Shared fixtures for clausal tests."""

from __future__ import annotations

import pytest

from clausal import Loader, LoaderBuilder, register_builtin_types
from clausal.testing import register


class Parity:
    """Receiver exposing a named predicate."""

    def is_even(self, x: int) -> bool:
        return x % 2 == 0


@pytest.fixture
def loader() -> Loader:
    """Loader with builtin types and the test-domain handlers."""
    return register(register_builtin_types(LoaderBuilder())).build()


@pytest.fixture
def parity() -> Parity:
    return Parity()
