"""Shared fixtures: throwaway in-memory model classes."""

from __future__ import annotations

from typing import Any, Callable, Iterable

import pytest

from shoulda_matchers.memory import InMemoryModel, Validator


@pytest.fixture
def define_model() -> Callable[..., type[InMemoryModel]]:
    """Factory creating a fresh ``InMemoryModel`` subclass with its own store."""

    def _define(
        name: str,
        columns: dict[str, str],
        validators: Iterable[Validator] = (),
        **class_attributes: Any,
    ) -> type[InMemoryModel]:
        namespace = {
            "columns": dict(columns),
            "validators": tuple(validators),
            **class_attributes,
        }
        return type(name, (InMemoryModel,), namespace)

    return _define
