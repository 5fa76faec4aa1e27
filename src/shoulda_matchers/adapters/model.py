"""Host-agnostic model-layer bindings consumed by the matchers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from shoulda_matchers.schema import ColumnType


@runtime_checkable
class ModelRecord(Protocol):
    """A single model instance with named attributes."""

    def get_attribute(self, name: str) -> Any: ...

    def set_attribute(self, name: str, value: Any) -> None: ...

    def has_attribute(self, name: str) -> bool: ...

    def save(self, validate: bool = True) -> bool: ...

    def run_validations(self) -> dict[str, list[str]]: ...


@runtime_checkable
class ModelAdapter(Protocol):
    """Protocol for reaching a model type and its backing store.

    Implementations let storage errors propagate; matchers never catch them.
    """

    @property
    def model_name(self) -> str: ...

    def build(self) -> ModelRecord: ...

    def first(self) -> ModelRecord | None: ...

    def all(self) -> list[ModelRecord]: ...

    def column_type(self, name: str) -> ColumnType | None: ...

    def has_secure_password(self) -> bool: ...
