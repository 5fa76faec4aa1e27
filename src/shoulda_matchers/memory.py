"""In-memory model layer implementing the adapter protocols.

Declare a model by subclassing ``InMemoryModel``::

    class Post(InMemoryModel):
        columns = {"slug": "text", "journal_id": "numeric"}
        validators = (UniquenessValidator(attribute="slug", scope=("journal_id",)),)

Each subclass owns its own record store. ``not_null`` columns behave like
database constraints: they are enforced on every save, even with
validations bypassed, and raise ``StoreConstraintError``.
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from shoulda_matchers.schema import (
    DEFAULT_TAKEN_MESSAGE,
    NOT_A_NUMBER_MESSAGE,
    NOT_AN_INTEGER_MESSAGE,
    ColumnType,
)

_INTEGER_FORMAT = re.compile(r"\A[+-]?\d+\Z")
_SECURE_PASSWORD_FIELDS = ("password", "password_confirmation")


class StoreConstraintError(RuntimeError):
    """Raised when a save violates a storage-level constraint."""


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------

def _add_error(errors: dict[str, list[str]], attribute: str, message: str) -> None:
    errors.setdefault(attribute, []).append(message)


class UniquenessValidator(BaseModel):
    """Rejects a value already stored by another record of the same model.

    Nil duplicates nil unless ``allow_nil`` is set.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    attribute: str = Field(..., min_length=1)
    scope: tuple[str, ...] = ()
    case_sensitive: bool = True
    allow_nil: bool = False
    message: str = DEFAULT_TAKEN_MESSAGE

    def check(self, record: InMemoryModel, errors: dict[str, list[str]]) -> None:
        value = record.get_attribute(self.attribute)
        if value is None and self.allow_nil:
            return
        for other in type(record).all():
            if other is record:
                continue
            if not self._same_value(other.get_attribute(self.attribute), value):
                continue
            if all(other.get_attribute(s) == record.get_attribute(s) for s in self.scope):
                _add_error(errors, self.attribute, self.message)
                return

    def _same_value(self, stored: Any, candidate: Any) -> bool:
        if not self.case_sensitive and isinstance(stored, str) and isinstance(candidate, str):
            return stored.casefold() == candidate.casefold()
        return stored == candidate


class NumericalityValidator(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    attribute: str = Field(..., min_length=1)
    only_integer: bool = False
    allow_nil: bool = False
    message: str | None = None

    def check(self, record: InMemoryModel, errors: dict[str, list[str]]) -> None:
        value = record.get_attribute(self.attribute)
        if value is None:
            if not self.allow_nil:
                _add_error(errors, self.attribute, self.message or NOT_A_NUMBER_MESSAGE)
            return

        if not _is_number(value):
            _add_error(errors, self.attribute, self.message or NOT_A_NUMBER_MESSAGE)
        elif self.only_integer and not _is_integer(value):
            _add_error(errors, self.attribute, self.message or NOT_AN_INTEGER_MESSAGE)


class PresenceValidator(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    attribute: str = Field(..., min_length=1)
    message: str = "blank"

    def check(self, record: InMemoryModel, errors: dict[str, list[str]]) -> None:
        value = record.get_attribute(self.attribute)
        if value is None or (isinstance(value, str) and not value.strip()):
            _add_error(errors, self.attribute, self.message)


Validator = UniquenessValidator | NumericalityValidator | PresenceValidator


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value))
    except ValueError:
        return False
    return True


def _is_integer(value: Any) -> bool:
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return False
    return bool(_INTEGER_FORMAT.match(str(value)))


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class InMemoryModel:
    """Minimal active-record style model backed by a per-class list."""

    columns: ClassVar[dict[str, ColumnType]] = {}
    validators: ClassVar[tuple[Validator, ...]] = ()
    not_null: ClassVar[frozenset[str]] = frozenset()
    secure_password: ClassVar[bool] = False

    _records: ClassVar[list[InMemoryModel]] = []

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._records = []

    def __init__(self, **attributes: Any) -> None:
        self._attributes: dict[str, Any] = {name: None for name in self.attribute_names()}
        self.persisted = False
        for name, value in attributes.items():
            self.set_attribute(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"

    @classmethod
    def attribute_names(cls) -> tuple[str, ...]:
        names = tuple(cls.columns)
        if cls.secure_password:
            names += _SECURE_PASSWORD_FIELDS
        return names

    # -- ModelRecord ----------------------------------------------------------

    def get_attribute(self, name: str) -> Any:
        if name not in self._attributes:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        return self._attributes[name]

    def set_attribute(self, name: str, value: Any) -> None:
        if name not in self._attributes:
            raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
        self._attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def run_validations(self) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        for validator in self.validators:
            validator.check(self, errors)
        if self.secure_password:
            password = self._attributes["password"]
            if password is None:
                _add_error(errors, "password", "blank")
            elif password != self._attributes["password_confirmation"]:
                _add_error(errors, "password_confirmation", "confirmation")
        return errors

    def save(self, validate: bool = True) -> bool:
        if validate and self.run_validations():
            return False
        self._check_constraints()
        if not self.persisted:
            type(self)._records.append(self)
            self.persisted = True
        return True

    def _check_constraints(self) -> None:
        table = type(self).__name__
        for name in sorted(self.not_null):
            if self._attributes.get(name) is None:
                raise StoreConstraintError(f"{table}.{name} may not be NULL")
        if self.secure_password and self._attributes["password"] is None:
            raise StoreConstraintError(f"{table}.password_digest may not be NULL")

    # -- class-level queries --------------------------------------------------

    @classmethod
    def first(cls) -> InMemoryModel | None:
        return cls._records[0] if cls._records else None

    @classmethod
    def all(cls) -> list[InMemoryModel]:
        return list(cls._records)

    @classmethod
    def create(cls, **attributes: Any) -> InMemoryModel:
        """Build and save with validations; check ``persisted`` for the outcome."""
        record = cls(**attributes)
        record.save()
        return record

    @classmethod
    def insert(cls, **attributes: Any) -> InMemoryModel:
        """Build and save with validations bypassed."""
        record = cls(**attributes)
        record.save(validate=False)
        return record

    @classmethod
    def delete_all(cls) -> None:
        cls._records.clear()

    @classmethod
    def adapter(cls) -> InMemoryModelAdapter:
        return InMemoryModelAdapter(cls)


class InMemoryModelAdapter:
    """``ModelAdapter`` over an ``InMemoryModel`` subclass."""

    def __init__(self, model_class: type[InMemoryModel]) -> None:
        self._model_class = model_class

    @property
    def model_name(self) -> str:
        return self._model_class.__name__

    @property
    def model_class(self) -> type[InMemoryModel]:
        return self._model_class

    def build(self) -> InMemoryModel:
        return self._model_class()

    def first(self) -> InMemoryModel | None:
        return self._model_class.first()

    def all(self) -> list[InMemoryModel]:
        return self._model_class.all()

    def column_type(self, name: str) -> ColumnType | None:
        return self._model_class.columns.get(name)

    def has_secure_password(self) -> bool:
        return self._model_class.secure_password
