"""Numericality matchers."""

from __future__ import annotations

from shoulda_matchers.adapters.model import ModelAdapter, ModelRecord
from shoulda_matchers.schema import (
    NOT_A_NUMBER_MESSAGE,
    NOT_AN_INTEGER_MESSAGE,
    ExpectedMessage,
    MatcherConfigurationError,
)
from shoulda_matchers.validation import DisallowValueMatcher

NON_NUMERIC_VALUE = "abcd"
NON_INTEGER_VALUE = 0.1


class OnlyIntegerMatcher:
    """Sub-check asserting that a non-integral number is rejected."""

    def __init__(self, attribute: str) -> None:
        self._attribute = attribute
        self._disallow_value_matcher = (
            DisallowValueMatcher(NON_INTEGER_VALUE)
            .for_attribute(attribute)
            .with_message(NOT_AN_INTEGER_MESSAGE)
        )

    def with_message(self, message: ExpectedMessage) -> OnlyIntegerMatcher:
        self._disallow_value_matcher.with_message(message)
        return self

    @property
    def allowed_type(self) -> str:
        return "integers"

    def matches(self, record: ModelRecord) -> bool:
        return self._disallow_value_matcher.matches(record)

    @property
    def failure_message(self) -> str:
        return self._disallow_value_matcher.failure_message


def validate_numericality_of(attribute: str) -> ValidateNumericalityOfMatcher:
    return ValidateNumericalityOfMatcher(attribute)


class ValidateNumericalityOfMatcher:
    """Asserts that non-numeric values (and optionally non-integers) are rejected."""

    def __init__(self, attribute: str) -> None:
        if not attribute:
            raise MatcherConfigurationError("attribute must be non-empty")
        self._attribute = attribute
        self._only_integer = False
        self._expected_message: ExpectedMessage | None = None
        self._model_name: str | None = None
        self._failure_message: str | None = None

    def only_integer(self) -> ValidateNumericalityOfMatcher:
        self._only_integer = True
        return self

    def with_message(self, message: ExpectedMessage) -> ValidateNumericalityOfMatcher:
        self._expected_message = message
        return self

    @property
    def allowed_types(self) -> str:
        return "integers" if self._only_integer else "numeric values"

    @property
    def description(self) -> str:
        return f"only allow {self.allowed_types} for {self._attribute}"

    def matches(self, model: ModelAdapter) -> bool:
        self._model_name = model.model_name
        self._failure_message = None
        record = model.build()

        numeric_check = (
            DisallowValueMatcher(NON_NUMERIC_VALUE)
            .for_attribute(self._attribute)
            .with_message(self._expected_message or NOT_A_NUMBER_MESSAGE)
        )
        if not numeric_check.matches(record):
            self._failure_message = numeric_check.failure_message
            return False

        if self._only_integer:
            integer_check = OnlyIntegerMatcher(self._attribute)
            if self._expected_message is not None:
                integer_check.with_message(self._expected_message)
            if not integer_check.matches(record):
                self._failure_message = integer_check.failure_message
                return False

        return True

    @property
    def failure_message(self) -> str:
        message = f"Expected {self._model_name} to {self.description}, but it did not"
        if self._failure_message:
            message += f": {self._failure_message}"
        return message

    @property
    def failure_message_when_negated(self) -> str:
        return f"Expected {self._model_name} not to {self.description}, but it did"
