"""Allow/disallow checks: the primitive every validation matcher builds on."""

from __future__ import annotations

import logging
import re
from typing import Any

from shoulda_matchers.adapters.model import ModelRecord
from shoulda_matchers.schema import ExpectedMessage, MatcherConfigurationError, describe_expected_message

logger = logging.getLogger(__name__)


def message_matches(expected: ExpectedMessage | None, actual: str) -> bool:
    """Exact match for strings, ``re.search`` for compiled patterns.

    ``None`` matches any error.
    """
    if expected is None:
        return True
    if isinstance(expected, re.Pattern):
        return expected.search(actual) is not None
    return actual == expected


class AllowValueMatcher:
    """Passes when setting ``value`` yields no matching error for the attribute."""

    def __init__(self, value: Any) -> None:
        self._value = value
        self._attribute: str | None = None
        self._expected_message: ExpectedMessage | None = None
        self._errors: list[str] = []
        self._matching_errors: list[str] = []

    def for_attribute(self, attribute: str) -> AllowValueMatcher:
        self._attribute = attribute
        return self

    def with_message(self, message: ExpectedMessage | None) -> AllowValueMatcher:
        self._expected_message = message
        return self

    @property
    def attribute(self) -> str:
        if not self._attribute:
            raise MatcherConfigurationError(
                "An attribute is required; call for_attribute() before matching"
            )
        return self._attribute

    @property
    def value(self) -> Any:
        return self._value

    def matches(self, record: ModelRecord) -> bool:
        attribute = self.attribute
        record.set_attribute(attribute, self._value)
        errors = record.run_validations()
        self._errors = list(errors.get(attribute, []))
        self._matching_errors = [
            error for error in self._errors if message_matches(self._expected_message, error)
        ]
        logger.debug(
            "Validated %s=%r: errors=%r matching=%r",
            attribute, self._value, self._errors, self._matching_errors,
        )
        return not self._matching_errors

    @property
    def description(self) -> str:
        return f"allow {self.attribute} to be set to {self._value!r}"

    @property
    def failure_message(self) -> str:
        return (
            f"Did not expect errors to include {describe_expected_message(self._expected_message)} "
            f"when {self.attribute} is set to {self._value!r}, "
            f"got error: {', '.join(self._matching_errors)}"
        )

    @property
    def failure_message_when_negated(self) -> str:
        if self._errors:
            got = f"got errors: {', '.join(self._errors)}"
        else:
            got = "got no errors"
        return (
            f"Expected errors to include {describe_expected_message(self._expected_message)} "
            f"when {self.attribute} is set to {self._value!r}, {got}"
        )


class DisallowValueMatcher:
    """Negation of :class:`AllowValueMatcher`."""

    def __init__(self, value: Any) -> None:
        self._allow_matcher = AllowValueMatcher(value)

    def for_attribute(self, attribute: str) -> DisallowValueMatcher:
        self._allow_matcher.for_attribute(attribute)
        return self

    def with_message(self, message: ExpectedMessage | None) -> DisallowValueMatcher:
        self._allow_matcher.with_message(message)
        return self

    @property
    def value(self) -> Any:
        return self._allow_matcher.value

    def matches(self, record: ModelRecord) -> bool:
        return not self._allow_matcher.matches(record)

    @property
    def description(self) -> str:
        return f"not {self._allow_matcher.description}"

    @property
    def failure_message(self) -> str:
        return self._allow_matcher.failure_message_when_negated

    @property
    def failure_message_when_negated(self) -> str:
        return self._allow_matcher.failure_message
