"""Uniqueness probe: checks that a model enforces a uniqueness rule.

The probe needs a persisted record to collide with. It uses the first stored
instance of the model, creating one with validations bypassed when the store
is empty. A fresh, unsaved subject record is then given the stored record's
value and must be rejected.

Usage::

    matcher = validate_uniqueness_of("slug").scoped_to("journal_id")
    assert matcher.matches(Post.adapter()), matcher.failure_message

Qualifiers:

- ``scoped_to(*scopes)``: the value only has to be unique among records
  sharing the scope values. Each scope is moved to an unused value and the
  duplicate must then be accepted.
- ``case_insensitive()``: the duplicate is tried with its letter case
  swapped and must still be rejected.
- ``allow_nil()``: a nil value must be accepted even when another record
  already stores nil.
- ``with_message(message)``: the error to look for. Strings match exactly,
  compiled patterns match with ``re.search``. Defaults to ``"taken"``.

Creating the stored record can fail when other columns carry database-level
constraints. Such errors propagate; create a valid record yourself before
running the matcher.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from shoulda_matchers.adapters.model import ModelAdapter, ModelRecord
from shoulda_matchers.schema import (
    ExpectedMessage,
    MatcherConfigurationError,
    ProbeConfiguration,
    ProbeResult,
)
from shoulda_matchers.validation import AllowValueMatcher, DisallowValueMatcher
from shoulda_matchers.values import max_value, swap_case, unused_value, zero_value_for

logger = logging.getLogger(__name__)

SENTINEL_VALUE = "a"
SECURE_PASSWORD_VALUE = "password"


def validate_uniqueness_of(attribute: str) -> ValidateUniquenessOfMatcher:
    """Build a uniqueness matcher for ``attribute``."""
    return ValidateUniquenessOfMatcher(attribute)


class ValidateUniquenessOfMatcher:
    """Fluent builder around :func:`evaluate_uniqueness`.

    Configuration is frozen by the first call to :meth:`matches`.
    """

    def __init__(self, attribute: str) -> None:
        self._config = ProbeConfiguration(attribute=attribute)
        self._frozen = False
        self._result: ProbeResult | None = None

    @property
    def config(self) -> ProbeConfiguration:
        return self._config

    @property
    def result(self) -> ProbeResult | None:
        return self._result

    def scoped_to(self, *scopes: str | Iterable[str]) -> ValidateUniquenessOfMatcher:
        flattened: list[str] = []
        for scope in scopes:
            if isinstance(scope, str):
                flattened.append(scope)
            else:
                flattened.extend(scope)
        return self._configure(scopes=tuple(flattened))

    def with_message(self, message: ExpectedMessage) -> ValidateUniquenessOfMatcher:
        return self._configure(expected_message=message)

    def case_insensitive(self) -> ValidateUniquenessOfMatcher:
        return self._configure(case_insensitive=True)

    def allow_nil(self) -> ValidateUniquenessOfMatcher:
        return self._configure(allow_nil=True)

    def _configure(self, **changes: Any) -> ValidateUniquenessOfMatcher:
        if self._frozen:
            raise MatcherConfigurationError(
                f"Cannot reconfigure uniqueness matcher for {self._config.attribute} "
                f"after it has been evaluated"
            )
        current = {name: getattr(self._config, name) for name in ProbeConfiguration.model_fields}
        self._config = ProbeConfiguration(**{**current, **changes})
        return self

    def matches(self, model: ModelAdapter) -> bool:
        self._frozen = True
        self._result = evaluate_uniqueness(self._config, model)
        return self._result.matched

    @property
    def description(self) -> str:
        return self._config.description

    @property
    def failure_message(self) -> str:
        return self._require_result().failure_message

    @property
    def failure_message_when_negated(self) -> str:
        return self._require_result().failure_message_when_negated

    def _require_result(self) -> ProbeResult:
        if self._result is None:
            raise MatcherConfigurationError(
                "Uniqueness matcher has not been evaluated; call matches() first"
            )
        return self._result


def evaluate_uniqueness(config: ProbeConfiguration, model: ModelAdapter) -> ProbeResult:
    """Probe ``model`` for the uniqueness rule described by ``config``.

    Runs, in order and stopping at the first failure:
    1. copy scope values from the stored record onto a fresh subject
    2. reject the stored record's value (case-swapped when case-insensitive)
    3. accept that value once each scope is moved to an unused value
    4. accept nil, when ``allow_nil`` is set

    Records created while probing stay in the store. Storage errors propagate.

    Args:
        config: Frozen probe configuration.
        model: Adapter for the model type under test.

    Returns:
        A ``ProbeResult`` with the outcome and both failure messages.
    """
    return _UniquenessProbe(config, model).evaluate()


class _UniquenessProbe:
    """State for a single evaluation; discarded afterwards."""

    def __init__(self, config: ProbeConfiguration, model: ModelAdapter) -> None:
        self._config = config
        self._model = model
        self._subject = model.build()
        self._existing_record: ModelRecord | None = None
        self._configuration_failure: str | None = None
        self._failure_details: list[str] = []
        self._negated_suffixes: list[str] = []

    def evaluate(self) -> ProbeResult:
        logger.debug("Probing %s: %s", self._model.model_name, self._config.description)
        matched = (
            self._set_scoped_attributes()
            and self._validate_everything_except_duplicate_nils()
            and self._validate_after_scope_change()
            and self._allows_nil()
        )
        logger.debug("Probe of %s %s", self._model.model_name, "passed" if matched else "failed")
        return ProbeResult(
            matched=matched,
            description=self._config.description,
            failure_message=self._failure_message(),
            failure_message_when_negated=self._failure_message_when_negated(),
        )

    # -- messages ------------------------------------------------------------

    def _failure_message(self) -> str:
        if self._configuration_failure is not None:
            return self._configuration_failure
        message = f"Expected {self._model.model_name} to {self._config.description}, but it did not"
        if self._failure_details:
            message += ": " + "; ".join(self._failure_details)
        return message

    def _failure_message_when_negated(self) -> str:
        message = f"Expected {self._model.model_name} not to {self._config.description}, but it did"
        return message + "".join(self._negated_suffixes)

    # -- existing record -----------------------------------------------------

    @property
    def existing_record(self) -> ModelRecord:
        if self._existing_record is None:
            first = self._model.first()
            self._existing_record = first if first is not None else self._create_record_in_database()
        return self._existing_record

    def _existing_value(self) -> Any:
        value = self.existing_record.get_attribute(self._config.attribute)
        if self._config.case_insensitive:
            value = swap_case(value)
        return value

    def _create_record_in_database(
        self, nil_value: bool = False, scope_values: dict[str, Any] | None = None
    ) -> ModelRecord:
        record = self._model.build()
        for scope, value in (scope_values or {}).items():
            record.set_attribute(scope, value)
        record.set_attribute(self._config.attribute, None if nil_value else SENTINEL_VALUE)
        if self._model.has_secure_password():
            record.set_attribute("password", SECURE_PASSWORD_VALUE)
            record.set_attribute("password_confirmation", SECURE_PASSWORD_VALUE)
        record.save(validate=False)
        logger.debug(
            "Created %s record with %s=%r",
            self._model.model_name, self._config.attribute, None if nil_value else SENTINEL_VALUE,
        )
        return record

    # -- steps ---------------------------------------------------------------

    def _set_scoped_attributes(self) -> bool:
        for scope in self._config.scopes:
            if not self._subject.has_attribute(scope):
                self._configuration_failure = (
                    f"{self._model.model_name} doesn't seem to have a {scope} attribute."
                )
                return False
            self._subject.set_attribute(scope, self.existing_record.get_attribute(scope))
        return True

    def _validate_everything_except_duplicate_nils(self) -> bool:
        if self._config.allow_nil and self._existing_value() is None:
            # Companion shares the subject's scope so the duplicate collides
            self._existing_record = self._create_record_in_database(
                scope_values={scope: self._subject.get_attribute(scope) for scope in self._config.scopes}
            )
        return self._disallows_value_of(self._existing_value())

    def _validate_after_scope_change(self) -> bool:
        if not self._config.scopes:
            return True

        all_records = self._model.all()
        all_passed = True
        for scope in self._config.scopes:
            original_value = self._subject.get_attribute(scope)
            stored_values = [record.get_attribute(scope) for record in all_records]
            previous_value = max_value(stored_values)
            if previous_value is None:
                # No stored value; assume a foreign key or typed column
                previous_value = zero_value_for(self._model.column_type(scope))
            self._subject.set_attribute(scope, unused_value(previous_value, stored_values))

            suffix = f" (with different value of {scope})"
            matcher = self._value_matcher(AllowValueMatcher, self._existing_value())
            if matcher.matches(self._subject):
                self._negated_suffixes.append(suffix)
            else:
                self._failure_details.append(matcher.failure_message + suffix)
                all_passed = False
            self._subject.set_attribute(scope, original_value)
        return all_passed

    def _allows_nil(self) -> bool:
        if not self._config.allow_nil:
            return True
        if self._existing_value() is not None:
            self._create_record_in_database(nil_value=True)
        return self._allows_value_of(None)

    # -- allow / disallow ----------------------------------------------------

    def _value_matcher(
        self,
        matcher_class: type[AllowValueMatcher] | type[DisallowValueMatcher],
        value: Any,
    ) -> AllowValueMatcher | DisallowValueMatcher:
        return matcher_class(value).for_attribute(self._config.attribute).with_message(
            self._config.expected_message
        )

    def _allows_value_of(self, value: Any) -> bool:
        matcher = self._value_matcher(AllowValueMatcher, value)
        if matcher.matches(self._subject):
            return True
        self._failure_details.append(matcher.failure_message)
        return False

    def _disallows_value_of(self, value: Any) -> bool:
        matcher = self._value_matcher(DisallowValueMatcher, value)
        if matcher.matches(self._subject):
            return True
        self._failure_details.append(matcher.failure_message)
        return False
