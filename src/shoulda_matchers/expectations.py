"""YAML expectation manifests: declare matchers per model and run them in bulk."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from shoulda_matchers.adapters.model import ModelAdapter
from shoulda_matchers.assertions import Matcher
from shoulda_matchers.numericality import ValidateNumericalityOfMatcher
from shoulda_matchers.schema import ExpectedMessage, MatcherConfigurationError
from shoulda_matchers.uniqueness import ValidateUniquenessOfMatcher

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Manifest types
# ---------------------------------------------------------------------------

class _MessageExpectation(BaseModel):
    """Expected error as an exact ``message`` or a regular expression ``pattern``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str | None = None
    pattern: str | None = None

    @model_validator(mode="after")
    def _message_or_pattern(self) -> _MessageExpectation:
        if self.message is not None and self.pattern is not None:
            raise ValueError("message and pattern are mutually exclusive")
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ValueError(f"invalid pattern {self.pattern!r}: {exc}") from exc
        return self

    @property
    def expected_message(self) -> ExpectedMessage | None:
        if self.pattern is not None:
            return re.compile(self.pattern)
        return self.message


class UniquenessExpectation(_MessageExpectation):
    attribute: str = Field(..., min_length=1)
    scoped_to: list[str] = Field(default_factory=list)
    case_insensitive: bool = False
    allow_nil: bool = False

    def build_matcher(self) -> ValidateUniquenessOfMatcher:
        matcher = ValidateUniquenessOfMatcher(self.attribute)
        if self.scoped_to:
            matcher.scoped_to(self.scoped_to)
        if self.case_insensitive:
            matcher.case_insensitive()
        if self.allow_nil:
            matcher.allow_nil()
        if self.expected_message is not None:
            matcher.with_message(self.expected_message)
        return matcher


class NumericalityExpectation(_MessageExpectation):
    attribute: str = Field(..., min_length=1)
    only_integer: bool = False

    def build_matcher(self) -> ValidateNumericalityOfMatcher:
        matcher = ValidateNumericalityOfMatcher(self.attribute)
        if self.only_integer:
            matcher.only_integer()
        if self.expected_message is not None:
            matcher.with_message(self.expected_message)
        return matcher


class ModelExpectations(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    model: str = Field(..., min_length=1)
    uniqueness: list[UniquenessExpectation] = Field(default_factory=list)
    numericality: list[NumericalityExpectation] = Field(default_factory=list)

    def build_matchers(self) -> list[Matcher]:
        matchers: list[Matcher] = [e.build_matcher() for e in self.uniqueness]
        matchers.extend(e.build_matcher() for e in self.numericality)
        return matchers


class ExpectationManifest(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    expectations: list[ModelExpectations] = Field(default_factory=list)


class ExpectationOutcome(BaseModel):
    """Result of running one declared matcher."""

    model_config = ConfigDict(frozen=True)

    model: str
    description: str
    status: Literal["passed", "failed", "error"]
    message: str | None = None


class ExpectationReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcomes: list[ExpectationOutcome] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(outcome.status == "passed" for outcome in self.outcomes)

    @property
    def failures(self) -> list[ExpectationOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status != "passed"]


# ---------------------------------------------------------------------------
# Loading and running
# ---------------------------------------------------------------------------

def load_expectation_manifest(path: Path | str) -> ExpectationManifest:
    """Load an expectation manifest from a YAML file.

    Raises:
        MatcherConfigurationError: if the file is missing or its root is not a mapping.
        pydantic.ValidationError: if the content does not match the manifest schema.
    """
    path = Path(path)
    if not path.exists():
        raise MatcherConfigurationError(f"Expectation manifest not found: {path}")

    with open(path, "r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise MatcherConfigurationError(f"Expectation manifest must be a mapping: {path}")

    return ExpectationManifest.model_validate(raw)


def run_expectation_manifest(
    manifest: ExpectationManifest,
    registry: Mapping[str, ModelAdapter],
) -> ExpectationReport:
    """Run every declared matcher against the registered models.

    Unknown model names are reported as ``error`` outcomes. Storage errors
    raised while matching are not caught.

    Args:
        manifest: Loaded expectation manifest.
        registry: Model adapters keyed by the names used in the manifest.

    Returns:
        An ``ExpectationReport`` with one outcome per declared matcher.
    """
    outcomes: list[ExpectationOutcome] = []
    for entry in manifest.expectations:
        model = registry.get(entry.model)
        for matcher in entry.build_matchers():
            if model is None:
                outcomes.append(ExpectationOutcome(
                    model=entry.model,
                    description=matcher.description,
                    status="error",
                    message=f"Unknown model: {entry.model}",
                ))
                continue

            if matcher.matches(model):
                outcome = ExpectationOutcome(
                    model=entry.model,
                    description=matcher.description,
                    status="passed",
                )
            else:
                outcome = ExpectationOutcome(
                    model=entry.model,
                    description=matcher.description,
                    status="failed",
                    message=matcher.failure_message,
                )
            logger.info("%s should %s: %s", outcome.model, outcome.description, outcome.status)
            outcomes.append(outcome)

    return ExpectationReport(outcomes=outcomes)
