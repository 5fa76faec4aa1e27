"""Core matcher types: probe configuration, results, and errors."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatcherError(RuntimeError):
    """Base class for errors raised by matchers."""


class MatcherConfigurationError(MatcherError):
    """Raised when a matcher is configured or used incorrectly."""


# ---------------------------------------------------------------------------
# Shared constants
# ---------------------------------------------------------------------------

ColumnType = Literal["text", "datetime", "uuid", "numeric"]

DEFAULT_TAKEN_MESSAGE = "taken"
NOT_A_NUMBER_MESSAGE = "not_a_number"
NOT_AN_INTEGER_MESSAGE = "not_an_integer"

ExpectedMessage = str | re.Pattern[str]


def describe_expected_message(message: ExpectedMessage | None) -> str:
    """Render an expected error message the way failure messages quote it."""
    if message is None:
        return "any error"
    if isinstance(message, re.Pattern):
        return f"/{message.pattern}/"
    return repr(message)


# ---------------------------------------------------------------------------
# Uniqueness probe types
# ---------------------------------------------------------------------------

class ProbeConfiguration(BaseModel):
    """Immutable settings for a single uniqueness probe."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    attribute: str = Field(..., min_length=1)
    scopes: tuple[str, ...] = ()
    case_insensitive: bool = False
    allow_nil: bool = False
    expected_message: ExpectedMessage = DEFAULT_TAKEN_MESSAGE

    @field_validator("scopes")
    @classmethod
    def _validate_scopes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for scope in v:
            if not scope:
                raise ValueError("scope attribute names must be non-empty")
        return v

    @property
    def description(self) -> str:
        result = "require "
        if not self.case_insensitive:
            result += "case sensitive "
        result += f"unique value for {self.attribute}"
        if self.scopes:
            result += f" scoped to {', '.join(self.scopes)}"
        return result


class ProbeResult(BaseModel):
    """Outcome of one uniqueness probe evaluation."""

    model_config = ConfigDict(frozen=True)

    matched: bool
    description: str
    failure_message: str
    failure_message_when_negated: str
