"""Assertion helpers that turn matcher outcomes into test failures."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shoulda_matchers.adapters.model import ModelAdapter


@runtime_checkable
class Matcher(Protocol):
    """Interface shared by the top-level matchers."""

    @property
    def description(self) -> str: ...

    @property
    def failure_message(self) -> str: ...

    @property
    def failure_message_when_negated(self) -> str: ...

    def matches(self, model: ModelAdapter) -> bool: ...


def assert_should(matcher: Matcher, model: ModelAdapter) -> None:
    """Fail with the matcher's failure message unless it matches ``model``."""
    if not matcher.matches(model):
        raise AssertionError(matcher.failure_message)


def assert_should_not(matcher: Matcher, model: ModelAdapter) -> None:
    """Fail with the matcher's negated message if it matches ``model``."""
    if matcher.matches(model):
        raise AssertionError(matcher.failure_message_when_negated)
