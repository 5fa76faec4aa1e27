"""Public API for shoulda-matchers."""

from shoulda_matchers.adapters.model import ModelAdapter, ModelRecord
from shoulda_matchers.assertions import Matcher, assert_should, assert_should_not
from shoulda_matchers.expectations import (
    ExpectationManifest,
    ExpectationOutcome,
    ExpectationReport,
    ModelExpectations,
    NumericalityExpectation,
    UniquenessExpectation,
    load_expectation_manifest,
    run_expectation_manifest,
)
from shoulda_matchers.memory import (
    InMemoryModel,
    InMemoryModelAdapter,
    NumericalityValidator,
    PresenceValidator,
    StoreConstraintError,
    UniquenessValidator,
)
from shoulda_matchers.numericality import (
    OnlyIntegerMatcher,
    ValidateNumericalityOfMatcher,
    validate_numericality_of,
)
from shoulda_matchers.schema import (
    DEFAULT_TAKEN_MESSAGE,
    NOT_A_NUMBER_MESSAGE,
    NOT_AN_INTEGER_MESSAGE,
    ColumnType,
    MatcherConfigurationError,
    MatcherError,
    ProbeConfiguration,
    ProbeResult,
)
from shoulda_matchers.uniqueness import (
    ValidateUniquenessOfMatcher,
    evaluate_uniqueness,
    validate_uniqueness_of,
)
from shoulda_matchers.validation import AllowValueMatcher, DisallowValueMatcher

__all__ = [
    # Adapters
    "ModelAdapter",
    "ModelRecord",
    # Value objects
    "ColumnType",
    "ProbeConfiguration",
    "ProbeResult",
    # Errors
    "MatcherConfigurationError",
    "MatcherError",
    "StoreConstraintError",
    # Messages
    "DEFAULT_TAKEN_MESSAGE",
    "NOT_A_NUMBER_MESSAGE",
    "NOT_AN_INTEGER_MESSAGE",
    # Matchers
    "AllowValueMatcher",
    "DisallowValueMatcher",
    "OnlyIntegerMatcher",
    "ValidateNumericalityOfMatcher",
    "ValidateUniquenessOfMatcher",
    "evaluate_uniqueness",
    "validate_numericality_of",
    "validate_uniqueness_of",
    # Assertions
    "Matcher",
    "assert_should",
    "assert_should_not",
    # In-memory model layer
    "InMemoryModel",
    "InMemoryModelAdapter",
    "NumericalityValidator",
    "PresenceValidator",
    "UniquenessValidator",
    # Expectation manifests
    "ExpectationManifest",
    "ExpectationOutcome",
    "ExpectationReport",
    "ModelExpectations",
    "NumericalityExpectation",
    "UniquenessExpectation",
    "load_expectation_manifest",
    "run_expectation_manifest",
]
