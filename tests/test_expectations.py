"""Tests for YAML expectation manifests."""

from __future__ import annotations

import re
import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from shoulda_matchers.expectations import (
    ExpectationManifest,
    load_expectation_manifest,
    run_expectation_manifest,
)
from shoulda_matchers.memory import NumericalityValidator, StoreConstraintError, UniquenessValidator
from shoulda_matchers.schema import MatcherConfigurationError
from shoulda_matchers.uniqueness import ValidateUniquenessOfMatcher

MANIFEST = textwrap.dedent(
    """\
    expectations:
      - model: Post
        uniqueness:
          - attribute: slug
            scoped_to: [journal_id]
          - attribute: key
            case_insensitive: true
        numericality:
          - attribute: rating
            only_integer: true
    """
)


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "expectations.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoading:
    def test_load_manifest(self, tmp_path: Path) -> None:
        manifest = load_expectation_manifest(_write(tmp_path, MANIFEST))

        assert len(manifest.expectations) == 1
        entry = manifest.expectations[0]
        assert entry.model == "Post"
        assert [e.attribute for e in entry.uniqueness] == ["slug", "key"]
        assert entry.uniqueness[0].scoped_to == ["journal_id"]
        assert entry.uniqueness[1].case_insensitive is True
        assert entry.numericality[0].only_integer is True

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        manifest = load_expectation_manifest(str(_write(tmp_path, MANIFEST)))
        assert manifest.expectations[0].model == "Post"

    def test_empty_file_is_empty_manifest(self, tmp_path: Path) -> None:
        manifest = load_expectation_manifest(_write(tmp_path, ""))
        assert manifest.expectations == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MatcherConfigurationError, match="not found"):
            load_expectation_manifest(tmp_path / "nope.yaml")

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        with pytest.raises(MatcherConfigurationError, match="must be a mapping"):
            load_expectation_manifest(_write(tmp_path, "- just\n- a list\n"))

    def test_unknown_keys_rejected(self, tmp_path: Path) -> None:
        content = "expectations:\n  - model: Post\n    presence: [title]\n"
        with pytest.raises(ValidationError):
            load_expectation_manifest(_write(tmp_path, content))

    def test_builds_configured_matcher(self) -> None:
        manifest = ExpectationManifest.model_validate({
            "expectations": [{
                "model": "Post",
                "uniqueness": [{
                    "attribute": "slug",
                    "scoped_to": ["journal_id", "author_id"],
                    "allow_nil": True,
                    "message": "is taken",
                }],
            }],
        })
        [matcher] = manifest.expectations[0].build_matchers()

        assert isinstance(matcher, ValidateUniquenessOfMatcher)
        assert matcher.config.scopes == ("journal_id", "author_id")
        assert matcher.config.allow_nil is True
        assert matcher.config.expected_message == "is taken"

    def test_pattern_compiles_to_regex(self) -> None:
        manifest = ExpectationManifest.model_validate({
            "expectations": [{
                "model": "Post",
                "uniqueness": [{"attribute": "slug", "pattern": "already in use$"}],
                "numericality": [{"attribute": "rating", "pattern": "^must be"}],
            }],
        })
        [entry] = manifest.expectations

        assert isinstance(entry.uniqueness[0].expected_message, re.Pattern)
        assert entry.numericality[0].expected_message.pattern == "^must be"
        uniqueness, _ = entry.build_matchers()
        assert isinstance(uniqueness.config.expected_message, re.Pattern)
        assert uniqueness.config.expected_message.pattern == "already in use$"

    def test_message_and_pattern_are_exclusive(self) -> None:
        with pytest.raises(ValidationError, match="mutually exclusive"):
            ExpectationManifest.model_validate({
                "expectations": [{
                    "model": "Post",
                    "uniqueness": [{"attribute": "slug", "message": "taken", "pattern": "taken"}],
                }],
            })

    def test_invalid_pattern_rejected(self) -> None:
        with pytest.raises(ValidationError, match="invalid pattern"):
            ExpectationManifest.model_validate({
                "expectations": [{"model": "Post", "uniqueness": [{"attribute": "slug", "pattern": "("}]}],
            })


class TestRunning:
    def test_reports_each_matcher(self, tmp_path: Path, define_model) -> None:
        post = define_model(
            "Post", {"slug": "text", "journal_id": "numeric", "key": "text", "rating": "numeric"},
            [
                UniquenessValidator(attribute="slug", scope=("journal_id",)),
                UniquenessValidator(attribute="key"),
                NumericalityValidator(attribute="rating", only_integer=True),
            ],
        )
        post.insert(slug="x", journal_id=1, key="abc")
        manifest = load_expectation_manifest(_write(tmp_path, MANIFEST))
        report = run_expectation_manifest(manifest, {"Post": post.adapter()})

        statuses = [(o.description, o.status) for o in report.outcomes]
        assert statuses == [
            ("require case sensitive unique value for slug scoped to journal_id", "passed"),
            ("require unique value for key", "failed"),
            ("only allow integers for rating", "passed"),
        ]
        assert report.passed is False
        [failure] = report.failures
        assert failure.message is not None
        assert "when key is set to 'ABC', got no errors" in failure.message

    def test_all_passing(self, define_model) -> None:
        post = define_model("Post", {"slug": "text"}, [UniquenessValidator(attribute="slug")])
        manifest = ExpectationManifest.model_validate(
            {"expectations": [{"model": "Post", "uniqueness": [{"attribute": "slug"}]}]}
        )
        report = run_expectation_manifest(manifest, {"Post": post.adapter()})
        assert report.passed is True
        assert report.failures == []

    def test_pattern_matches_custom_message(self, tmp_path: Path, define_model) -> None:
        post = define_model(
            "Post", {"slug": "text"},
            [UniquenessValidator(attribute="slug", message="is already in use")],
        )
        content = textwrap.dedent(
            """\
            expectations:
              - model: Post
                uniqueness:
                  - attribute: slug
                    pattern: "already in use$"
            """
        )
        manifest = load_expectation_manifest(_write(tmp_path, content))
        report = run_expectation_manifest(manifest, {"Post": post.adapter()})
        assert report.passed is True

    def test_unknown_model_is_error(self) -> None:
        manifest = ExpectationManifest.model_validate(
            {"expectations": [{"model": "Ghost", "uniqueness": [{"attribute": "slug"}]}]}
        )
        report = run_expectation_manifest(manifest, {})

        [outcome] = report.outcomes
        assert outcome.status == "error"
        assert outcome.message == "Unknown model: Ghost"

    def test_storage_errors_propagate(self, define_model) -> None:
        post = define_model(
            "Post", {"slug": "text", "content": "text"},
            [UniquenessValidator(attribute="slug")],
            not_null=frozenset({"content"}),
        )
        manifest = ExpectationManifest.model_validate(
            {"expectations": [{"model": "Post", "uniqueness": [{"attribute": "slug"}]}]}
        )
        with pytest.raises(StoreConstraintError):
            run_expectation_manifest(manifest, {"Post": post.adapter()})
