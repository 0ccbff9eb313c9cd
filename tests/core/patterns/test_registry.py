"""Tests for the pattern catalogue, registry queries and exclusion globs."""

from __future__ import annotations

import pytest

from deslop.core.patterns import (
    AutoFix,
    Certainty,
    Finding,
    PatternRegistry,
    Severity,
    default_registry,
    is_file_excluded,
)
from deslop.core.patterns.registry import compile_glob
from deslop.exceptions import ConfigError


class TestSeverity:
    def test_severity_ordering(self) -> None:
        assert Severity.LOW < Severity.MEDIUM < Severity.HIGH < Severity.CRITICAL

    def test_label_round_trip(self) -> None:
        for severity in Severity:
            assert Severity.from_label(severity.label) is severity

    def test_certainty_initials(self) -> None:
        assert [c.initial for c in (Certainty.HIGH, Certainty.MEDIUM, Certainty.LOW)] == ["H", "M", "L"]


class TestAutoFix:
    @pytest.mark.parametrize("fix", [AutoFix.REMOVE, AutoFix.REPLACE, AutoFix.ADD_LOGGING])
    def test_automatic_strategies(self, fix: AutoFix) -> None:
        assert fix.is_automatic

    @pytest.mark.parametrize("fix", [AutoFix.FLAG, AutoFix.NONE])
    def test_manual_strategies(self, fix: AutoFix) -> None:
        assert not fix.is_automatic


class TestCatalogue:
    def test_ids_are_unique(self, registry: PatternRegistry) -> None:
        ids = [p.id for p in registry]
        assert len(ids) == len(set(ids))

    def test_line_patterns_have_regex(self, registry: PatternRegistry) -> None:
        for pattern in registry.line_patterns():
            assert pattern.regex is not None
            assert not pattern.requires_multi_pass

    def test_multi_pass_analyzers_present(self, registry: PatternRegistry) -> None:
        assert set(registry.multi_pass_patterns()) == {
            "doc_code_ratio",
            "verbosity_ratio",
            "over_engineering_metrics",
            "buzzword_inflation",
            "infrastructure_without_implementation",
            "dead_code",
            "placeholder_stub_functions",
            "shotgun_surgery",
        }

    def test_secrets_are_critical(self, registry: PatternRegistry) -> None:
        for pattern_id in ("hardcoded_secrets", "openai_api_key", "github_token", "private_key"):
            pattern = registry.get(pattern_id)
            assert pattern is not None
            assert pattern.severity is Severity.CRITICAL

    def test_consecutive_patterns(self, registry: PatternRegistry) -> None:
        commented = registry.get("commented_code")
        blank = registry.get("multiple_blank_lines")
        assert commented is not None and commented.min_consecutive_lines == 5
        assert blank is not None and blank.min_consecutive_lines == 3

    def test_to_dict_is_plain_data(self, registry: PatternRegistry) -> None:
        data = registry.get("doc_code_ratio").to_dict()  # type: ignore[union-attr]
        assert data["multi_pass"] is True
        assert data["thresholds"] == {"min_function_lines": 3, "max_ratio": 3.0}


class TestRegistryQueries:
    def test_language_scoping_includes_universal(self, registry: PatternRegistry) -> None:
        ids = {p.id for p in registry.patterns_for_language("python")}
        assert "python_debugging" in ids
        assert "old_todos" in ids
        assert "console_debugging" not in ids

    def test_none_language_returns_universal_only(self, registry: PatternRegistry) -> None:
        assert all(p.language is None for p in registry.patterns_for_language(None))

    def test_query_order_is_stable(self, registry: PatternRegistry) -> None:
        first = [p.id for p in registry.patterns_for_language("javascript")]
        second = [p.id for p in registry.patterns_for_language("javascript")]
        assert first == second

    def test_languages(self, registry: PatternRegistry) -> None:
        assert registry.languages() == sorted(registry.languages())
        assert "javascript" in registry.languages()

    def test_duplicate_ids_rejected(self, registry: PatternRegistry) -> None:
        pattern = registry.get("old_todos")
        with pytest.raises(ConfigError):
            PatternRegistry([pattern, pattern])  # type: ignore[list-item]


class TestDefaultRegistryOverrides:
    def test_disabled_pattern_removed(self) -> None:
        registry = default_registry(disabled=["magic_numbers"])
        assert "magic_numbers" not in registry

    def test_threshold_override_merges(self) -> None:
        registry = default_registry(thresholds={"doc_code_ratio": {"max_ratio": 5}})
        pattern = registry.get("doc_code_ratio")
        assert pattern is not None
        assert pattern.threshold("max_ratio", 0) == 5
        assert pattern.threshold("min_function_lines", 0) == 3

    def test_unknown_id_raises(self) -> None:
        with pytest.raises(ConfigError, match="no_such_pattern"):
            default_registry(disabled=["no_such_pattern"])


class TestExclusionGlobs:
    @pytest.mark.parametrize(
        ("path", "globs"),
        [
            ("src/app.test.js", ("*.test.*",)),
            ("tests/conftest.py", ("conftest.py",)),
            ("crate/tests/it.rs", ("**/tests/**",)),
            ("README.md", ("README.*",)),
        ],
    )
    def test_excluded(self, path: str, globs: tuple[str, ...]) -> None:
        assert is_file_excluded(path, globs)

    def test_not_excluded(self) -> None:
        assert not is_file_excluded("src/app.js", ("*.test.*", "*.md"))

    def test_regex_specials_are_literal(self) -> None:
        assert compile_glob("a+b.js").match("a+b.js")
        assert not compile_glob("a+b.js").match("aab.js")

    def test_question_mark_matches_one_character(self) -> None:
        assert is_file_excluded("src/app.test.js", ("*.?s",))
        assert compile_glob("v?.js").match("v1.js")
        assert not compile_glob("v?.js").match("v12.js")
        assert not compile_glob("a?b").match("a/b")

    def test_too_many_wildcards_never_match(self) -> None:
        assert not compile_glob("*" * 11).match("anything")


class TestFinding:
    def test_to_dict(self) -> None:
        finding = Finding(
            file="a.js",
            line=3,
            pattern_id="console_debugging",
            severity=Severity.MEDIUM,
            certainty=Certainty.HIGH,
            description="Console.log",
            auto_fix=AutoFix.REMOVE,
            snippet="console.log(1)",
        )
        data = finding.to_dict()
        assert data["severity"] == "medium"
        assert data["certainty"] == "HIGH"
        assert data["auto_fix"] == "remove"
        assert data["phase"] == 1

    def test_details_are_read_only(self) -> None:
        finding = Finding("a", 1, "p", Severity.LOW, Certainty.LOW, "d", AutoFix.FLAG, details={"k": 1})
        with pytest.raises(TypeError):
            finding.details["k"] = 2  # type: ignore[index]
