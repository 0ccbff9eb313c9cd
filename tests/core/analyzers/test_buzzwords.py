"""Tests for buzzword inflation: quality claims checked against code evidence."""

from __future__ import annotations

from deslop.core.analyzers import analyze_buzzword_inflation
from deslop.core.analyzers.buzzwords import extract_claims, is_positive_claim, search_evidence
from deslop.core.patterns import Severity
from deslop.core.scanner import RunCache


class TestClaimClassification:
    def test_assertive_claim(self) -> None:
        assert is_positive_claim("This library is production-ready.")

    def test_aspirational_claim(self) -> None:
        assert not is_positive_claim("We plan to make it production-ready.")
        assert not is_positive_claim("TODO: production-ready logging")

    def test_neutral_mention(self) -> None:
        assert not is_positive_claim("production-ready")


class TestExtractClaims:
    def test_longest_buzzword_wins(self) -> None:
        (claim,) = extract_claims("It is secure by default.", "README.md")
        assert claim.buzzword == "secure by default"
        assert claim.category == "security"

    def test_line_numbers_and_positivity(self) -> None:
        content = "# Title\n\nThis library is production-ready.\nScalable someday.\n"
        claims = extract_claims(content, "README.md")
        assert [(c.line, c.buzzword, c.is_positive) for c in claims] == [
            (3, "production-ready", True),
            (4, "scalable", False),
        ]


class TestSearchEvidence:
    def test_path_and_content_evidence(self, make_project) -> None:
        root = make_project({
            "tests/app.test.js": "it('works', () => {});\n",
            "src/app.js": "try { run(); } catch (e) { logger.error(e); }\n",
        })
        evidence = search_evidence("production", ["src/app.js", "tests/app.test.js"], RunCache(root))
        assert evidence.by_kind["tests"] == ["tests/app.test.js"]
        assert evidence.by_kind["error_handling"] == ["src/app.js"]
        assert evidence.by_kind["logging"] == ["src/app.js"]
        assert evidence.total == 3

    def test_unknown_category(self, tmp_path) -> None:
        assert search_evidence("nope", ["a.js"], RunCache(tmp_path)).total == 0


class TestAnalyzeBuzzwordInflation:
    def test_unsupported_claims_reported(self, make_project) -> None:
        root = make_project({
            "README.md": "# Lib\n\nThis library is production-ready.\n",
            "src/app.js": "function f() { return 1; }\n",
        })
        (violation,) = analyze_buzzword_inflation(root)
        assert violation.file == "README.md"
        assert violation.line == 3
        assert violation.buzzword == "production-ready"
        assert violation.evidence_count == 0
        assert violation.severity is Severity.HIGH
        assert violation.message == 'Claim "production-ready" without sufficient evidence (found 0/2 required)'

    def test_supported_claims_pass(self, make_project) -> None:
        root = make_project({
            "README.md": "This library is production-ready.\n",
            "src/app.js": "try { run(); } catch (e) { logger.error(e); }\n",
            "tests/app.test.js": "it('works', () => {});\n",
        })
        assert analyze_buzzword_inflation(root) == []

    def test_partial_evidence_is_medium(self, make_project) -> None:
        root = make_project({
            "README.md": "This library is production-ready.\n",
            "tests/app.test.js": "it('works', () => {});\n",
        })
        (violation,) = analyze_buzzword_inflation(root)
        assert violation.evidence_count == 1
        assert violation.severity is Severity.MEDIUM

    def test_aspirational_claims_ignored(self, make_project) -> None:
        root = make_project({"README.md": "We plan to make it production-ready.\n"})
        assert analyze_buzzword_inflation(root) == []

    def test_claims_in_source_comments(self, make_project) -> None:
        root = make_project({"src/server.py": "# This server is highly scalable.\nx = 1\n"})
        violations = analyze_buzzword_inflation(root)
        assert [(v.file, v.buzzword) for v in violations] == [("src/server.py", "highly scalable")]
