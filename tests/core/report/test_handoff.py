"""Tests for the verbose and compact handoff renderings."""

from __future__ import annotations

import pytest

from deslop.core.patterns import AutoFix, Certainty, Finding, Severity
from deslop.core.report import NO_ISSUES, format_compact, format_handoff, format_verbose


def _finding(file: str, line: int, certainty: Certainty, auto_fix: AutoFix = AutoFix.FLAG, pattern_id: str = "p") -> Finding:
    return Finding(file, line, pattern_id, Severity.MEDIUM, certainty, f"issue at {line}", auto_fix)


MIXED = [
    _finding("src/a.js", 3, Certainty.HIGH, AutoFix.REMOVE, "console_debugging"),
    _finding("src/b.js", 7, Certainty.LOW, pattern_id="code_duplication"),
    _finding("src/a.js", 9, Certainty.HIGH, pattern_id="hardcoded_secrets"),
    _finding("project-level", 0, Certainty.MEDIUM, pattern_id="shotgun_surgery"),
]


class TestEmpty:
    @pytest.mark.parametrize("compact", [False, True])
    def test_no_issues(self, compact: bool) -> None:
        assert format_handoff([], "report", compact=compact) == NO_ISSUES

    def test_render_helpers(self) -> None:
        assert format_verbose([], "apply") == NO_ISSUES
        assert format_compact([], "apply", 5) == NO_ISSUES


class TestVerbose:
    def test_header_and_tiers_in_order(self) -> None:
        text = format_verbose(MIXED, "report")
        assert text.startswith("## Slop Detection Results\n\nMode: **report** | Total: 4 findings\n\n")
        high = text.index("### HIGH Certainty (Definitive - trust these)")
        medium = text.index("### MEDIUM Certainty (Verify context)")
        low = text.index("### LOW Certainty (Use judgment)")
        assert high < medium < low

    def test_findings_grouped_by_file(self) -> None:
        text = format_verbose(MIXED, "report")
        assert "**src/a.js**\n- L3: issue at 3 [remove]\n- L9: issue at 9\n" in text
        assert "**project-level**\n- L0: issue at 0\n" in text

    def test_action_hints(self) -> None:
        report = format_verbose(MIXED, "report")
        assert "_Action: Review surrounding code before applying._" in report
        assert "_Action: May be false positives. Investigate before acting._" in report
        assert "_Action: Apply fixes directly for autoFix patterns._" not in report
        assert "_Action: Apply fixes directly for autoFix patterns._" in format_verbose(MIXED, "apply")

    def test_action_summary(self) -> None:
        assert format_verbose(MIXED, "report").endswith(
            "### Action Summary\n\n- Auto-fixable: 1\n- Needs manual review: 3\n"
        )

    def test_empty_tiers_omitted(self) -> None:
        text = format_verbose([MIXED[0]], "report")
        assert "MEDIUM Certainty" not in text
        assert "LOW Certainty" not in text


class TestCompact:
    def test_table(self) -> None:
        text = format_compact(MIXED, "apply")
        lines = text.split("\n")
        assert lines[0] == "## Slop: apply|H:2|M:1|L:1"
        assert lines[2] == "|File|Line|Pattern|Cert|Fix|"
        assert "|src/a.js|3|console_debugging|H|remove|" in lines
        assert "|src/b.js|7|code_duplication|L|-|" in lines
        assert text.endswith("**Auto-fixable: 1** | Manual: 3")

    def test_truncation(self) -> None:
        findings = [_finding("a.py", i, Certainty.HIGH) for i in range(1, 76)]
        text = format_handoff(findings, "report", compact=True, max_findings=50)
        rows = [line for line in text.split("\n") if line.startswith("|a.py|")]
        assert len(rows) == 50
        assert rows[-1].startswith("|a.py|50|")
        assert "_+25 more findings (truncated)_" in text
        assert "H:75" in text

    def test_no_truncation_note_at_limit(self) -> None:
        findings = [_finding("a.py", i, Certainty.LOW) for i in range(1, 4)]
        assert "truncated" not in format_compact(findings, "report", max_findings=3)
