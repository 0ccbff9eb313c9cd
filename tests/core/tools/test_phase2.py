"""Tests for Phase 2 orchestration and the missing-tools message."""

from __future__ import annotations

import json
import time
from pathlib import Path

from deslop.core.patterns import Certainty, Severity
from deslop.core.scanner import RunCache
from deslop.core.tools import Failed, Success, TimedOut, missing_tools_message, run_phase2
from deslop.core.tools.adapters import ComplexityResult, Duplicate
from deslop.core.tools.phase2 import complexity_findings, cycle_findings, duplicate_findings


class TestConversions:
    def test_duplicates(self) -> None:
        (finding,) = duplicate_findings([Duplicate("a.js", 3, "b.js", 40, 12, 80)])
        assert finding.pattern_id == "code_duplication"
        assert finding.certainty is Certainty.LOW
        assert finding.phase == 2
        assert finding.description == "Code duplication: 12 lines duplicated in b.js:40"

    def test_cycles(self) -> None:
        (finding,) = cycle_findings([["a.js", "b.js", "a.js"]])
        assert finding.file == "a.js"
        assert finding.severity is Severity.HIGH
        assert finding.description == "Circular dependency: a.js -> b.js -> a.js"

    def test_complexity_threshold(self) -> None:
        findings = complexity_findings([
            ComplexityResult("a.py", "low", 1, 10),
            ComplexityResult("a.py", "medium", 5, 11),
            ComplexityResult("a.py", "high", 9, 21),
        ])
        assert [(f.snippet, f.severity) for f in findings] == [
            ("medium: complexity 11", Severity.MEDIUM),
            ("high: complexity 21", Severity.HIGH),
        ]
        assert findings[0].description == "High cyclomatic complexity: 11 in medium"


class TestRunPhase2:
    def test_only_relevant_tools_checked(self, tmp_path: Path, fake_runner) -> None:
        runner = fake_runner()
        result = run_phase2(tmp_path, [], runner=runner, languages=["python"])
        assert runner.checked == ["jscpd", "pylint", "radon"]
        assert result.missing_tools == ["jscpd", "pylint", "radon"]
        assert result.findings == []
        assert result.languages == ["python"]

    def test_available_tools_contribute(self, tmp_path: Path, fake_runner) -> None:
        radon = {"app.py": [{"type": "function", "name": "route", "lineno": 3, "complexity": 25}]}
        runner = fake_runner(
            ["jscpd", "pylint", "radon"], {"radon": Success("radon", json.dumps(radon))}
        )
        result = run_phase2(tmp_path, ["app.py"], runner=runner, languages=["python"])
        assert result.missing_tools == []
        assert runner.tools_run() == ["jscpd", "radon"]
        (finding,) = result.findings
        assert (finding.file, finding.line, finding.pattern_id) == ("app.py", 3, "high_complexity")
        assert finding.certainty is Certainty.LOW

    def test_failed_tool_is_reported_missing(self, tmp_path: Path, fake_runner) -> None:
        runner = fake_runner(
            ["jscpd", "madge", "escomplex"],
            {
                "madge": TimedOut("madge", 60.0),
                "jscpd": Failed("jscpd", "crash"),
                "escomplex": Success("escomplex", json.dumps({"functions": [{"name": "f", "line": 2, "cyclomatic": 30}]})),
            },
        )
        result = run_phase2(tmp_path, ["src/a.js"], runner=runner, languages=["javascript"])
        assert result.missing_tools == ["jscpd", "madge"]
        assert [f.pattern_id for f in result.findings] == ["high_complexity"]

    def test_availability_map_skips_version_checks(self, tmp_path: Path, fake_runner) -> None:
        runner = fake_runner(["madge"])
        result = run_phase2(
            tmp_path, [], tools={"madge": True}, runner=runner, languages=["typescript"]
        )
        assert runner.checked == []
        assert result.missing_tools == ["jscpd"]
        assert runner.tools_run() == ["madge"]

    def test_expired_deadline_skips_everything(self, tmp_path: Path, fake_runner) -> None:
        runner = fake_runner(["jscpd", "radon"])
        result = run_phase2(
            tmp_path, [], runner=runner, languages=["python"], deadline=time.monotonic() - 1
        )
        assert runner.calls == []
        assert result.missing_tools == ["pylint", "jscpd", "radon"]

    def test_timeout_capped_by_deadline(self, tmp_path: Path, fake_runner) -> None:
        runner = fake_runner(["jscpd"])
        run_phase2(
            tmp_path, [], runner=runner, languages=["go"], deadline=time.monotonic() + 5, timeout=60
        )
        _, _, timeout = runner.calls[0]
        assert 0 < timeout <= 5

    def test_availability_cached_per_run(self, tmp_path: Path, fake_runner) -> None:
        cache = RunCache(tmp_path)
        runner = fake_runner(["jscpd"])
        run_phase2(tmp_path, [], runner=runner, languages=["go"], cache=cache)
        run_phase2(tmp_path, [], runner=runner, languages=["go"], cache=cache)
        assert runner.checked == ["jscpd", "golangci_lint"]
        assert cache.tool_available("jscpd") is True

    def test_languages_detected_when_omitted(self, make_project, fake_runner) -> None:
        root = make_project({"Cargo.toml": "[package]\n"})
        result = run_phase2(root, [], runner=fake_runner())
        assert result.languages == ["rust"]
        assert result.missing_tools == ["jscpd", "clippy"]


class TestMissingToolsMessage:
    def test_lists_install_hints(self) -> None:
        message = missing_tools_message(["radon", "radon", "pylint"], ["python"])
        assert "Detected project languages: python" in message
        assert message.count("**radon**") == 1
        assert "  Install: `pip install pylint`" in message
        assert message.index("**radon**") < message.index("**pylint**")

    def test_empty_when_nothing_known(self) -> None:
        assert missing_tools_message([]) == ""
        assert missing_tools_message(["unknown-tool"]) == ""
