"""Tests for the phase orchestration of ``run_pipeline``."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

import pytest

from deslop.core.patterns import Certainty, default_registry
from deslop.core.pipeline import PipelineOptions, run_pipeline
from deslop.core.report import NO_ISSUES
from deslop.core.tools import Success, Unavailable
from deslop.exceptions import ConfigError

APP_JS = (
    "function getUser(id) {\n"
    "  // TODO: query the database\n"
    "  return null;\n"
    "}\n"
    "console.log(getUser(1));\n"
)


class StubRunner:
    """Reports every tool as installed; radon returns one complex function."""

    RADON_REPORT = {"app.py": [{"type": "function", "name": "route", "lineno": 1, "complexity": 15}]}

    def __init__(self, radon_output: str | None = None) -> None:
        self.tools: list[str] = []
        self.radon_output = radon_output or json.dumps(self.RADON_REPORT)

    def is_available(self, tool) -> bool:
        return True

    def run(self, tool, command, cwd, timeout=60.0):
        self.tools.append(tool)
        if tool == "radon":
            return Success(tool, self.radon_output)
        if tool == "jscpd":
            return Unavailable(tool)
        return Success(tool, "")


@pytest.fixture
def project(make_project) -> Path:
    return make_project({
        "src/app.js": APP_JS,
        "src/app.test.js": "console.log('in a test');\n",
        "notes.txt": "console.log('not source');\n",
    })


class TestPhases:
    def test_quick_runs_line_scanner_only(self, project: Path, no_git_history) -> None:
        result = run_pipeline(project, PipelineOptions(thoroughness="quick"), log_reader=no_git_history)
        assert result.findings
        assert {f.certainty for f in result.findings} == {Certainty.HIGH}
        assert "placeholder_stub_functions" not in {f.pattern_id for f in result.findings}

    def test_normal_appends_structural_findings(self, project: Path, no_git_history) -> None:
        result = run_pipeline(project, PipelineOptions(), log_reader=no_git_history)
        ids = [f.pattern_id for f in result.findings]
        assert "console_debugging" in ids
        assert "placeholder_stub_functions" in ids
        assert ids.index("console_debugging") < ids.index("placeholder_stub_functions")
        assert all(f.phase == 1 for f in result.findings)
        assert result.missing_tools == []
        assert result.detected_languages == []

    def test_test_and_non_source_files_ignored(self, project: Path, no_git_history) -> None:
        result = run_pipeline(project, PipelineOptions(), log_reader=no_git_history)
        assert {f.file for f in result.findings} <= {"src/app.js", "project-level"}
        assert result.metadata["files_analyzed"] == 1

    def test_deep_runs_relevant_tools(self, make_project, no_git_history) -> None:
        root = make_project({"pyproject.toml": "[project]\n", "app.py": "def route():\n    return 1\n"})
        runner = StubRunner()
        result = run_pipeline(root, PipelineOptions(thoroughness="deep"), runner=runner, log_reader=no_git_history)
        assert result.detected_languages == ["python"]
        assert runner.tools == ["jscpd", "radon"]
        assert result.missing_tools == ["jscpd"]
        (complex_fn,) = [f for f in result.findings if f.phase == 2]
        assert complex_fn.pattern_id == "high_complexity"
        assert complex_fn.certainty is Certainty.LOW

    def test_deep_with_passed_deadline(self, make_project, no_git_history) -> None:
        root = make_project({"go.mod": "module x\n", "main.go": "package main\n"})
        options = PipelineOptions(thoroughness="deep", deadline=time.monotonic() - 1)
        runner = StubRunner()
        result = run_pipeline(root, options, runner=runner, log_reader=no_git_history)
        assert runner.tools == []
        assert result.missing_tools == ["jscpd"]


class TestDeepResilience:
    @pytest.fixture
    def py_project(self, make_project) -> Path:
        return make_project({"pyproject.toml": "[project]\n", "app.py": "print(1)\n"})

    def test_unexpected_tool_output_keeps_findings(self, py_project: Path, no_git_history) -> None:
        runner = StubRunner(radon_output="[]")
        result = run_pipeline(py_project, PipelineOptions(thoroughness="deep"), runner=runner, log_reader=no_git_history)
        assert "python_debugging" in {f.pattern_id for f in result.findings}
        assert "radon" in result.missing_tools

    def test_string_complexity_still_reported(self, py_project: Path, no_git_history) -> None:
        report = {"app.py": [{"type": "function", "name": "route", "lineno": 1, "complexity": "12"}]}
        runner = StubRunner(radon_output=json.dumps(report))
        result = run_pipeline(py_project, PipelineOptions(thoroughness="deep"), runner=runner, log_reader=no_git_history)
        assert [f.pattern_id for f in result.findings if f.phase == 2] == ["high_complexity"]
        assert "radon" not in result.missing_tools

    def test_phase2_crash_keeps_earlier_findings(
        self, py_project: Path, no_git_history, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        def explode(*args, **kwargs):
            raise RuntimeError("tool layer exploded")

        monkeypatch.setattr("deslop.core.pipeline.run.run_phase2", explode)
        with caplog.at_level(logging.WARNING, logger="deslop.core.pipeline.run"):
            result = run_pipeline(py_project, PipelineOptions(thoroughness="deep"), log_reader=no_git_history)
        assert "python_debugging" in {f.pattern_id for f in result.findings}
        assert result.missing_tools == ["jscpd", "radon"]
        assert "Phase 2 aborted" in caplog.text


class TestOptions:
    def test_explicit_target_files(self, project: Path, no_git_history) -> None:
        options = PipelineOptions(thoroughness="quick", target_files=["src/gone.js"])
        result = run_pipeline(project, options, log_reader=no_git_history)
        assert result.findings == []
        assert result.metadata["files_analyzed"] == 1

    def test_disabled_patterns(self, project: Path, no_git_history) -> None:
        options = PipelineOptions(disabled_patterns=("console_debugging", "placeholder_stub_functions"))
        result = run_pipeline(project, options, log_reader=no_git_history)
        ids = {f.pattern_id for f in result.findings}
        assert not ids & {"console_debugging", "placeholder_stub_functions"}

    def test_unknown_disabled_pattern(self, project: Path) -> None:
        with pytest.raises(ConfigError):
            run_pipeline(project, PipelineOptions(disabled_patterns=("no_such_pattern",)))

    def test_explicit_registry_wins(self, project: Path, no_git_history) -> None:
        registry = default_registry(disabled=["console_debugging"])
        result = run_pipeline(project, PipelineOptions(thoroughness="quick"), registry=registry, log_reader=no_git_history)
        assert "console_debugging" not in {f.pattern_id for f in result.findings}

    def test_not_a_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Not a directory"):
            run_pipeline(tmp_path / "missing")


class TestResult:
    def test_empty_project(self, tmp_path: Path, no_git_history) -> None:
        result = run_pipeline(tmp_path, log_reader=no_git_history)
        assert not result.has_findings
        assert result.handoff_text == NO_ISSUES
        assert result.summary.total == 0

    def test_compact_handoff(self, project: Path, no_git_history) -> None:
        options = PipelineOptions(mode="apply", compact=True, max_findings=1)
        result = run_pipeline(project, options, log_reader=no_git_history)
        assert result.handoff_text.startswith("## Slop: apply|")
        assert "more findings (truncated)" in result.handoff_text

    def test_metadata_and_json(self, project: Path, no_git_history) -> None:
        result = run_pipeline(project, PipelineOptions(), log_reader=no_git_history)
        data = json.loads(json.dumps(result.to_dict()))
        assert data["metadata"]["root"] == str(project.resolve())
        assert data["metadata"]["thoroughness"] == "normal"
        assert data["metadata"]["mode"] == "report"
        assert data["metadata"]["duration_seconds"] >= 0
        assert data["summary"]["total"] == len(result.findings)
        assert data["findings"][0]["certainty"] == "HIGH"
