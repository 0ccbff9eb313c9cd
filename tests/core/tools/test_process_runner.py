"""Tests for the subprocess wrapper, using the current interpreter as the tool."""

from __future__ import annotations

import sys

from deslop.core.tools import CLI_TOOLS, Failed, ProcessRunner, Success, TimedOut, ToolDefinition, Unavailable


def _script(code: str) -> list[str]:
    return [sys.executable, "-c", code]


class TestRun:
    def test_stdout_is_returned(self) -> None:
        outcome = ProcessRunner().run("py", _script("print('report')"), cwd=None, timeout=30)
        assert outcome == Success("py", "report\n")

    def test_exit_code_one_still_reports(self) -> None:
        outcome = ProcessRunner().run("py", _script("print('found'); raise SystemExit(1)"), cwd=None, timeout=30)
        assert isinstance(outcome, Success)
        assert outcome.data == "found\n"

    def test_other_exit_codes_fail_with_last_stderr_line(self) -> None:
        code = "import sys; sys.stderr.write('first\\nboom\\n'); raise SystemExit(3)"
        outcome = ProcessRunner().run("py", _script(code), cwd=None, timeout=30)
        assert outcome == Failed("py", "boom")

    def test_silent_failure_names_exit_code(self) -> None:
        outcome = ProcessRunner().run("py", _script("raise SystemExit(4)"), cwd=None, timeout=30)
        assert outcome == Failed("py", "exit code 4")

    def test_missing_executable(self) -> None:
        outcome = ProcessRunner().run("ghost", ["deslop-no-such-tool-xyz"], cwd=None, timeout=5)
        assert outcome == Unavailable("ghost")

    def test_timeout(self) -> None:
        outcome = ProcessRunner().run("py", _script("import time; time.sleep(10)"), cwd=None, timeout=0.2)
        assert outcome == TimedOut("py", 0.2)


class TestIsAvailable:
    def test_missing_from_path(self) -> None:
        tool = ToolDefinition(
            key="ghost",
            name="ghost",
            description="not installed",
            check_command=("deslop-no-such-tool-xyz", "--version"),
            install_hint="-",
            languages=("python",),
        )
        assert ProcessRunner().is_available(tool) is False

    def test_interpreter_version_check(self) -> None:
        tool = ToolDefinition(
            key="python",
            name="python",
            description="interpreter",
            check_command=(sys.executable, "--version"),
            install_hint="-",
            languages=("python",),
        )
        assert ProcessRunner().is_available(tool) is True

    def test_catalogue_check_commands_are_vectors(self) -> None:
        for tool in CLI_TOOLS.values():
            assert isinstance(tool.check_command, tuple)
            assert tool.check_command[-1] == "--version"
