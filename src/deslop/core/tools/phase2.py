"""Phase 2: optional external tools, reported at LOW certainty.

Only tools relevant to the detected project languages are considered.
A tool that is not installed, times out, fails, or is skipped because the
run deadline has passed ends up in ``missing_tools``; findings from tools
that already ran are kept.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from deslop.core.patterns import AutoFix, Certainty, Finding, Severity
from deslop.core.scanner.context import RunCache
from deslop.core.tools.adapters import (
    ComplexityResult,
    Duplicate,
    run_complexity_analysis,
    run_dependency_analysis,
    run_duplicate_detection,
    run_python_complexity,
)
from deslop.core.tools.definitions import CLI_TOOLS, detect_project_languages, tools_for_languages
from deslop.core.tools.models import Success, TimedOut, ToolOutcome
from deslop.core.tools.runner import DEFAULT_TOOL_TIMEOUT, ProcessRunner

logger = logging.getLogger(__name__)

COMPLEXITY_THRESHOLD = 10
HIGH_COMPLEXITY_THRESHOLD = 20


@dataclass
class Phase2Result:
    findings: list[Finding] = field(default_factory=list)
    missing_tools: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Record -> Finding conversion
# ---------------------------------------------------------------------------


def duplicate_findings(duplicates: list[Duplicate]) -> list[Finding]:
    return [
        Finding(
            file=dup.first_file,
            line=dup.first_line,
            pattern_id="code_duplication",
            severity=Severity.MEDIUM,
            certainty=Certainty.LOW,
            description=f"Code duplication: {dup.lines} lines duplicated in {dup.second_file}:{dup.second_line}",
            auto_fix=AutoFix.FLAG,
            snippet=f"{dup.lines} lines duplicated",
            phase=2,
            details={
                "second_file": dup.second_file,
                "second_line": dup.second_line,
                "lines": dup.lines,
                "tokens": dup.tokens,
            },
        )
        for dup in duplicates
    ]


def cycle_findings(cycles: list[list[str]]) -> list[Finding]:
    return [
        Finding(
            file=cycle[0],
            line=0,
            pattern_id="circular_dependency",
            severity=Severity.HIGH,
            certainty=Certainty.LOW,
            description=f"Circular dependency: {' -> '.join(cycle)}",
            auto_fix=AutoFix.FLAG,
            snippet=" -> ".join(cycle)[:100],
            phase=2,
            details={"cycle": list(cycle)},
        )
        for cycle in cycles
    ]


def complexity_findings(results: list[ComplexityResult]) -> list[Finding]:
    return [
        Finding(
            file=result.file,
            line=result.line,
            pattern_id="high_complexity",
            severity=Severity.HIGH if result.complexity > HIGH_COMPLEXITY_THRESHOLD else Severity.MEDIUM,
            certainty=Certainty.LOW,
            description=f"High cyclomatic complexity: {result.complexity:g} in {result.name}",
            auto_fix=AutoFix.FLAG,
            snippet=f"{result.name}: complexity {result.complexity:g}",
            phase=2,
            details={"name": result.name, "complexity": result.complexity},
        )
        for result in results
        if result.complexity > COMPLEXITY_THRESHOLD
    ]


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def _check_availability(
    keys: list[str],
    tools: Mapping[str, bool] | None,
    runner: ProcessRunner,
    cache: RunCache | None,
) -> dict[str, bool]:
    available: dict[str, bool] = {}
    for key in keys:
        if tools is not None:
            available[key] = bool(tools.get(key, False))
            continue
        cached = cache.tool_available(key) if cache is not None else None
        if cached is None:
            cached = runner.is_available(CLI_TOOLS[key])
            if cache is not None:
                cache.record_tool(key, cached)
        available[key] = cached
    return available


def run_phase2(
    root: Path,
    target_files: list[str],
    tools: Mapping[str, bool] | None = None,
    runner: ProcessRunner | None = None,
    languages: list[str] | None = None,
    deadline: float | None = None,
    timeout: float = DEFAULT_TOOL_TIMEOUT,
    cache: RunCache | None = None,
) -> Phase2Result:
    """Run every relevant, available external tool.

    Args:
        root: Project root.
        target_files: Files handed to per-file tools (escomplex).
        tools: Pre-detected availability map keyed by tool key; when
            given, no version checks are run.
        runner: Process runner, replaced in tests.
        languages: Project languages; detected from ``root`` when omitted.
        deadline: ``time.monotonic()`` value after which remaining tools
            are skipped and reported missing.
        timeout: Per-invocation time budget in seconds.
        cache: Run cache used to memoise availability checks.
    """
    runner = runner or ProcessRunner()
    languages = languages or detect_project_languages(root)
    relevant = [tool.key for tool in tools_for_languages(languages)]
    available = _check_availability(relevant, tools, runner, cache)

    result = Phase2Result(languages=list(languages))
    result.missing_tools = [key for key in relevant if not available[key]]

    def budget() -> float | None:
        if deadline is None:
            return timeout
        remaining = deadline - time.monotonic()
        return None if remaining <= 0 else min(timeout, remaining)

    steps: list[tuple[str, Callable[[float], ToolOutcome], Callable[[list], list[Finding]]]] = [
        ("jscpd", lambda t: run_duplicate_detection(root, runner, timeout=t), duplicate_findings),
        ("madge", lambda t: run_dependency_analysis(root, runner, timeout=t), cycle_findings),
        (
            "escomplex",
            lambda t: run_complexity_analysis(
                root, target_files, runner, timeout=min(t, 30.0), deadline=deadline
            ),
            complexity_findings,
        ),
        ("radon", lambda t: run_python_complexity(root, runner, timeout=t), complexity_findings),
    ]

    for key, run, convert in steps:
        if key not in relevant or not available[key]:
            continue
        allowed = budget()
        if allowed is None:
            logger.warning("Deadline reached, skipping %s", key)
            result.missing_tools.append(key)
            continue
        outcome = run(allowed)
        if isinstance(outcome, Success):
            result.findings.extend(convert(outcome.data))
        else:
            if isinstance(outcome, TimedOut):
                logger.warning("%s timed out; its findings are omitted", key)
            result.missing_tools.append(key)

    return result


def missing_tools_message(missing: list[str], languages: list[str] | None = None) -> str:
    """Markdown install hints for tools that could not contribute."""
    known = [CLI_TOOLS[key] for key in dict.fromkeys(missing) if key in CLI_TOOLS]
    if not known:
        return ""
    message = "\n## Enhanced Analysis Available\n\n"
    if languages:
        message += f"Detected project languages: {', '.join(languages)}\n\n"
    message += "For deeper analysis, consider installing:\n\n"
    for tool in known:
        message += f"- **{tool.name}**: {tool.description}\n"
        message += f"  Install: `{tool.install_hint}`\n"
    message += "\nThese tools are optional and enhance detection capabilities.\n"
    return message
