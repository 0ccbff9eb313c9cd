"""Adapters that run one external tool and parse its JSON report.

Each adapter returns a ``ToolOutcome`` whose ``Success.data`` is a list
of parsed records. Unreadable JSON and reports whose layout does not match what the
parser expects become ``Failed`` outcomes.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from deslop.core.tools.models import Failed, Success, TimedOut, ToolOutcome
from deslop.core.tools.runner import DEFAULT_TOOL_TIMEOUT, ProcessRunner

logger = logging.getLogger(__name__)

ESCOMPLEX_FILE_TIMEOUT = 30.0
JSCPD_REPORT = "jscpd-report.json"

MADGE_ENTRY_CANDIDATES: tuple[str, ...] = (
    "src/index.js",
    "src/index.ts",
    "index.js",
    "index.ts",
    "lib/index.js",
    "main.js",
)

_JS_FILE = re.compile(r"\.[jt]sx?$")

# Raised when a report parses as JSON but not into the expected layout
_MALFORMED = (AttributeError, KeyError, TypeError, ValueError)


@dataclass(frozen=True)
class Duplicate:
    first_file: str
    first_line: int
    second_file: str
    second_line: int
    lines: int
    tokens: int
    fragment: str = ""


@dataclass(frozen=True)
class ComplexityResult:
    file: str
    name: str
    line: int
    complexity: float


def _relative(root: Path, name: str) -> str:
    path = Path(name)
    if path.is_absolute():
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            return path.as_posix()
    return path.as_posix()


# ---------------------------------------------------------------------------
# jscpd: duplicated code
# ---------------------------------------------------------------------------


def parse_jscpd_report(report: dict[str, Any], root: Path) -> list[Duplicate]:
    duplicates: list[Duplicate] = []
    for dup in report.get("duplicates") or []:
        first = dup.get("firstFile") or {}
        second = dup.get("secondFile") or {}
        duplicates.append(Duplicate(
            first_file=_relative(root, first.get("name") or "unknown"),
            first_line=int(first.get("start") or 0),
            second_file=_relative(root, second.get("name") or "unknown"),
            second_line=int(second.get("start") or 0),
            lines=int(dup.get("lines") or 0),
            tokens=int(dup.get("tokens") or 0),
            fragment=(dup.get("fragment") or "")[:100],
        ))
    return duplicates


def run_duplicate_detection(
    root: Path,
    runner: ProcessRunner,
    timeout: float = DEFAULT_TOOL_TIMEOUT,
    min_lines: int = 5,
    min_tokens: int = 50,
) -> ToolOutcome:
    """Run jscpd with its JSON reporter writing into a temporary directory."""
    with tempfile.TemporaryDirectory(prefix="deslop_jscpd_") as output_dir:
        command = [
            "jscpd", str(root),
            "--min-lines", str(min_lines),
            "--min-tokens", str(min_tokens),
            "--reporters", "json",
            "--output", output_dir,
            "--silent",
        ]
        outcome = runner.run("jscpd", command, cwd=root, timeout=timeout)
        if not isinstance(outcome, Success):
            return outcome

        report_path = Path(output_dir) / JSCPD_REPORT
        if not report_path.exists():
            # No report means nothing was duplicated
            return Success("jscpd", [])
        try:
            report = json.loads(report_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            return Failed("jscpd", f"unreadable report: {exc}")
    try:
        duplicates = parse_jscpd_report(report, root)
    except _MALFORMED as exc:
        return Failed("jscpd", f"unexpected report shape: {exc!r}")
    return Success("jscpd", duplicates)


# ---------------------------------------------------------------------------
# madge: circular dependencies
# ---------------------------------------------------------------------------


def madge_entry(root: Path) -> str:
    for candidate in MADGE_ENTRY_CANDIDATES:
        if (root / candidate).exists():
            return candidate
    return "."


def run_dependency_analysis(
    root: Path,
    runner: ProcessRunner,
    timeout: float = DEFAULT_TOOL_TIMEOUT,
    entry: str | None = None,
) -> ToolOutcome:
    """Run ``madge --circular --json``; data is a list of cycles (lists of paths)."""
    outcome = runner.run(
        "madge", ["madge", "--circular", "--json", entry or madge_entry(root)], cwd=root, timeout=timeout
    )
    if not isinstance(outcome, Success):
        return outcome
    try:
        cycles = json.loads(outcome.data or "[]")
    except json.JSONDecodeError as exc:
        return Failed("madge", f"unreadable output: {exc}")
    if not isinstance(cycles, list):
        return Success("madge", [])
    try:
        parsed = [[str(node) for node in cycle] for cycle in cycles if cycle]
    except TypeError as exc:
        return Failed("madge", f"unexpected output shape: {exc!r}")
    return Success("madge", parsed)


# ---------------------------------------------------------------------------
# escomplex / radon: cyclomatic complexity
# ---------------------------------------------------------------------------


def parse_escomplex_report(report: dict[str, Any], file: str) -> list[ComplexityResult]:
    results = [
        ComplexityResult(
            file=file,
            name=fn.get("name") or "anonymous",
            line=int(fn.get("line") or 0),
            complexity=float(fn.get("cyclomatic") or 0),
        )
        for fn in report.get("functions") or []
    ]
    aggregate = report.get("aggregate")
    if aggregate:
        results.append(ComplexityResult(file, "module", 0, float(aggregate.get("cyclomatic") or 0)))
    return results


def run_complexity_analysis(
    root: Path,
    target_files: list[str],
    runner: ProcessRunner,
    timeout: float = ESCOMPLEX_FILE_TIMEOUT,
    deadline: float | None = None,
) -> ToolOutcome:
    """Run escomplex on each JS/TS target file.

    A file that times out or fails is logged and skipped. Reaching
    ``deadline`` stops the loop with a ``TimedOut`` outcome.
    """
    results: list[ComplexityResult] = []
    for file in target_files:
        if not _JS_FILE.search(file):
            continue
        if deadline is not None and time.monotonic() >= deadline:
            return TimedOut("escomplex", timeout)
        path = file if os.path.isabs(file) else str(root / file)
        outcome = runner.run("escomplex", ["escomplex", path, "--format", "json"], cwd=root, timeout=timeout)
        if not isinstance(outcome, Success):
            logger.warning("escomplex skipped %s: %s", file, outcome)
            continue
        try:
            report = json.loads(outcome.data)
        except json.JSONDecodeError:
            logger.warning("escomplex produced unreadable output for %s", file)
            continue
        try:
            results.extend(parse_escomplex_report(report, file))
        except _MALFORMED:
            logger.warning("escomplex report for %s has an unexpected shape", file, exc_info=True)
    return Success("escomplex", results)


def parse_radon_report(report: dict[str, Any], root: Path) -> list[ComplexityResult]:
    results: list[ComplexityResult] = []
    for name, blocks in report.items():
        if not isinstance(blocks, list):
            # radon reports per-file parse errors as {"error": "..."}
            continue
        file = _relative(root, name)
        for block in blocks:
            if block.get("type") not in ("function", "method"):
                continue
            label = block.get("name") or "anonymous"
            if block.get("classname"):
                label = f"{block['classname']}.{label}"
            results.append(ComplexityResult(
                file=file,
                name=label,
                line=int(block.get("lineno") or 0),
                complexity=float(block.get("complexity") or 0),
            ))
    return results


def run_python_complexity(
    root: Path,
    runner: ProcessRunner,
    timeout: float = DEFAULT_TOOL_TIMEOUT,
) -> ToolOutcome:
    """Run ``radon cc -j`` over the project."""
    outcome = runner.run("radon", ["radon", "cc", "-j", str(root)], cwd=root, timeout=timeout)
    if not isinstance(outcome, Success):
        return outcome
    try:
        report = json.loads(outcome.data or "{}")
    except json.JSONDecodeError as exc:
        return Failed("radon", f"unreadable output: {exc}")
    try:
        results = parse_radon_report(report, root)
    except _MALFORMED as exc:
        return Failed("radon", f"unexpected output shape: {exc!r}")
    return Success("radon", results)
