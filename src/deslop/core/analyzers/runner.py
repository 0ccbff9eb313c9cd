"""Phase 1b: run the structural analyzers and convert violations to findings.

Each analyzer is bound to one multi-pass pattern of the registry; when
that pattern is absent (disabled in config) the analyzer does not run.
Per-file analyzers see every supported, non-test target file; project-level
analyzers run once afterwards. An analyzer that raises is logged and
skipped so the remaining analyzers still contribute findings.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Iterable, Optional

from deslop.core.analyzers.buzzwords import analyze_buzzword_inflation
from deslop.core.analyzers.dead_code import analyze_dead_code
from deslop.core.analyzers.doc_ratio import analyze_doc_code_ratio
from deslop.core.analyzers.infrastructure import analyze_infrastructure
from deslop.core.analyzers.over_engineering import analyze_over_engineering
from deslop.core.analyzers.shotgun import LogReader, analyze_shotgun_surgery, read_git_log
from deslop.core.analyzers.stubs import analyze_stub_functions
from deslop.core.analyzers.verbosity import analyze_verbosity_ratio
from deslop.core.patterns import (
    PROJECT_LEVEL,
    AutoFix,
    Certainty,
    Finding,
    PatternDefinition,
    PatternRegistry,
    Severity,
    is_file_excluded,
)
from deslop.core.scanner.context import RunCache
from deslop.core.scanner.files import is_test_file
from deslop.core.scanner.line_scanner import SNIPPET_LIMIT
from deslop.exceptions import AnalysisError

logger = logging.getLogger(__name__)

STRUCTURAL_FILE = re.compile(r"\.(js|jsx|ts|tsx|mjs|cjs|py|rs|java|go)$", re.IGNORECASE)

FileAnalyzer = Callable[[PatternDefinition, str, str, Optional[str]], list[Finding]]


def _clip(text: str) -> str:
    return text[:SNIPPET_LIMIT]


# ---------------------------------------------------------------------------
# Per-file analyzers
# ---------------------------------------------------------------------------


def _doc_ratio(pattern: PatternDefinition, file: str, content: str, language: str | None) -> list[Finding]:
    violations = analyze_doc_code_ratio(
        content,
        language,
        min_function_lines=int(pattern.threshold("min_function_lines", 3)),
        max_ratio=pattern.threshold("max_ratio", 3.0),
    )
    return [
        Finding(
            file=file,
            line=v.line,
            pattern_id=pattern.id,
            severity=pattern.severity,
            certainty=Certainty.MEDIUM,
            description=(
                f"{pattern.description} ({v.doc_lines} doc lines / "
                f"{v.code_lines} code lines = {v.ratio}x)"
            ),
            auto_fix=pattern.auto_fix,
            snippet=f"{v.function_name}()",
            details={
                "doc_lines": v.doc_lines,
                "code_lines": v.code_lines,
                "ratio": v.ratio,
                "function_name": v.function_name,
            },
        )
        for v in violations
    ]


def _verbosity(pattern: PatternDefinition, file: str, content: str, language: str | None) -> list[Finding]:
    violations = analyze_verbosity_ratio(
        content,
        language,
        min_code_lines=int(pattern.threshold("min_code_lines", 3)),
        max_comment_ratio=pattern.threshold("max_comment_ratio", 2.0),
    )
    return [
        Finding(
            file=file,
            line=v.line,
            pattern_id=pattern.id,
            severity=pattern.severity,
            certainty=Certainty.MEDIUM,
            description=(
                f"{pattern.description} ({v.comment_lines} comment lines / "
                f"{v.code_lines} code lines = {v.ratio}x)"
            ),
            auto_fix=pattern.auto_fix,
            snippet=f"Function at line {v.line}",
            details={"comment_lines": v.comment_lines, "code_lines": v.code_lines, "ratio": v.ratio},
        )
        for v in violations
    ]


def _dead_code(pattern: PatternDefinition, file: str, content: str, language: str | None) -> list[Finding]:
    return [
        Finding(
            file=file,
            line=v.line,
            pattern_id=pattern.id,
            severity=pattern.severity,
            certainty=Certainty.MEDIUM,
            description=f"{pattern.description}: {v.termination_type} at line {v.termination_line}",
            auto_fix=pattern.auto_fix,
            snippet=v.content,
            details={"termination_type": v.termination_type, "termination_line": v.termination_line},
        )
        for v in analyze_dead_code(content, language)
    ]


def _stubs(pattern: PatternDefinition, file: str, content: str, language: str | None) -> list[Finding]:
    # The only Phase 1b finding allowed to escalate to HIGH certainty
    return [
        Finding(
            file=file,
            line=v.line,
            pattern_id=pattern.id,
            severity=Severity.HIGH if v.has_todo else pattern.severity,
            certainty=v.certainty,
            description=f"{pattern.description}: {v.function_name}() returns {v.return_value}",
            auto_fix=pattern.auto_fix,
            snippet=_clip(v.content),
            details={
                "function_name": v.function_name,
                "return_value": v.return_value,
                "has_todo": v.has_todo,
            },
        )
        for v in analyze_stub_functions(content, language)
    ]


FILE_ANALYZERS: dict[str, FileAnalyzer] = {
    "doc_code_ratio": _doc_ratio,
    "verbosity_ratio": _verbosity,
    "dead_code": _dead_code,
    "placeholder_stub_functions": _stubs,
}


# ---------------------------------------------------------------------------
# Project-level analyzers
# ---------------------------------------------------------------------------


def _over_engineering(pattern: PatternDefinition, root: Path, cache: RunCache, max_files: int) -> list[Finding]:
    report = analyze_over_engineering(
        root,
        file_ratio_threshold=pattern.threshold("file_ratio_threshold", 20),
        lines_per_export_threshold=pattern.threshold("lines_per_export_threshold", 500),
        depth_threshold=int(pattern.threshold("depth_threshold", 4)),
        max_files=max_files,
    )
    return [
        Finding(
            file=PROJECT_LEVEL,
            line=0,
            pattern_id=pattern.id,
            severity=v.severity,
            certainty=Certainty.MEDIUM,
            description=f"Over-engineering: {v.kind} - {v.value} (threshold: {v.threshold})",
            auto_fix=AutoFix.FLAG,
            snippet=v.value,
            details=v.details,
        )
        for v in report.violations
    ]


def _buzzwords(pattern: PatternDefinition, root: Path, cache: RunCache, max_files: int) -> list[Finding]:
    violations = analyze_buzzword_inflation(
        root,
        min_evidence_matches=int(pattern.threshold("min_evidence_matches", 2)),
        cache=cache,
        max_files=max_files,
    )
    return [
        Finding(
            file=v.file,
            line=v.line,
            pattern_id=pattern.id,
            severity=v.severity,
            certainty=Certainty.MEDIUM,
            description=v.message,
            auto_fix=AutoFix.FLAG,
            snippet=_clip(v.claim),
            details={"buzzword": v.buzzword, "category": v.category, "evidence_count": v.evidence_count},
        )
        for v in violations
    ]


def _infrastructure(pattern: PatternDefinition, root: Path, cache: RunCache, max_files: int) -> list[Finding]:
    setups = analyze_infrastructure(
        root,
        cache=cache,
        max_matches_per_file=int(pattern.threshold("max_matches_per_file", 100)),
        max_files=max_files,
    )
    return [
        Finding(
            file=s.file,
            line=s.line,
            pattern_id=pattern.id,
            severity=Severity.HIGH,
            certainty=Certainty.MEDIUM,
            description=s.message,
            auto_fix=AutoFix.FLAG,
            snippet=_clip(s.content),
            details={"variable": s.variable, "component": s.component},
        )
        for s in setups
    ]


def _shotgun(
    pattern: PatternDefinition, root: Path, log_reader: LogReader
) -> list[Finding]:
    violations = analyze_shotgun_surgery(
        root,
        commit_limit=pattern.threshold("commit_limit", 100),
        cluster_threshold=int(pattern.threshold("cluster_threshold", 5)),
        min_co_changes=int(pattern.threshold("min_co_changes", 3)),
        log_reader=log_reader,
    )
    return [
        Finding(
            file=PROJECT_LEVEL,
            line=0,
            pattern_id=pattern.id,
            severity=v.severity,
            certainty=Certainty.MEDIUM,
            description=v.message,
            auto_fix=pattern.auto_fix,
            snippet=_clip(", ".join((v.file, *v.coupled_with))),
            details={
                "file": v.file,
                "coupled_count": v.coupled_count,
                "coupled_with": list(v.coupled_with),
            },
        )
        for v in violations
    ]


ProjectAnalyzer = Callable[[PatternDefinition, Path, RunCache, int], list[Finding]]

PROJECT_ANALYZERS: dict[str, ProjectAnalyzer] = {
    "over_engineering_metrics": _over_engineering,
    "buzzword_inflation": _buzzwords,
    "infrastructure_without_implementation": _infrastructure,
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def is_structural_target(file: str) -> bool:
    return bool(STRUCTURAL_FILE.search(file)) and not is_test_file(file)


def run_phase1b(
    cache: RunCache,
    target_files: Iterable[str],
    registry: PatternRegistry,
    max_files: int = 1000,
    log_reader: LogReader = read_git_log,
) -> list[Finding]:
    """Run every enabled structural analyzer.

    Args:
        cache: Run-scoped cache; its ``root`` is the scanned directory.
        target_files: Relative paths analysed by the per-file analyzers.
        registry: Supplies the enabled multi-pass patterns and thresholds.
        max_files: Cap for the project-level file walks.
        log_reader: Source of ``git log`` output for shotgun surgery.

    Returns:
        Findings in analyzer order: per-file analyzers by file, then the
        project-level analyzers.
    """
    enabled = registry.multi_pass_patterns()
    findings: list[Finding] = []

    file_analyzers = [
        (enabled[pattern_id], analyzer)
        for pattern_id, analyzer in FILE_ANALYZERS.items()
        if pattern_id in enabled
    ]
    for file in target_files:
        if not is_structural_target(file):
            continue
        content = cache.content(file)
        if content is None:
            continue
        language = cache.language(file)
        for pattern, analyzer in file_analyzers:
            if is_file_excluded(file, pattern.exclude):
                continue
            try:
                findings.extend(analyzer(pattern, file, content, language))
            except Exception:
                logger.warning("Analyzer %s failed on %s", pattern.id, file, exc_info=True)

    for pattern_id, project_analyzer in PROJECT_ANALYZERS.items():
        pattern = enabled.get(pattern_id)
        if pattern is None:
            continue
        try:
            findings.extend(project_analyzer(pattern, cache.root, cache, max_files))
        except AnalysisError as exc:
            logger.warning("Analyzer %s skipped: %s", pattern_id, exc)
        except Exception:
            logger.warning("Analyzer %s failed", pattern_id, exc_info=True)

    shotgun = enabled.get("shotgun_surgery")
    if shotgun is not None:
        try:
            findings.extend(_shotgun(shotgun, cache.root, log_reader))
        except Exception:
            logger.warning("Analyzer %s failed", shotgun.id, exc_info=True)

    return findings
