"""Pipeline orchestration: Phase 1, Phase 1b and Phase 2 in order.

``run_pipeline`` is the single entry point used by the CLI and by library
callers. Options are validated before any file is read; per-file and
per-analyzer failures are logged and skipped so a result is always
returned. Findings are only ever appended: Phase 1 first, then the
structural analyzers, then the external tools.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from deslop.core.analyzers.runner import run_phase1b
from deslop.core.analyzers.shotgun import LogReader, read_git_log
from deslop.core.patterns import Finding, PatternRegistry, default_registry
from deslop.core.pipeline.options import PipelineOptions, Thoroughness
from deslop.core.report import Summary, build_summary, format_handoff
from deslop.core.scanner import RunCache, collect_source_files, run_phase1
from deslop.core.tools import ProcessRunner, detect_project_languages, run_phase2, tools_for_languages
from deslop.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRun:
    """Mutable state of one run, discarded when the run finishes."""

    root: Path
    options: PipelineOptions
    registry: PatternRegistry
    cache: RunCache
    target_files: list[str] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)
    missing_tools: list[str] = field(default_factory=list)
    detected_languages: list[str] = field(default_factory=list)
    started: float = field(default_factory=time.monotonic)

    def record(self, phase: str, findings: list[Finding]) -> None:
        logger.info("%s: %d finding(s)", phase, len(findings))
        self.findings.extend(findings)


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of ``run_pipeline``.

    Attributes:
        findings: All findings in phase order.
        summary: Counts along each reporting axis.
        handoff_text: Markdown for the remediation agent.
        missing_tools: Relevant external tools that did not contribute.
        detected_languages: Project languages (Phase 2 only).
        metadata: Root, thoroughness, mode, file count, timestamp, duration.
    """

    findings: list[Finding]
    summary: Summary
    handoff_text: str
    missing_tools: list[str] = field(default_factory=list)
    detected_languages: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "metadata": dict(self.metadata),
            "summary": self.summary.to_dict(),
            "findings": [finding.to_dict() for finding in self.findings],
            "missing_tools": list(self.missing_tools),
            "detected_languages": list(self.detected_languages),
            "handoff": self.handoff_text,
        }


def _resolve_root(root: Path | str) -> Path:
    path = Path(root).resolve()
    if not path.is_dir():
        raise ConfigError(f"Not a directory: {root}")
    return path


def run_pipeline(
    root: Path | str,
    options: PipelineOptions | None = None,
    *,
    registry: PatternRegistry | None = None,
    runner: ProcessRunner | None = None,
    log_reader: LogReader = read_git_log,
) -> PipelineResult:
    """Run the detection pipeline over ``root``.

    Args:
        root: Directory to analyse.
        options: Validated options; defaults to a ``normal`` report run.
        registry: Pattern registry; built from the catalogue with the
            options' disabled patterns and threshold overrides when omitted.
        runner: External process runner for Phase 2.
        log_reader: Source of ``git log`` output for shotgun surgery.

    Raises:
        ConfigError: If ``root`` is not a directory or an override names
            an unknown pattern.
    """
    options = options or PipelineOptions()
    root_path = _resolve_root(root)
    if registry is None:
        registry = default_registry(options.disabled_patterns, options.thresholds)

    run = AnalysisRun(root=root_path, options=options, registry=registry, cache=RunCache(root_path))
    if options.target_files is not None:
        run.target_files = list(options.target_files)
    else:
        run.target_files = collect_source_files(root_path, max_files=options.max_files)
    logger.info(
        "Scanning %d file(s) in %s (%s)", len(run.target_files), root_path, options.thoroughness.value
    )

    run.record("phase 1", run_phase1(run.cache, run.target_files, registry, options.language))

    if options.thoroughness is not Thoroughness.QUICK:
        run.record(
            "phase 1b",
            run_phase1b(
                run.cache, run.target_files, registry, max_files=options.max_files, log_reader=log_reader
            ),
        )

    if options.thoroughness is Thoroughness.DEEP:
        run.detected_languages = detect_project_languages(root_path)
        try:
            phase2 = run_phase2(
                root_path,
                run.target_files,
                tools=options.tools,
                runner=runner,
                languages=run.detected_languages,
                deadline=options.deadline,
                timeout=options.tool_timeout,
                cache=run.cache,
            )
        except Exception:
            logger.warning("Phase 2 aborted; keeping earlier findings", exc_info=True)
            run.missing_tools = [tool.key for tool in tools_for_languages(run.detected_languages)]
        else:
            run.record("phase 2", phase2.findings)
            run.missing_tools = list(dict.fromkeys(phase2.missing_tools))

    handoff = format_handoff(
        run.findings, options.mode.value, compact=options.compact, max_findings=options.max_findings
    )
    return PipelineResult(
        findings=run.findings,
        summary=build_summary(run.findings),
        handoff_text=handoff,
        missing_tools=run.missing_tools,
        detected_languages=run.detected_languages,
        metadata={
            "root": str(root_path),
            "thoroughness": options.thoroughness.value,
            "mode": options.mode.value,
            "files_analyzed": len(run.target_files),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "duration_seconds": round(time.monotonic() - run.started, 3),
        },
    )
