"""Data models shared by every stage of the detection pipeline.

Severity, Certainty, AutoFix, PatternDefinition and Finding are kept apart
from the catalogue and the analyzers so that the reporter and the CLI can
import them without pulling in any regex tables or filesystem code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Mapping


# ---------------------------------------------------------------------------
# Severity: how bad the issue is
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Four-level severity scale for findings.

    The integer encoding enables direct comparison: LOW < MEDIUM < HIGH < CRITICAL.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Lower-case name used in summaries and JSON output."""
        return self.name.lower()

    @classmethod
    def from_label(cls, value: str) -> Severity:
        return cls[value.upper()]


# ---------------------------------------------------------------------------
# Certainty: how far the finding can be trusted
# ---------------------------------------------------------------------------


class Certainty(IntEnum):
    """Confidence tier of a finding.

    HIGH comes from a single regex match, MEDIUM from structural analysis
    that needs context, LOW from heuristics and external tools.
    """

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def initial(self) -> str:
        return self.name[0]


# ---------------------------------------------------------------------------
# AutoFix: remediation label attached to a finding
# ---------------------------------------------------------------------------


class AutoFix(str, Enum):
    """Remediation strategy a downstream agent may apply.

    The engine never edits files; the strategy is only a label.
    """

    REMOVE = "remove"
    REPLACE = "replace"
    ADD_LOGGING = "add_logging"
    FLAG = "flag"
    NONE = "none"

    @property
    def is_automatic(self) -> bool:
        """True for strategies that can be applied without manual review."""
        return self not in (AutoFix.FLAG, AutoFix.NONE)


# ---------------------------------------------------------------------------
# PatternDefinition: one detector in the registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PatternDefinition:
    """Immutable description of a single detector.

    A definition either carries a compiled ``regex`` applied line by line
    in Phase 1, or sets ``requires_multi_pass`` to delegate detection to a
    structural analyzer that reads its ``thresholds``.

    Attributes:
        id: Stable identifier used in findings and config files.
        category: Coarse grouping (``debugging``, ``placeholder``, ``secrets`` ...).
        description: Human-readable explanation shown in reports.
        severity: Default severity of findings produced by this pattern.
        certainty: Default certainty of findings produced by this pattern.
        auto_fix: Remediation label.
        regex: Line matcher, or ``None`` for multi-pass patterns.
        language: Language scope, or ``None`` when the pattern is universal.
        exclude: Glob patterns of files the pattern never applies to.
        min_consecutive_lines: When set, only runs of at least this many
            matching lines are reported, as one finding per run.
        requires_multi_pass: Detection is delegated to a structural analyzer.
        thresholds: Analyzer tuning values (ratios, counts, limits).
    """

    id: str
    category: str
    description: str
    severity: Severity
    certainty: Certainty = Certainty.HIGH
    auto_fix: AutoFix = AutoFix.FLAG
    regex: re.Pattern[str] | None = None
    language: str | None = None
    exclude: tuple[str, ...] = ()
    min_consecutive_lines: int | None = None
    requires_multi_pass: bool = False
    thresholds: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "thresholds", MappingProxyType(dict(self.thresholds)))
        object.__setattr__(self, "exclude", tuple(self.exclude))

    def threshold(self, name: str, default: float) -> float:
        """Return a threshold value, falling back to ``default`` when unset."""
        return self.thresholds.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "description": self.description,
            "severity": self.severity.label,
            "certainty": self.certainty.name,
            "auto_fix": self.auto_fix.value,
            "language": self.language,
            "exclude": list(self.exclude),
            "multi_pass": self.requires_multi_pass,
            "thresholds": dict(self.thresholds),
        }


# ---------------------------------------------------------------------------
# Finding: one reported issue
# ---------------------------------------------------------------------------

PROJECT_LEVEL = "project-level"


@dataclass(frozen=True)
class Finding:
    """A single issue reported by the pipeline.

    Findings are immutable (frozen); later phases only ever append new
    findings to the run, never edit earlier ones.

    Attributes:
        file: Path relative to the scanned root, or ``"project-level"``.
        line: 1-based line number, ``0`` for project-level findings.
        pattern_id: Identifier of the pattern or analyzer that fired.
        severity: Severity of this finding.
        certainty: Confidence tier of this finding.
        description: Human-readable message.
        auto_fix: Remediation label.
        snippet: Short excerpt of the offending source (at most 100 chars).
        phase: ``1`` for built-in detection, ``2`` for external tools.
        details: Analyzer-specific metrics.
    """

    file: str
    line: int
    pattern_id: str
    severity: Severity
    certainty: Certainty
    description: str
    auto_fix: AutoFix
    snippet: str = ""
    phase: int = 1
    details: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    @property
    def is_project_level(self) -> bool:
        return self.file == PROJECT_LEVEL

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""
        return {
            "file": self.file,
            "line": self.line,
            "pattern": self.pattern_id,
            "severity": self.severity.label,
            "certainty": self.certainty.name,
            "description": self.description,
            "auto_fix": self.auto_fix.value,
            "snippet": self.snippet,
            "phase": self.phase,
            "details": dict(self.details),
        }
