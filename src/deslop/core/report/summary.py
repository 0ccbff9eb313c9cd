"""Summary statistics over a completed list of findings."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable

from deslop.core.patterns import AutoFix, Certainty, Finding, Severity


@dataclass(frozen=True)
class Summary:
    """Counts of findings along each reporting axis.

    Every bucket is present even when empty so consumers can index them
    without checks. ``top_patterns`` is ordered by descending frequency,
    ties broken by pattern id.
    """

    total: int
    by_severity: dict[str, int] = field(default_factory=dict)
    by_certainty: dict[str, int] = field(default_factory=dict)
    by_phase: dict[int, int] = field(default_factory=dict)
    by_auto_fix: dict[str, int] = field(default_factory=dict)
    top_patterns: list[tuple[str, int]] = field(default_factory=list)

    @property
    def auto_fixable(self) -> int:
        return sum(
            count for name, count in self.by_auto_fix.items() if AutoFix(name).is_automatic
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_severity": dict(self.by_severity),
            "by_certainty": dict(self.by_certainty),
            "by_phase": {str(phase): count for phase, count in self.by_phase.items()},
            "by_auto_fix": dict(self.by_auto_fix),
            "top_patterns": dict(self.top_patterns),
        }


def build_summary(findings: Iterable[Finding]) -> Summary:
    findings = list(findings)
    by_severity = {s.label: 0 for s in sorted(Severity, reverse=True)}
    by_certainty = {c.name: 0 for c in sorted(Certainty, reverse=True)}
    by_phase = {1: 0, 2: 0}
    by_auto_fix = {fix.value: 0 for fix in AutoFix}
    patterns: Counter[str] = Counter()

    for finding in findings:
        by_severity[finding.severity.label] += 1
        by_certainty[finding.certainty.name] += 1
        by_phase[finding.phase] = by_phase.get(finding.phase, 0) + 1
        by_auto_fix[finding.auto_fix.value] += 1
        patterns[finding.pattern_id] += 1

    return Summary(
        total=len(findings),
        by_severity=by_severity,
        by_certainty=by_certainty,
        by_phase=by_phase,
        by_auto_fix=by_auto_fix,
        top_patterns=sorted(patterns.items(), key=lambda item: (-item[1], item[0])),
    )
