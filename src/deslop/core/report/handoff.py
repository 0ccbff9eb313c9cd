"""Handoff text for the remediation agent.

Two renderings of the same findings: a verbose Markdown report grouped
by certainty tier and file, and a compact table bounded by
``max_findings`` rows. Both are total functions; an empty list renders
``NO_ISSUES``.
"""

from __future__ import annotations

from typing import Sequence

from deslop.core.patterns import Certainty, Finding

NO_ISSUES = "## Slop Detection Results\n\nNo issues detected."
DEFAULT_MAX_FINDINGS = 50

_TIERS: tuple[tuple[Certainty, str, str | None], ...] = (
    (
        Certainty.HIGH,
        "### HIGH Certainty (Definitive - trust these)",
        None,
    ),
    (
        Certainty.MEDIUM,
        "### MEDIUM Certainty (Verify context)",
        "_Action: Review surrounding code before applying._",
    ),
    (
        Certainty.LOW,
        "### LOW Certainty (Use judgment)",
        "_Action: May be false positives. Investigate before acting._",
    ),
)

_APPLY_HINT = "_Action: Apply fixes directly for autoFix patterns._"


def _fix_tag(finding: Finding) -> str:
    return f" [{finding.auto_fix.value}]" if finding.auto_fix.is_automatic else ""


def format_findings_list(findings: Sequence[Finding]) -> str:
    """Findings grouped by file, in first-appearance order."""
    by_file: dict[str, list[Finding]] = {}
    for finding in findings:
        by_file.setdefault(finding.file, []).append(finding)

    out = ""
    for file, file_findings in by_file.items():
        out += f"**{file}**\n"
        for finding in file_findings:
            out += f"- L{finding.line}: {finding.description}{_fix_tag(finding)}\n"
        out += "\n"
    return out


def format_verbose(findings: Sequence[Finding], mode: str) -> str:
    if not findings:
        return NO_ISSUES

    out = "## Slop Detection Results\n\n"
    out += f"Mode: **{mode}** | Total: {len(findings)} findings\n\n"

    for certainty, heading, hint in _TIERS:
        tier = [f for f in findings if f.certainty is certainty]
        if not tier:
            continue
        out += f"{heading}\n\n"
        if certainty is Certainty.HIGH:
            if mode == "apply":
                out += f"{_APPLY_HINT}\n\n"
        elif hint:
            out += f"{hint}\n\n"
        out += format_findings_list(tier)
        out += "\n"

    auto_fixable = sum(1 for f in findings if f.auto_fix.is_automatic)
    out += "### Action Summary\n\n"
    out += f"- Auto-fixable: {auto_fixable}\n"
    out += f"- Needs manual review: {len(findings) - auto_fixable}\n"
    return out


def format_compact(findings: Sequence[Finding], mode: str, max_findings: int = DEFAULT_MAX_FINDINGS) -> str:
    if not findings:
        return NO_ISSUES

    counts = {c: 0 for c in Certainty}
    auto_fixable = 0
    for finding in findings:
        counts[finding.certainty] += 1
        if finding.auto_fix.is_automatic:
            auto_fixable += 1

    out = (
        f"## Slop: {mode}|H:{counts[Certainty.HIGH]}"
        f"|M:{counts[Certainty.MEDIUM]}|L:{counts[Certainty.LOW]}\n\n"
    )
    out += "|File|Line|Pattern|Cert|Fix|\n"
    out += "|---|---|---|---|---|\n"
    for finding in findings[:max_findings]:
        fix = finding.auto_fix.value if finding.auto_fix.is_automatic else "-"
        out += f"|{finding.file}|{finding.line}|{finding.pattern_id}|{finding.certainty.initial}|{fix}|\n"

    if len(findings) > max_findings:
        out += f"\n_+{len(findings) - max_findings} more findings (truncated)_\n"

    out += f"\n**Auto-fixable: {auto_fixable}** | Manual: {len(findings) - auto_fixable}"
    return out


def format_handoff(
    findings: Sequence[Finding],
    mode: str,
    compact: bool = False,
    max_findings: int = DEFAULT_MAX_FINDINGS,
) -> str:
    """Render findings for the remediation agent.

    Args:
        findings: All findings of a run, in pipeline order.
        mode: ``report`` or ``apply``; ``apply`` adds the direct-fix hint.
        compact: Render the bounded table instead of the grouped report.
        max_findings: Row cap for the compact table.
    """
    if compact:
        return format_compact(findings, mode, max_findings)
    return format_verbose(findings, mode)
