"""Phase 1: regex patterns applied line by line.

Every finding produced here is HIGH certainty: a single regex match on a
single line (or a run of consecutive matching lines) is definitive.

Files are independent, so they are scanned on a thread pool bounded by the
number of CPUs. Results are gathered per file and concatenated in input
order, with findings inside a file sorted by line.
"""

from __future__ import annotations

import logging
import math
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from deslop.core.patterns import (
    Certainty,
    Finding,
    PatternDefinition,
    PatternRegistry,
    is_file_excluded,
)
from deslop.core.scanner.context import RunCache
from deslop.core.scanner.files import split_lines
from deslop.core.scanner.language import normalize_language

logger = logging.getLogger(__name__)

SNIPPET_LIMIT = 100


def shannon_entropy(text: str) -> float:
    """Bits of entropy per character of ``text``."""
    if not text:
        return 0.0
    length = len(text)
    return -sum((n / length) * math.log2(n / length) for n in Counter(text).values())


def _line_matches(pattern: PatternDefinition, line: str) -> bool:
    if pattern.regex is None:
        return False
    match = pattern.regex.search(line)
    if match is None:
        return False
    entropy_threshold = pattern.thresholds.get("entropy_threshold")
    if entropy_threshold is not None:
        token = match.group(1) if match.groups() else match.group(0)
        return shannon_entropy(token) >= entropy_threshold
    return True


def _scan_consecutive(
    relative: str, lines: list[str], pattern: PatternDefinition
) -> list[Finding]:
    """Report each run of at least ``min_consecutive_lines`` matching lines once.

    Args:
        relative: Project-relative path used in findings.
        lines: File content split into lines.
        pattern: Pattern with ``min_consecutive_lines`` set.

    Returns:
        One finding per qualifying run, placed on its first line, with the
        line range as snippet.
    """
    min_lines = pattern.min_consecutive_lines or 1
    findings: list[Finding] = []
    start = -1
    count = 0
    # One extra iteration flushes a run that reaches end-of-file
    for index in range(len(lines) + 1):
        if index < len(lines) and _line_matches(pattern, lines[index]):
            if start == -1:
                start = index
            count += 1
            continue
        if count >= min_lines:
            first, last = start + 1, start + count
            findings.append(Finding(
                file=relative,
                line=first,
                pattern_id=pattern.id,
                severity=pattern.severity,
                certainty=Certainty.HIGH,
                description=f"{pattern.description} ({count} consecutive lines)",
                auto_fix=pattern.auto_fix,
                snippet=f"Lines {first}-{last}",
                phase=1,
                details={"start_line": first, "end_line": last, "line_count": count},
            ))
        start, count = -1, 0
    return findings


def scan_content(
    relative: str,
    content: str,
    patterns: Sequence[PatternDefinition],
) -> list[Finding]:
    """Apply ``patterns`` to one file's content.

    Patterns without a regex, multi-pass patterns, and patterns whose
    exclusion globs match ``relative`` are skipped. Language scoping is
    the caller's job.
    """
    lines = split_lines(content)
    findings: list[Finding] = []

    for pattern in patterns:
        if pattern.requires_multi_pass or pattern.regex is None:
            continue
        if is_file_excluded(relative, pattern.exclude):
            continue

        if pattern.min_consecutive_lines:
            findings.extend(_scan_consecutive(relative, lines, pattern))
            continue

        for number, line in enumerate(lines, start=1):
            if _line_matches(pattern, line):
                findings.append(Finding(
                    file=relative,
                    line=number,
                    pattern_id=pattern.id,
                    severity=pattern.severity,
                    certainty=Certainty.HIGH,
                    description=pattern.description,
                    auto_fix=pattern.auto_fix,
                    snippet=line.strip()[:SNIPPET_LIMIT],
                    phase=1,
                ))

    # Stable sort keeps catalogue order for findings on the same line
    findings.sort(key=lambda f: f.line)
    return findings


def _scan_one(
    cache: RunCache,
    registry: PatternRegistry,
    relative: str,
    language_filter: str | None,
) -> list[Finding]:
    language = cache.language(relative)
    if language_filter is not None and language != language_filter:
        return []
    content = cache.content(relative)
    if content is None:
        return []
    return scan_content(relative, content, registry.patterns_for_language(language))


def run_phase1(
    cache: RunCache,
    target_files: Sequence[str],
    registry: PatternRegistry,
    language: str | None = None,
    max_workers: int | None = None,
) -> list[Finding]:
    """Scan ``target_files`` with every applicable line pattern.

    Args:
        cache: Run-scoped cache used for reads and language detection.
        target_files: Paths relative to the cache root, in report order.
        registry: Source of pattern definitions.
        language: When set, only files of this language are scanned.
        max_workers: Thread pool size; defaults to the CPU count.

    Returns:
        HIGH-certainty findings, grouped by file in ``target_files`` order.
    """
    language_filter = normalize_language(language) if language else None
    workers = max_workers or os.cpu_count() or 1

    def task(relative: str) -> list[Finding]:
        try:
            return _scan_one(cache, registry, relative, language_filter)
        except Exception:
            logger.warning("Failed to scan: %s", relative, exc_info=True)
            return []

    with ThreadPoolExecutor(max_workers=workers) as pool:
        per_file = list(pool.map(task, target_files))

    return [finding for findings in per_file for finding in findings]
