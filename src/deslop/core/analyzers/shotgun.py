"""Shotgun surgery: files that keep changing together in git history.

Every pair of source files committed together is counted. Pairs seen in
at least ``min_co_changes`` commits are *coupled*; a file that belongs to
``cluster_threshold`` or more coupled pairs is reported, since touching it
tends to require edits in many other places.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from pathlib import Path
from typing import Callable

from deslop.core.patterns import Severity
from deslop.core.scanner.files import is_test_file, should_exclude

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_LIMIT = 100
DEFAULT_CLUSTER_THRESHOLD = 5
DEFAULT_MIN_CO_CHANGES = 3
MAX_COMMIT_LIMIT = 10000

GIT_TIMEOUT_SECONDS = 30

# Commits touching more files than this are bulk changes (renames, formatting)
MAX_FILES_PER_COMMIT = 20
TOP_COUPLED = 5

TRACKED_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx", ".py", ".go", ".rs", ".java"})

_COMMIT_PREFIX = "COMMIT:"

LogReader = Callable[[Path, int], str]


@dataclass(frozen=True)
class ShotgunViolation:
    file: str
    coupled_count: int
    coupled_with: tuple[str, ...]
    severity: Severity

    @property
    def message(self) -> str:
        return (
            f'"{self.file}" changes with {self.coupled_count} other files frequently '
            "(shotgun surgery indicator)"
        )


def clamp_commit_limit(value: object) -> int:
    """Coerce ``value`` to a commit count in ``1..MAX_COMMIT_LIMIT``, else the default."""
    try:
        limit = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return DEFAULT_COMMIT_LIMIT
    if limit < 1 or limit > MAX_COMMIT_LIMIT:
        return DEFAULT_COMMIT_LIMIT
    return limit


def read_git_log(root: Path, commit_limit: int) -> str:
    """Run ``git log --name-only`` in ``root``. Raises on any git failure."""
    result = subprocess.run(
        ["git", "log", "--name-only", f"--pretty=format:{_COMMIT_PREFIX}%H", "-n", str(commit_limit)],
        cwd=root,
        capture_output=True,
        text=True,
        timeout=GIT_TIMEOUT_SECONDS,
        check=True,
    )
    return result.stdout


def parse_commits(log: str) -> list[list[str]]:
    """File lists per commit, keeping tracked non-test sources only."""
    commits: list[list[str]] = []
    current: list[str] | None = None
    for raw in log.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if line.startswith(_COMMIT_PREFIX):
            current = []
            commits.append(current)
            continue
        if current is None:
            continue
        if os.path.splitext(line)[1] not in TRACKED_EXTENSIONS:
            continue
        if is_test_file(line) or should_exclude(line):
            continue
        current.append(line)
    return [files for files in commits if len(files) > 1]


def coupled_pairs(commits: list[list[str]], min_co_changes: int) -> list[tuple[str, str, int]]:
    """Pairs co-changed at least ``min_co_changes`` times, most frequent first."""
    counts: Counter[tuple[str, str]] = Counter()
    for files in commits:
        if len(files) < 2 or len(files) > MAX_FILES_PER_COMMIT:
            continue
        for a, b in combinations(sorted(set(files)), 2):
            counts[(a, b)] += 1
    pairs = [(a, b, n) for (a, b), n in counts.items() if n >= min_co_changes]
    pairs.sort(key=lambda p: (-p[2], p[0], p[1]))
    return pairs


def analyze_shotgun_surgery(
    root: Path,
    commit_limit: object = DEFAULT_COMMIT_LIMIT,
    cluster_threshold: int = DEFAULT_CLUSTER_THRESHOLD,
    min_co_changes: int = DEFAULT_MIN_CO_CHANGES,
    log_reader: LogReader = read_git_log,
) -> list[ShotgunViolation]:
    """Report files coupled to ``cluster_threshold`` or more other files.

    When history cannot be read (not a git repository, git missing, or
    the command times out) the analysis is skipped and nothing is reported.
    """
    try:
        log = log_reader(root, clamp_commit_limit(commit_limit))
    except (OSError, subprocess.SubprocessError) as exc:
        logger.info("Skipping shotgun surgery analysis, git history unavailable: %s", exc)
        return []

    pairs = coupled_pairs(parse_commits(log), min_co_changes)
    frequency: Counter[str] = Counter()
    for a, b, _ in pairs:
        frequency[a] += 1
        frequency[b] += 1

    flagged = sorted(
        ((file, count) for file, count in frequency.items() if count >= cluster_threshold),
        key=lambda item: (-item[1], item[0]),
    )
    violations: list[ShotgunViolation] = []
    for file, count in flagged:
        partners = [b if a == file else a for a, b, _ in pairs if file in (a, b)]
        violations.append(ShotgunViolation(
            file=file,
            coupled_count=count,
            coupled_with=tuple(partners[:TOP_COUPLED]),
            severity=Severity.HIGH if count >= cluster_threshold * 2 else Severity.MEDIUM,
        ))
    return violations
