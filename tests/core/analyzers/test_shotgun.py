"""Tests for shotgun surgery detection over git history."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from deslop.core.analyzers.shotgun import (
    DEFAULT_COMMIT_LIMIT,
    analyze_shotgun_surgery,
    clamp_commit_limit,
    coupled_pairs,
    parse_commits,
)
from deslop.core.patterns import Severity

CLUSTER = ["core.js", "a.js", "b.js", "c.js", "d.js", "e.js"]


def _log(commits: list[list[str]]) -> str:
    return "\n\n".join(
        f"COMMIT:{index:040x}\n" + "\n".join(files) for index, files in enumerate(commits)
    )


def _reader(log: str):
    def read(root: Path, limit: int) -> str:
        return log

    return read


class TestClampCommitLimit:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(50, 50), ("25", 25), (0, DEFAULT_COMMIT_LIMIT), (20000, DEFAULT_COMMIT_LIMIT), ("abc", DEFAULT_COMMIT_LIMIT), (None, DEFAULT_COMMIT_LIMIT)],
    )
    def test_clamp(self, value: object, expected: int) -> None:
        assert clamp_commit_limit(value) == expected


class TestParseCommits:
    def test_filters_untracked_and_test_files(self) -> None:
        log = _log([["a.js", "b.py", "README.md", "a.test.js"], ["only.js"]])
        assert parse_commits(log) == [["a.js", "b.py"]]

    def test_excluded_directories(self) -> None:
        log = _log([["node_modules/x.js", "src/y.js", "src/z.js"]])
        assert parse_commits(log) == [["src/y.js", "src/z.js"]]


class TestCoupledPairs:
    def test_min_co_changes(self) -> None:
        commits = [["a.js", "b.js"]] * 3 + [["a.js", "c.js"]] * 2
        assert coupled_pairs(commits, 3) == [("a.js", "b.js", 3)]

    def test_bulk_commits_ignored(self) -> None:
        bulk = [f"f{i}.js" for i in range(25)]
        assert coupled_pairs([bulk] * 5, 1) == []


class TestAnalyzeShotgunSurgery:
    def test_cluster_reported(self, tmp_path: Path) -> None:
        violations = analyze_shotgun_surgery(tmp_path, log_reader=_reader(_log([CLUSTER] * 3)))
        by_file = {v.file: v for v in violations}
        assert set(by_file) == set(CLUSTER)
        core = by_file["core.js"]
        assert core.coupled_count == 5
        assert core.severity is Severity.MEDIUM
        assert core.message == '"core.js" changes with 5 other files frequently (shotgun surgery indicator)'
        assert len(core.coupled_with) == 5

    def test_results_sorted_by_count_then_name(self, tmp_path: Path) -> None:
        violations = analyze_shotgun_surgery(tmp_path, log_reader=_reader(_log([CLUSTER] * 3)))
        assert [v.file for v in violations] == sorted(CLUSTER)

    def test_below_threshold(self, tmp_path: Path) -> None:
        violations = analyze_shotgun_surgery(tmp_path, log_reader=_reader(_log([CLUSTER] * 2)))
        assert violations == []

    def test_high_severity_for_large_clusters(self, tmp_path: Path) -> None:
        files = [f"m{i}.js" for i in range(11)]
        violations = analyze_shotgun_surgery(tmp_path, log_reader=_reader(_log([files] * 3)))
        assert all(v.severity is Severity.HIGH for v in violations)

    @pytest.mark.parametrize(
        "error",
        [
            subprocess.CalledProcessError(128, ["git", "log"]),
            subprocess.TimeoutExpired(["git", "log"], 30),
            FileNotFoundError("git"),
        ],
    )
    def test_git_failures_skip_analysis(self, tmp_path: Path, error: Exception) -> None:
        def failing(root: Path, limit: int) -> str:
            raise error

        assert analyze_shotgun_surgery(tmp_path, log_reader=failing) == []

    def test_commit_limit_is_clamped(self, tmp_path: Path) -> None:
        seen: list[int] = []

        def reader(root: Path, limit: int) -> str:
            seen.append(limit)
            return ""

        analyze_shotgun_surgery(tmp_path, commit_limit=99999, log_reader=reader)
        assert seen == [DEFAULT_COMMIT_LIMIT]

    def test_not_a_repository(self, tmp_path: Path) -> None:
        assert analyze_shotgun_surgery(tmp_path) == []
