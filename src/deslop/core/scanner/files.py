"""Source file enumeration with exclusion, .gitignore and test detection.

``collect_source_files`` is the one place that walks the filesystem for the
per-file phases. The walk is sorted at every level so the file order, and
therefore the finding order, is reproducible across runs and platforms.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from deslop.core.scanner.language import ALL_SOURCE_EXTENSIONS

logger = logging.getLogger(__name__)

EXCLUDE_DIRS: frozenset[str] = frozenset({
    "node_modules", "vendor", "dist", "build", "out", "target",
    ".git", ".svn", ".hg", "__pycache__", ".pytest_cache",
    "coverage", ".nyc_output", ".next", ".nuxt", ".cache",
})

MAX_WALK_DEPTH = 10

_TEST_FILE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.test\.[jt]sx?$"),
    re.compile(r"\.spec\.[jt]sx?$"),
    re.compile(r"_tests?\.(go|rs|py)$"),
    re.compile(r"(?:^|/)test_[^/]*\.py$"),
    re.compile(r"(?:^|/)conftest\.py$"),
    re.compile(r"__tests__"),
    re.compile(r"(?:^|/)tests?/", re.IGNORECASE),
)


def is_test_file(path: str) -> bool:
    normalized = path.replace("\\", "/")
    return any(p.search(normalized) for p in _TEST_FILE_PATTERNS)


def should_exclude(path: str, exclude_dirs: frozenset[str] = EXCLUDE_DIRS) -> bool:
    """True when any component of ``path`` is an excluded directory name."""
    parts = re.split(r"[\\/]", path)
    return any(part in exclude_dirs for part in parts)


# ---------------------------------------------------------------------------
# .gitignore support
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _IgnoreRule:
    regex: re.Pattern[str]
    negated: bool
    dir_only: bool


def _gitignore_to_regex(pattern: str, anchored: bool) -> str:
    leading_globstar = pattern.startswith("**/")
    body = pattern
    placeholders = {
        "\x00LEADING\x00": "(?:.*/)?",
        "\x00TRAILING\x00": "(?:/.*)?",
        "\x00ANYPATH\x00": "(?:.*/)?",
        "\x00ANYPATH2\x00": "(?:/.*)?",
        "\x00STAR2\x00": ".*",
    }
    body = re.sub(r"^\*\*/", "\x00LEADING\x00", body)
    body = re.sub(r"/\*\*$", "\x00TRAILING\x00", body)
    body = body.replace("**/", "\x00ANYPATH\x00")
    body = body.replace("/**", "\x00ANYPATH2\x00")
    body = body.replace("**", "\x00STAR2\x00")

    body = re.sub(r"[.+^${}()|\[\]\\]", lambda m: "\\" + m.group(0), body)
    body = body.replace("*", "[^/]*").replace("?", "[^/]")
    for marker, replacement in placeholders.items():
        body = body.replace(marker, replacement)

    if anchored or leading_globstar or "/" in pattern:
        prefix = "^"
    else:
        prefix = "(?:^|/)"
    return prefix + body + "(?:$|/)"


class GitignoreMatcher:
    """Matcher for the root ``.gitignore`` of a repository.

    Supports comments, negation (``!``), directory-only rules (trailing
    ``/``), root anchoring (leading ``/``) and ``**`` globstars. The last
    matching rule wins, as in git.
    """

    def __init__(self, lines: list[str]) -> None:
        self.rules: list[_IgnoreRule] = []
        for raw in lines:
            pattern = raw.strip()
            if not pattern or pattern.startswith("#"):
                continue
            negated = pattern.startswith("!")
            if negated:
                pattern = pattern[1:]
            dir_only = pattern.endswith("/")
            if dir_only:
                pattern = pattern[:-1]
            anchored = pattern.startswith("/")
            if anchored:
                pattern = pattern[1:]
            if not pattern:
                continue
            regex = re.compile(_gitignore_to_regex(pattern, anchored))
            self.rules.append(_IgnoreRule(regex, negated, dir_only))

    @classmethod
    def from_root(cls, root: Path) -> GitignoreMatcher | None:
        gitignore = root / ".gitignore"
        try:
            content = gitignore.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read %s", gitignore, exc_info=True)
            return None
        return cls(content.split("\n"))

    def is_ignored(self, relative_path: str, is_dir: bool = False) -> bool:
        normalized = relative_path.replace("\\", "/")
        ignored = False
        for rule in self.rules:
            if rule.dir_only and not is_dir:
                continue
            if rule.regex.search(normalized):
                ignored = not rule.negated
        return ignored


# ---------------------------------------------------------------------------
# Walking and reading
# ---------------------------------------------------------------------------


def collect_source_files(
    root: Path,
    max_files: int = 1000,
    include_tests: bool = False,
    respect_gitignore: bool = True,
    extensions: frozenset[str] = ALL_SOURCE_EXTENSIONS,
) -> list[str]:
    """Enumerate source files under ``root``.

    Args:
        root: Directory to walk.
        max_files: Stop after this many files.
        include_tests: Keep files recognised by ``is_test_file``.
        respect_gitignore: Skip paths matched by the root ``.gitignore``.
        extensions: File suffixes to keep.

    Returns:
        POSIX-style paths relative to ``root``, in sorted walk order.
    """
    matcher = GitignoreMatcher.from_root(root) if respect_gitignore else None
    files: list[str] = []

    def walk(directory: Path, depth: int) -> None:
        if depth > MAX_WALK_DEPTH or len(files) >= max_files:
            return
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            logger.warning("Cannot list directory: %s", directory)
            return

        for entry in entries:
            if len(files) >= max_files:
                return
            relative = Path(entry.path).relative_to(root).as_posix()
            if entry.name in EXCLUDE_DIRS:
                continue
            is_dir = entry.is_dir(follow_symlinks=False)
            if matcher is not None and matcher.is_ignored(relative, is_dir):
                continue
            if is_dir:
                walk(Path(entry.path), depth + 1)
            elif entry.is_file():
                suffix = os.path.splitext(entry.name)[1]
                if suffix not in extensions:
                    continue
                if not include_tests and is_test_file(relative):
                    continue
                files.append(relative)

    walk(root, 0)
    return files


def read_text(path: Path) -> str | None:
    """Read a UTF-8 file, returning ``None`` (and logging) when unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.warning("Skipping unreadable file: %s", path, exc_info=True)
        return None


def split_lines(content: str) -> list[str]:
    """Split on ``\\n`` only, without a phantom empty line after a final newline."""
    lines = content.split("\n")
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines
