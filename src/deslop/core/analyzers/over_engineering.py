"""Over-engineering metrics: implementation size relative to public API.

Three project-level signals are measured:

1. **File proliferation** -- source files per exported symbol.
2. **Code density** -- non-comment source lines per exported symbol.
3. **Directory depth** -- nesting depth under ``src/``.

Exports are counted at conventional entry points first (``index.js``,
``lib.rs``, ``__init__.py`` ...), then across ``src/``, and finally fall
back to one so ratios stay defined.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deslop.core.analyzers.common import require_directory
from deslop.core.patterns import Severity
from deslop.core.scanner.files import EXCLUDE_DIRS, collect_source_files, read_text
from deslop.core.scanner.language import detect_language

DEFAULT_FILE_RATIO_THRESHOLD = 20
DEFAULT_LINES_PER_EXPORT_THRESHOLD = 500
DEFAULT_DEPTH_THRESHOLD = 4

MAX_DEPTH_WALK = 20

ENTRY_POINTS: tuple[str, ...] = (
    "index.js", "index.ts", "src/index.js", "src/index.ts",
    "lib/index.js", "lib/index.ts", "main.js", "main.ts",
    "lib.rs", "src/lib.rs",
    "main.go",
    "__init__.py", "src/__init__.py",
    "Main.java", "src/Main.java", "src/main/java/Main.java",
    "Application.java", "src/main/java/Application.java",
    "App.java", "src/main/java/App.java",
)

EXPORT_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "javascript": (
        re.compile(r"export\s+(function|class|const|let|var|default|async\s+function)"),
        re.compile(r"export\s*\{[^}]+\}"),
        re.compile(r"export\s*\*\s*(as\s+\w+\s+)?from"),
        re.compile(r"module\.exports\s*="),
        re.compile(r"exports\.\w+\s*="),
    ),
    "rust": (
        re.compile(r"^pub\s+(fn|struct|enum|mod|type|trait|const|static)", re.MULTILINE),
    ),
    "go": (
        re.compile(r"^func\s+[A-Z]", re.MULTILINE),
        re.compile(r"^type\s+[A-Z]\w*\s+(struct|interface)", re.MULTILINE),
        re.compile(r"^var\s+[A-Z]", re.MULTILINE),
        re.compile(r"^const\s+[A-Z]", re.MULTILINE),
    ),
    "python": (
        re.compile(r"__all__\s*=\s*\["),
        re.compile(r"^def\s+(?!_)\w+\s*\(", re.MULTILINE),
        re.compile(r"^class\s+[A-Z]\w*[\s:(]", re.MULTILINE),
    ),
    "java": (
        re.compile(r"^\s*public\s+(?:static\s+)?(?:final\s+)?(?:class|interface|enum)\s+\w+", re.MULTILINE),
        re.compile(
            r"^\s*public\s+(?:static\s+)?(?:final\s+)?(?:synchronized\s+)?(?:\w+(?:<[^>]*>)?)\s+\w+\s*\(",
            re.MULTILINE,
        ),
    ),
}


@dataclass(frozen=True)
class ExportCount:
    count: int
    method: str
    entry_points: tuple[str, ...] = ()


@dataclass(frozen=True)
class OverEngineeringViolation:
    kind: str
    value: str
    threshold: str
    severity: Severity
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class OverEngineeringReport:
    source_files: int
    exports: ExportCount
    total_lines: int
    directory_depth: int
    violations: list[OverEngineeringViolation]


def count_exports_in_content(content: str, language: str | None) -> int:
    patterns = EXPORT_PATTERNS.get(language or "javascript", EXPORT_PATTERNS["javascript"])
    return sum(len(p.findall(content)) for p in patterns)


def count_entry_point_exports(root: Path) -> ExportCount:
    found: list[str] = []
    count = 0
    for entry in ENTRY_POINTS:
        path = root / entry
        if not path.is_file():
            continue
        content = read_text(path)
        if content is None:
            continue
        exports = count_exports_in_content(content, detect_language(entry))
        if exports > 0:
            found.append(entry)
            count += exports
    if count > 0:
        return ExportCount(count, "entry-points", tuple(found))

    src = root / "src"
    if src.is_dir():
        for relative in collect_source_files(src):
            content = read_text(src / relative)
            if content is not None:
                count += count_exports_in_content(content, detect_language(relative))
        if count > 0:
            return ExportCount(count, "src-scan", ("src/",))

    return ExportCount(1, "fallback")


def count_source_lines_in(content: str) -> int:
    """Count lines that hold code once comments and blanks are removed."""
    total = 0
    in_block = False
    for raw in content.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if in_block:
            end = line.find("*/")
            if end == -1:
                continue
            in_block = False
            line = line[end + 2:].strip()

        start = line.find("/*")
        if start != -1:
            before = line[:start].strip()
            after = line[start + 2:]
            end = after.find("*/")
            if end != -1:
                line = (before + " " + after[end + 2:].strip()).strip()
            else:
                in_block = True
                line = before

        if not line:
            continue
        if line.startswith(("//", "#", '"""', "'''")):
            continue
        total += 1
    return total


def count_source_lines(root: Path, files: list[str]) -> int:
    total = 0
    for relative in files:
        content = read_text(root / relative)
        if content is not None:
            total += count_source_lines_in(content)
    return total


def max_directory_depth(root: Path, start: str = "src") -> int:
    """Deepest directory nesting under ``root / start`` (the start itself is 1)."""
    base = root / start
    if not base.is_dir():
        return 0
    deepest = 0

    def walk(directory: Path, depth: int) -> None:
        nonlocal deepest
        deepest = max(deepest, depth)
        if depth > MAX_DEPTH_WALK:
            return
        try:
            entries = list(os.scandir(directory))
        except OSError:
            return
        for entry in entries:
            if entry.is_dir(follow_symlinks=False) and entry.name not in EXCLUDE_DIRS:
                walk(Path(entry.path), depth + 1)

    walk(base, 1)
    return deepest


def analyze_over_engineering(
    root: Path,
    file_ratio_threshold: float = DEFAULT_FILE_RATIO_THRESHOLD,
    lines_per_export_threshold: float = DEFAULT_LINES_PER_EXPORT_THRESHOLD,
    depth_threshold: int = DEFAULT_DEPTH_THRESHOLD,
    max_files: int = 10000,
) -> OverEngineeringReport:
    """Measure the three over-engineering signals for ``root``.

    A signal is HIGH severity when it exceeds twice its threshold (depth:
    threshold + 2), MEDIUM otherwise.
    """
    require_directory(root)
    files = collect_source_files(root, max_files=max_files)
    exports = count_entry_point_exports(root)
    export_count = max(exports.count, 1)
    violations: list[OverEngineeringViolation] = []

    file_ratio = len(files) / export_count
    if file_ratio > file_ratio_threshold:
        violations.append(OverEngineeringViolation(
            kind="file_proliferation",
            value=f"{len(files)} files / {exports.count} exports = {file_ratio:.1f}x",
            threshold=f"{file_ratio_threshold:g}x",
            severity=Severity.HIGH if file_ratio > file_ratio_threshold * 2 else Severity.MEDIUM,
            details={
                "source_file_count": len(files),
                "export_count": exports.count,
                "file_ratio": round(file_ratio, 2),
                "export_method": exports.method,
            },
        ))

    total_lines = count_source_lines(root, files)
    lines_per_export = total_lines / export_count
    if lines_per_export > lines_per_export_threshold:
        violations.append(OverEngineeringViolation(
            kind="code_density",
            value=f"{total_lines} lines / {exports.count} exports = {round(lines_per_export)}:1",
            threshold=f"{lines_per_export_threshold:g}:1",
            severity=(
                Severity.HIGH
                if lines_per_export > lines_per_export_threshold * 2
                else Severity.MEDIUM
            ),
            details={
                "total_lines": total_lines,
                "export_count": exports.count,
                "lines_per_export": round(lines_per_export),
            },
        ))

    depth = max_directory_depth(root)
    if depth > depth_threshold:
        violations.append(OverEngineeringViolation(
            kind="directory_depth",
            value=f"{depth} levels",
            threshold=f"{depth_threshold:g} levels",
            severity=Severity.HIGH if depth > depth_threshold + 2 else Severity.MEDIUM,
            details={"max_depth": depth},
        ))

    return OverEngineeringReport(
        source_files=len(files),
        exports=exports,
        total_lines=total_lines,
        directory_depth=depth,
        violations=violations,
    )
