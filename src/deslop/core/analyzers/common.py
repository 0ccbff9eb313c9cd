"""Small text helpers shared by the structural analyzers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from deslop.exceptions import AnalysisError

PYTHON_DEF = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)\s*\([^)]*\)\s*(?:->.*)?:\s*$")

BRACE_LANGUAGES = frozenset({"javascript", "java", "rust", "go"})


def count_non_empty_lines(text: str) -> int:
    return sum(1 for line in text.split("\n") if line.strip())


def line_number_at(content: str, index: int) -> int:
    """1-based line number of the character at ``index``."""
    return content.count("\n", 0, index) + 1


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


@dataclass(frozen=True)
class PythonFunction:
    """A ``def`` header located by indentation scanning.

    Attributes:
        index: 0-based line index of the ``def``.
        indent: Indentation width of the ``def`` line.
        name: Function name.
    """

    index: int
    indent: int
    name: str


def iter_python_functions(lines: list[str]) -> Iterator[PythonFunction]:
    """Yield single-line ``def`` headers in file order."""
    for index, line in enumerate(lines):
        match = PYTHON_DEF.match(line)
        if match:
            yield PythonFunction(index, len(match.group(1)), match.group(2))


def python_body(lines: list[str], start: int, indent: int) -> list[str]:
    """Stripped non-empty lines from ``start`` until the block dedents to ``indent``."""
    body: list[str] = []
    for line in lines[start:]:
        stripped = line.strip()
        if not stripped:
            continue
        if indent_of(line) <= indent:
            break
        body.append(stripped)
    return body


def require_directory(root: Path) -> None:
    """Raise ``AnalysisError`` unless ``root`` is an existing directory."""
    if not root.is_dir():
        raise AnalysisError(f"Not a directory: {root}")
