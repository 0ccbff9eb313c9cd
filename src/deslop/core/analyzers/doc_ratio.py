"""Doc/code ratio: documentation blocks that dwarf the function they describe.

For brace languages the doc block preceding a function header is matched
with a language-specific regex and the body is delimited with the bounded
brace matcher. Python uses the docstring and the indentation-delimited
body instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from deslop.core.analyzers.braces import DEFAULT_LIMIT, BraceStatus, scan_brace
from deslop.core.analyzers.common import (
    count_non_empty_lines,
    indent_of,
    iter_python_functions,
    line_number_at,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_FUNCTION_LINES = 3
DEFAULT_MAX_RATIO = 3.0


@dataclass(frozen=True)
class DocRatioViolation:
    line: int
    doc_lines: int
    code_lines: int
    ratio: float
    function_name: str


@dataclass(frozen=True)
class _DocPattern:
    regex: re.Pattern[str]
    # Groups that may hold the function name, first non-empty wins
    name_groups: tuple[int, ...]


_DOC_PATTERNS: dict[str, _DocPattern] = {
    "javascript": _DocPattern(
        re.compile(
            r"/\*\*([\s\S]*?)\*/\s*(export\s+)?(async\s+)?(?:function\s+(\w+)\s*\([^)]*\)"
            r"|(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>)"
        ),
        (4, 5),
    ),
    "java": _DocPattern(
        re.compile(
            r"/\*\*([\s\S]*?)\*/\s*(?:@\w+\s*)*(?:public|private|protected)?\s*(?:static\s+)?"
            r"(?:final\s+)?(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*\([^)]*\)"
        ),
        (2,),
    ),
    "rust": _DocPattern(
        re.compile(r"((?:^\s*//[/!].*\n)+)\s*(?:pub\s+)?(?:async\s+)?fn\s+(\w+)", re.MULTILINE),
        (2,),
    ),
    "go": _DocPattern(
        re.compile(r"((?:^\s*//.*\n)+)\s*func\s+(?:\([^)]+\)\s+)?(\w+)", re.MULTILINE),
        (2,),
    ),
}


def _ratio(doc_lines: int, code_lines: int) -> float:
    return round(doc_lines / code_lines, 2)


def _analyze_brace_language(
    content: str, doc_pattern: _DocPattern, min_function_lines: int, max_ratio: float
) -> list[DocRatioViolation]:
    violations: list[DocRatioViolation] = []
    for match in doc_pattern.regex.finditer(content):
        doc_lines = count_non_empty_lines(match.group(1))
        open_index = content.find("{", match.end())
        if open_index == -1:
            continue

        name = next((match.group(g) for g in doc_pattern.name_groups if match.group(g)), "unknown")
        brace = scan_brace(content, open_index)
        if brace.status is BraceStatus.LIMIT_EXCEEDED:
            logger.info(
                "Skipped doc ratio for %s: body exceeds the %d character brace lookahead", name, DEFAULT_LIMIT
            )
            continue
        if not brace.found:
            continue

        code_lines = count_non_empty_lines(content[open_index + 1:brace.index])
        if code_lines < min_function_lines:
            continue
        if doc_lines / code_lines > max_ratio:
            violations.append(DocRatioViolation(
                line=line_number_at(content, match.start()),
                doc_lines=doc_lines,
                code_lines=code_lines,
                ratio=_ratio(doc_lines, code_lines),
                function_name=name,
            ))
    return violations


def _docstring_extent(lines: list[str], start: int) -> tuple[int, int]:
    """Return (docstring line count, index of first line after it)."""
    if start >= len(lines):
        return 0, start
    first = lines[start].strip()
    if not first.startswith(('"""', "'''")):
        return 0, start
    quote = first[:3]
    if len(first) > 6 and first.endswith(quote):
        return 1, start + 1

    doc_lines = 1
    index = start + 1
    while index < len(lines):
        doc_lines += 1
        if quote in lines[index]:
            return doc_lines, index + 1
        index += 1
    return doc_lines, index


def _analyze_python(
    content: str, min_function_lines: int, max_ratio: float
) -> list[DocRatioViolation]:
    lines = content.split("\n")
    violations: list[DocRatioViolation] = []
    for func in iter_python_functions(lines):
        doc_lines, body_start = _docstring_extent(lines, func.index + 1)

        code_lines = 0
        for line in lines[body_start:]:
            stripped = line.strip()
            if not stripped:
                continue
            if indent_of(line) <= func.indent:
                break
            if not stripped.startswith("#"):
                code_lines += 1

        if code_lines < min_function_lines:
            continue
        if doc_lines / code_lines > max_ratio:
            violations.append(DocRatioViolation(
                line=func.index + 1,
                doc_lines=doc_lines,
                code_lines=code_lines,
                ratio=_ratio(doc_lines, code_lines),
                function_name=func.name,
            ))
    return violations


def analyze_doc_code_ratio(
    content: str,
    language: str | None,
    min_function_lines: int = DEFAULT_MIN_FUNCTION_LINES,
    max_ratio: float = DEFAULT_MAX_RATIO,
) -> list[DocRatioViolation]:
    """Flag functions whose doc block exceeds ``max_ratio`` times their body.

    Functions with fewer than ``min_function_lines`` non-empty body lines
    are ignored. Unsupported languages yield no violations.
    """
    if language == "python":
        return _analyze_python(content, min_function_lines, max_ratio)
    doc_pattern = _DOC_PATTERNS.get(language or "")
    if doc_pattern is None:
        return []
    return _analyze_brace_language(content, doc_pattern, min_function_lines, max_ratio)
