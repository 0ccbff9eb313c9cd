"""Verbosity ratio: inline comments that outnumber the code inside a function.

Unlike the doc/code ratio, which looks at the doc block above a function,
this analyzer counts comment lines *within* the body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from deslop.core.analyzers.braces import find_matching_brace, NOT_FOUND
from deslop.core.analyzers.common import iter_python_functions, line_number_at, python_body

DEFAULT_MIN_CODE_LINES = 3
DEFAULT_MAX_COMMENT_RATIO = 2.0

# How far past a function header the opening brace may appear
BRACE_LOOKAHEAD = 200


@dataclass(frozen=True)
class CommentSyntax:
    line: re.Pattern[str]
    block_start: str
    block_end: str


_C_STYLE = CommentSyntax(re.compile(r"^\s*//"), "/*", "*/")

COMMENT_SYNTAX: dict[str, CommentSyntax] = {
    "javascript": _C_STYLE,
    "java": _C_STYLE,
    "rust": _C_STYLE,
    "go": _C_STYLE,
    "python": CommentSyntax(re.compile(r"^\s*#"), '"""', '"""'),
}

_FUNCTION_HEADERS: dict[str, re.Pattern[str]] = {
    "javascript": re.compile(
        r"(export\s+)?(async\s+)?(?:function\s+\w+\s*\([^)]*\)"
        r"|(?:const|let|var)\s+\w+\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"
        r"|(?:const|let|var)\s+\w+\s*=\s*(?:async\s+)?function\s*\([^)]*\))"
    ),
    "rust": re.compile(
        r"(?:pub\s+)?(?:async\s+)?fn\s+\w+\s*(?:<[^>]*>)?\s*\([^)]*\)(?:\s*->\s*[^{;]+)?"
    ),
    "go": re.compile(r"func\s+(?:\([^)]+\)\s+)?\w+\s*\([^)]*\)(?:\s*(?:\([^)]+\)|[^{\n]+))?"),
    "java": re.compile(
        r"(?:public|private|protected)\s+(?:static\s+)?(?:final\s+)?(?:\w+(?:<[^>]*>)?)\s+\w+"
        r"\s*\([^)]*\)(?:\s*throws\s+[\w.,\s]+)?"
    ),
}

_OPENING_BRACE = re.compile(r"^\s*\{")


@dataclass(frozen=True)
class VerbosityViolation:
    line: int
    comment_lines: int
    code_lines: int
    ratio: float


def count_comment_and_code(body_lines: list[str], syntax: CommentSyntax) -> tuple[int, int]:
    """Classify non-empty lines as comment or code.

    A line that opens a block comment counts as comment, as does every line
    up to and including the one that closes it. Lines with code followed by
    a trailing comment count as code.
    """
    comments = 0
    code = 0
    in_block = False
    for raw in body_lines:
        line = raw.strip()
        if not line:
            continue
        if in_block:
            comments += 1
            if syntax.block_end in line:
                in_block = False
            continue
        start = line.find(syntax.block_start)
        if start != -1 and (start == 0 or syntax.block_start == "/*"):
            comments += 1
            rest = line[start + len(syntax.block_start):]
            if syntax.block_end not in rest:
                in_block = True
            continue
        if syntax.line.match(line):
            comments += 1
            continue
        code += 1
    return comments, code


def _analyze_brace_language(
    content: str,
    header: re.Pattern[str],
    syntax: CommentSyntax,
    min_code_lines: int,
    max_comment_ratio: float,
) -> list[VerbosityViolation]:
    violations: list[VerbosityViolation] = []
    for match in header.finditer(content):
        region = content[match.end():match.end() + BRACE_LOOKAHEAD]
        if not _OPENING_BRACE.match(region):
            # Expression-bodied arrow or a declaration without a body
            continue
        open_index = match.end() + region.index("{")
        close_index = find_matching_brace(content, open_index)
        if close_index == NOT_FOUND:
            continue

        body = content[open_index + 1:close_index].split("\n")
        comments, code = count_comment_and_code(body, syntax)
        if code < min_code_lines:
            continue
        if comments / code > max_comment_ratio:
            violations.append(VerbosityViolation(
                line=line_number_at(content, match.start()),
                comment_lines=comments,
                code_lines=code,
                ratio=round(comments / code, 2),
            ))
    return violations


def _analyze_python(
    content: str, min_code_lines: int, max_comment_ratio: float
) -> list[VerbosityViolation]:
    lines = content.split("\n")
    syntax = COMMENT_SYNTAX["python"]
    violations: list[VerbosityViolation] = []
    for func in iter_python_functions(lines):
        body = python_body(lines, func.index + 1, func.indent)
        # A leading docstring is documentation, not inline commentary
        if body and body[0].startswith(('"""', "'''")):
            quote = body[0][:3]
            end = 0
            if not (len(body[0]) > 6 and body[0].endswith(quote)):
                end = next((i for i in range(1, len(body)) if quote in body[i]), len(body) - 1)
            body = body[end + 1:]
        comments, code = count_comment_and_code(body, syntax)
        if code < min_code_lines:
            continue
        if comments / code > max_comment_ratio:
            violations.append(VerbosityViolation(
                line=func.index + 1,
                comment_lines=comments,
                code_lines=code,
                ratio=round(comments / code, 2),
            ))
    return violations


def analyze_verbosity_ratio(
    content: str,
    language: str | None,
    min_code_lines: int = DEFAULT_MIN_CODE_LINES,
    max_comment_ratio: float = DEFAULT_MAX_COMMENT_RATIO,
) -> list[VerbosityViolation]:
    """Flag functions with more than ``max_comment_ratio`` comment lines per code line."""
    if language == "python":
        return _analyze_python(content, min_code_lines, max_comment_ratio)
    header = _FUNCTION_HEADERS.get(language or "")
    if header is None:
        return []
    return _analyze_brace_language(
        content, header, COMMENT_SYNTAX[language or ""], min_code_lines, max_comment_ratio
    )
