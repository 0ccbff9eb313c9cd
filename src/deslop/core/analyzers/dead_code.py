"""Dead code: statements after ``return``/``throw``/``break``/``continue``.

Scope is tracked by indentation for Python and by brace depth elsewhere.
Only the first unreachable line after each terminator is reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from deslop.core.analyzers.common import indent_of

SNIPPET_WIDTH = 50

_C_STYLE_TERMINATORS = (
    re.compile(r"\breturn\s*(?:[^;]*)?;"),
    re.compile(r"\bthrow\s+"),
    re.compile(r"\bbreak\s*;"),
    re.compile(r"\bcontinue\s*;"),
)

TERMINATION_STATEMENTS: dict[str, tuple[re.Pattern[str], ...]] = {
    "javascript": _C_STYLE_TERMINATORS,
    "java": _C_STYLE_TERMINATORS,
    "python": (
        re.compile(r"^\s*return(?:\s+|$)"),
        re.compile(r"^\s*raise(?:\s+|$)"),
        re.compile(r"^\s*break\s*$"),
        re.compile(r"^\s*continue\s*$"),
    ),
    "go": (
        re.compile(r"\breturn\b"),
        re.compile(r"\bpanic\s*\("),
        re.compile(r"\bbreak\s*$"),
        re.compile(r"\bcontinue\s*$"),
    ),
    "rust": (
        re.compile(r"\breturn\s*(?:[^;]*)?;"),
        re.compile(r"\bpanic!\s*\("),
        re.compile(r"\bbreak\s*;"),
        re.compile(r"\bcontinue\s*;"),
    ),
}

_TERMINATOR_WORD = re.compile(r"\b(return|throw|break|continue|panic|raise)\b", re.IGNORECASE)
_ONE_LINE_CONDITIONAL = re.compile(r"^\s*(?:if|elif|else\s+if)\s*\(|^\s*if\s+.*:")
_SWITCH_LABEL = re.compile(r"^(case\s+|default\s*:)")
_ALTERNATIVE_BRANCH = re.compile(
    r"^(else\s*[:{]?|elif\s+|else\s+if\s+|except\b|catch\s*[({]|\}\s*else\s*|\}\s*catch\s*|finally\b)"
)
_CLOSERS = frozenset({"}", "},", "};"})
_OPEN_BRACKETS = re.compile(r"[(\[{]")
_CLOSE_BRACKETS = re.compile(r"[)\]}]")


@dataclass(frozen=True)
class DeadCodeViolation:
    line: int
    termination_type: str
    termination_line: int
    content: str


def _is_comment(trimmed: str) -> bool:
    return trimmed.startswith(("//", "#", "/*", "*"))


def _bracket_balance(text: str) -> int:
    return len(_OPEN_BRACKETS.findall(text)) - len(_CLOSE_BRACKETS.findall(text))


def _truncate(text: str) -> str:
    if len(text) > SNIPPET_WIDTH:
        return text[:SNIPPET_WIDTH] + "..."
    return text


def analyze_dead_code(content: str, language: str | None) -> list[DeadCodeViolation]:
    """Report the first reachable-looking line after each terminator in the same scope.

    One-line conditionals (``if (x) return;``, ``if x: return``) do not
    terminate the enclosing block, and multi-line terminators (``return [``
    ... ``]``) are followed to their closing bracket first. ``case``,
    ``default``, ``else``, ``elif``, ``except`` and ``catch`` start an
    alternative path and end the search.
    """
    language = language if language in TERMINATION_STATEMENTS else "javascript"
    terminators = TERMINATION_STATEMENTS[language]
    is_python = language == "python"
    lines = content.split("\n")
    violations: list[DeadCodeViolation] = []

    i = 0
    while i < len(lines):
        line = lines[i]
        trimmed = line.strip()
        if not trimmed or _is_comment(trimmed) or trimmed in _CLOSERS:
            i += 1
            continue
        if not any(p.search(trimmed) for p in terminators):
            i += 1
            continue
        if _ONE_LINE_CONDITIONAL.search(trimmed):
            i += 1
            continue

        word = _TERMINATOR_WORD.search(trimmed)
        termination_type = word.group(1) if word else "terminator"
        termination_line = i + 1
        current_indent = indent_of(line)

        balance = _bracket_balance(trimmed)
        while balance > 0 and i + 1 < len(lines):
            i += 1
            balance += _bracket_balance(lines[i].strip())

        depth = 0
        for j in range(i + 1, len(lines)):
            next_line = lines[j]
            next_trimmed = next_line.strip()
            if not next_trimmed or _is_comment(next_trimmed):
                continue

            if is_python:
                if indent_of(next_line) < current_indent:
                    break
            else:
                depth += next_trimmed.count("{") - next_trimmed.count("}")
                if depth < 0:
                    break
                if next_trimmed in _CLOSERS:
                    continue

            if _SWITCH_LABEL.match(next_trimmed) or _ALTERNATIVE_BRANCH.match(next_trimmed):
                break

            violations.append(DeadCodeViolation(
                line=j + 1,
                termination_type=termination_type,
                termination_line=termination_line,
                content=_truncate(next_trimmed),
            ))
            break
        i += 1

    return violations
