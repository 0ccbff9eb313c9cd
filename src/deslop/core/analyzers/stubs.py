"""Placeholder stub functions: bodies that only return a dummy value.

A function is a stub when its body holds exactly one significant
(non-comment) line and that line is a placeholder: ``return null``,
``return 0``, ``pass``, ``todo!()``, ``raise NotImplementedError()`` and
so on. A nearby TODO/FIXME/XXX/HACK/STUB marker raises certainty.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from deslop.core.analyzers.braces import NOT_FOUND, find_matching_brace
from deslop.core.analyzers.common import iter_python_functions, line_number_at, python_body
from deslop.core.patterns import Certainty

_MARKER = re.compile(r"\b(TODO|FIXME|XXX|HACK|STUB)\b", re.IGNORECASE)
_C_COMMENTS = (re.compile(r"^\s*//"), re.compile(r"^\s*/\*"), re.compile(r"^\s*\*"))

# Python markers are looked for in the def line and the lines right after it
PYTHON_MARKER_WINDOW = 10


@dataclass(frozen=True)
class _StubRule:
    regex: re.Pattern[str]
    # Fixed label reported instead of the captured value
    label: str | None = None


@dataclass(frozen=True)
class _BraceConfig:
    function_patterns: tuple[re.Pattern[str], ...]
    stub_rules: tuple[_StubRule, ...]
    comment_patterns: tuple[re.Pattern[str], ...] = _C_COMMENTS


_BRACE_CONFIGS: dict[str, _BraceConfig] = {
    "javascript": _BraceConfig(
        function_patterns=(
            re.compile(r"(?:async\s+)?function\s+(\w+)\s*\([^)]*\)\s*\{"),
            re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>\s*\{"),
            re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s+)?function\s*\([^)]*\)\s*\{"),
            re.compile(
                r"^\s*(?:async\s+)?(?!if\b|for\b|while\b|switch\b|catch\b|with\b|function\b)(\w+)\s*\([^)]*\)\s*\{",
                re.MULTILINE,
            ),
        ),
        stub_rules=(
            _StubRule(re.compile(r"^\s*return\s+(0|null|undefined|true|false|\[\]|\{\}|\"\"|''|``)\s*;?\s*$")),
        ),
    ),
    "rust": _BraceConfig(
        function_patterns=(
            re.compile(r"(?:pub\s+)?(?:async\s+)?fn\s+(\w+)\s*(?:<[^>]*>)?\s*\([^)]*\)(?:\s*->\s*[^{]+)?\s*\{"),
        ),
        stub_rules=(
            _StubRule(re.compile(
                r"^\s*(?:return\s+)?(None|0|true|false|String::new\(\)|Vec::new\(\)|vec!\[\]|\(\)|\"\"|Default::default\(\))\s*;?\s*$"
            )),
            _StubRule(re.compile(r"^\s*(todo!\(\)|unimplemented!\(\)|panic!\([^)]*\))\s*;?\s*$")),
        ),
    ),
    "java": _BraceConfig(
        function_patterns=(
            re.compile(
                r"(?:public|private|protected)?\s*(?:static\s+)?(?:final\s+)?(?:\w+(?:<[^>]*>)?)\s+(\w+)"
                r"\s*\([^)]*\)\s*(?:throws\s+[^{]+)?\s*\{"
            ),
        ),
        stub_rules=(
            _StubRule(re.compile(
                r"^\s*return\s+(null|0|0L|0\.0|0\.0f|true|false|\"\"|Collections\.emptyList\(\)"
                r"|Collections\.emptyMap\(\)|Optional\.empty\(\))\s*;\s*$"
            )),
            _StubRule(
                re.compile(
                    r"^\s*throw\s+new\s+(?:Unsupported(?:Operation)?Exception|NotImplementedException"
                    r"|IllegalStateException)\s*\([^)]*\)\s*;\s*$"
                ),
                label="throw stub",
            ),
        ),
    ),
    "go": _BraceConfig(
        function_patterns=(
            re.compile(r"func\s+(?:\([^)]+\)\s+)?(\w+)\s*\([^)]*\)(?:\s*(?:\([^)]+\)|[^{]+))?\s*\{"),
        ),
        stub_rules=(
            _StubRule(re.compile(
                r"^\s*return\s+(nil|0|\"\"|false|true|\[\][a-zA-Z_]\w*\{\}|map\[[^\]]+\][a-zA-Z_]\w*\{\}|&?[A-Z]\w*\{\})\s*$"
            )),
            _StubRule(re.compile(r"^\s*panic\s*\([^)]*\)\s*$"), label="panic"),
        ),
        comment_patterns=(re.compile(r"^\s*//"),),
    ),
}

_PYTHON_STUBS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\s*return\s+(None|0|True|False|\[\]|\{\}|\"\"|'')\s*$"),
    re.compile(r"^\s*pass\s*$"),
    re.compile(r"^\s*raise\s+NotImplementedError(?:\s*\([^)]*\))?\s*$"),
    re.compile(r"^\s*\.\.\.\s*$"),
)

# Java control-flow keywords that the method regex would otherwise take for names
_NOT_FUNCTIONS = frozenset({"if", "for", "while", "switch", "catch", "else", "return", "new"})


@dataclass(frozen=True)
class StubViolation:
    line: int
    function_name: str
    return_value: str
    has_todo: bool
    content: str

    @property
    def certainty(self) -> Certainty:
        return Certainty.HIGH if self.has_todo else Certainty.MEDIUM


def _match_stub(line: str, rules: tuple[_StubRule, ...]) -> str | None:
    for rule in rules:
        match = rule.regex.match(line)
        if match:
            return rule.label or match.group(1)
    return None


def _analyze_brace_language(content: str, config: _BraceConfig) -> list[StubViolation]:
    violations: list[StubViolation] = []
    seen: set[int] = set()
    for pattern in config.function_patterns:
        for match in pattern.finditer(content):
            name = match.group(1) or "anonymous"
            open_index = match.end() - 1
            if open_index in seen or name in _NOT_FUNCTIONS:
                continue
            seen.add(open_index)

            close_index = find_matching_brace(content, open_index)
            if close_index == NOT_FOUND:
                continue
            body = content[open_index + 1:close_index]
            significant = [
                line.strip() for line in body.split("\n")
                if line.strip() and not any(p.match(line.strip()) for p in config.comment_patterns)
            ]
            if len(significant) != 1:
                continue

            value = _match_stub(significant[0], config.stub_rules)
            if value is None:
                continue
            violations.append(StubViolation(
                line=line_number_at(content, open_index),
                function_name=name,
                return_value=value,
                has_todo=bool(_MARKER.search(body)),
                content=f"{name}() returns {value}",
            ))
    violations.sort(key=lambda v: v.line)
    return violations


def _strip_docstring(body: list[str]) -> list[str]:
    if not body or not body[0].startswith(('"""', "'''")):
        return body
    quote = body[0][:3]
    if len(body[0]) >= 6 and body[0].endswith(quote):
        return body[1:]
    for index in range(1, len(body)):
        if quote in body[index]:
            return body[index + 1:]
    return []


def _analyze_python(content: str) -> list[StubViolation]:
    lines = content.split("\n")
    violations: list[StubViolation] = []
    for func in iter_python_functions(lines):
        body = [
            line for line in _strip_docstring(python_body(lines, func.index + 1, func.indent))
            if not line.startswith("#")
        ]
        if len(body) != 1:
            continue
        only = body[0]
        for stub in _PYTHON_STUBS:
            match = stub.match(only)
            if not match:
                continue
            window = "\n".join(lines[func.index:func.index + PYTHON_MARKER_WINDOW])
            violations.append(StubViolation(
                line=func.index + 1,
                function_name=func.name,
                return_value=(match.group(1) if stub.groups else None) or only,
                has_todo=bool(_MARKER.search(window)),
                content=f"def {func.name}(): {only}",
            ))
            break
    return violations


def analyze_stub_functions(content: str, language: str | None) -> list[StubViolation]:
    """Find functions whose only statement returns a placeholder value."""
    if language == "python":
        return _analyze_python(content)
    config = _BRACE_CONFIGS.get(language or "")
    if config is None:
        return []
    return _analyze_brace_language(content, config)
