"""Buzzword inflation: quality claims with no supporting code.

Docs and comments are scanned for words like "production-ready" or
"scalable". A line counts as a *positive* claim when it also carries an
assertive phrase ("is", "provides", "fully", ...) and nothing aspirational
("TODO", "will be", "plan to", ...). Each positive claim is then checked
against evidence in the source tree: test files, error handling, logging,
caching and so on, depending on the claim's category. Claims backed by
fewer than ``min_evidence_matches`` evidence hits are reported.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from deslop.core.analyzers.common import require_directory
from deslop.core.patterns import Severity
from deslop.core.scanner.context import RunCache
from deslop.core.scanner.files import collect_source_files, should_exclude

DEFAULT_MIN_EVIDENCE_MATCHES = 2

MAX_CLAIM_FILES = 500
MAX_CLAIM_DEPTH = 5

BUZZWORD_CATEGORIES: dict[str, tuple[str, ...]] = {
    "production": ("production-ready", "production-grade", "prod-ready"),
    "enterprise": ("enterprise-grade", "enterprise-ready", "enterprise-class"),
    "security": ("secure", "secure by default", "security-focused"),
    "scale": ("scalable", "high-performance", "performant", "highly scalable"),
    "reliability": ("battle-tested", "robust", "reliable", "rock-solid"),
    "completeness": ("comprehensive", "complete", "full-featured", "feature-complete"),
}


@dataclass(frozen=True)
class EvidencePattern:
    """One piece of evidence for a category.

    ``on_path`` patterns are matched against the relative file path (no
    read needed); the rest are matched against file content.
    """

    kind: str
    regex: re.Pattern[str]
    on_path: bool = False


_TEST_PATHS = re.compile(r"\.test\.[jt]sx?$|\.spec\.[jt]sx?$|__tests__|test_.*\.py$|_test\.go$|_test\.rs$")
_TRY_CATCH = r"try\s*\{|catch\s*\(|\.catch\s*\(|except\b[^:\n]*:|if\s+let\s+Err"

EVIDENCE_PATTERNS: dict[str, tuple[EvidencePattern, ...]] = {
    "production": (
        EvidencePattern("tests", _TEST_PATHS, on_path=True),
        EvidencePattern("error_handling", re.compile(_TRY_CATCH + r"|match.*Err\(")),
        EvidencePattern(
            "logging",
            re.compile(
                r"logger\.|logging\.|\.log\s*\(|console\.error|tracing::|slog\.|log\.(info|warn|error|debug)",
                re.IGNORECASE,
            ),
        ),
    ),
    "enterprise": (
        EvidencePattern("auth", re.compile(r"authenticat|authorization|permission|rbac|acl|role", re.IGNORECASE)),
        EvidencePattern("audit", re.compile(r"audit|track.*event|event.*log|activity.*log", re.IGNORECASE)),
        EvidencePattern("rate_limit", re.compile(r"rate.?limit|throttle|limiter", re.IGNORECASE)),
    ),
    "security": (
        EvidencePattern("validation", re.compile(r"validat|sanitiz|escape|clean|htmlspecialchars", re.IGNORECASE)),
        EvidencePattern("auth", re.compile(r"\bauth\b|token|jwt|session|login|passport", re.IGNORECASE)),
        EvidencePattern("encryption", re.compile(r"encrypt|decrypt|hash|bcrypt|argon|crypto\.", re.IGNORECASE)),
    ),
    "scale": (
        EvidencePattern("async", re.compile(r"async\s+|await\s+|Promise|Future|tokio|async_std|goroutine|asyncio")),
        EvidencePattern("cache", re.compile(r"\bcache\b|redis|memcache|lru", re.IGNORECASE)),
        EvidencePattern("pool", re.compile(r"pool|connection.?pool|thread.?pool", re.IGNORECASE)),
    ),
    "reliability": (
        EvidencePattern("tests", _TEST_PATHS, on_path=True),
        EvidencePattern("coverage", re.compile(r"coverage|lcov|nyc|istanbul|codecov", re.IGNORECASE)),
        EvidencePattern("error_handling", re.compile(_TRY_CATCH)),
    ),
    "completeness": (
        EvidencePattern("edge_cases", re.compile(r"edge.?case|boundary|corner.?case", re.IGNORECASE)),
        EvidencePattern(
            "error_handling",
            re.compile(r"\b(handle|handles|handled|handling)\s+(all\s+)?(errors?|exceptions?|failures?)\b", re.IGNORECASE),
        ),
        EvidencePattern("documentation", re.compile(r"/\*\*|///|\"\"\"|'''")),
    ),
}

CLAIM_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bis\s+", re.IGNORECASE),
    re.compile(r"\bare\s+", re.IGNORECASE),
    re.compile(r"\bprovides?\s+", re.IGNORECASE),
    re.compile(r"\boffers?\s+", re.IGNORECASE),
    re.compile(r"\bfeatures?\s+", re.IGNORECASE),
    re.compile(r"\bfully\s+", re.IGNORECASE),
    re.compile(r"\b100%\s+", re.IGNORECASE),
    re.compile(r"\bdesigned\s+(for|to\s+be)\s+", re.IGNORECASE),
)

NOT_CLAIM_INDICATORS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bTODO\b", re.IGNORECASE),
    re.compile(r"\bFIXME\b", re.IGNORECASE),
    re.compile(r"\bshould\s+be\b", re.IGNORECASE),
    re.compile(r"\bwill\s+be\b", re.IGNORECASE),
    re.compile(r"\bmake\s+(?:it\s+(?:more|less|better)|this\b)", re.IGNORECASE),
    re.compile(r"\bneeds?\s+to\s+be\b", re.IGNORECASE),
    re.compile(r"\bplan(ning)?\s+to\b", re.IGNORECASE),
    re.compile(r"\bwants?\s+to\b", re.IGNORECASE),
)

_CLAIM_SOURCES: tuple[re.Pattern[str], ...] = (
    re.compile(r"README", re.IGNORECASE),
    re.compile(r"\.md$"),
    re.compile(r"docs?/", re.IGNORECASE),
    re.compile(r"\.rst$"),
    re.compile(r"CHANGELOG", re.IGNORECASE),
    re.compile(r"\.[jt]sx?$"),
    re.compile(r"\.py$"),
    re.compile(r"\.rs$"),
    re.compile(r"\.go$"),
)


@dataclass(frozen=True)
class Claim:
    file: str
    line: int
    buzzword: str
    category: str
    text: str
    is_positive: bool


@dataclass
class Evidence:
    """Evidence collected for one category: kind -> supporting files."""

    by_kind: dict[str, list[str]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(len(files) for files in self.by_kind.values())

    @property
    def kinds(self) -> list[str]:
        return list(self.by_kind)

    def add(self, kind: str, file: str) -> None:
        files = self.by_kind.setdefault(kind, [])
        if file not in files:
            files.append(file)


@dataclass(frozen=True)
class BuzzwordViolation:
    file: str
    line: int
    buzzword: str
    category: str
    claim: str
    evidence_kinds: tuple[str, ...]
    evidence_count: int
    evidence_required: int
    severity: Severity

    @property
    def message(self) -> str:
        return (
            f'Claim "{self.buzzword}" without sufficient evidence '
            f"(found {self.evidence_count}/{self.evidence_required} required)"
        )


def _buzzword_regex(categories: Mapping[str, tuple[str, ...]]) -> tuple[re.Pattern[str], dict[str, tuple[str, str]]]:
    lookup: dict[str, tuple[str, str]] = {}
    alternatives: list[str] = []
    for category, words in categories.items():
        for word in words:
            alternatives.append(re.escape(word))
            lookup[word.lower()] = (category, word)
    # Longest first so "secure by default" wins over "secure"
    alternatives.sort(key=len, reverse=True)
    return re.compile(r"\b(" + "|".join(alternatives) + r")\b", re.IGNORECASE), lookup


def is_positive_claim(line: str) -> bool:
    if any(p.search(line) for p in NOT_CLAIM_INDICATORS):
        return False
    return any(p.search(line) for p in CLAIM_INDICATORS)


def extract_claims(
    content: str,
    file: str,
    categories: Mapping[str, tuple[str, ...]] = BUZZWORD_CATEGORIES,
) -> list[Claim]:
    """Every buzzword occurrence in ``content``, positive or not."""
    regex, lookup = _buzzword_regex(categories)
    claims: list[Claim] = []
    for index, line in enumerate(content.split("\n")):
        matches = list(regex.finditer(line))
        if not matches:
            continue
        positive = is_positive_claim(line)
        for match in matches:
            mapping = lookup.get(match.group(1).lower())
            if mapping is None:
                continue
            category, word = mapping
            claims.append(Claim(file, index + 1, word, category, line.strip(), positive))
    return claims


def find_claim_source_files(root: Path) -> list[str]:
    """Docs, changelogs and commented source files, breadth-limited."""
    files: list[str] = []

    def walk(directory: Path, depth: int) -> None:
        if depth > MAX_CLAIM_DEPTH or len(files) >= MAX_CLAIM_FILES:
            return
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError:
            return
        for entry in entries:
            relative = Path(entry.path).relative_to(root).as_posix()
            if should_exclude(relative):
                continue
            if entry.is_dir(follow_symlinks=False):
                walk(Path(entry.path), depth + 1)
            elif entry.is_file() and any(p.search(relative) for p in _CLAIM_SOURCES):
                files.append(relative)
                if len(files) >= MAX_CLAIM_FILES:
                    return

    walk(root, 0)
    return files


def search_evidence(
    category: str,
    files: list[str],
    cache: RunCache,
    patterns: Mapping[str, tuple[EvidencePattern, ...]] = EVIDENCE_PATTERNS,
) -> Evidence:
    evidence = Evidence()
    category_patterns = patterns.get(category, ())
    path_patterns = [p for p in category_patterns if p.on_path]
    content_patterns = [p for p in category_patterns if not p.on_path]

    for file in files:
        for pattern in path_patterns:
            if pattern.regex.search(file):
                evidence.add(pattern.kind, file)
        if not content_patterns:
            continue
        content = cache.content(file)
        if content is None:
            continue
        for pattern in content_patterns:
            if pattern.regex.search(content):
                evidence.add(pattern.kind, file)
    return evidence


def analyze_buzzword_inflation(
    root: Path,
    min_evidence_matches: int = DEFAULT_MIN_EVIDENCE_MATCHES,
    cache: RunCache | None = None,
    max_files: int = 1000,
) -> list[BuzzwordViolation]:
    """Report positive claims whose category lacks evidence in the tree.

    Evidence is searched over all source files, tests included, and is
    computed once per category.
    """
    require_directory(root)
    cache = cache or RunCache(root)
    evidence_files = collect_source_files(root, max_files=max_files, include_tests=True)

    claims: list[Claim] = []
    for file in find_claim_source_files(root):
        content = cache.content(file)
        if content is not None:
            claims.extend(extract_claims(content, file))

    evidence_by_category: dict[str, Evidence] = {}
    violations: list[BuzzwordViolation] = []
    for claim in claims:
        if not claim.is_positive:
            continue
        evidence = evidence_by_category.get(claim.category)
        if evidence is None:
            evidence = search_evidence(claim.category, evidence_files, cache)
            evidence_by_category[claim.category] = evidence

        if evidence.total < min_evidence_matches:
            violations.append(BuzzwordViolation(
                file=claim.file,
                line=claim.line,
                buzzword=claim.buzzword,
                category=claim.category,
                claim=claim.text,
                evidence_kinds=tuple(evidence.kinds),
                evidence_count=evidence.total,
                evidence_required=min_evidence_matches,
                severity=Severity.HIGH if evidence.total == 0 else Severity.MEDIUM,
            ))
    return violations
