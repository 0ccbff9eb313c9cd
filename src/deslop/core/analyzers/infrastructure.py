"""Infrastructure without implementation: clients and pools nobody uses.

A setup is an assignment that creates something named like infrastructure
(``new RedisClient()``, ``pool = create_pool()``, ``Client::new()``).
Each setup variable is then searched for usage across all non-test
source files; setups with no usage line anywhere are reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from deslop.core.analyzers.common import line_number_at, require_directory
from deslop.core.scanner.context import RunCache
from deslop.core.scanner.files import collect_source_files, split_lines

DEFAULT_MAX_MATCHES_PER_FILE = 100

INFRASTRUCTURE_SUFFIXES: tuple[str, ...] = (
    "Client", "Connection", "Pool", "Service", "Provider",
    "Manager", "Factory", "Repository", "Gateway", "Adapter",
    "Handler", "Broker", "Queue", "Cache", "Store",
    "Transport", "Channel", "Socket", "Server", "Database",
)

_GENERIC_VARIABLE = re.compile(r"^[ijkxy]$")

_SUFFIX = "(?:" + "|".join(INFRASTRUCTURE_SUFFIXES) + ")"

INSTANTIATION_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "javascript": (
        re.compile(rf"(?:const|let|var)\s+(\w+)\s*=\s*new\s+(\w+{_SUFFIX})"),
        re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:await\s+)?(?:create|connect|init|initialize|setup)(\w+)", re.IGNORECASE),
        re.compile(r"(?:const|let|var)\s+(\w+)\s*=\s*(?:await\s+)?\w+\.(?:create|connect|init|initialize|setup|open|start)\(", re.IGNORECASE),
    ),
    "python": (
        re.compile(rf"(\w+)\s*=\s*(\w+{_SUFFIX})\(", re.MULTILINE),
        re.compile(rf"(\w+)\s*=\s*\w+\.(\w+{_SUFFIX})\(", re.MULTILINE),
        re.compile(r"(\w+)\s*=\s*(?:create|connect|init|initialize|setup)_(\w+)\(", re.MULTILINE),
        re.compile(r"(\w+)\s*=\s*await\s+(?:create|connect|init|initialize|setup)_(\w+)\(", re.MULTILINE),
    ),
    "go": (
        re.compile(r"(\w+)\s*:=\s*(?:New|Create|Connect|Init|Setup)(\w+)\("),
        re.compile(r"(\w+)\s*:=\s*\w+\.(?:New|Create|Connect|Init|Setup)(\w+)\("),
        re.compile(r"var\s+(\w+)\s+.*=\s*(?:New|Create|Connect|Init|Setup)(\w+)\("),
        re.compile(rf"(\w+)\s*:=\s*&(\w+{_SUFFIX})\{{"),
    ),
    "rust": (
        re.compile(rf"let\s+(?:mut\s+)?(\w+)\s*=\s*(\w*{_SUFFIX})::(?:new|create|connect|init|build)\("),
        re.compile(r"let\s+(?:mut\s+)?(\w+)\s*=\s*(\w+Builder)::new\(\).*\.build\(\)"),
        re.compile(rf"let\s+(?:mut\s+)?(\w+)\s*=\s*(\w*{_SUFFIX})::from"),
    ),
    "java": (
        re.compile(rf"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*=\s*new\s+(\w+{_SUFFIX})(?:<[^>]*>)?\s*\("),
        re.compile(r"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*=\s*(\w+(?:Factory|Builder))\.(?:create|build|get|new)\w*\("),
        re.compile(r"(?:\w+(?:<[^>]*>)?)\s+(\w+)\s*=\s*(\w+)\.builder\(\).*\.build\(\)"),
        re.compile(r"@(?:Autowired|Inject)\s+(?:private\s+)?(?:\w+(?:<[^>]*>)?)\s+(\w+)"),
    ),
}


@dataclass(frozen=True)
class InfrastructureSetup:
    file: str
    line: int
    variable: str
    component: str
    content: str

    @property
    def message(self) -> str:
        return (
            f'Infrastructure component "{self.variable}" ({self.component}) '
            "is created but never used"
        )


def _usage_patterns(variable: str) -> tuple[re.Pattern[str], ...]:
    name = re.escape(variable)
    return (
        re.compile(rf"\b{name}\s*\.\w+"),
        re.compile(rf"\b{name}\s*\["),
        re.compile(rf"\(.*\b{name}\b.*\)"),
        re.compile(rf"\b{name}\s*\)"),
        re.compile(rf"return\s+.*\b{name}\b"),
    )


def find_setups(
    file: str,
    content: str,
    language: str | None,
    max_matches_per_file: int = DEFAULT_MAX_MATCHES_PER_FILE,
) -> list[InfrastructureSetup]:
    """Infrastructure instantiations in one file, keyed by variable."""
    patterns = INSTANTIATION_PATTERNS.get(language or "javascript", INSTANTIATION_PATTERNS["javascript"])
    lines = content.split("\n")
    setups: dict[str, InfrastructureSetup] = {}
    for pattern in patterns:
        for count, match in enumerate(pattern.finditer(content)):
            if count >= max_matches_per_file:
                break
            variable = match.group(1)
            if len(variable) < 2 or _GENERIC_VARIABLE.match(variable):
                continue
            component = (match.group(2) if pattern.groups >= 2 else None) or "Infrastructure"
            line = line_number_at(content, match.start())
            setups[variable] = InfrastructureSetup(
                file=file,
                line=line,
                variable=variable,
                component=component,
                content=lines[line - 1].strip(),
            )
    return list(setups.values())


def _is_used(setup: InfrastructureSetup, files: list[str], cache: RunCache) -> bool:
    patterns = _usage_patterns(setup.variable)
    for file in files:
        content = cache.content(file)
        if content is None:
            continue
        for index, line in enumerate(split_lines(content)):
            if file == setup.file and index == setup.line - 1:
                continue
            if any(p.search(line) for p in patterns):
                return True
    return False


def _looks_exported(setup: InfrastructureSetup) -> bool:
    text = setup.content.lower()
    if "export" in text or "module.exports" in text:
        return True
    return "function" in text and setup.variable.lower() in text


def analyze_infrastructure(
    root: Path,
    cache: RunCache | None = None,
    max_matches_per_file: int = DEFAULT_MAX_MATCHES_PER_FILE,
    max_files: int = 1000,
) -> list[InfrastructureSetup]:
    """Return infrastructure setups that are never used afterwards."""
    require_directory(root)
    cache = cache or RunCache(root)
    files = collect_source_files(root, max_files=max_files)

    setups: list[InfrastructureSetup] = []
    for file in files:
        content = cache.content(file)
        if content is None:
            continue
        setups.extend(find_setups(file, content, cache.language(file), max_matches_per_file))

    return [
        setup for setup in setups
        if not _looks_exported(setup) and not _is_used(setup, files, cache)
    ]
