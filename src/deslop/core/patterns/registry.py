"""Pattern registry: lookup and filtering over the detector catalogue.

The ``PatternRegistry`` holds an ordered, immutable collection of
``PatternDefinition`` records. Scanner, analyzers and reporter all operate
over the same registry, so adding a detector is a data change rather than a
new branch in the pipeline.

``default_registry()`` builds the registry from the built-in catalogue and
applies caller overrides (disabled pattern ids, threshold values) at
construction time. After construction nothing in the registry can change.
"""

from __future__ import annotations

import dataclasses
import re
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Iterable, Iterator, Mapping

from deslop.core.patterns.catalog import BUILTIN_PATTERNS
from deslop.core.patterns.models import AutoFix, PatternDefinition, Severity
from deslop.exceptions import ConfigError

# Globs with more wildcards than this compile to a never-matching regex
MAX_GLOB_WILDCARDS = 10

_NEVER_MATCH = re.compile(r"(?!)")
_GLOB_SPECIALS = re.compile(r"[.+^${}()|\[\]\\]")


@lru_cache(maxsize=512)
def compile_glob(glob: str) -> re.Pattern[str]:
    """Compile an exclusion glob into an anchored regex.

    Both ``*`` and ``**`` match any run of characters, including ``/``;
    ``?`` matches exactly one character other than ``/``. Every other
    regex metacharacter is escaped.

    Args:
        glob: Exclusion glob such as ``*.test.*`` or ``**/tests/**``.

    Returns:
        The compiled regex, or one that never matches when the glob
        holds more than ``MAX_GLOB_WILDCARDS`` wildcards.
    """
    if glob.count("*") + glob.count("?") > MAX_GLOB_WILDCARDS:
        return _NEVER_MATCH
    escaped = _GLOB_SPECIALS.sub(lambda m: "\\" + m.group(0), glob)
    translated = re.sub(r"\*+", ".*", escaped).replace("?", "[^/]")
    return re.compile("^" + translated + "$")


def is_file_excluded(path: str, exclude: Iterable[str]) -> bool:
    """Return True when ``path`` matches any of the ``exclude`` globs.

    Globs are tested against the full relative path and against the
    basename, so ``conftest.py`` also excludes ``tests/conftest.py``.
    """
    normalized = path.replace("\\", "/")
    basename = PurePosixPath(normalized).name
    for glob in exclude:
        regex = compile_glob(glob)
        if regex.match(normalized) or regex.match(basename):
            return True
    return False


class PatternRegistry:
    """Ordered, read-only collection of pattern definitions.

    Attributes:
        patterns: Definitions in registration order.
    """

    def __init__(self, patterns: Iterable[PatternDefinition]) -> None:
        ordered = tuple(patterns)
        by_id: dict[str, PatternDefinition] = {}
        for pattern in ordered:
            if pattern.id in by_id:
                raise ConfigError(f"Duplicate pattern id: {pattern.id}")
            by_id[pattern.id] = pattern
        self._patterns = ordered
        self._by_id = by_id

    @property
    def patterns(self) -> tuple[PatternDefinition, ...]:
        return self._patterns

    def __iter__(self) -> Iterator[PatternDefinition]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._by_id

    def get(self, pattern_id: str) -> PatternDefinition | None:
        """Definition registered under ``pattern_id``, or None."""
        return self._by_id.get(pattern_id)

    def patterns_for_language(self, language: str | None) -> list[PatternDefinition]:
        """Return language-specific plus universal definitions.

        Registration order is preserved, so repeated calls yield the same
        sequence. ``None`` returns only the universal definitions.
        """
        return [p for p in self._patterns if p.language is None or p.language == language]

    def line_patterns(self) -> list[PatternDefinition]:
        """Definitions the Phase 1 scanner can run on its own."""
        return [p for p in self._patterns if p.regex is not None and not p.requires_multi_pass]

    def multi_pass_patterns(self) -> dict[str, PatternDefinition]:
        """Definitions delegated to structural analyzers, keyed by id."""
        return {p.id: p for p in self._patterns if p.requires_multi_pass}

    def languages(self) -> list[str]:
        """Sorted language scopes present in the registry."""
        return sorted({p.language for p in self._patterns if p.language})

    def by_severity(self, severity: Severity) -> list[PatternDefinition]:
        """Definitions at exactly ``severity``, in registration order."""
        return [p for p in self._patterns if p.severity == severity]

    def by_auto_fix(self, auto_fix: AutoFix) -> list[PatternDefinition]:
        return [p for p in self._patterns if p.auto_fix == auto_fix]


def default_registry(
    disabled: Iterable[str] = (),
    thresholds: Mapping[str, Mapping[str, float]] | None = None,
) -> PatternRegistry:
    """Create a registry from the built-in catalogue.

    Args:
        disabled: Pattern ids to leave out.
        thresholds: Per-pattern threshold overrides, merged over the
            catalogue defaults.

    Raises:
        ConfigError: If an override names a pattern that does not exist.
    """
    disabled_ids = set(disabled)
    overrides = dict(thresholds or {})
    known = {p.id for p in BUILTIN_PATTERNS}

    unknown = (disabled_ids | set(overrides)) - known
    if unknown:
        raise ConfigError(f"Unknown pattern id(s): {', '.join(sorted(unknown))}")

    patterns: list[PatternDefinition] = []
    for pattern in BUILTIN_PATTERNS:
        if pattern.id in disabled_ids:
            continue
        if pattern.id in overrides:
            merged = {**pattern.thresholds, **overrides[pattern.id]}
            pattern = dataclasses.replace(pattern, thresholds=merged)
        patterns.append(pattern)
    return PatternRegistry(patterns)
