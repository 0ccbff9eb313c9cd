"""Declarative pattern registry for slop detection.

Every detector is a ``PatternDefinition`` record: a matcher (line regex or
multi-pass marker) plus certainty, severity, auto-fix label, language scope
and exclusion globs. The registry, the scanner and the reporter all work
over this one typed collection.

Submodules
----------
- ``models``: Severity, Certainty, AutoFix, PatternDefinition, Finding.
- ``catalog``: The built-in detector catalogue.
- ``registry``: PatternRegistry, default_registry(), is_file_excluded().

Usage::

    from deslop.core.patterns import default_registry

    registry = default_registry()
    for pattern in registry.patterns_for_language("python"):
        print(pattern.id, pattern.severity.label)
"""

from deslop.core.patterns.models import (
    PROJECT_LEVEL,
    AutoFix,
    Certainty,
    Finding,
    PatternDefinition,
    Severity,
)
from deslop.core.patterns.registry import PatternRegistry, default_registry, is_file_excluded

__all__ = [
    "PROJECT_LEVEL",
    "AutoFix",
    "Certainty",
    "Finding",
    "PatternDefinition",
    "PatternRegistry",
    "Severity",
    "default_registry",
    "is_file_excluded",
]
