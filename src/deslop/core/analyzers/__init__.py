"""Structural (Phase 1b) analyzers.

These detectors need more context than a single line: function bodies,
whole files, the project tree or its git history. Their findings carry
MEDIUM certainty, except stub functions with a TODO-style marker, which
escalate to HIGH.

Submodules
----------
- ``braces``: Bounded brace matcher aware of strings, comments and templates.
- ``doc_ratio``: Doc blocks that dwarf the function body.
- ``verbosity``: Inline comments that outnumber code lines.
- ``over_engineering``: Files, lines and directory depth per export.
- ``buzzwords``: Quality claims with no supporting evidence.
- ``infrastructure``: Clients and pools created but never used.
- ``dead_code``: Statements after an unconditional terminator.
- ``stubs``: Functions that only return a placeholder.
- ``shotgun``: Files that keep changing together in git history.
- ``runner``: ``run_phase1b``, mapping violations to findings.
"""

from deslop.core.analyzers.braces import (
    NOT_FOUND,
    BraceMatch,
    BraceStatus,
    find_matching_brace,
    scan_brace,
)
from deslop.core.analyzers.buzzwords import analyze_buzzword_inflation
from deslop.core.analyzers.dead_code import analyze_dead_code
from deslop.core.analyzers.doc_ratio import analyze_doc_code_ratio
from deslop.core.analyzers.infrastructure import analyze_infrastructure
from deslop.core.analyzers.over_engineering import analyze_over_engineering
from deslop.core.analyzers.runner import run_phase1b
from deslop.core.analyzers.shotgun import analyze_shotgun_surgery
from deslop.core.analyzers.stubs import analyze_stub_functions
from deslop.core.analyzers.verbosity import analyze_verbosity_ratio

__all__ = [
    "NOT_FOUND",
    "BraceMatch",
    "BraceStatus",
    "analyze_buzzword_inflation",
    "analyze_dead_code",
    "analyze_doc_code_ratio",
    "analyze_infrastructure",
    "analyze_over_engineering",
    "analyze_shotgun_surgery",
    "analyze_stub_functions",
    "analyze_verbosity_ratio",
    "find_matching_brace",
    "run_phase1b",
    "scan_brace",
]
