"""Aggregation and handoff formatting.

Submodules
----------
- ``summary``: ``Summary`` and ``build_summary``.
- ``handoff``: Verbose and compact handoff text.
"""

from deslop.core.report.handoff import NO_ISSUES, format_compact, format_handoff, format_verbose
from deslop.core.report.summary import Summary, build_summary

__all__ = [
    "NO_ISSUES",
    "Summary",
    "build_summary",
    "format_compact",
    "format_handoff",
    "format_verbose",
]
