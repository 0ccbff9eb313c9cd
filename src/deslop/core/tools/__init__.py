"""Optional external tools (Phase 2).

jscpd, madge, escomplex and radon are run as bounded child processes when
installed; pylint, golangci-lint and cargo-clippy are only checked for
availability so their absence can be reported with an install hint.

Submodules
----------
- ``models``: ``ToolOutcome`` variants (Success, Unavailable, TimedOut, Failed).
- ``definitions``: Tool catalogue and ``detect_project_languages``.
- ``runner``: ``ProcessRunner``, the subprocess wrapper.
- ``adapters``: Per-tool invocation and JSON report parsing.
- ``phase2``: ``run_phase2`` and ``missing_tools_message``.
"""

from deslop.core.tools.definitions import (
    CLI_TOOLS,
    SUPPORTED_LANGUAGES,
    ToolDefinition,
    detect_project_languages,
    tools_for_languages,
)
from deslop.core.tools.models import Failed, Success, TimedOut, ToolOutcome, Unavailable
from deslop.core.tools.phase2 import Phase2Result, missing_tools_message, run_phase2
from deslop.core.tools.runner import ProcessRunner

__all__ = [
    "CLI_TOOLS",
    "SUPPORTED_LANGUAGES",
    "Failed",
    "Phase2Result",
    "ProcessRunner",
    "Success",
    "TimedOut",
    "ToolDefinition",
    "ToolOutcome",
    "Unavailable",
    "detect_project_languages",
    "missing_tools_message",
    "run_phase2",
    "tools_for_languages",
]
