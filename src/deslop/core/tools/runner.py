"""Bounded child-process execution for external tools.

Commands are always argument vectors (never a shell string) and always
carry a timeout. Every call returns a ``ToolOutcome``; nothing here
raises for an ordinary tool failure.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from deslop.core.tools.definitions import ToolDefinition
from deslop.core.tools.models import Failed, Success, TimedOut, ToolOutcome, Unavailable

logger = logging.getLogger(__name__)

VERSION_CHECK_TIMEOUT = 5.0
DEFAULT_TOOL_TIMEOUT = 60.0

# Some tools exit non-zero when they find problems but still print a report
_REPORTING_EXIT_CODES = frozenset({0, 1})


class ProcessRunner:
    """Runs tool commands with ``subprocess.run``.

    Tests substitute an object with the same two methods to simulate
    installed, missing, slow or crashing tools.
    """

    def is_available(self, tool: ToolDefinition) -> bool:
        """True when the executable is on PATH and its version check succeeds."""
        if shutil.which(tool.check_command[0]) is None:
            return False
        outcome = self.run(tool.key, tool.check_command, cwd=None, timeout=VERSION_CHECK_TIMEOUT)
        return isinstance(outcome, Success)

    def run(
        self,
        tool: str,
        command: Sequence[str],
        cwd: Path | None,
        timeout: float = DEFAULT_TOOL_TIMEOUT,
    ) -> ToolOutcome:
        """Run ``command``; on success ``data`` is its stdout."""
        try:
            result = subprocess.run(
                list(command),
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
            )
        except FileNotFoundError:
            return Unavailable(tool)
        except subprocess.TimeoutExpired:
            logger.warning("%s timed out after %.0fs", tool, timeout)
            return TimedOut(tool, timeout)
        except OSError as exc:
            logger.warning("%s could not be started: %s", tool, exc)
            return Failed(tool, str(exc))

        if result.returncode not in _REPORTING_EXIT_CODES:
            reason = (result.stderr or "").strip().splitlines()[-1:] or [f"exit code {result.returncode}"]
            logger.warning("%s failed: %s", tool, reason[0])
            return Failed(tool, reason[0])
        return Success(tool, result.stdout)
