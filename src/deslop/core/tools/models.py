"""Tagged outcomes of an external tool invocation.

Every child process ends in exactly one of four states. Adapters return
these instead of ``None`` or raising, so callers can tell a missing tool
from a timeout or a crash and report each one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    """The tool ran and its output was parsed into ``data``."""

    tool: str
    data: Any


@dataclass(frozen=True)
class Unavailable:
    """The tool is not installed or its version check failed."""

    tool: str


@dataclass(frozen=True)
class TimedOut:
    """The tool exceeded its time budget (or the run deadline) and was stopped."""

    tool: str
    timeout: float


@dataclass(frozen=True)
class Failed:
    """The tool ran but exited abnormally or produced unreadable output."""

    tool: str
    reason: str


ToolOutcome = Union[Success, Unavailable, TimedOut, Failed]


def is_success(outcome: ToolOutcome) -> bool:
    return isinstance(outcome, Success)
