"""Shared fixtures for external tool tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from deslop.core.tools import Success, ToolDefinition, ToolOutcome, Unavailable


class FakeRunner:
    """Stands in for ``ProcessRunner``; records every command it is given.

    ``responses`` maps a tool key to either a ready outcome or a callable
    taking the command and returning one.
    """

    def __init__(
        self,
        installed: Sequence[str] = (),
        responses: dict[str, ToolOutcome | Callable[[list[str]], ToolOutcome]] | None = None,
    ) -> None:
        self.installed = set(installed)
        self.responses = responses or {}
        self.calls: list[tuple[str, list[str], float]] = []
        self.checked: list[str] = []

    def is_available(self, tool: ToolDefinition) -> bool:
        self.checked.append(tool.key)
        return tool.key in self.installed

    def run(self, tool: str, command: Sequence[str], cwd: Path | None, timeout: float = 60.0) -> ToolOutcome:
        self.calls.append((tool, list(command), timeout))
        if tool not in self.installed:
            return Unavailable(tool)
        response = self.responses.get(tool, Success(tool, ""))
        if callable(response):
            return response(list(command))
        return response

    def tools_run(self) -> list[str]:
        return [tool for tool, _, _ in self.calls]


@pytest.fixture
def fake_runner() -> type[FakeRunner]:
    return FakeRunner
