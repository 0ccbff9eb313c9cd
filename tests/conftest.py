"""Shared fixtures for deslop tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from deslop.core.patterns import default_registry, PatternRegistry

ProjectFactory = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Return a factory that writes ``{relative path: content}`` under tmp_path."""

    def factory(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return factory


@pytest.fixture
def registry() -> PatternRegistry:
    """The built-in pattern registry."""
    return default_registry()


@pytest.fixture
def no_git_history() -> Callable[[Path, int], str]:
    """A log reader that reports an empty history."""

    def reader(root: Path, limit: int) -> str:
        return ""

    return reader
