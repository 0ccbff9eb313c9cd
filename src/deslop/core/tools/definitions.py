"""Catalogue of optional external tools and project language detection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

SUPPORTED_LANGUAGES: tuple[str, ...] = ("javascript", "typescript", "python", "rust", "go")


@dataclass(frozen=True)
class ToolDefinition:
    """An optional CLI tool that can deepen the analysis.

    Attributes:
        key: Stable identifier used in availability maps and ``missing_tools``.
        name: Executable (or display) name.
        description: What the tool detects.
        check_command: Argument vector of a cheap version check.
        install_hint: Shell command the user can run to install it.
        languages: Project languages the tool is relevant for.
    """

    key: str
    name: str
    description: str
    check_command: tuple[str, ...]
    install_hint: str
    languages: tuple[str, ...]


CLI_TOOLS: dict[str, ToolDefinition] = {
    tool.key: tool
    for tool in (
        ToolDefinition(
            key="jscpd",
            name="jscpd",
            description="Copy/paste detector for code duplication",
            check_command=("jscpd", "--version"),
            install_hint="npm install -g jscpd",
            languages=("javascript", "typescript", "python", "go", "rust"),
        ),
        ToolDefinition(
            key="madge",
            name="madge",
            description="Circular dependency detector",
            check_command=("madge", "--version"),
            install_hint="npm install -g madge",
            languages=("javascript", "typescript"),
        ),
        ToolDefinition(
            key="escomplex",
            name="escomplex",
            description="Cyclomatic complexity analyzer",
            check_command=("escomplex", "--version"),
            install_hint="npm install -g escomplex",
            languages=("javascript",),
        ),
        ToolDefinition(
            key="pylint",
            name="pylint",
            description="Python linter with complexity analysis",
            check_command=("pylint", "--version"),
            install_hint="pip install pylint",
            languages=("python",),
        ),
        ToolDefinition(
            key="radon",
            name="radon",
            description="Python complexity and maintainability metrics",
            check_command=("radon", "--version"),
            install_hint="pip install radon",
            languages=("python",),
        ),
        ToolDefinition(
            key="golangci_lint",
            name="golangci-lint",
            description="Go linters aggregator with complexity checks",
            check_command=("golangci-lint", "--version"),
            install_hint="go install github.com/golangci/golangci-lint/cmd/golangci-lint@latest",
            languages=("go",),
        ),
        ToolDefinition(
            key="clippy",
            name="cargo-clippy",
            description="Rust linter with code smell detection",
            check_command=("cargo", "clippy", "--version"),
            install_hint="rustup component add clippy",
            languages=("rust",),
        ),
    )
}

_CONFIG_INDICATORS: dict[str, tuple[str, ...]] = {
    "package.json": ("javascript", "typescript"),
    "tsconfig.json": ("typescript",),
    "requirements.txt": ("python",),
    "setup.py": ("python",),
    "pyproject.toml": ("python",),
    "Pipfile": ("python",),
    "go.mod": ("go",),
    "go.sum": ("go",),
    "Cargo.toml": ("rust",),
}

_EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
}


def detect_project_languages(root: Path) -> list[str]:
    """Guess the project's languages from manifests, then file extensions.

    Manifests in ``root`` win. Without any, the top level plus ``src/`` and
    ``lib/`` are listed (not walked) for known extensions. Falls back to
    ``["javascript"]``.
    """
    found: list[str] = []

    def add(language: str) -> None:
        if language in SUPPORTED_LANGUAGES and language not in found:
            found.append(language)

    for manifest, languages in _CONFIG_INDICATORS.items():
        if (root / manifest).exists():
            for language in languages:
                add(language)

    if not found:
        for directory in (root, root / "src", root / "lib"):
            if not directory.is_dir():
                continue
            try:
                names = sorted(os.listdir(directory))
            except OSError:
                continue
            for name in names:
                language = _EXTENSION_LANGUAGES.get(os.path.splitext(name)[1].lower())
                if language:
                    add(language)

    return found or ["javascript"]


def tools_for_languages(languages: list[str] | tuple[str, ...]) -> list[ToolDefinition]:
    """Tools relevant to at least one of ``languages``, in catalogue order."""
    return [
        tool for tool in CLI_TOOLS.values()
        if any(language in languages for language in tool.languages)
    ]
