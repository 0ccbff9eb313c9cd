"""Caller-facing pipeline options, validated before any file is read."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from deslop.core.scanner.language import SOURCE_EXTENSIONS, normalize_language
from deslop.exceptions import ConfigError

DEFAULT_MAX_FILES = 1000
DEFAULT_MAX_FINDINGS = 50
DEFAULT_TOOL_TIMEOUT = 60.0


class Thoroughness(str, Enum):
    """How many phases run.

    QUICK runs the line scanner only, NORMAL adds the structural
    analyzers, DEEP adds the external tools.
    """

    QUICK = "quick"
    NORMAL = "normal"
    DEEP = "deep"


class Mode(str, Enum):
    """Whether the remediation agent should only report or also apply fixes."""

    REPORT = "report"
    APPLY = "apply"


def _coerce(enum_type: type[Enum], value: Any, name: str) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)  # type: ignore[attr-defined]
        raise ConfigError(f"Invalid {name} {value!r}; expected one of: {choices}") from None


@dataclass(frozen=True)
class PipelineOptions:
    """Everything ``run_pipeline`` needs besides the root directory.

    Attributes:
        thoroughness: Phases to run.
        target_files: Explicit relative paths; all source files when ``None``.
        language: Restrict Phase 1 to one language (aliases accepted).
        mode: ``report`` or ``apply``.
        tools: Pre-detected tool availability map; skips version checks.
        max_files: Cap for source enumeration.
        compact: Render the compact handoff table.
        max_findings: Row cap of the compact table.
        deadline: ``time.monotonic()`` value after which Phase 2 tools are skipped.
        tool_timeout: Per-tool time budget in seconds.
        thresholds: Per-pattern threshold overrides.
        disabled_patterns: Pattern ids to leave out.
    """

    thoroughness: Thoroughness = Thoroughness.NORMAL
    target_files: tuple[str, ...] | None = None
    language: str | None = None
    mode: Mode = Mode.REPORT
    tools: Mapping[str, bool] | None = None
    max_files: int = DEFAULT_MAX_FILES
    compact: bool = False
    max_findings: int = DEFAULT_MAX_FINDINGS
    deadline: float | None = None
    tool_timeout: float = DEFAULT_TOOL_TIMEOUT
    thresholds: Mapping[str, Mapping[str, float]] = field(default_factory=dict)
    disabled_patterns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "thoroughness", _coerce(Thoroughness, self.thoroughness, "thoroughness"))
        object.__setattr__(self, "mode", _coerce(Mode, self.mode, "mode"))

        if self.language is not None:
            language = normalize_language(self.language)
            if language not in SOURCE_EXTENSIONS:
                raise ConfigError(f"Unsupported language {self.language!r}")
            object.__setattr__(self, "language", language)

        if self.target_files is not None:
            # Deduplicate, keeping first occurrence
            object.__setattr__(self, "target_files", tuple(dict.fromkeys(self.target_files)))

        for name in ("max_files", "max_findings"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.tool_timeout, (int, float)) or self.tool_timeout <= 0:
            raise ConfigError(f"tool_timeout must be a positive number, got {self.tool_timeout!r}")

        object.__setattr__(self, "disabled_patterns", tuple(self.disabled_patterns))
