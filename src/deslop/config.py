"""``.deslop.yml`` loading and option merging.

The config file is optional. When present it may set any of the keys in
``CONFIG_KEYS``; anything else is rejected so typos surface immediately
instead of being silently ignored. Precedence is CLI flags over file
values over built-in defaults.

Example::

    thoroughness: deep
    mode: report
    max_files: 2000
    disabled_patterns: [magic_numbers, trailing_whitespace]
    thresholds:
      doc_code_ratio:
        max_ratio: 4
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from deslop.core.pipeline.options import PipelineOptions
from deslop.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".deslop.yml"

CONFIG_KEYS: frozenset[str] = frozenset({
    "thoroughness",
    "mode",
    "max_files",
    "max_findings",
    "tool_timeout",
    "disabled_patterns",
    "thresholds",
})


def _check_type(key: str, value: Any, expected: type | tuple[type, ...], label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ConfigError(f"Config key {key!r} must be {label}, got {type(value).__name__}")


def validate_config(data: Any, source: str = CONFIG_FILENAME) -> dict[str, Any]:
    """Check keys and value types of a parsed config document.

    Returns:
        A plain dict with tuples for list values, ready to be merged.

    Raises:
        ConfigError: On unknown keys or wrongly typed values.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    unknown = set(data) - CONFIG_KEYS
    if unknown:
        raise ConfigError(f"{source}: unknown key(s): {', '.join(sorted(map(str, unknown)))}")

    config: dict[str, Any] = {}
    for key in ("thoroughness", "mode"):
        if key in data:
            _check_type(key, data[key], str, "a string")
            config[key] = data[key]
    for key in ("max_files", "max_findings"):
        if key in data:
            _check_type(key, data[key], int, "an integer")
            config[key] = data[key]
    if "tool_timeout" in data:
        _check_type("tool_timeout", data["tool_timeout"], (int, float), "a number")
        config["tool_timeout"] = float(data["tool_timeout"])

    if "disabled_patterns" in data:
        disabled = data["disabled_patterns"]
        if not isinstance(disabled, list) or not all(isinstance(item, str) for item in disabled):
            raise ConfigError(f"{source}: 'disabled_patterns' must be a list of pattern ids")
        config["disabled_patterns"] = tuple(disabled)

    if "thresholds" in data:
        thresholds = data["thresholds"]
        if not isinstance(thresholds, dict):
            raise ConfigError(f"{source}: 'thresholds' must map pattern ids to mappings")
        parsed: dict[str, dict[str, float]] = {}
        for pattern_id, values in thresholds.items():
            if not isinstance(values, dict):
                raise ConfigError(f"{source}: thresholds for {pattern_id!r} must be a mapping")
            for name, number in values.items():
                if isinstance(number, bool) or not isinstance(number, (int, float)):
                    raise ConfigError(
                        f"{source}: threshold {pattern_id}.{name} must be a number, got {number!r}"
                    )
            parsed[str(pattern_id)] = {str(name): number for name, number in values.items()}
        config["thresholds"] = parsed

    return config


def load_config(path: Path) -> dict[str, Any]:
    """Read and validate a YAML config file.

    Raises:
        ConfigError: If the file cannot be read or parsed, or is invalid.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc
    logger.debug("Loaded config from %s", path)
    return validate_config(data, source=str(path))


def find_config(root: Path) -> Path | None:
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def build_options(
    root: Path,
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> PipelineOptions:
    """Merge defaults, the config file and CLI overrides into options.

    Args:
        root: Scanned directory, searched for ``.deslop.yml`` when
            ``config_path`` is not given.
        config_path: Explicit config file.
        overrides: CLI values; ``None`` entries mean "not given".
    """
    path = config_path or find_config(root)
    settings: dict[str, Any] = load_config(path) if path is not None else {}
    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value
    try:
        return PipelineOptions(**settings)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
