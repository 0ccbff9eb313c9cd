"""Run-scoped cache shared by the phases of one pipeline run.

Replaces process-wide memoisation: a ``RunCache`` is created per run and
discarded with it, so two runs (or two tests) never see each other's state.
Reads are served from memory after the first access to each file.
"""

from __future__ import annotations

import threading
from pathlib import Path

from deslop.core.scanner.files import read_text
from deslop.core.scanner.language import detect_language

_MISSING = object()


class RunCache:
    """Per-run memo of file contents, detected languages and tool checks.

    Safe to share between the Phase 1 worker threads.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._lock = threading.Lock()
        self._contents: dict[str, str | None] = {}
        self._languages: dict[str, str | None] = {}
        self._tools: dict[str, bool] = {}

    def _resolve(self, relative: str) -> Path:
        path = Path(relative)
        return path if path.is_absolute() else self.root / path

    def content(self, relative: str) -> str | None:
        """Return file content, or ``None`` if the file cannot be read."""
        with self._lock:
            cached = self._contents.get(relative, _MISSING)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]
        text = read_text(self._resolve(relative))
        with self._lock:
            self._contents.setdefault(relative, text)
            return self._contents[relative]

    def language(self, relative: str) -> str | None:
        """Detect the language of a file once per run."""
        with self._lock:
            cached = self._languages.get(relative, _MISSING)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]
        language = detect_language(relative)
        if language is None and "." not in Path(relative).name:
            language = detect_language(relative, self.content(relative))
        with self._lock:
            self._languages.setdefault(relative, language)
            return self._languages[relative]

    def tool_available(self, name: str) -> bool | None:
        with self._lock:
            return self._tools.get(name)

    def record_tool(self, name: str, available: bool) -> None:
        with self._lock:
            self._tools[name] = available
