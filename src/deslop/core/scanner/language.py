"""Language detection from file extension, with a shebang fallback."""

from __future__ import annotations

from pathlib import PurePath

SOURCE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "javascript": (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"),
    "python": (".py",),
    "rust": (".rs",),
    "go": (".go",),
    "java": (".java",),
}

_EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ext: lang for lang, exts in SOURCE_EXTENSIONS.items() for ext in exts
}

ALL_SOURCE_EXTENSIONS: frozenset[str] = frozenset(_EXTENSION_TO_LANGUAGE)

_SHEBANG_HINTS: tuple[tuple[str, str], ...] = (
    ("node", "javascript"),
    ("deno", "javascript"),
    ("python", "python"),
)

# Aliases accepted from callers for the language filter
LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "typescript": "javascript",
    "ts": "javascript",
    "py": "python",
    "rs": "rust",
    "golang": "go",
}


def normalize_language(language: str) -> str:
    lowered = language.lower()
    return LANGUAGE_ALIASES.get(lowered, lowered)


def detect_language(path: str, content: str | None = None) -> str | None:
    """Return the language of ``path`` or ``None`` when unknown.

    The extension decides. Extensionless files fall back to the interpreter
    named on a ``#!`` first line when ``content`` is given.
    """
    suffix = PurePath(path).suffix.lower()
    if suffix:
        return _EXTENSION_TO_LANGUAGE.get(suffix)
    if content and content.startswith("#!"):
        first_line = content.split("\n", 1)[0]
        for hint, language in _SHEBANG_HINTS:
            if hint in first_line:
                return language
    return None
