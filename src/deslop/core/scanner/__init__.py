"""File enumeration, language detection and the Phase 1 line scanner.

Submodules
----------
- ``language``: Extension and shebang based language detection.
- ``files``: Source enumeration, exclusions, .gitignore, test-file detection.
- ``context``: ``RunCache``, the per-run memo of contents and languages.
- ``line_scanner``: Phase 1 regex scanning on a bounded thread pool.
"""

from deslop.core.scanner.context import RunCache
from deslop.core.scanner.files import (
    EXCLUDE_DIRS,
    GitignoreMatcher,
    collect_source_files,
    is_test_file,
    read_text,
    should_exclude,
    split_lines,
)
from deslop.core.scanner.language import SOURCE_EXTENSIONS, detect_language, normalize_language
from deslop.core.scanner.line_scanner import run_phase1, scan_content, shannon_entropy

__all__ = [
    "EXCLUDE_DIRS",
    "GitignoreMatcher",
    "RunCache",
    "SOURCE_EXTENSIONS",
    "collect_source_files",
    "detect_language",
    "is_test_file",
    "normalize_language",
    "read_text",
    "run_phase1",
    "scan_content",
    "shannon_entropy",
    "should_exclude",
    "split_lines",
]
