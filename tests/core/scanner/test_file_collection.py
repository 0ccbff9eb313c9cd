"""Tests for source enumeration, .gitignore handling and language detection."""

from __future__ import annotations

from pathlib import Path

from deslop.core.scanner import (
    GitignoreMatcher,
    RunCache,
    collect_source_files,
    detect_language,
    is_test_file,
    normalize_language,
    should_exclude,
    split_lines,
)


class TestCollectSourceFiles:
    def test_sorted_and_relative(self, make_project) -> None:
        root = make_project({"b.js": "", "a.py": "", "src/c.go": "", "notes.txt": ""})
        assert collect_source_files(root) == ["a.py", "b.js", "src/c.go"]

    def test_excluded_directories_skipped(self, make_project) -> None:
        root = make_project({
            "node_modules/lib/index.js": "",
            "dist/bundle.js": "",
            "__pycache__/x.py": "",
            "app.js": "",
        })
        assert collect_source_files(root) == ["app.js"]

    def test_tests_excluded_by_default(self, make_project) -> None:
        root = make_project({"app.js": "", "app.test.js": "", "tests/test_x.py": ""})
        assert collect_source_files(root) == ["app.js"]
        assert collect_source_files(root, include_tests=True) == ["app.js", "app.test.js", "tests/test_x.py"]

    def test_max_files_cap(self, make_project) -> None:
        root = make_project({f"f{i:02d}.js": "" for i in range(10)})
        assert len(collect_source_files(root, max_files=3)) == 3

    def test_gitignore_respected(self, make_project) -> None:
        root = make_project({
            ".gitignore": "generated/\n*.gen.js\n!keep.gen.js\n",
            "generated/out.js": "",
            "a.gen.js": "",
            "keep.gen.js": "",
            "main.js": "",
        })
        assert collect_source_files(root) == ["keep.gen.js", "main.js"]

    def test_gitignore_can_be_disabled(self, make_project) -> None:
        root = make_project({".gitignore": "*.js\n", "main.js": ""})
        assert collect_source_files(root, respect_gitignore=False) == ["main.js"]


class TestGitignoreMatcher:
    def test_anchored_rule(self) -> None:
        matcher = GitignoreMatcher(["/config.js"])
        assert matcher.is_ignored("config.js")
        assert not matcher.is_ignored("src/config.js")

    def test_unanchored_rule_matches_anywhere(self) -> None:
        matcher = GitignoreMatcher(["secret.py"])
        assert matcher.is_ignored("a/b/secret.py")

    def test_directory_only_rule(self) -> None:
        matcher = GitignoreMatcher(["cache/"])
        assert matcher.is_ignored("cache", is_dir=True)
        assert not matcher.is_ignored("cache", is_dir=False)

    def test_globstar(self) -> None:
        matcher = GitignoreMatcher(["**/fixtures/**"])
        assert matcher.is_ignored("a/fixtures/data.js")

    def test_last_rule_wins(self) -> None:
        matcher = GitignoreMatcher(["*.js", "!main.js"])
        assert not matcher.is_ignored("main.js")
        assert matcher.is_ignored("other.js")

    def test_comments_and_blanks_ignored(self) -> None:
        assert GitignoreMatcher(["# comment", "", "   "]).rules == []

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert GitignoreMatcher.from_root(tmp_path) is None


class TestTestFileDetection:
    def test_recognises_test_files(self) -> None:
        for path in ("a.test.ts", "b.spec.js", "x_test.go", "tests/unit.js", "pkg/test_mod.py", "conftest.py"):
            assert is_test_file(path), path

    def test_regular_files(self) -> None:
        for path in ("src/app.js", "contest.py", "latest.rs"):
            assert not is_test_file(path), path

    def test_should_exclude(self) -> None:
        assert should_exclude("node_modules/x/y.js")
        assert not should_exclude("src/node.js")


class TestLanguageDetection:
    def test_extensions(self) -> None:
        assert detect_language("a.tsx") == "javascript"
        assert detect_language("a.py") == "python"
        assert detect_language("a.rs") == "rust"
        assert detect_language("A.java") == "java"
        assert detect_language("a.txt") is None

    def test_shebang_fallback(self) -> None:
        assert detect_language("script", "#!/usr/bin/env node\nconsole.log(1)") == "javascript"
        assert detect_language("tool", "#!/usr/bin/python3\n") == "python"
        assert detect_language("plain", "hello") is None

    def test_aliases(self) -> None:
        assert normalize_language("TypeScript") == "javascript"
        assert normalize_language("py") == "python"
        assert normalize_language("go") == "go"


class TestRunCache:
    def test_content_is_memoised(self, make_project) -> None:
        root = make_project({"a.js": "one"})
        cache = RunCache(root)
        assert cache.content("a.js") == "one"
        (root / "a.js").write_text("two")
        assert cache.content("a.js") == "one"

    def test_unreadable_file_is_none(self, tmp_path: Path) -> None:
        assert RunCache(tmp_path).content("missing.js") is None

    def test_separate_runs_do_not_share_state(self, make_project) -> None:
        root = make_project({"a.js": "one"})
        assert RunCache(root).content("a.js") == "one"
        (root / "a.js").write_text("two")
        assert RunCache(root).content("a.js") == "two"

    def test_tool_availability_record(self, tmp_path: Path) -> None:
        cache = RunCache(tmp_path)
        assert cache.tool_available("jscpd") is None
        cache.record_tool("jscpd", True)
        assert cache.tool_available("jscpd") is True


class TestSplitLines:
    def test_no_phantom_trailing_line(self) -> None:
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_empty(self) -> None:
        assert split_lines("") == [""]
