"""Tests for ``deslop patterns``."""

from __future__ import annotations

import json

from click.testing import CliRunner

from deslop.cli.main import cli
from deslop.core.patterns import default_registry


class TestPatternsCommand:
    def test_json_lists_whole_registry(self) -> None:
        result = CliRunner().invoke(cli, ["patterns", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data) == len(default_registry())
        assert {"id", "severity", "certainty", "auto_fix", "language", "multi_pass"} <= set(data[0])

    def test_language_filter(self) -> None:
        result = CliRunner().invoke(cli, ["patterns", "--language", "py", "--format", "json"])
        languages = {entry["language"] for entry in json.loads(result.stdout)}
        assert languages <= {None, "python"}
        assert "python" in languages

    def test_unknown_language(self) -> None:
        result = CliRunner().invoke(cli, ["patterns", "--language", "cobol"])
        assert result.exit_code == 2
        assert "unsupported language" in result.output

    def test_text_table(self) -> None:
        result = CliRunner().invoke(cli, ["patterns"])
        assert result.exit_code == 0
        assert "deslop Patterns" in result.stdout
