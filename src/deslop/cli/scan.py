"""``deslop scan [path]`` -- Detect slop in a source tree.

Runs the pipeline at the requested thoroughness and prints the findings
as a rich table (text), a JSON document (json), or the Markdown handoff
for a remediation agent (markdown).

Exit Codes:
    0 -- No findings.
    1 -- One or more findings.
    2 -- At least one CRITICAL finding, or invalid arguments/config.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from deslop.config import build_options
from deslop.core.patterns import Severity
from deslop.core.pipeline import PipelineResult, run_pipeline
from deslop.core.tools import missing_tools_message
from deslop.exceptions import ConfigError


def exit_code_for(result: PipelineResult) -> int:
    """Map a pipeline result to the process exit code.

    Args:
        result: Completed pipeline result.

    Returns:
        2 when any finding is critical, 1 for other findings, 0 when clean.
    """
    if any(finding.severity >= Severity.CRITICAL for finding in result.findings):
        return 2
    return 1 if result.findings else 0


def _output_result(result: PipelineResult, output_format: str) -> None:
    """Write ``result`` to stdout as JSON, the markdown handoff, or rich tables."""
    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif output_format == "markdown":
        click.echo(result.handoff_text)
        if result.missing_tools:
            click.echo(missing_tools_message(result.missing_tools, result.detected_languages))
    else:
        from deslop.cli.output import print_findings_table, print_summary

        print_findings_table(result)
        print_summary(result)
        if result.missing_tools:
            click.echo(missing_tools_message(result.missing_tools, result.detected_languages))


@click.command("scan")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=".",
)
@click.option("--quick", is_flag=True, default=False, help="Regex patterns only (Phase 1).")
@click.option("--deep", is_flag=True, default=False, help="Also run external tools (Phase 2).")
@click.option("--apply", "apply_fixes", is_flag=True, default=False, help="Hand off in apply mode.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "markdown"]),
    default="text",
    help="Output format: text (default), json, or markdown.",
)
@click.option("--compact", is_flag=True, default=False, help="Compact handoff table.")
@click.option("--max", "max_findings", type=int, default=None, help="Row cap for --compact (default: 50).")
@click.option("--language", default=None, help="Only scan files of this language.")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Config file (default: PATH/.deslop.yml when present).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress to stderr.")
def scan_command(
    path: str,
    quick: bool,
    deep: bool,
    apply_fixes: bool,
    output_format: str,
    compact: bool,
    max_findings: int | None,
    language: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Scan PATH (default: current directory) for low-quality code.

    Exit code 0 if clean, 1 if findings exist, 2 if any are CRITICAL.
    """
    from deslop.cli.output import configure_logging

    configure_logging(verbose)
    if quick and deep:
        raise click.UsageError("--quick and --deep are mutually exclusive")

    root = Path(path)
    overrides = {
        "thoroughness": "quick" if quick else "deep" if deep else None,
        "mode": "apply" if apply_fixes else None,
        "compact": compact or None,
        "max_findings": max_findings,
        "language": language,
    }
    try:
        options = build_options(root, Path(config_path) if config_path else None, overrides)
        result = run_pipeline(root, options)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    _output_result(result, output_format)
    sys.exit(exit_code_for(result))
