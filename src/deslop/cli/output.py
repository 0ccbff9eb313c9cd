"""Rich output formatting helpers for the deslop CLI.

Severity Color Mapping:
    CRITICAL = bold red, HIGH = yellow, MEDIUM = cyan, LOW = green
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from deslop.core.patterns import Certainty, PatternDefinition, Severity
from deslop.core.pipeline import PipelineResult
from deslop.core.tools import ToolDefinition

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "yellow",
    Severity.MEDIUM: "cyan",
    Severity.LOW: "green",
}

_CERTAINTY_STYLES: dict[Certainty, str] = {
    Certainty.HIGH: "bold",
    Certainty.MEDIUM: "",
    Certainty.LOW: "dim",
}

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich; debug level when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def print_findings_table(result: PipelineResult) -> None:
    """Print all findings of a run, one row each, coloured by severity."""
    if not result.findings:
        console.print("[bold green]No issues detected.[/bold green]")
        return

    table = Table(title="deslop Findings", show_header=True, header_style="bold")
    table.add_column("File", style="bold")
    table.add_column("Line", justify="right")
    table.add_column("Pattern")
    table.add_column("Severity", justify="center")
    table.add_column("Certainty", justify="center")
    table.add_column("Fix", justify="center")
    table.add_column("Description")

    for finding in result.findings:
        fix = finding.auto_fix.value if finding.auto_fix.is_automatic else "-"
        table.add_row(
            finding.file,
            str(finding.line),
            finding.pattern_id,
            Text(finding.severity.name, style=severity_style(finding.severity)),
            Text(finding.certainty.name, style=_CERTAINTY_STYLES[finding.certainty]),
            fix,
            finding.description,
        )
    console.print(table)


def print_summary(result: PipelineResult) -> None:
    """Print the severity breakdown and the most frequent patterns."""
    summary = result.summary
    lines = [
        f"[bold]Files analyzed:[/bold] {result.metadata.get('files_analyzed', 0)}",
        f"[bold]Findings:[/bold] {summary.total}",
    ]
    severities = "  ".join(
        f"[{severity_style(Severity.from_label(label))}]{label.upper()}: {count}[/]"
        for label, count in summary.by_severity.items()
    )
    lines.append(severities)
    lines.append(
        f"[bold]Auto-fixable:[/bold] {summary.auto_fixable}  "
        f"[bold]Manual:[/bold] {summary.total - summary.auto_fixable}"
    )
    if summary.top_patterns:
        top = ", ".join(f"{pattern_id} ({count})" for pattern_id, count in summary.top_patterns[:5])
        lines.append(f"[bold]Top patterns:[/bold] {top}")
    title = (
        f"Summary ({result.metadata.get('thoroughness', '?')}, "
        f"{result.metadata.get('mode', '?')})"
    )
    console.print(Panel("\n".join(lines), title=title, expand=False))


def print_patterns_table(patterns: list[PatternDefinition]) -> None:
    """Print the pattern catalogue as a rich table, one row per pattern."""
    table = Table(title=f"deslop Patterns ({len(patterns)})", show_header=True, header_style="bold")
    table.add_column("ID", style="bold")
    table.add_column("Category", style="dim")
    table.add_column("Language")
    table.add_column("Severity", justify="center")
    table.add_column("Certainty", justify="center")
    table.add_column("Auto-fix", justify="center")
    table.add_column("Kind", justify="center")

    for pattern in patterns:
        table.add_row(
            pattern.id,
            pattern.category,
            pattern.language or "any",
            Text(pattern.severity.name, style=severity_style(pattern.severity)),
            pattern.certainty.name,
            pattern.auto_fix.value,
            "multi-pass" if pattern.requires_multi_pass else "regex",
        )
    console.print(table)


def print_tools_table(tools: list[tuple[ToolDefinition, bool]], languages: list[str]) -> None:
    """Print availability of the external tools relevant to ``languages``."""
    if languages:
        console.print(f"Detected project languages: [bold]{', '.join(languages)}[/bold]")
    if not tools:
        console.print("[dim]No external tools apply to this project.[/dim]")
        return

    table = Table(title="External Tools", show_header=True, header_style="bold")
    table.add_column("Tool", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Description")
    table.add_column("Install", style="dim")

    for tool, available in tools:
        status = Text("available", style="bold green") if available else Text("missing", style="bold red")
        table.add_row(tool.name, status, tool.description, "-" if available else tool.install_hint)
    console.print(table)
