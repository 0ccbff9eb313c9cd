"""``deslop tools [path]`` -- Show which optional external tools are installed.

Only tools relevant to the project's detected languages are checked.

Exit Codes:
    0 -- Always (informational command).
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from deslop.core.tools import ProcessRunner, detect_project_languages, tools_for_languages


@click.command("tools")
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False),
    required=False,
    default=".",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def tools_command(path: str, output_format: str) -> None:
    """Check availability of external analysis tools for PATH."""
    languages = detect_project_languages(Path(path))
    runner = ProcessRunner()
    checked = [(tool, runner.is_available(tool)) for tool in tools_for_languages(languages)]

    if output_format == "json":
        click.echo(json.dumps({
            "languages": languages,
            "tools": [
                {
                    "key": tool.key,
                    "name": tool.name,
                    "available": available,
                    "install": tool.install_hint,
                }
                for tool, available in checked
            ],
        }, indent=2))
        return

    from deslop.cli.output import print_tools_table

    print_tools_table(checked, languages)
