"""``deslop patterns`` -- List the built-in detection patterns.

Exit Codes:
    0 -- Always (informational command).
    2 -- Unknown ``--language`` value.
"""

from __future__ import annotations

import json

import click

from deslop.core.patterns import default_registry
from deslop.core.scanner import SOURCE_EXTENSIONS, normalize_language


@click.command("patterns")
@click.option("--language", default=None, help="Show universal plus this language's patterns.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format: text (default) or json.",
)
def patterns_command(language: str | None, output_format: str) -> None:
    """List every pattern in the registry."""
    registry = default_registry()
    if language is None:
        patterns = list(registry)
    else:
        normalized = normalize_language(language)
        if normalized not in SOURCE_EXTENSIONS:
            raise click.BadParameter(f"unsupported language {language!r}", param_hint="--language")
        patterns = registry.patterns_for_language(normalized)

    if output_format == "json":
        click.echo(json.dumps([pattern.to_dict() for pattern in patterns], indent=2))
        return

    from deslop.cli.output import print_patterns_table

    print_patterns_table(patterns)
