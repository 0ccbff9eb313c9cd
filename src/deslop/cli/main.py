"""deslop CLI -- Certainty-tiered detection of low-quality code.

Entry point for the ``deslop`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan      -- Run the detection pipeline over a directory.
    patterns  -- List the built-in detection patterns.
    tools     -- Show availability of optional external tools.

Usage::

    deslop scan                        # Normal scan of the current directory
    deslop scan ./src --deep           # Include external tools
    deslop scan . --format markdown --compact --max 20
    deslop patterns --language python
    deslop tools .
"""

from __future__ import annotations

import click

from deslop import __version__
from deslop.cli.patterns_cmd import patterns_command
from deslop.cli.scan import scan_command
from deslop.cli.tools_cmd import tools_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """deslop: Find AI-artifact slop in source code.

    Regex patterns (HIGH certainty), structural analyzers (MEDIUM) and
    optional external tools (LOW) produce findings that are handed to a
    remediation agent as Markdown.
    """


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(patterns_command)
cli.add_command(tools_command)
