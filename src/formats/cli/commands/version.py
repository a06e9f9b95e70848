# topmark:header:start
#
#   project      : Formats
#   file         : version.py
#   file_relpath : src/formats/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Formats `version` command.

Prints the current Formats version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from formats.cli.options import OutputFormat, output_format_option
from formats.constants import FORMATS_VERSION

if TYPE_CHECKING:
    from formats.cli.console_api import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of Formats.",
)
@output_format_option
def version_command(*, output_format: OutputFormat | None = None) -> None:
    """Show the current version of Formats.

    Args:
        output_format (OutputFormat | None): Optional output format.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    fmt: OutputFormat = output_format or OutputFormat.DEFAULT
    if fmt in (OutputFormat.JSON, OutputFormat.NDJSON):
        console.print(json.dumps({"version": FORMATS_VERSION}))
    elif ctx.obj.get("verbosity_level", 0) > 0:
        console.print(console.styled("Formats version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(FORMATS_VERSION, bold=True)}")
    else:
        console.print(console.styled(FORMATS_VERSION, bold=True))
