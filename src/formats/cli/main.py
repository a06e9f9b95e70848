# topmark:header:start
#
#   project      : Formats
#   file         : main.py
#   file_relpath : src/formats/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Entry point of the ``formats`` command line interface.

Group-level options (verbosity, color) are resolved once and placed into
``ctx.obj`` together with the console; subcommands build their own registry
from built-ins, plugins and declaration files.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from formats.cli.commands.guess import guess_command
from formats.cli.commands.list_formats import list_command
from formats.cli.commands.resolve import resolve_command
from formats.cli.commands.version import version_command
from formats.cli.console import ClickConsole
from formats.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from formats.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from formats.cli.console_api import ConsoleLike
    from formats.config.logging import FormatsLogger

logger: FormatsLogger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging, color, console) on the context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color``.
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}
    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    # Diagnostics reach the user through the console; internal logging is
    # configured from the environment and otherwise limited to errors.
    level_env = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env if level_env is not None else logging.ERROR)

    mode = ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO)
    enable_color = resolve_color_mode(cli_mode=mode, output_format=None)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="Identify data formats and codings, and show which handlers service them.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: str | None,
    no_color: bool,
) -> None:
    """Entry point for the Formats CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=ColorMode(color_mode) if color_mode else None,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'formats guess PATH...' to identify files.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(guess_command)

cli.add_command(list_command)

cli.add_command(resolve_command)

if __name__ == "__main__":
    cli()
