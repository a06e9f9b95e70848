# topmark:header:start
#
#   project      : Formats
#   file         : guess.py
#   file_relpath : src/formats/cli/commands/guess.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Formats `guess` command.

Shows the format and coding inferred for each path, either from its name
(default) or from its leading bytes (``--content``). Exits with
``UNSUPPORTED_FORMAT`` when the format of any path could not be determined.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from formats.cli.bootstrap import command_registry, report_diagnostics
from formats.cli.errors import to_cli_error
from formats.cli.exit_codes import ExitCode
from formats.cli.options import OutputFormat, common_config_options, output_format_option
from formats.errors import FormatsError
from formats.formatted import FormattedPath, FormattedStream, guess_as

if TYPE_CHECKING:
    from formats.cli.console_api import ConsoleLike
    from formats.diagnostic import Diagnostic
    from formats.formatted import Formatted
    from formats.registry import FormatRegistry


def _guess_one(path: Path, *, content: bool, registry: FormatRegistry) -> dict[str, Any]:
    """Guess and resolve one path, collecting the diagnostics it produces."""
    collected: list[Diagnostic] = []
    unsubscribe = registry.diagnostics.subscribe(collected.append)
    try:
        f: Formatted
        if content:
            with path.open("rb") as stream:
                f = guess_as(FormattedStream, stream, registry=registry)
        else:
            f = guess_as(FormattedPath, path, registry=registry)
        entry: dict[str, Any] = f.to_dict()
        entry["resource"] = str(path)
        entry["resolved_format"] = None if f.is_unknown else f.get_format()
        entry["resolved_coding"] = None if f.is_unknown else f.get_coding()
        entry["describe"] = f.describe()
    finally:
        unsubscribe()
    entry["diagnostics"] = collected
    return entry


@click.command(
    name="guess",
    help="Show the format and coding inferred for each PATH.",
    epilog="""
By default only file names are inspected and the files need not exist.
With --content, each file is opened and its first bytes are matched against
the registered signatures.
""",
)
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option(
    "--content",
    is_flag=True,
    help="Sniff the leading bytes of each file instead of its name.",
)
@common_config_options
@output_format_option
def guess_command(
    *,
    paths: tuple[Path, ...],
    content: bool = False,
    config_files: tuple[Path, ...] = (),
    no_config: bool = False,
    no_plugins: bool = False,
    output_format: OutputFormat | None = None,
) -> None:
    """Guess the format and coding of each path.

    Args:
        paths (tuple[Path, ...]): Files to inspect.
        content (bool): Sniff file content instead of names.
        config_files (tuple[Path, ...]): Explicit declaration files.
        no_config (bool): Skip declaration file discovery.
        no_plugins (bool): Skip entry-point plugins.
        output_format (OutputFormat | None): Output format (default: human-readable).
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    registry = command_registry(
        ctx, config_files=config_files, no_config=no_config, no_plugins=no_plugins
    )
    fmt: OutputFormat = output_format or OutputFormat.DEFAULT

    results: list[dict[str, Any]] = []
    for path in paths:
        try:
            results.append(_guess_one(path, content=content, registry=registry))
        except (FormatsError, OSError) as exc:
            raise to_cli_error(exc) from exc

    def _serialize(entry: dict[str, Any]) -> dict[str, Any]:
        out = {k: v for k, v in entry.items() if k != "describe"}
        out["diagnostics"] = [d.to_dict() for d in entry["diagnostics"]]
        return out

    if fmt == OutputFormat.JSON:
        console.print(json.dumps([_serialize(e) for e in results], indent=2))
    elif fmt == OutputFormat.NDJSON:
        for entry in results:
            console.print(json.dumps(_serialize(entry)))
    else:
        for entry in results:
            console.print(entry["describe"])
            report_diagnostics(ctx, entry["diagnostics"])

    if any(entry["resolved_format"] is None for entry in results):
        ctx.exit(ExitCode.UNSUPPORTED_FORMAT)
