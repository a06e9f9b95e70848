# topmark:header:start
#
#   project      : Formats
#   file         : resolve.py
#   file_relpath : src/formats/cli/commands/resolve.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Formats `resolve` command.

Shows which reader (or writer) and which decoder (or encoder) would handle a
path, applying the same selection rules as reading and writing.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from formats.cli.bootstrap import command_registry, report_diagnostics
from formats.cli.errors import to_cli_error
from formats.cli.options import OutputFormat, common_config_options, output_format_option
from formats.errors import FormatsError
from formats.formatted import FormattedPath, FormattedStream, guess_as
from formats.handlers import HandlerRole, handler_name
from formats.resolution import (
    resolve_decoder,
    resolve_encoder,
    resolve_handler,
)

if TYPE_CHECKING:
    from formats.cli.console_api import ConsoleLike
    from formats.diagnostic import Diagnostic
    from formats.formatted import Formatted
    from formats.registry import FormatRegistry


def _resolve(f: Formatted, role: HandlerRole, registry: FormatRegistry) -> dict[str, Any]:
    fmt = f.resolve_format()
    coding = f.resolve_coding()
    handler = resolve_handler(role, fmt, registry=registry)
    codec_key = "decoder" if role is HandlerRole.READER else "encoder"
    codec: str | None = None
    if coding is not None:
        factory = (
            resolve_decoder(coding, registry=registry)
            if role is HandlerRole.READER
            else resolve_encoder(coding, registry=registry)
        )
        codec = handler_name(factory)
    return {
        "format": fmt.name,
        "coding": None if coding is None else coding.name,
        role.value: handler_name(handler),
        codec_key: codec,
    }


@click.command(
    name="resolve",
    help="Show the handler and codec selected for PATH.",
)
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--reader",
    "role",
    flag_value=HandlerRole.READER.value,
    default=True,
    help="Resolve the reader and decoder (default).",
)
@click.option(
    "--writer",
    "role",
    flag_value=HandlerRole.WRITER.value,
    help="Resolve the writer and encoder.",
)
@click.option(
    "--content",
    is_flag=True,
    help="Sniff the leading bytes of the file instead of its name.",
)
@common_config_options
@output_format_option
def resolve_command(
    *,
    path: Path,
    role: str = HandlerRole.READER.value,
    content: bool = False,
    config_files: tuple[Path, ...] = (),
    no_config: bool = False,
    no_plugins: bool = False,
    output_format: OutputFormat | None = None,
) -> None:
    """Resolve the handler servicing ``path``.

    Args:
        path (Path): File to resolve.
        role (str): ``"reader"`` or ``"writer"``.
        content (bool): Sniff file content instead of the name.
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
    handler_role = HandlerRole(role)

    collected: list[Diagnostic] = []
    unsubscribe = registry.diagnostics.subscribe(collected.append)
    try:
        if content:
            with path.open("rb") as stream:
                f = guess_as(FormattedStream, stream, registry=registry)
        else:
            f = guess_as(FormattedPath, path, registry=registry)
        result = _resolve(f, handler_role, registry)
    except (FormatsError, OSError) as exc:
        raise to_cli_error(exc) from exc
    finally:
        unsubscribe()

    result = {"resource": str(path), **result}
    if fmt in (OutputFormat.JSON, OutputFormat.NDJSON):
        result["diagnostics"] = [d.to_dict() for d in collected]
        console.print(json.dumps(result, indent=2 if fmt == OutputFormat.JSON else None))
        return

    console.print(console.styled(str(path), bold=True))
    for key, value in result.items():
        if key == "resource":
            continue
        console.print(f"  {key + ':':<9} {value if value is not None else '-'}")
    report_diagnostics(ctx, collected)
