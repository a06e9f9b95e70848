# topmark:header:start
#
#   project      : Formats
#   file         : list_formats.py
#   file_relpath : src/formats/cli/commands/list_formats.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Formats `list` command.

Lists the registered formats and codings. With ``--long``, also shows their
extensions, signatures, handlers, favorites and codecs.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from formats.cli.bootstrap import command_registry
from formats.cli.options import OutputFormat, common_config_options, output_format_option
from formats.identifiers import Namespace
from formats.registry import render_signature

if TYPE_CHECKING:
    from pathlib import Path

    from formats.cli.console_api import ConsoleLike
    from formats.registry import IdentifierMeta


def _summary(meta: IdentifierMeta) -> dict[str, object]:
    return {"name": meta.name, "namespace": meta.namespace.value}


def _detail_lines(meta: IdentifierMeta) -> list[str]:
    lines: list[str] = []
    if meta.extensions:
        lines.append(f"    extensions: {', '.join(meta.extensions)}")
    if meta.signatures:
        lines.append(f"    signatures: {', '.join(render_signature(s) for s in meta.signatures)}")
    if meta.namespace is Namespace.FORMAT:
        if meta.readers:
            lines.append(f"    readers:    {', '.join(meta.readers)}")
        if meta.favorite_reader:
            lines.append(f"    preferred reader: {meta.favorite_reader}")
        if meta.writers:
            lines.append(f"    writers:    {', '.join(meta.writers)}")
        if meta.favorite_writer:
            lines.append(f"    preferred writer: {meta.favorite_writer}")
    else:
        if meta.decoder:
            lines.append(f"    decoder:    {meta.decoder}")
        if meta.encoder:
            lines.append(f"    encoder:    {meta.encoder}")
    return lines


@click.command(
    name="list",
    help="List the registered formats and codings.",
)
@click.option(
    "--long",
    "show_details",
    is_flag=True,
    help="Show extensions, signatures, handlers and codecs.",
)
@common_config_options
@output_format_option
def list_command(
    *,
    show_details: bool = False,
    config_files: tuple[Path, ...] = (),
    no_config: bool = False,
    no_plugins: bool = False,
    output_format: OutputFormat | None = None,
) -> None:
    """List registered formats and codings.

    Args:
        show_details (bool): Show extended information.
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
    metas = list(registry.iter_meta())

    if fmt in (OutputFormat.JSON, OutputFormat.NDJSON):
        payload = [m.to_dict() if show_details else _summary(m) for m in metas]
        if fmt == OutputFormat.JSON:
            console.print(json.dumps(payload, indent=2))
        else:
            for obj in payload:
                console.print(json.dumps(obj))
        return

    for namespace, title in ((Namespace.FORMAT, "Formats"), (Namespace.CODING, "Codings")):
        group = [m for m in metas if m.namespace is namespace]
        console.print(console.styled(f"{title}:", bold=True, underline=True))
        if not group:
            console.print("  (none)")
        for meta in group:
            console.print(f"  {console.styled(meta.name, bold=True)}")
            if show_details:
                for line in _detail_lines(meta):
                    console.print(line)
        console.print()
