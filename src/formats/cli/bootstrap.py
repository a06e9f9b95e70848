# topmark:header:start
#
#   project      : Formats
#   file         : bootstrap.py
#   file_relpath : src/formats/cli/bootstrap.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Populate the registry a CLI command works against.

Registration order: built-in codings, entry-point plugins, then declaration
files (explicit ``--config`` files in order, or the discovered one).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from formats.builtins import register_builtin_codings
from formats.cli.errors import to_cli_error
from formats.config import ObjectLoader, find_declaration_file, load_into
from formats.config.logging import get_logger
from formats.diagnostic import DiagnosticLevel
from formats.errors import FormatsError
from formats.registry import FormatRegistry, load_plugins

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from formats.cli.console_api import ConsoleLike
    from formats.config.logging import FormatsLogger
    from formats.diagnostic import Diagnostic

logger: FormatsLogger = get_logger(__name__)


def build_registry(
    *,
    config_files: Sequence[Path] = (),
    no_config: bool = False,
    no_plugins: bool = False,
) -> FormatRegistry:
    """Return a fresh registry populated for a CLI invocation.

    Args:
        config_files (Sequence[Path]): Declaration files to load, in order.
            When given, discovery is skipped.
        no_config (bool): Skip discovery of a declaration file.
        no_plugins (bool): Skip entry-point plugins.

    Returns:
        FormatRegistry: The populated registry.

    Raises:
        FormatsCliError: If a declaration file is missing or malformed.
    """
    registry = FormatRegistry()
    register_builtin_codings(registry)
    if not no_plugins:
        loaded = load_plugins(registry)
        logger.debug("Loaded plugins: %s", loaded)

    files: list[Path] = list(config_files)
    if not files and not no_config:
        try:
            found = find_declaration_file()
        except FormatsError as exc:
            raise to_cli_error(exc) from exc
        if found is not None:
            files.append(found)

    loader = ObjectLoader()
    for path in files:
        if not path.exists():
            raise to_cli_error(FileNotFoundError(2, "No such file", str(path)))
        try:
            load_into(registry, path, loader=loader)
        except FormatsError as exc:
            raise to_cli_error(exc) from exc
    return registry


def command_registry(
    ctx: click.Context,
    *,
    config_files: Sequence[Path],
    no_config: bool,
    no_plugins: bool,
) -> FormatRegistry:
    """Build the registry for the current command and report bootstrap diagnostics."""
    registry = build_registry(
        config_files=config_files, no_config=no_config, no_plugins=no_plugins
    )
    report_diagnostics(ctx, registry.diagnostics)
    registry.diagnostics.clear()
    return registry


def report_diagnostics(ctx: click.Context, diagnostics: Iterable[Diagnostic]) -> None:
    """Echo diagnostics to stderr according to the current verbosity.

    Warnings are shown unless ``-q``; informational diagnostics need ``-v``.
    """
    verbosity: int = ctx.obj.get("verbosity_level", 0)
    if verbosity < 0:
        return
    console: ConsoleLike = ctx.obj["console"]
    for diagnostic in diagnostics:
        if diagnostic.level is DiagnosticLevel.INFO and verbosity < 1:
            continue
        console.diagnostic(diagnostic)
