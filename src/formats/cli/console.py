# topmark:header:start
#
#   project      : Formats
#   file         : console.py
#   file_relpath : src/formats/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Console for user-facing program output.

Program output (guess results, listings) goes through a `ClickConsole`;
internal diagnostics go through `logging`.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, TextIO

import click

from formats.cli.console_api import ConsoleLike

if TYPE_CHECKING:
    from formats.diagnostic import Diagnostic


class ClickConsole(ConsoleLike):
    """Program-output console, independent from the logger.

    Attributes:
        enable_color (bool): Whether to emit ANSI color codes.
        out (TextIO): Stream for standard output (defaults to sys.stdout).
        err (TextIO): Stream for error output (defaults to sys.stderr).
    """

    enable_color: bool
    out: TextIO
    err: TextIO

    def __init__(
        self,
        *,
        enable_color: bool = True,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color = enable_color
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def print(self, text: str = "", *, nl: bool = True) -> None:
        """Write a message to stdout."""
        click.echo(text, nl=nl, file=self.out, color=self.enable_color)

    def error(self, text: str, *, nl: bool = True) -> None:
        """Write an error message to stderr."""
        click.secho(text, nl=nl, file=self.err, color=self.enable_color, fg="bright_red")

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` styled with `click.style` (plain if color is disabled)."""
        if not self.enable_color:
            return text
        return click.style(text, **style_kwargs)

    def diagnostic(self, diagnostic: Diagnostic) -> None:
        """Write a diagnostic to stderr, prefixed and colored by its level."""
        label = f"[{diagnostic.level.value}]"
        if self.enable_color:
            label = diagnostic.level.color(label)
        click.echo(f"{label} {diagnostic.message}", file=self.err, color=self.enable_color)
