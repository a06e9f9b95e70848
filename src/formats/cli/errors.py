# topmark:header:start
#
#   project      : Formats
#   file         : errors.py
#   file_relpath : src/formats/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Exceptions for the Formats CLI.

Usage:
    Commands convert library errors with `to_cli_error()` and raise the result;
    Click prints the message and exits with the class's exit code.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from formats.cli.exit_codes import ExitCode
from formats.errors import (
    ConflictingGlobalFavorites,
    FormatsConfigError,
    FormatsError,
    InvalidFavorite,
    NoCodecRegistered,
    NoHandlerRegistered,
    UnknownFormat,
)


class FormatsCliError(click.ClickException):
    """Base class for all Formats CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available."""
        ctx = click.get_current_context(silent=True)
        console = ctx.obj.get("console") if ctx is not None and isinstance(ctx.obj, dict) else None
        if console is not None:
            console.error(console.styled(self.format_message(), fg="bright_red"))
            return
        super().show(file)


class FormatsUsageError(FormatsCliError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class FormatsConfigCliError(FormatsCliError):
    """Error for malformed declarations or inconsistent handler preferences."""

    exit_code = ExitCode.CONFIG_ERROR


class FormatsFileNotFoundError(FormatsCliError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class FormatsPermissionDeniedError(FormatsCliError):
    """Error for insufficient permissions."""

    exit_code = ExitCode.PERMISSION_DENIED


class FormatsIOError(FormatsCliError):
    """Error for I/O errors reading files."""

    exit_code = ExitCode.IO_ERROR


class FormatsUnsupportedFormatError(FormatsCliError):
    """Error when a format is unknown or has no handler or codec."""

    exit_code = ExitCode.UNSUPPORTED_FORMAT


_CONFIG_ERRORS = (FormatsConfigError, ConflictingGlobalFavorites, InvalidFavorite)
_UNSUPPORTED_ERRORS = (UnknownFormat, NoHandlerRegistered, NoCodecRegistered)


def to_cli_error(exc: FormatsError | OSError) -> FormatsCliError:
    """Map a library or I/O error to the CLI error carrying its exit code.

    Args:
        exc (FormatsError | OSError): The error raised by the library or the OS.

    Returns:
        FormatsCliError: The CLI error to raise (``raise ... from exc``).
    """
    if isinstance(exc, _CONFIG_ERRORS):
        return FormatsConfigCliError(str(exc))
    if isinstance(exc, _UNSUPPORTED_ERRORS):
        return FormatsUnsupportedFormatError(str(exc))
    if isinstance(exc, FileNotFoundError):
        return FormatsFileNotFoundError(f"{exc.filename}: no such file")
    if isinstance(exc, PermissionError):
        return FormatsPermissionDeniedError(f"{exc.filename}: permission denied")
    if isinstance(exc, OSError):
        return FormatsIOError(str(exc))
    return FormatsCliError(str(exc))
