# topmark:header:start
#
#   project      : Formats
#   file         : __init__.py
#   file_relpath : src/formats/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Formats package.

Formats identifies the data format and transport coding (compression) of a
file or stream from its name or its first bytes, and selects which registered
reader, writer, decoder or encoder should handle it. Registrations come from
application code, entry-point plugins or TOML declaration files.
"""

from __future__ import annotations

from formats.errors import FormatsError
from formats.formatted import (
    Formatted,
    FormattedPath,
    FormattedStream,
    formatted,
    guess,
    openf,
    readf,
    readf_into,
    specify,
    writef,
)
from formats.handlers import FormatHandler
from formats.identifiers import Coding, Format
from formats.registry import FormatRegistry, get_registry

__all__ = [
    "Coding",
    "Format",
    "FormatHandler",
    "FormatRegistry",
    "Formatted",
    "FormattedPath",
    "FormattedStream",
    "FormatsError",
    "formatted",
    "get_registry",
    "guess",
    "openf",
    "readf",
    "readf_into",
    "specify",
    "writef",
]
