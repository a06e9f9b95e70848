# topmark:header:start
#
#   project      : Formats
#   file         : handlers_stub.py
#   file_relpath : tests/handlers_stub.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Stub format handlers shared by the test suite."""

from __future__ import annotations

from typing import IO, Any

from formats.handlers import FormatHandler
from formats.identifiers import Format

PNG_MAGIC = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A])


class SlashIO(FormatHandler):
    """Text values framed by a trailing ``/``.

    Reading consumes bytes up to and including the next ``/``; reading at end
    of stream raises `EOFError`.
    """

    name = "slash"

    def read(self, format: Format, stream: IO[bytes], *args: Any, **kwargs: Any) -> str:
        chars = bytearray()
        while True:
            b = stream.read(1)
            if not b:
                raise EOFError("no terminating '/'")
            if b == b"/":
                return chars.decode("utf-8")
            chars += b

    def read_into(
        self, format: Format, stream: IO[bytes], output: Any, *args: Any, **kwargs: Any
    ) -> Any:
        output.append(self.read(format, stream))
        return output

    def write(
        self, format: Format, stream: IO[bytes], value: Any, *args: Any, **kwargs: Any
    ) -> None:
        stream.write(str(value).encode("utf-8"))
        stream.write(b"/")


class TokenIO(FormatHandler):
    """Handler that does nothing; used for selection tests only."""

    def __init__(self, name: str) -> None:
        self.name = name


class ConfigHandler(FormatHandler):
    """Handler class referenced by import path in declaration tests."""

    name = "config-handler"


def identity_codec(stream: IO[bytes]) -> IO[bytes]:
    """Codec factory that returns the stream unchanged."""
    return stream
