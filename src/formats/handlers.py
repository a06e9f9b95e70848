# topmark:header:start
#
#   project      : Formats
#   file         : handlers.py
#   file_relpath : src/formats/handlers.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Handler capability interface and codec factory protocol.

The registry never calls a handler; it only stores and selects among them.
The resource layer ([`formats.formatted`][formats.formatted]) invokes the
selected handler through the small capability interface defined here. A single
handler object may service several formats; the resolved
[`Format`][formats.identifiers.Format] is always passed in so the handler can
dispatch on it by table lookup.

Example:
    ```python
    class SlashIO(FormatHandler):
        name = "slash"

        def read(self, format, stream, *args, **kwargs):
            ...

        def write(self, format, stream, value, *args, **kwargs):
            stream.write(value.encode() + b"/")
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import IO, TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from formats.identifiers import Format


class HandlerRole(Enum):
    """Operation a format handler is registered for."""

    READER = "reader"
    WRITER = "writer"


class CodecRole(Enum):
    """Direction a codec factory is registered for."""

    DECODER = "decoder"
    ENCODER = "encoder"


@runtime_checkable
class CodecFactory(Protocol):
    """Callable wrapping a binary stream for transcoding.

    Decoders are called with a readable stream and return a readable stream of
    decoded bytes; encoders are called with a writable stream and return a
    writable stream whose ``close()`` flushes the encoding *without* closing
    the wrapped stream.
    """

    def __call__(self, stream: IO[bytes]) -> IO[bytes]:
        """Wrap ``stream``."""
        ...


class FormatHandler:
    """Base class for format readers and writers.

    Subclasses override the capabilities they provide. Handlers are compared
    by identity unless a subclass defines equality; registering the same
    handler twice for one format is an error.
    """

    #: Human-readable name used in listings and diagnostics.
    name: str = ""

    def read(self, format: Format, stream: IO[bytes], *args: Any, **kwargs: Any) -> Any:
        """Read and return one value of ``format`` from ``stream``."""
        raise NotImplementedError(f"{handler_name(self)} cannot read {format}")

    def read_into(
        self, format: Format, stream: IO[bytes], output: Any, *args: Any, **kwargs: Any
    ) -> Any:
        """Read one value of ``format`` from ``stream`` into pre-allocated ``output``."""
        raise NotImplementedError(f"{handler_name(self)} cannot read {format} in place")

    def write(
        self, format: Format, stream: IO[bytes], value: Any, *args: Any, **kwargs: Any
    ) -> None:
        """Write ``value`` to ``stream`` as ``format``."""
        raise NotImplementedError(f"{handler_name(self)} cannot write {format}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {handler_name(self)!r}>"


def handler_name(handler: object) -> str:
    """Return a display name for a handler or codec factory.

    Uses a non-empty ``name`` attribute when present, then ``__qualname__``
    (functions and classes), then the class name.
    """
    name = getattr(handler, "name", None)
    if isinstance(name, str) and name:
        return name
    qualname = getattr(handler, "__qualname__", None)
    if isinstance(qualname, str) and qualname:
        return qualname
    return type(handler).__name__
