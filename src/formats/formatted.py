# topmark:header:start
#
#   project      : Formats
#   file         : formatted.py
#   file_relpath : src/formats/formatted.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Resources annotated with specified or inferred format/coding information.

A [`Formatted`][formats.formatted.Formatted] wraps a filename
([`FormattedPath`][formats.formatted.FormattedPath]) or a binary stream
([`FormattedStream`][formats.formatted.FormattedStream]) together with either a
*specified* format/coding or the candidates *inferred* for it. Instances are
immutable: guessing or specifying again returns a new object.

Typical usage:
    ```python
    from formats import guess, specify, readf, writef

    f = guess("myoglobin.gro.gz")
    f.get_format()  # "structure/x-gro"
    f.get_coding()  # "application/gzip"

    mol = specify("insulin.dat", "structure/x-pdb").read()
    writef("insulin.gro", mol)
    ```

Reading resolves the format to a reader and the coding to a decoder; writing
resolves a writer and an encoder. Both then delegate to the selected handler.
"""

from __future__ import annotations

import os
from contextlib import ExitStack
from dataclasses import dataclass, field, replace
from typing import IO, TYPE_CHECKING, Any

from formats.config.logging import get_logger
from formats.identifiers import Coding, Format, IdentifierLike, as_name
from formats.inference import Candidates, infer_from_name, infer_from_stream
from formats.registry.store import get_registry
from formats.resolution import (
    resolve_coding,
    resolve_decoder,
    resolve_encoder,
    resolve_format,
    resolve_reader,
    resolve_writer,
)

if TYPE_CHECKING:
    from formats.config.logging import FormatsLogger
    from formats.registry.store import FormatRegistry

logger: FormatsLogger = get_logger(__name__)


@dataclass(frozen=True)
class Formatted:
    """A resource plus its specified or inferred format/coding.

    When ``format`` is set the state is *specified* and the guess lists are
    ignored. Otherwise ``format_guesses``/``coding_guesses`` hold the
    inference results.

    Attributes:
        resource (Any): Filename or binary stream.
        format (Format | None): Specified format.
        coding (Coding | None): Specified coding (only meaningful with ``format``).
        format_guesses (tuple[Format, ...]): Inferred format candidates.
        coding_guesses (tuple[Coding, ...]): Inferred coding candidates.
        registry (FormatRegistry | None): Registry used for inference and
            resolution; the default registry when None.
    """

    resource: Any
    format: Format | None = None
    coding: Coding | None = None
    format_guesses: tuple[Format, ...] = ()
    coding_guesses: tuple[Coding, ...] = ()
    registry: FormatRegistry | None = field(default=None, compare=False, repr=False)

    # --- state predicates -------------------------------------------------

    @property
    def is_specified(self) -> bool:
        """Whether the format was explicitly specified."""
        return self.format is not None

    @property
    def is_guessed(self) -> bool:
        """Whether the format was inferred from an extension or signature."""
        return self.format is None and len(self.format_guesses) > 0

    @property
    def is_unknown(self) -> bool:
        """Whether the format was neither specified nor inferred."""
        return self.format is None and len(self.format_guesses) == 0

    @property
    def is_ambiguous(self) -> bool:
        """Whether several formats were inferred."""
        return self.format is None and len(self.format_guesses) > 1

    # --- resolution -------------------------------------------------------

    @property
    def effective_registry(self) -> FormatRegistry:
        """The registry this resource resolves against."""
        return self.registry if self.registry is not None else get_registry()

    def resolve_format(self) -> Format:
        """Resolve the effective format (see `formats.resolution.resolve_format`)."""
        return resolve_format(self, registry=self.effective_registry)

    def resolve_coding(self) -> Coding | None:
        """Resolve the effective coding (see `formats.resolution.resolve_coding`)."""
        return resolve_coding(self, registry=self.effective_registry)

    def get_format(self) -> str:
        """Return the name of the effective format.

        Raises:
            UnknownFormat: If the format was neither specified nor inferred.
        """
        return self.resolve_format().name

    def get_coding(self) -> str | None:
        """Return the name of the effective coding, or None for no coding."""
        coding = self.resolve_coding()
        return None if coding is None else coding.name

    def describe(self) -> str:
        """Return a short human-readable summary of the state."""
        lines = [f"{type(self).__name__}: {self.resource_label}"]
        if self.format is None:
            if len(self.format_guesses) == 1:
                lines.append(f" inferred format: {self.format_guesses[0]}")
            elif self.format_guesses:
                lines.append(" inferred format possibilities:")
                lines.extend(f"  {g}" for g in self.format_guesses)
            else:
                lines.append(" unknown format")
            if len(self.coding_guesses) == 1:
                lines.append(f" inferred coding: {self.coding_guesses[0]}")
            elif self.coding_guesses:
                lines.append(" inferred coding possibilities:")
                lines.extend(f"  {g}" for g in self.coding_guesses)
        else:
            lines.append(f" specified format: {self.format}")
            if self.coding is not None:
                lines.append(f" specified coding: {self.coding}")
        return "\n".join(lines)

    @property
    def resource_label(self) -> str:
        """Display label of the wrapped resource."""
        return str(self.resource)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping of the state."""
        return {
            "resource": self.resource_label,
            "specified": self.is_specified,
            "format": None if self.format is None else self.format.name,
            "coding": None if self.coding is None else self.coding.name,
            "format_guesses": [g.name for g in self.format_guesses],
            "coding_guesses": [g.name for g in self.coding_guesses],
        }

    # --- I/O --------------------------------------------------------------

    def read(self, *args: Any, **kwargs: Any) -> Any:
        """Read a single value from the resource."""
        raise NotImplementedError

    def read_into(self, output: Any, *args: Any, **kwargs: Any) -> Any:
        """Read a single value from the resource into pre-allocated ``output``."""
        raise NotImplementedError

    def write(self, value: Any, *args: Any, **kwargs: Any) -> int | None:
        """Write ``value`` to the resource."""
        raise NotImplementedError


@dataclass(frozen=True)
class FormattedStream(Formatted):
    """A binary stream with format/coding information.

    The stream is owned by the caller; `close()` and the context manager
    protocol close it.
    """

    def _decoded(self, stack: ExitStack | None = None) -> tuple[Format, object, IO[bytes]]:
        registry = self.effective_registry
        fmt = self.resolve_format()
        reader = resolve_reader(fmt, registry=registry)
        coding = self.resolve_coding()
        stream: IO[bytes] = self.resource
        if coding is not None:
            decoder = resolve_decoder(coding, registry=registry)
            stream = decoder(stream)
            if stack is not None:
                stack.callback(stream.close)
        return fmt, reader, stream

    def read(self, *args: Any, **kwargs: Any) -> Any:
        """Read a single value from the stream.

        The format and coding are resolved, then the reader is called with the
        (decoded) stream. Extra arguments are passed to the reader.
        """
        fmt, reader, stream = self._decoded()
        logger.debug("Reading %s from %s", fmt, self.resource_label)
        return reader.read(fmt, stream, *args, **kwargs)  # type: ignore[attr-defined]

    def read_into(self, output: Any, *args: Any, **kwargs: Any) -> Any:
        """Read a single value from the stream into ``output``."""
        fmt, reader, stream = self._decoded()
        logger.debug("Reading %s in place from %s", fmt, self.resource_label)
        return reader.read_into(fmt, stream, output, *args, **kwargs)  # type: ignore[attr-defined]

    def write(self, value: Any, *args: Any, **kwargs: Any) -> int | None:
        """Write ``value`` to the stream.

        With a coding, the encoder wrapper is closed after writing so that it
        flushes; encoders must not close the stream they wrap.

        Returns:
            int | None: Number of bytes added to the stream, or None if the
                stream is not seekable.
        """
        registry = self.effective_registry
        fmt = self.resolve_format()
        writer = resolve_writer(fmt, registry=registry)
        coding = self.resolve_coding()
        stream: IO[bytes] = self.resource
        start = _position(stream)
        logger.debug("Writing %s to %s", fmt, self.resource_label)
        if coding is None:
            writer.write(fmt, stream, value, *args, **kwargs)  # type: ignore[attr-defined]
        else:
            encoder = resolve_encoder(coding, registry=registry)
            encoded = encoder(stream)
            try:
                writer.write(fmt, encoded, value, *args, **kwargs)  # type: ignore[attr-defined]
            finally:
                encoded.close()
        end = _position(stream)
        if start is None or end is None:
            return None
        return end - start

    def close(self) -> None:
        """Close the wrapped stream."""
        self.resource.close()

    def __enter__(self) -> FormattedStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def resource_label(self) -> str:
        """Display label: the stream's ``name`` when it has one."""
        name = getattr(self.resource, "name", None)
        if isinstance(name, (str, bytes, os.PathLike)):
            return os.fsdecode(name)
        return repr(self.resource)


@dataclass(frozen=True)
class FormattedPath(Formatted):
    """A filename with format/coding information."""

    def open(self, mode: str = "rb", **kwargs: Any) -> FormattedStream:
        """Open the file, carrying the format/coding state over to the stream.

        To re-infer from the stream's content, call `guess` on the result.

        Args:
            mode (str): Binary open mode.
            **kwargs (Any): Passed to `open`.

        Returns:
            FormattedStream: The opened stream with the same state.
        """
        if "b" not in mode:
            raise ValueError(f"Formatted resources are binary; got mode {mode!r}")
        stream = open(self.resource, mode, **kwargs)  # noqa: SIM115
        return FormattedStream(
            stream,
            self.format,
            self.coding,
            self.format_guesses,
            self.coding_guesses,
            registry=self.registry,
        )

    def read(self, *args: Any, **kwargs: Any) -> Any:
        """Open the file and read a single value from it."""
        with ExitStack() as stack:
            f = stack.enter_context(self.open("rb"))
            fmt, reader, stream = f._decoded(stack)
            logger.debug("Reading %s from %s", fmt, self.resource_label)
            return reader.read(fmt, stream, *args, **kwargs)  # type: ignore[attr-defined]

    def read_into(self, output: Any, *args: Any, **kwargs: Any) -> Any:
        """Open the file and read a single value from it into ``output``."""
        with ExitStack() as stack:
            f = stack.enter_context(self.open("rb"))
            fmt, reader, stream = f._decoded(stack)
            return reader.read_into(fmt, stream, output, *args, **kwargs)  # type: ignore[attr-defined]

    def write(self, value: Any, *args: Any, **kwargs: Any) -> int | None:
        """Create or truncate the file and write ``value`` to it."""
        with self.open("wb") as f:
            return f.write(value, *args, **kwargs)

    @property
    def resource_label(self) -> str:
        """Display label: the filename."""
        return os.fsdecode(self.resource)


def _position(stream: IO[bytes]) -> int | None:
    seekable = getattr(stream, "seekable", None)
    if callable(seekable) and seekable():
        return stream.tell()
    return None


def _is_path_like(resource: object) -> bool:
    return isinstance(resource, (str, os.PathLike))


def _from_candidates(
    cls: type[Formatted], resource: Any, candidates: Candidates, registry: FormatRegistry | None
) -> Formatted:
    return cls(resource, None, None, candidates.formats, candidates.codings, registry=registry)


def guess(resource: Any, *, registry: FormatRegistry | None = None) -> Formatted:
    """Infer the format/coding of a filename, binary stream or `Formatted` object.

    Filenames are inferred from their extension(s); streams from their first
    bytes (without consuming them). A `Formatted` object is inferred again
    from its resource, dropping any specified state.

    Args:
        resource (Any): Filename, path, binary stream, or `Formatted`.
        registry (FormatRegistry | None): Registry to use; for a `Formatted`,
            defaults to the one it carries.

    Returns:
        Formatted: A `FormattedPath` or `FormattedStream`.

    Raises:
        TypeError: If ``resource`` is none of the supported kinds.
        UnrewindableStream: If a stream cannot be inspected without consuming it.
    """
    if isinstance(resource, Formatted):
        reg = registry if registry is not None else resource.registry
        return guess_as(type(resource), resource.resource, registry=reg)
    if _is_path_like(resource):
        return guess_as(FormattedPath, resource, registry=registry)
    if callable(getattr(resource, "read", None)) or callable(getattr(resource, "write", None)):
        return guess_as(FormattedStream, resource, registry=registry)
    raise TypeError(f"Cannot guess the format of {type(resource).__name__} objects")


def guess_as(
    cls: type[Formatted], resource: Any, *, registry: FormatRegistry | None = None
) -> Formatted:
    """Infer candidates for ``resource`` and wrap it in ``cls``."""
    if issubclass(cls, FormattedPath):
        candidates = infer_from_name(resource, registry=registry)
    else:
        candidates = infer_from_stream(resource, registry=registry)
    return _from_candidates(cls, resource, candidates, registry)


def specify(
    resource: Any,
    format: IdentifierLike,
    coding: IdentifierLike | None = None,
    *,
    registry: FormatRegistry | None = None,
) -> Formatted:
    """Declare the format (and optionally the coding) of a resource.

    A specified format disables inference entirely, including coding
    inference: without ``coding`` the resource is treated as uncoded.

    Args:
        resource (Any): Filename, path, binary stream, or `Formatted`.
        format (IdentifierLike): Format name.
        coding (IdentifierLike | None): Coding name, if any.
        registry (FormatRegistry | None): Registry to use; for a `Formatted`,
            defaults to the one it carries.

    Returns:
        Formatted: A `FormattedPath` or `FormattedStream`.
    """
    fmt = Format(as_name(format))
    cod = None if coding is None else Coding(as_name(coding))
    if isinstance(resource, Formatted):
        reg = registry if registry is not None else resource.registry
        return replace(
            resource, format=fmt, coding=cod, format_guesses=(), coding_guesses=(), registry=reg
        )
    cls: type[Formatted] = FormattedPath if _is_path_like(resource) else FormattedStream
    return cls(resource, fmt, cod, registry=registry)


def formatted(resource: Any, *, registry: FormatRegistry | None = None) -> Formatted:
    """Return ``resource`` unchanged if it is `Formatted`, else `guess` it."""
    if isinstance(resource, Formatted):
        return resource
    return guess(resource, registry=registry)


def openf(resource: Any, mode: str = "rb", **kwargs: Any) -> FormattedStream:
    """Open a filename or `FormattedPath`, guessing format/coding if missing.

    Raises:
        TypeError: If ``resource`` is already a stream.
    """
    f = formatted(resource)
    if not isinstance(f, FormattedPath):
        raise TypeError(f"openf() needs a filename, got {type(f.resource).__name__}")
    return f.open(mode, **kwargs)


def readf(resource: Any, *args: Any, **kwargs: Any) -> Any:
    """Read a value from ``resource``, guessing format/coding if missing."""
    return formatted(resource).read(*args, **kwargs)


def readf_into(resource: Any, output: Any, *args: Any, **kwargs: Any) -> Any:
    """Read a value from ``resource`` into ``output``, guessing format/coding if missing."""
    return formatted(resource).read_into(output, *args, **kwargs)


def writef(resource: Any, value: Any, *args: Any, **kwargs: Any) -> int | None:
    """Write ``value`` to ``resource``, guessing format/coding if missing."""
    return formatted(resource).write(value, *args, **kwargs)
