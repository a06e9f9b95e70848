# topmark:header:start
#
#   project      : Formats
#   file         : inference.py
#   file_relpath : src/formats/inference.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Infer format and coding candidates from a filename or a stream prefix.

Both entry points return a [`Candidates`][formats.inference.Candidates] pair
``(formats, codings)``. Candidates keep registration order and are not
deduplicated across lookups: their count and order feed the ambiguity warning
and the "first guess" tie-break applied later by resolution.

Rules shared by both forms:
    * Bound names are partitioned into formats and codings using the registry's
      namespaces; names registered in neither are ignored.
    * Format takes precedence at the same level: when one lookup yields both
      format and coding candidates, the coding candidates are discarded.

Filename inference peels at most one coding layer: ``"myoglobin.gro.gz"``
yields coding ``gzip`` from ``.gz`` and then looks up ``.gro`` for formats only.
Byte inference does not peel: a compressed stream only reveals its outer coding.
"""

from __future__ import annotations

import os
from typing import IO, TYPE_CHECKING, NamedTuple

from formats.config.logging import get_logger
from formats.constants import MAX_SIGNATURE_SIZE
from formats.errors import UnrewindableStream
from formats.identifiers import Coding, Format
from formats.registry.store import get_registry, render_signature

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formats.config.logging import FormatsLogger
    from formats.registry.store import FormatRegistry

logger: FormatsLogger = get_logger(__name__)


class Candidates(NamedTuple):
    """Format and coding candidates, each in registration order."""

    formats: tuple[Format, ...] = ()
    codings: tuple[Coding, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Whether neither a format nor a coding was inferred."""
        return not self.formats and not self.codings


def _partition(
    names: Iterable[str], registry: FormatRegistry
) -> tuple[list[Format], list[Coding]]:
    """Split bound names into format and coding candidates."""
    formats: list[Format] = []
    codings: list[Coding] = []
    for name in names:
        if registry.is_coding(name):
            codings.append(Coding(name))
        elif registry.is_format(name):
            formats.append(Format(name))
        else:
            logger.trace("Ignoring %s: registered neither as format nor as coding", name)
    return formats, codings


def _split_extension(name: str) -> tuple[str, str]:
    """Split ``name`` into base and lowercased extension (``""`` if none)."""
    base, ext = os.path.splitext(name)
    return base, ext.lower()


def infer_from_name(
    name: str | os.PathLike[str], *, registry: FormatRegistry | None = None
) -> Candidates:
    """Infer candidates from a filename's extension(s).

    Args:
        name (str | os.PathLike[str]): Filename or path.
        registry (FormatRegistry | None): Registry to consult (default registry if None).

    Returns:
        Candidates: Format and coding candidates.

    Example:
        ```python
        infer_from_name("kitten.png.gz")
        # Candidates(formats=(Format("image/png"),), codings=(Coding("application/gzip"),))
        ```
    """
    reg: FormatRegistry = registry if registry is not None else get_registry()
    base, ext = _split_extension(os.fspath(name))

    formats, codings = _partition(reg.lookup_extension(ext), reg)
    if formats and codings:
        logger.debug("%s: %s claimed by formats and codings, ignoring codings", name, ext)
        codings = []

    if codings:
        _, inner_ext = _split_extension(base)
        inner_formats, _ = _partition(reg.lookup_extension(inner_ext), reg)
        formats.extend(inner_formats)

    logger.trace("Inferred from name %s: formats=%s codings=%s", name, formats, codings)
    return Candidates(tuple(formats), tuple(codings))


def infer_from_bytes(prefix: bytes, *, registry: FormatRegistry | None = None) -> Candidates:
    """Infer candidates from the leading bytes of a resource.

    Only the first 512 bytes of ``prefix`` are considered. A signature matches
    when ``prefix`` starts with it.

    Args:
        prefix (bytes): Leading bytes of the resource.
        registry (FormatRegistry | None): Registry to consult (default registry if None).

    Returns:
        Candidates: Format and coding candidates.
    """
    reg: FormatRegistry = registry if registry is not None else get_registry()
    head = bytes(prefix[:MAX_SIGNATURE_SIZE])

    formats: list[Format] = []
    codings: list[Coding] = []
    if head:
        for signature, names in reg.iter_signatures():
            if len(head) >= len(signature) and head.startswith(signature):
                logger.trace("Signature %s matched", render_signature(signature))
                matched_formats, matched_codings = _partition(names, reg)
                formats.extend(matched_formats)
                codings.extend(matched_codings)

    if formats and codings:
        logger.debug("Signatures matched formats and codings, ignoring codings")
        codings = []

    logger.trace("Inferred from bytes: formats=%s codings=%s", formats, codings)
    return Candidates(tuple(formats), tuple(codings))


def read_prefix(stream: IO[bytes], size: int = MAX_SIGNATURE_SIZE) -> bytes:
    """Read up to ``size`` leading bytes without moving the stream position.

    Seekable streams are read then sought back to their original position.
    Non-seekable buffered streams are inspected with ``peek()``.

    Args:
        stream (IO[bytes]): Binary stream.
        size (int): Maximum number of bytes to return.

    Returns:
        bytes: Up to ``size`` bytes, starting at the current position.

    Raises:
        UnrewindableStream: If the stream supports neither seeking nor peeking.
        TypeError: If the stream yields text instead of bytes.
    """
    seekable = getattr(stream, "seekable", None)
    if callable(seekable) and seekable():
        position = stream.tell()
        chunks: list[bytes] = []
        remaining = size
        try:
            while remaining > 0:
                chunk = stream.read(remaining)
                if not chunk:
                    break
                if isinstance(chunk, str):
                    raise TypeError("byte inference requires a binary stream")
                chunks.append(chunk)
                remaining -= len(chunk)
        finally:
            stream.seek(position)
        return b"".join(chunks)

    peek = getattr(stream, "peek", None)
    if callable(peek):
        data = peek(size)
        if isinstance(data, str):
            raise TypeError("byte inference requires a binary stream")
        return bytes(data[:size])

    raise UnrewindableStream(stream)


def infer_from_stream(
    stream: IO[bytes], *, registry: FormatRegistry | None = None
) -> Candidates:
    """Infer candidates from a stream's leading bytes, leaving its position unchanged.

    Raises:
        UnrewindableStream: If the stream cannot be inspected without consuming it.
    """
    return infer_from_bytes(read_prefix(stream), registry=registry)
