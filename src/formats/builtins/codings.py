# topmark:header:start
#
#   project      : Formats
#   file         : codings.py
#   file_relpath : src/formats/builtins/codings.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Compression codings backed by the standard library.

Each coding has a decoder and an encoder factory. The wrappers returned by the
factories never close the stream they wrap; closing an encoder wrapper writes
the compressed trailer.

| Coding                | Extension | Signature           |
| --------------------- | --------- | ------------------- |
| `application/gzip`    | `.gz`     | `1f 8b`             |
| `application/x-bzip2` | `.bz2`    | `BZh`               |
| `application/x-xz`    | `.xz`     | `fd 37 7a 58 5a 00` |
"""

from __future__ import annotations

import bz2
import gzip
import lzma
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Callable

from formats.config.logging import get_logger
from formats.handlers import CodecRole

if TYPE_CHECKING:
    from formats.config.logging import FormatsLogger
    from formats.registry.store import FormatRegistry

logger: FormatsLogger = get_logger(__name__)


def gzip_decoder(stream: IO[bytes]) -> IO[bytes]:
    """Wrap a readable stream of gzip data."""
    return gzip.GzipFile(fileobj=stream, mode="rb")


def gzip_encoder(stream: IO[bytes]) -> IO[bytes]:
    """Wrap a writable stream with gzip compression."""
    return gzip.GzipFile(fileobj=stream, mode="wb")


def bzip2_decoder(stream: IO[bytes]) -> IO[bytes]:
    """Wrap a readable stream of bzip2 data."""
    return bz2.BZ2File(stream, mode="rb")


def bzip2_encoder(stream: IO[bytes]) -> IO[bytes]:
    """Wrap a writable stream with bzip2 compression."""
    return bz2.BZ2File(stream, mode="wb")


def xz_decoder(stream: IO[bytes]) -> IO[bytes]:
    """Wrap a readable stream of xz data."""
    return lzma.LZMAFile(stream, mode="rb")


def xz_encoder(stream: IO[bytes]) -> IO[bytes]:
    """Wrap a writable stream with xz compression."""
    return lzma.LZMAFile(stream, mode="wb", format=lzma.FORMAT_XZ)


@dataclass(frozen=True)
class BuiltinCoding:
    """Static description of a bundled coding."""

    name: str
    extension: str
    signature: bytes
    decoder: Callable[[IO[bytes]], IO[bytes]]
    encoder: Callable[[IO[bytes]], IO[bytes]]


BUILTIN_CODINGS: tuple[BuiltinCoding, ...] = (
    BuiltinCoding("application/gzip", ".gz", b"\x1f\x8b", gzip_decoder, gzip_encoder),
    BuiltinCoding("application/x-bzip2", ".bz2", b"BZh", bzip2_decoder, bzip2_encoder),
    BuiltinCoding(
        "application/x-xz", ".xz", bytes.fromhex("fd377a585a00"), xz_decoder, xz_encoder
    ),
)


def register_builtin_codings(registry: FormatRegistry) -> None:
    """Register the bundled codings, their extensions, signatures and codecs.

    Registering into a registry that already holds them is a no-op apart from
    `REPLACED_CODEC` diagnostics when a different codec was set.

    Args:
        registry (FormatRegistry): Registry to populate.
    """
    for coding in BUILTIN_CODINGS:
        registry.add_coding(coding.name)
        registry.add_extension(coding.name, coding.extension)
        registry.add_signature(coding.name, coding.signature)
        if registry.codec(CodecRole.DECODER, coding.name) is not coding.decoder:
            registry.set_decoder(coding.name, coding.decoder)
        if registry.codec(CodecRole.ENCODER, coding.name) is not coding.encoder:
            registry.set_encoder(coding.name, coding.encoder)
    logger.debug("Registered %d builtin codings", len(BUILTIN_CODINGS))
