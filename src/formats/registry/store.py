# topmark:header:start
#
#   project      : Formats
#   file         : store.py
#   file_relpath : src/formats/registry/store.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Registry of known formats, codings, extensions, signatures, handlers and codecs.

A [`FormatRegistry`][formats.registry.store.FormatRegistry] holds every table
that inference and resolution consult. Registrants (plugins, declaration
files, application code) populate it during a sequential bootstrap phase;
afterwards inference and resolution only read from it.

Notes:
    * Repeat registrations of the same association are silent no-ops.
    * Conflicts between independent registrants (an extension or signature
      bound to several identifiers, a format with several readers) are not
      errors: they are reported to [`FormatRegistry.diagnostics`][].
    * Programming mistakes (namespace clashes, duplicate handler objects,
      malformed extensions or signatures) raise a
      [`FormatsError`][formats.errors.FormatsError] subclass.
    * There is no internal locking. Callers that register from several
      threads must serialize registration themselves.
"""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Union

from formats.config.logging import get_logger
from formats.constants import EXTENSION_DELIMITER, MAX_SIGNATURE_SIZE
from formats.diagnostic import DiagnosticKind, DiagnosticLog
from formats.errors import (
    DuplicateFavorite,
    DuplicateHandler,
    InvalidExtension,
    InvalidFavorite,
    InvalidSignature,
    NamespaceConflict,
)
from formats.handlers import CodecFactory, CodecRole, HandlerRole, handler_name
from formats.identifiers import Identifier, IdentifierLike, Namespace, as_name

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from formats.config.logging import FormatsLogger

logger: FormatsLogger = get_logger(__name__)

SignatureLike = Union[bytes, bytearray, memoryview, str, Iterable[int]]


def normalize_extension(extension: str) -> str:
    """Validate and lowercase a filename extension.

    Args:
        extension (str): Extension including its leading dot, e.g. ``".PNG"``.

    Returns:
        str: The lowercased extension.

    Raises:
        InvalidExtension: If ``extension`` does not start with ``"."``.
    """
    if not isinstance(extension, str) or not extension.startswith(EXTENSION_DELIMITER):
        raise InvalidExtension(str(extension))
    return extension.lower()


def normalize_signature(signature: SignatureLike) -> bytes:
    """Validate a byte signature and return it as immutable ``bytes``.

    Strings are encoded as UTF-8; sequences of ints are converted byte-wise.

    Args:
        signature (SignatureLike): Raw signature.

    Returns:
        bytes: The signature.

    Raises:
        InvalidSignature: If the signature is empty or longer than 512 bytes.
    """
    if isinstance(signature, str):
        data = signature.encode("utf-8")
    elif isinstance(signature, int):
        raise InvalidSignature("signature must be a byte sequence, not an int", b"")
    else:
        try:
            data = bytes(signature)
        except (TypeError, ValueError) as exc:
            raise InvalidSignature(f"signature is not a byte sequence: {exc}", b"") from exc
    if not data:
        raise InvalidSignature("signature cannot be empty", data)
    if len(data) > MAX_SIGNATURE_SIZE:
        raise InvalidSignature(f"maximum signature size is {MAX_SIGNATURE_SIZE} bytes", data)
    return data


def render_signature(signature: bytes) -> str:
    """Render a signature for humans: printable ASCII as text, otherwise hex."""
    if all(0x20 <= b < 0x7F for b in signature):
        return repr(signature.decode("ascii"))
    return signature.hex(" ")


class HandlerTable:
    """Readers or writers per format, with per-format and global favorites.

    One table exists per [`HandlerRole`][formats.handlers.HandlerRole]. The
    resolution engine reads it through `candidates()`, `favorite()` and
    `global_favorites`.
    """

    def __init__(self, role: HandlerRole) -> None:
        self.role: HandlerRole = role
        self._available: dict[str, list[object]] = {}
        self._favorites: dict[str, object] = {}
        self._global_favorites: list[object] = []

    # --- queries ----------------------------------------------------------

    def candidates(self, format_name: str) -> tuple[object, ...]:
        """Return the handlers registered for ``format_name`` in registration order."""
        return tuple(self._available.get(format_name, ()))

    def favorite(self, format_name: str) -> object | None:
        """Return the per-format favorite for ``format_name``, if any."""
        return self._favorites.get(format_name)

    @property
    def global_favorites(self) -> tuple[object, ...]:
        """Handlers preferred for every format they can service."""
        return tuple(self._global_favorites)

    # --- mutation ---------------------------------------------------------

    def add(self, format_name: str, handler: object, diagnostics: DiagnosticLog) -> None:
        role = self.role.value
        handlers = self._available.setdefault(format_name, [])
        if handler in handlers:
            raise DuplicateHandler(role, handler, format_name)
        handlers.append(handler)
        logger.debug("Registered %s %s for %s", role, handler_name(handler), format_name)
        if len(handlers) > 1:
            diagnostics.add_info(
                DiagnosticKind.MULTIPLE_HANDLERS,
                format_name,
                f"{format_name} has multiple registered {role}s",
                candidates=[handler_name(h) for h in handlers],
            )

    def remove(self, format_name: str, handler: object) -> bool:
        handlers = self._available.get(format_name)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._available[format_name]
        logger.debug(
            "Removed %s %s from %s", self.role.value, handler_name(handler), format_name
        )
        return True

    def prefer(self, format_name: str, handler: object, diagnostics: DiagnosticLog) -> None:
        role = self.role.value
        if handler not in self._available.get(format_name, ()):
            raise InvalidFavorite(role, handler, format_name)
        previous = self._favorites.get(format_name)
        if previous is not None:
            diagnostics.add_warning(
                DiagnosticKind.REPLACED_FAVORITE,
                format_name,
                f"replacing preferred {role} for {format_name}",
                choice=handler_name(handler),
                candidates=[handler_name(previous), handler_name(handler)],
            )
        self._favorites[format_name] = handler

    def prefer_globally(self, handler: object) -> None:
        if handler in self._global_favorites:
            raise DuplicateFavorite(self.role.value, handler)
        self._global_favorites.append(handler)
        logger.debug("Globally preferred %s: %s", self.role.value, handler_name(handler))

    # --- lifecycle --------------------------------------------------------

    def copy(self) -> HandlerTable:
        other = HandlerTable(self.role)
        other._available = {k: list(v) for k, v in self._available.items()}
        other._favorites = dict(self._favorites)
        other._global_favorites = list(self._global_favorites)
        return other

    def clear(self) -> None:
        self._available.clear()
        self._favorites.clear()
        self._global_favorites.clear()

    def merge(self, other: HandlerTable) -> None:
        for format_name, handlers in other._available.items():
            _extend_unique(self._available.setdefault(format_name, []), handlers)
        self._favorites.update(other._favorites)
        _extend_unique(self._global_favorites, other._global_favorites)


def _extend_unique(target: list, items: Iterable[object]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


@dataclass(frozen=True)
class IdentifierMeta:
    """Stable, serializable metadata about a registered format or coding."""

    name: str
    namespace: Namespace
    extensions: tuple[str, ...] = ()
    signatures: tuple[bytes, ...] = ()
    readers: tuple[str, ...] = ()
    writers: tuple[str, ...] = ()
    favorite_reader: str | None = None
    favorite_writer: str | None = None
    decoder: str | None = None
    encoder: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping of this entry."""
        return {
            "name": self.name,
            "namespace": self.namespace.value,
            "extensions": list(self.extensions),
            "signatures": [s.hex() for s in self.signatures],
            "readers": list(self.readers),
            "writers": list(self.writers),
            "favorite_reader": self.favorite_reader,
            "favorite_writer": self.favorite_writer,
            "decoder": self.decoder,
            "encoder": self.encoder,
        }


class FormatRegistry:
    """Mutable tables of formats, codings and their associations.

    Attributes:
        diagnostics (DiagnosticLog): Sink receiving every ambiguity, override
            and replacement observed during registration or resolution.

    Example:
        ```python
        registry = FormatRegistry()
        registry.add_format("image/png")
        registry.add_extension("image/png", ".png")
        registry.add_signature("image/png", b"\\x89PNG\\r\\n\\x1a\\n")
        ```
    """

    def __init__(self) -> None:
        self._names: dict[Namespace, dict[str, None]] = {
            Namespace.FORMAT: {},
            Namespace.CODING: {},
        }
        self._extensions: dict[str, list[str]] = {}
        self._signatures: dict[bytes, list[str]] = {}
        self._handlers: dict[HandlerRole, HandlerTable] = {
            role: HandlerTable(role) for role in HandlerRole
        }
        self._codecs: dict[CodecRole, dict[str, CodecFactory]] = {
            CodecRole.DECODER: {},
            CodecRole.ENCODER: {},
        }
        self.diagnostics: DiagnosticLog = DiagnosticLog()

    def __repr__(self) -> str:
        return (
            f"<FormatRegistry formats={len(self._names[Namespace.FORMAT])} "
            f"codings={len(self._names[Namespace.CODING])}>"
        )

    # --- identifiers ------------------------------------------------------

    def _add_name(self, namespace: Namespace, value: IdentifierLike) -> str:
        if isinstance(value, Identifier) and value.namespace is not namespace:
            raise TypeError(f"{value!r} cannot be registered as a data {namespace.value}")
        name = as_name(value)
        if name in self._names[namespace.other()]:
            raise NamespaceConflict(name, namespace.other().value)
        if name in self._names[namespace]:
            logger.debug("%s already registered as a data %s", name, namespace.value)
        else:
            self._names[namespace][name] = None
            logger.debug("Registered data %s %s", namespace.value, name)
        return name

    def add_format(self, name: IdentifierLike) -> str:
        """Register ``name`` as a data format.

        Args:
            name (IdentifierLike): Format name, e.g. ``"image/png"``.

        Returns:
            str: The registered name.

        Raises:
            NamespaceConflict: If ``name`` is already registered as a coding.
            TypeError: If ``name`` is a typed `Coding`.
        """
        return self._add_name(Namespace.FORMAT, name)

    def add_coding(self, name: IdentifierLike) -> str:
        """Register ``name`` as a data coding.

        Raises:
            NamespaceConflict: If ``name`` is already registered as a format.
            TypeError: If ``name`` is a typed `Format`.
        """
        return self._add_name(Namespace.CODING, name)

    def namespace_of(self, name: IdentifierLike) -> Namespace | None:
        """Return the namespace ``name`` is registered in, or None."""
        key = as_name(name)
        for namespace, names in self._names.items():
            if key in names:
                return namespace
        return None

    def is_format(self, name: IdentifierLike) -> bool:
        """Return True if ``name`` is a registered format."""
        return as_name(name) in self._names[Namespace.FORMAT]

    def is_coding(self, name: IdentifierLike) -> bool:
        """Return True if ``name`` is a registered coding."""
        return as_name(name) in self._names[Namespace.CODING]

    @property
    def formats(self) -> tuple[str, ...]:
        """Registered formats, in registration order."""
        return tuple(self._names[Namespace.FORMAT])

    @property
    def codings(self) -> tuple[str, ...]:
        """Registered codings, in registration order."""
        return tuple(self._names[Namespace.CODING])

    # --- extensions and signatures ----------------------------------------

    def add_extension(self, name: IdentifierLike, extension: str) -> None:
        """Bind a filename ``extension`` to a format or coding.

        Args:
            name (IdentifierLike): Format or coding name.
            extension (str): Extension including its leading dot; matched case-insensitively.

        Raises:
            InvalidExtension: If ``extension`` does not start with ``"."``.
        """
        key = as_name(name)
        ext = normalize_extension(extension)
        names = self._extensions.setdefault(ext, [])
        if key in names:
            logger.debug("extension %s already registered for %s", ext, key)
            return
        names.append(key)
        if len(names) > 1:
            self.diagnostics.add_warning(
                DiagnosticKind.AMBIGUOUS_EXTENSION,
                ext,
                f"extension {ext} registered for multiple formats",
                candidates=names,
            )

    def add_signature(self, name: IdentifierLike, signature: SignatureLike) -> None:
        """Bind a leading-bytes ``signature`` (1 to 512 bytes) to a format or coding.

        Raises:
            InvalidSignature: If the signature is empty or too long.
        """
        key = as_name(name)
        sig = normalize_signature(signature)
        names = self._signatures.setdefault(sig, [])
        if key in names:
            logger.debug("signature %s already registered for %s", render_signature(sig), key)
            return
        names.append(key)
        if len(names) > 1:
            self.diagnostics.add_warning(
                DiagnosticKind.AMBIGUOUS_SIGNATURE,
                render_signature(sig),
                f"signature {render_signature(sig)} registered for multiple formats",
                candidates=names,
            )

    @property
    def extensions(self) -> Mapping[str, tuple[str, ...]]:
        """Read-only view of extension -> identifier names (registration order)."""
        return MappingProxyType({k: tuple(v) for k, v in self._extensions.items()})

    @property
    def signatures(self) -> Mapping[bytes, tuple[str, ...]]:
        """Read-only view of signature -> identifier names (registration order)."""
        return MappingProxyType({k: tuple(v) for k, v in self._signatures.items()})

    def lookup_extension(self, extension: str) -> tuple[str, ...]:
        """Return the names bound to ``extension`` (case-insensitive), or ``()``."""
        return tuple(self._extensions.get(extension.lower(), ()))

    def iter_signatures(self) -> Iterator[tuple[bytes, tuple[str, ...]]]:
        """Iterate ``(signature, names)`` pairs in registration order."""
        for sig, names in self._signatures.items():
            yield sig, tuple(names)

    # --- handlers ---------------------------------------------------------

    def handlers(self, role: HandlerRole) -> HandlerTable:
        """Return the handler table for ``role`` (read through its query methods)."""
        return self._handlers[role]

    def readers(self, format: IdentifierLike) -> tuple[object, ...]:
        """Readers registered for ``format``, in registration order."""
        return self._handlers[HandlerRole.READER].candidates(as_name(format))

    def writers(self, format: IdentifierLike) -> tuple[object, ...]:
        """Writers registered for ``format``, in registration order."""
        return self._handlers[HandlerRole.WRITER].candidates(as_name(format))

    def favorite_reader(self, format: IdentifierLike) -> object | None:
        """The per-format preferred reader for ``format``, or None."""
        return self._handlers[HandlerRole.READER].favorite(as_name(format))

    def favorite_writer(self, format: IdentifierLike) -> object | None:
        """The per-format preferred writer for ``format``, or None."""
        return self._handlers[HandlerRole.WRITER].favorite(as_name(format))

    @property
    def global_readers(self) -> tuple[object, ...]:
        """Globally preferred readers, in declaration order."""
        return self._handlers[HandlerRole.READER].global_favorites

    @property
    def global_writers(self) -> tuple[object, ...]:
        """Globally preferred writers, in declaration order."""
        return self._handlers[HandlerRole.WRITER].global_favorites

    def add_reader(self, format: IdentifierLike, reader: object) -> None:
        """Register ``reader`` for ``format``.

        Raises:
            DuplicateHandler: If ``reader`` is already registered for ``format``.
        """
        self._handlers[HandlerRole.READER].add(as_name(format), reader, self.diagnostics)

    def add_writer(self, format: IdentifierLike, writer: object) -> None:
        """Register ``writer`` for ``format``.

        Raises:
            DuplicateHandler: If ``writer`` is already registered for ``format``.
        """
        self._handlers[HandlerRole.WRITER].add(as_name(format), writer, self.diagnostics)

    def remove_reader(self, format: IdentifierLike, reader: object) -> bool:
        """Unregister ``reader`` from ``format``; favorites are left untouched.

        Returns:
            bool: True if the reader was registered and has been removed.
        """
        return self._handlers[HandlerRole.READER].remove(as_name(format), reader)

    def remove_writer(self, format: IdentifierLike, writer: object) -> bool:
        """Unregister ``writer`` from ``format``; favorites are left untouched."""
        return self._handlers[HandlerRole.WRITER].remove(as_name(format), writer)

    def prefer_reader(self, reader: object, format: IdentifierLike | None = None) -> None:
        """Mark ``reader`` as the preferred reader.

        With ``format``, ``reader`` becomes the favorite for that format only and
        must already be registered for it. Without ``format``, ``reader`` becomes
        a global favorite, used for every format it can read.

        Raises:
            InvalidFavorite: If ``reader`` is not registered for ``format``.
            DuplicateFavorite: If ``reader`` is already globally preferred.
        """
        table = self._handlers[HandlerRole.READER]
        if format is None:
            table.prefer_globally(reader)
        else:
            table.prefer(as_name(format), reader, self.diagnostics)

    def prefer_writer(self, writer: object, format: IdentifierLike | None = None) -> None:
        """Mark ``writer`` as the preferred writer (see `prefer_reader`)."""
        table = self._handlers[HandlerRole.WRITER]
        if format is None:
            table.prefer_globally(writer)
        else:
            table.prefer(as_name(format), writer, self.diagnostics)

    # --- codecs -----------------------------------------------------------

    def _set_codec(self, role: CodecRole, coding: IdentifierLike, factory: CodecFactory) -> None:
        name = as_name(coding)
        table = self._codecs[role]
        previous = table.get(name)
        if previous is not None:
            self.diagnostics.add_warning(
                DiagnosticKind.REPLACED_CODEC,
                name,
                f"replacing {role.value} for {name}",
                choice=handler_name(factory),
                candidates=[handler_name(previous), handler_name(factory)],
            )
        table[name] = factory

    def set_decoder(self, coding: IdentifierLike, decoder: CodecFactory) -> None:
        """Set the decoder factory for ``coding`` (replacing any previous one)."""
        self._set_codec(CodecRole.DECODER, coding, decoder)

    def set_encoder(self, coding: IdentifierLike, encoder: CodecFactory) -> None:
        """Set the encoder factory for ``coding`` (replacing any previous one)."""
        self._set_codec(CodecRole.ENCODER, coding, encoder)

    def codec(self, role: CodecRole, coding: IdentifierLike) -> CodecFactory | None:
        """Return the codec factory for ``coding``, or None."""
        return self._codecs[role].get(as_name(coding))

    @property
    def decoders(self) -> Mapping[str, CodecFactory]:
        """Read-only view of coding -> decoder factory."""
        return MappingProxyType(dict(self._codecs[CodecRole.DECODER]))

    @property
    def encoders(self) -> Mapping[str, CodecFactory]:
        """Read-only view of coding -> encoder factory."""
        return MappingProxyType(dict(self._codecs[CodecRole.ENCODER]))

    # --- introspection ----------------------------------------------------

    def iter_meta(self) -> Iterator[IdentifierMeta]:
        """Iterate over metadata for every registered format, then every coding.

        Yields:
            IdentifierMeta: Serializable metadata about each identifier.
        """
        readers = self._handlers[HandlerRole.READER]
        writers = self._handlers[HandlerRole.WRITER]
        for namespace in (Namespace.FORMAT, Namespace.CODING):
            for name in self._names[namespace]:
                fav_r = readers.favorite(name)
                fav_w = writers.favorite(name)
                dec = self._codecs[CodecRole.DECODER].get(name)
                enc = self._codecs[CodecRole.ENCODER].get(name)
                yield IdentifierMeta(
                    name=name,
                    namespace=namespace,
                    extensions=tuple(e for e, ns in self._extensions.items() if name in ns),
                    signatures=tuple(s for s, ns in self._signatures.items() if name in ns),
                    readers=tuple(handler_name(h) for h in readers.candidates(name)),
                    writers=tuple(handler_name(h) for h in writers.candidates(name)),
                    favorite_reader=handler_name(fav_r) if fav_r is not None else None,
                    favorite_writer=handler_name(fav_w) if fav_w is not None else None,
                    decoder=handler_name(dec) if dec is not None else None,
                    encoder=handler_name(enc) if enc is not None else None,
                )

    # --- lifecycle --------------------------------------------------------

    def copy(self) -> FormatRegistry:
        """Return an independent copy of all tables.

        Handlers and codec factories are shared, not copied. The copy starts
        with an empty diagnostics log.
        """
        other = FormatRegistry()
        other._names = {ns: dict(names) for ns, names in self._names.items()}
        other._extensions = {k: list(v) for k, v in self._extensions.items()}
        other._signatures = {k: list(v) for k, v in self._signatures.items()}
        other._handlers = {role: table.copy() for role, table in self._handlers.items()}
        other._codecs = {role: dict(table) for role, table in self._codecs.items()}
        return other

    def clear(self) -> None:
        """Empty every table (the diagnostics log is kept)."""
        for names in self._names.values():
            names.clear()
        self._extensions.clear()
        self._signatures.clear()
        for table in self._handlers.values():
            table.clear()
        for codecs in self._codecs.values():
            codecs.clear()

    def merge(self, other: FormatRegistry) -> None:
        """Merge ``other``'s tables into this registry.

        Identifier sets are united; per-extension, per-signature and per-format
        handler lists are united preserving order (this registry's entries
        first); favorite and codec slots are taken from ``other``; global
        favorites are appended without duplicates.

        Raises:
            NamespaceConflict: If a name is a format in one registry and a coding
                in the other. Nothing is merged in that case.
        """
        for namespace in (Namespace.FORMAT, Namespace.CODING):
            for name in other._names[namespace]:
                if name in self._names[namespace.other()]:
                    raise NamespaceConflict(name, namespace.other().value)
        for namespace, names in other._names.items():
            self._names[namespace].update(names)
        for ext, names in other._extensions.items():
            _extend_unique(self._extensions.setdefault(ext, []), names)
        for sig, names in other._signatures.items():
            _extend_unique(self._signatures.setdefault(sig, []), names)
        for role, table in other._handlers.items():
            self._handlers[role].merge(table)
        for role, codecs in other._codecs.items():
            self._codecs[role].update(codecs)

    def restore(self, snapshot: FormatRegistry) -> None:
        """Replace all tables with the content of ``snapshot``."""
        self.clear()
        self.merge(snapshot)

    @contextmanager
    def isolated(self, *, keep: bool = False) -> Iterator[FormatRegistry]:
        """Run a block against an empty registry, then bring the previous tables back.

        By default the previous tables are restored exactly: entries registered
        inside the block are discarded, and so are the diagnostics they emitted.
        With ``keep=True`` a block that completes has the previous tables merged
        back on top of its own (block entries first, favorite and codec slots
        from the previous tables), and its diagnostics are kept. A block that
        raises is always rolled back. Not reentrant across threads.

        Args:
            keep (bool): Keep what the block registered.

        Yields:
            FormatRegistry: This registry, emptied.

        Raises:
            NamespaceConflict: With ``keep=True``, if the block registered as a
                format a name that was a coding before the block, or the reverse.
                The previous tables are restored exactly in that case.
        """
        snapshot = self.copy()
        recorded = self.diagnostics.freeze()
        self.clear()
        try:
            yield self
        except BaseException:
            self.restore(snapshot)
            self.diagnostics.reset_to(recorded)
            raise
        if not keep:
            self.restore(snapshot)
            self.diagnostics.reset_to(recorded)
            return
        try:
            self.merge(snapshot)
        except NamespaceConflict:
            self.restore(snapshot)
            self.diagnostics.reset_to(recorded)
            raise


_default_registry = FormatRegistry()


def get_registry() -> FormatRegistry:
    """Return the process-wide default registry."""
    return _default_registry
