# topmark:header:start
#
#   project      : Formats
#   file         : resolution.py
#   file_relpath : src/formats/resolution.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Collapse candidates to one format/coding and pick one handler or codec.

Format and coding resolution operate on a resource state (anything shaped like
[`ResourceState`][formats.resolution.ResourceState]); handler and codec
resolution operate on a resolved identifier. Every function here is read-only
with respect to the registry; ambiguity is reported to the registry's
diagnostics log and never raised.

Handler selection, in order:
    1. No handler registered for the format: `NoHandlerRegistered`.
    2. Several global favorites can service the format:
       `ConflictingGlobalFavorites`.
    3. Exactly one applicable global favorite: use it, warning if a
       per-format favorite is also declared.
    4. Otherwise the per-format favorite (which must still be registered,
       else `InvalidFavorite`).
    5. Otherwise the first handler in registration order, warning when there
       are several.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from formats.config.logging import get_logger
from formats.diagnostic import DiagnosticKind
from formats.errors import (
    ConflictingGlobalFavorites,
    InvalidFavorite,
    NoCodecRegistered,
    NoHandlerRegistered,
    UnknownFormat,
)
from formats.handlers import CodecFactory, CodecRole, HandlerRole, handler_name
from formats.identifiers import IdentifierLike, as_name
from formats.registry.store import get_registry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from formats.config.logging import FormatsLogger
    from formats.diagnostic import DiagnosticLog
    from formats.identifiers import Coding, Format
    from formats.registry.store import FormatRegistry

logger: FormatsLogger = get_logger(__name__)


class ResourceState(Protocol):
    """What resolution needs to know about a resource.

    Attributes:
        resource: The wrapped resource (used in messages only).
        format: Specified format, or None when it is to be inferred.
        coding: Specified coding, or None.
        format_guesses: Inferred format candidates, in registration order.
        coding_guesses: Inferred coding candidates, in registration order.
    """

    @property
    def resource(self) -> object: ...

    @property
    def format(self) -> Format | None: ...

    @property
    def coding(self) -> Coding | None: ...

    @property
    def format_guesses(self) -> Sequence[Format]: ...

    @property
    def coding_guesses(self) -> Sequence[Coding]: ...


def _registry(registry: FormatRegistry | None) -> FormatRegistry:
    return registry if registry is not None else get_registry()


def resolve_format(
    state: ResourceState,
    *,
    registry: FormatRegistry | None = None,
    diagnostics: DiagnosticLog | None = None,
) -> Format:
    """Return the effective format of ``state``.

    A specified format always wins. Otherwise the first guess is used, with an
    `AMBIGUOUS_FORMAT` warning when there are several.

    Args:
        state (ResourceState): Resource state to resolve.
        registry (FormatRegistry | None): Registry whose diagnostics log receives
            warnings (default registry if None).
        diagnostics (DiagnosticLog | None): Explicit sink overriding the registry's.

    Returns:
        Format: The resolved format.

    Raises:
        UnknownFormat: If no format was specified and none was inferred.
    """
    if state.format is not None:
        return state.format
    guesses = state.format_guesses
    if not guesses:
        raise UnknownFormat(state.resource)
    chosen = guesses[0]
    if len(guesses) > 1:
        sink = diagnostics if diagnostics is not None else _registry(registry).diagnostics
        sink.add_warning(
            DiagnosticKind.AMBIGUOUS_FORMAT,
            str(state.resource),
            f"{state.resource}: ambiguous format, assuming {chosen}",
            choice=chosen.name,
            candidates=[g.name for g in guesses],
        )
    return chosen


def resolve_coding(
    state: ResourceState,
    *,
    registry: FormatRegistry | None = None,
    diagnostics: DiagnosticLog | None = None,
) -> Coding | None:
    """Return the effective coding of ``state``, or None for no coding.

    Specifying a format is a complete manual override: the specified coding
    (possibly None) is returned and coding guesses are never consulted.
    Otherwise the first coding guess is used, with an `AMBIGUOUS_CODING`
    warning when there are several.
    """
    if state.format is not None:
        return state.coding
    guesses = state.coding_guesses
    if not guesses:
        return None
    chosen = guesses[0]
    if len(guesses) > 1:
        sink = diagnostics if diagnostics is not None else _registry(registry).diagnostics
        sink.add_warning(
            DiagnosticKind.AMBIGUOUS_CODING,
            str(state.resource),
            f"{state.resource}: ambiguous coding, assuming {chosen}",
            choice=chosen.name,
            candidates=[g.name for g in guesses],
        )
    return chosen


def resolve_handler(
    role: HandlerRole,
    format: IdentifierLike,
    *,
    registry: FormatRegistry | None = None,
) -> object:
    """Pick the single reader or writer servicing ``format``.

    Args:
        role (HandlerRole): Reader or writer.
        format (IdentifierLike): Resolved format.
        registry (FormatRegistry | None): Registry to consult (default registry if None).

    Returns:
        object: The selected handler.

    Raises:
        NoHandlerRegistered: If no handler of ``role`` is registered for ``format``.
        ConflictingGlobalFavorites: If several global favorites apply.
        InvalidFavorite: If the per-format favorite is no longer registered.
    """
    reg = _registry(registry)
    name = as_name(format)
    thing = role.value
    table = reg.handlers(role)

    handlers = table.candidates(name)
    if not handlers:
        raise NoHandlerRegistered(thing, name)

    applicable = tuple(f for f in table.global_favorites if f in handlers)
    if len(applicable) > 1:
        raise ConflictingGlobalFavorites(thing, name, applicable)

    favorite = table.favorite(name)
    if len(applicable) == 1:
        handler = applicable[0]
        if favorite is not None:
            reg.diagnostics.add_warning(
                DiagnosticKind.GLOBAL_FAVORITE_OVERRIDE,
                name,
                f"both a global and a format-specific preferred {thing} are registered "
                f"for {name}; using global preferred {thing} {handler_name(handler)}",
                choice=handler_name(handler),
                candidates=[handler_name(handler), handler_name(favorite)],
            )
        logger.trace("Resolved %s for %s: %s (global favorite)", thing, name, handler)
        return handler

    if favorite is not None:
        if favorite not in handlers:
            raise InvalidFavorite(thing, favorite, name)
        logger.trace("Resolved %s for %s: %s (favorite)", thing, name, favorite)
        return favorite

    handler = handlers[0]
    if len(handlers) > 1:
        reg.diagnostics.add_warning(
            DiagnosticKind.AMBIGUOUS_HANDLER,
            name,
            f"multiple applicable {thing}s for {name}, using {handler_name(handler)}",
            choice=handler_name(handler),
            candidates=[handler_name(h) for h in handlers],
        )
    logger.trace("Resolved %s for %s: %s", thing, name, handler)
    return handler


def resolve_reader(format: IdentifierLike, *, registry: FormatRegistry | None = None) -> object:
    """Pick the reader servicing ``format`` (see `resolve_handler`)."""
    return resolve_handler(HandlerRole.READER, format, registry=registry)


def resolve_writer(format: IdentifierLike, *, registry: FormatRegistry | None = None) -> object:
    """Pick the writer servicing ``format`` (see `resolve_handler`)."""
    return resolve_handler(HandlerRole.WRITER, format, registry=registry)


def _resolve_codec(
    role: CodecRole, coding: IdentifierLike, registry: FormatRegistry | None
) -> CodecFactory:
    name = as_name(coding)
    factory = _registry(registry).codec(role, name)
    if factory is None:
        raise NoCodecRegistered(role.value, name)
    return factory


def resolve_decoder(
    coding: IdentifierLike, *, registry: FormatRegistry | None = None
) -> CodecFactory:
    """Return the decoder factory for ``coding``.

    Raises:
        NoCodecRegistered: If no decoder is set for ``coding``.
    """
    return _resolve_codec(CodecRole.DECODER, coding, registry)


def resolve_encoder(
    coding: IdentifierLike, *, registry: FormatRegistry | None = None
) -> CodecFactory:
    """Return the encoder factory for ``coding``.

    Raises:
        NoCodecRegistered: If no encoder is set for ``coding``.
    """
    return _resolve_codec(CodecRole.ENCODER, coding, registry)
