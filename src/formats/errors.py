# topmark:header:start
#
#   project      : Formats
#   file         : errors.py
#   file_relpath : src/formats/errors.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Exceptions raised by the Formats registry, inference and resolution engines.

Every failure is fatal to the calling operation and is surfaced as a subclass
of [`FormatsError`][formats.errors.FormatsError]. Callers can branch on the
concrete class or on the stable ``kind`` string.

Ambiguity is *not* an error: it is reported through the diagnostics channel
(see [`formats.diagnostic`][formats.diagnostic]).
"""

from __future__ import annotations

from typing import Any


class FormatsError(Exception):
    """Base class for all Formats errors."""

    kind: str = "formats_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message: str = message
        self.context: dict[str, Any] = context

    def __str__(self) -> str:
        return self.message


class NamespaceConflict(FormatsError):
    """An identifier was registered both as a format and as a coding."""

    kind = "namespace_conflict"

    def __init__(self, name: str, claimed_by: str) -> None:
        super().__init__(
            f"{name} is already registered as a data {claimed_by}",
            name=name,
            claimed_by=claimed_by,
        )
        self.name: str = name
        self.claimed_by: str = claimed_by


class InvalidExtension(FormatsError):
    """A filename extension does not start with the ``.`` delimiter."""

    kind = "invalid_extension"

    def __init__(self, extension: str) -> None:
        super().__init__(
            f"invalid filename extension {extension!r} (must start with '.')",
            extension=extension,
        )
        self.extension: str = extension


class InvalidSignature(FormatsError):
    """A byte signature is empty or longer than the inference window."""

    kind = "invalid_signature"

    def __init__(self, reason: str, signature: bytes) -> None:
        super().__init__(reason, signature=signature)
        self.signature: bytes = signature


class DuplicateHandler(FormatsError):
    """The same handler object was registered twice for one format slot."""

    kind = "duplicate_handler"

    def __init__(self, role: str, handler: object, format_name: str) -> None:
        super().__init__(
            f"{role} {handler!r} already registered for {format_name}",
            role=role,
            handler=handler,
            format=format_name,
        )
        self.role: str = role
        self.handler: object = handler
        self.format_name: str = format_name


class DuplicateFavorite(FormatsError):
    """A handler was declared a global favorite twice."""

    kind = "duplicate_favorite"

    def __init__(self, role: str, handler: object) -> None:
        super().__init__(
            f"{role} {handler!r} is already globally preferred",
            role=role,
            handler=handler,
        )
        self.role: str = role
        self.handler: object = handler


class UnknownFormat(FormatsError):
    """The format of a resource was neither specified nor inferred."""

    kind = "unknown_format"

    def __init__(self, resource: object) -> None:
        super().__init__(f"{resource}: could not determine format", resource=resource)
        self.resource: object = resource


class NoHandlerRegistered(FormatsError):
    """No reader (or writer) is registered for a format."""

    kind = "no_handler_registered"

    def __init__(self, role: str, format_name: str) -> None:
        super().__init__(f"no {role} registered for {format_name}", role=role, format=format_name)
        self.role: str = role
        self.format_name: str = format_name


class NoCodecRegistered(FormatsError):
    """No decoder (or encoder) is registered for a coding."""

    kind = "no_codec_registered"

    def __init__(self, role: str, coding_name: str) -> None:
        super().__init__(f"no {role} registered for {coding_name}", role=role, coding=coding_name)
        self.role: str = role
        self.coding_name: str = coding_name


class ConflictingGlobalFavorites(FormatsError):
    """Several global favorites can all service the same format."""

    kind = "conflicting_global_favorites"

    def __init__(self, role: str, format_name: str, handlers: tuple[object, ...]) -> None:
        super().__init__(
            f"multiple {role}s for {format_name} are marked as favorites",
            role=role,
            format=format_name,
            handlers=handlers,
        )
        self.role: str = role
        self.format_name: str = format_name
        self.handlers: tuple[object, ...] = handlers


class InvalidFavorite(FormatsError):
    """A per-format favorite is not among the handlers registered for that format."""

    kind = "invalid_favorite"

    def __init__(self, role: str, handler: object, format_name: str) -> None:
        super().__init__(
            f"{role} {handler!r}, preferred for {format_name}, is not registered",
            role=role,
            handler=handler,
            format=format_name,
        )
        self.role: str = role
        self.handler: object = handler
        self.format_name: str = format_name


class UnrewindableStream(FormatsError):
    """A stream can neither seek back nor peek, so its prefix cannot be sniffed."""

    kind = "unrewindable_stream"

    def __init__(self, stream: object) -> None:
        super().__init__(
            f"cannot inspect {stream!r} without consuming it (not seekable, no peek())",
            stream=stream,
        )
        self.stream: object = stream


class FormatsConfigError(FormatsError):
    """A declaration file (``formats.toml`` / ``[tool.formats]``) is malformed."""

    kind = "config_error"
