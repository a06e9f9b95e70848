# topmark:header:start
#
#   project      : Formats
#   file         : identifiers.py
#   file_relpath : src/formats/identifiers.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Typed identifiers for data formats and data codings.

Formats and codings share the same identifier space (MIME-like strings such as
``"structure/x-pdb"`` or ``"application/gzip"``) but live in two disjoint
namespaces. The registry stores plain names; inference hands out typed
[`Format`][formats.identifiers.Format] and
[`Coding`][formats.identifiers.Coding] values so callers can tell the two
apart without asking the registry again.

Example:
    ```python
    from formats.identifiers import Coding, Format

    Format("image/png") == Format("image/png")  # True
    Format("image/png") == Coding("image/png")  # False
    str(Coding("application/gzip"))  # "application/gzip"
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class Namespace(Enum):
    """The two disjoint identifier namespaces.

    Attributes:
        FORMAT: Structured-data representations (readers/writers apply).
        CODING: Transport or compression transforms (decoders/encoders apply).
    """

    FORMAT = "format"
    CODING = "coding"

    def other(self) -> Namespace:
        """Return the namespace this one excludes."""
        return Namespace.CODING if self is Namespace.FORMAT else Namespace.FORMAT


@dataclass(frozen=True)
class Identifier:
    """Immutable, value-compared identifier.

    Equality includes the concrete class, so a `Format` and a `Coding` with
    the same name never compare equal.
    """

    name: str

    namespace: ClassVar[Namespace]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Identifier name must be a non-empty string, got {self.name!r}")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Format(Identifier):
    """Identifier of a data format, e.g. ``"structure/x-pdb"``."""

    namespace: ClassVar[Namespace] = Namespace.FORMAT


@dataclass(frozen=True)
class Coding(Identifier):
    """Identifier of a data coding, e.g. ``"application/gzip"``."""

    namespace: ClassVar[Namespace] = Namespace.CODING


IdentifierLike = Union[str, Identifier]


def as_name(value: IdentifierLike) -> str:
    """Return the bare identifier name for a string or `Identifier`.

    Args:
        value (IdentifierLike): Identifier name or typed identifier.

    Returns:
        str: The identifier name.

    Raises:
        TypeError: If ``value`` is neither a string nor an `Identifier`.
        ValueError: If ``value`` is an empty string.
    """
    if isinstance(value, Identifier):
        return value.name
    if isinstance(value, str):
        if not value:
            raise ValueError("Identifier name must be a non-empty string")
        return value
    raise TypeError(f"Expected str or Identifier, got {type(value).__name__}")


def make_identifier(namespace: Namespace, name: str) -> Identifier:
    """Build the typed identifier for ``name`` in ``namespace``."""
    if namespace is Namespace.FORMAT:
        return Format(name)
    return Coding(name)
