# topmark:header:start
#
#   project      : Formats
#   file         : test_resolution.py
#   file_relpath : tests/test_resolution.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Tests for format, coding, handler and codec resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

from formats.constants import MAX_RECORDED_DIAGNOSTICS
from formats.diagnostic import DiagnosticKind, DiagnosticLog
from formats.errors import (
    ConflictingGlobalFavorites,
    InvalidFavorite,
    NoCodecRegistered,
    NoHandlerRegistered,
    UnknownFormat,
)
from formats.handlers import HandlerRole
from formats.identifiers import Coding, Format
from formats.resolution import (
    resolve_coding,
    resolve_decoder,
    resolve_encoder,
    resolve_format,
    resolve_handler,
    resolve_reader,
    resolve_writer,
)
from tests.handlers_stub import TokenIO, identity_codec

if TYPE_CHECKING:
    from formats.registry import FormatRegistry

PNG = Format("image/png")
PONG = Format("game/pong")
GZIP = Coding("application/gzip")
XZ = Coding("application/x-xz")


@dataclass(frozen=True)
class State:
    """Minimal resource state."""

    resource: object = "kitten.png"
    format: Format | None = None
    coding: Coding | None = None
    format_guesses: tuple[Format, ...] = ()
    coding_guesses: tuple[Coding, ...] = ()


# --- format and coding ---


def test_unknown_format_raises(registry: FormatRegistry) -> None:
    with pytest.raises(UnknownFormat) as excinfo:
        resolve_format(State(), registry=registry)
    assert excinfo.value.resource == "kitten.png"


def test_single_guess_resolves_silently(registry: FormatRegistry) -> None:
    state = State(format_guesses=(PNG,))

    assert resolve_format(state, registry=registry) == PNG
    assert resolve_coding(state, registry=registry) is None
    assert len(registry.diagnostics) == 0


def test_first_guess_wins_with_a_warning(registry: FormatRegistry) -> None:
    state = State(format_guesses=(PNG, PONG), coding_guesses=(GZIP, XZ))

    assert resolve_format(state, registry=registry) == PNG
    assert resolve_coding(state, registry=registry) == GZIP

    (fmt_diag,) = registry.diagnostics.of_kind(DiagnosticKind.AMBIGUOUS_FORMAT)
    assert fmt_diag.choice == "image/png"
    assert fmt_diag.candidates == ("image/png", "game/pong")
    (coding_diag,) = registry.diagnostics.of_kind(DiagnosticKind.AMBIGUOUS_CODING)
    assert coding_diag.choice == "application/gzip"


def test_explicit_diagnostics_sink(registry: FormatRegistry) -> None:
    sink = DiagnosticLog()
    resolve_format(State(format_guesses=(PNG, PONG)), registry=registry, diagnostics=sink)

    assert len(sink) == 1
    assert len(registry.diagnostics) == 0


def test_repeated_ambiguous_resolution_keeps_the_log_bounded(registry: FormatRegistry) -> None:
    registry.add_format(PNG)
    registry.add_reader(PNG, TokenIO("first"))
    registry.add_reader(PNG, TokenIO("second"))
    state = State(format_guesses=(PNG, PONG))

    for _ in range(MAX_RECORDED_DIAGNOSTICS + 100):
        resolve_reader(resolve_format(state, registry=registry), registry=registry)

    assert len(registry.diagnostics) == MAX_RECORDED_DIAGNOSTICS
    assert registry.diagnostics.items[-1].kind is DiagnosticKind.AMBIGUOUS_HANDLER


def test_specified_format_is_a_full_override(registry: FormatRegistry) -> None:
    """A specified format wins, and the specified coding (even None) is used verbatim."""
    state = State(format=PONG, format_guesses=(PNG,), coding_guesses=(GZIP,))

    assert resolve_format(state, registry=registry) == PONG
    assert resolve_coding(state, registry=registry) is None

    state = State(format=PONG, coding=XZ, coding_guesses=(GZIP,))
    assert resolve_coding(state, registry=registry) == XZ
    assert len(registry.diagnostics) == 0


# --- handlers ---


def test_no_handler_registered(registry: FormatRegistry) -> None:
    with pytest.raises(NoHandlerRegistered) as excinfo:
        resolve_reader(PNG, registry=registry)
    assert excinfo.value.role == "reader"
    assert excinfo.value.format_name == "image/png"


def test_favorite_scenario(registry: FormatRegistry) -> None:
    """Registration order, per-format favorite, then global favorite, then a conflict."""
    testio1, testio2, testio3 = TokenIO("testio1"), TokenIO("testio2"), TokenIO("testio3")
    for handler in (testio1, testio2):
        registry.add_reader(PNG, handler)
        registry.add_writer(PNG, handler)
    registry.diagnostics.clear()

    assert resolve_reader(PNG, registry=registry) is testio1
    (diag,) = registry.diagnostics.of_kind(DiagnosticKind.AMBIGUOUS_HANDLER)
    assert diag.choice == "testio1"
    assert diag.candidates == ("testio1", "testio2")

    registry.prefer_reader(testio2, PNG)
    registry.prefer_writer(testio2, PNG)
    assert resolve_reader(PNG, registry=registry) is testio2
    assert resolve_writer(PNG, registry=registry) is testio2

    registry.add_reader(PNG, testio3)
    registry.add_writer(PNG, testio3)
    assert resolve_reader(PNG, registry=registry) is testio2

    registry.diagnostics.clear()
    registry.prefer_reader(testio3)
    registry.prefer_writer(testio3)
    assert resolve_reader(PNG, registry=registry) is testio3
    assert resolve_writer(PNG, registry=registry) is testio3
    overrides = registry.diagnostics.of_kind(DiagnosticKind.GLOBAL_FAVORITE_OVERRIDE)
    assert [d.choice for d in overrides] == ["testio3", "testio3"]

    registry.prefer_reader(testio1)
    with pytest.raises(ConflictingGlobalFavorites) as excinfo:
        resolve_reader(PNG, registry=registry)
    assert excinfo.value.handlers == (testio3, testio1)
    # writers are unaffected by reader preferences
    assert resolve_writer(PNG, registry=registry) is testio3


def test_global_favorite_only_applies_where_registered(registry: FormatRegistry) -> None:
    fast, slow = TokenIO("fast"), TokenIO("slow")
    registry.add_reader(PNG, fast)
    registry.add_reader(PONG, slow)
    registry.prefer_reader(fast)

    assert resolve_reader(PONG, registry=registry) is slow
    assert resolve_handler(HandlerRole.READER, PNG, registry=registry) is fast


def test_removed_favorite_is_invalid(registry: FormatRegistry) -> None:
    first, second = TokenIO("first"), TokenIO("second")
    registry.add_reader(PNG, first)
    registry.add_reader(PNG, second)
    registry.prefer_reader(second, PNG)
    registry.remove_reader(PNG, second)

    with pytest.raises(InvalidFavorite):
        resolve_reader(PNG, registry=registry)


def test_string_identifiers_are_accepted(registry: FormatRegistry) -> None:
    handler = TokenIO("h")
    registry.add_writer("image/png", handler)

    assert resolve_writer("image/png", registry=registry) is handler
    assert resolve_writer(PNG, registry=registry) is handler


# --- codecs ---


def test_codec_lookup(registry: FormatRegistry) -> None:
    registry.set_decoder(GZIP, identity_codec)

    assert resolve_decoder(GZIP, registry=registry) is identity_codec
    with pytest.raises(NoCodecRegistered) as excinfo:
        resolve_encoder(GZIP, registry=registry)
    assert excinfo.value.role == "encoder"
    assert excinfo.value.kind == "no_codec_registered"
