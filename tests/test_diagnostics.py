# topmark:header:start
#
#   project      : Formats
#   file         : test_diagnostics.py
#   file_relpath : tests/test_diagnostics.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Tests for the diagnostics log: recording, subscribers, escalation and stats."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from formats.constants import MAX_RECORDED_DIAGNOSTICS
from formats.diagnostic import Diagnostic, DiagnosticKind, DiagnosticLevel, DiagnosticLog
from formats.identifiers import Format
from formats.resolution import resolve_format

if TYPE_CHECKING:
    from formats.registry import FormatRegistry


class AmbiguityError(Exception):
    """Raised by a strict subscriber."""


def test_log_records_in_order() -> None:
    log = DiagnosticLog()
    log.add_info(DiagnosticKind.MULTIPLE_HANDLERS, "image/png", "two readers")
    log.add_warning(
        DiagnosticKind.AMBIGUOUS_FORMAT,
        "kitten.png",
        "ambiguous",
        choice="image/png",
        candidates=["image/png", "game/pong"],
    )

    assert [d.kind for d in log] == [
        DiagnosticKind.MULTIPLE_HANDLERS,
        DiagnosticKind.AMBIGUOUS_FORMAT,
    ]
    assert log.has_warning()
    assert log.stats().total == 2
    assert log.to_dict() == {"info": 1, "warning": 1}
    assert log.items[1].to_dict() == {
        "level": "warning",
        "kind": "ambiguous_format",
        "subject": "kitten.png",
        "message": "ambiguous",
        "choice": "image/png",
        "candidates": ["image/png", "game/pong"],
    }


def test_freeze_is_a_snapshot() -> None:
    log = DiagnosticLog()
    log.add_info(DiagnosticKind.MULTIPLE_HANDLERS, "x", "one")
    frozen = log.freeze()
    log.add_info(DiagnosticKind.MULTIPLE_HANDLERS, "x", "two")

    assert len(frozen) == 1
    assert frozen.stats().n_info == 1
    assert len(log) == 2

    log.clear()
    assert len(log) == 0
    assert not log.has_warning()


def test_log_drops_the_oldest_entries_when_full() -> None:
    log = DiagnosticLog(max_items=3)
    seen: list[Diagnostic] = []
    log.subscribe(seen.append)

    for n in range(5):
        log.add_info(DiagnosticKind.MULTIPLE_HANDLERS, "image/png", f"readers: {n + 2}")

    assert [d.message for d in log] == ["readers: 4", "readers: 5", "readers: 6"]
    assert len(seen) == 5
    assert log.stats().n_info == 3


def test_unbounded_log_keeps_everything() -> None:
    log = DiagnosticLog(max_items=None)
    for _ in range(MAX_RECORDED_DIAGNOSTICS + 1):
        log.add_info(DiagnosticKind.REPLACED_CODEC, "application/gzip", "replaced")

    assert len(log) == MAX_RECORDED_DIAGNOSTICS + 1


def test_reset_to_a_snapshot() -> None:
    log = DiagnosticLog()
    log.add_info(DiagnosticKind.REPLACED_CODEC, "application/gzip", "kept")
    snapshot = log.freeze()
    log.add_info(DiagnosticKind.REPLACED_CODEC, "application/gzip", "dropped")

    log.reset_to(snapshot)

    assert [d.message for d in log] == ["kept"]


def test_subscribers_receive_and_can_unsubscribe() -> None:
    log = DiagnosticLog()
    seen: list[Diagnostic] = []
    unsubscribe = log.subscribe(seen.append)

    log.add_info(DiagnosticKind.REPLACED_CODEC, "application/gzip", "replaced")
    unsubscribe()
    unsubscribe()
    log.add_info(DiagnosticKind.REPLACED_CODEC, "application/gzip", "replaced again")

    assert [d.message for d in seen] == ["replaced"]


def test_subscriber_can_escalate(registry: FormatRegistry) -> None:
    """A strict subscriber turns an ambiguity warning into an error."""

    def strict(diagnostic: Diagnostic) -> None:
        if diagnostic.level is DiagnosticLevel.WARNING:
            raise AmbiguityError(diagnostic.message)

    registry.diagnostics.subscribe(strict)
    registry.add_format("image/png")
    registry.add_extension("image/png", ".png")

    with pytest.raises(AmbiguityError, match="registered for multiple formats"):
        registry.add_extension("game/pong", ".png")


def test_escalation_during_resolution(registry: FormatRegistry) -> None:
    def strict(diagnostic: Diagnostic) -> None:
        raise AmbiguityError(diagnostic.message)

    class _State:
        resource = "kitten.png"
        format = None
        coding = None
        format_guesses = (Format("image/png"), Format("game/pong"))
        coding_guesses = ()

    registry.diagnostics.subscribe(strict)
    with pytest.raises(AmbiguityError, match="ambiguous format"):
        resolve_format(_State(), registry=registry)


def test_levels_have_colors() -> None:
    for level in DiagnosticLevel:
        assert "x" in level.color("x")
