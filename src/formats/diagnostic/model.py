# topmark:header:start
#
#   project      : Formats
#   file         : model.py
#   file_relpath : src/formats/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Core diagnostic types for ambiguity and override reporting.

Registrants are loaded independently and in any order, so they can disagree:
two formats claim the same extension, two readers service the same format, a
global favorite overrides a per-format one. None of these are errors; each is
recorded as a structured, non-fatal [`Diagnostic`][formats.diagnostic.model.Diagnostic]
in a [`DiagnosticLog`][formats.diagnostic.model.DiagnosticLog] that callers may
surface, ignore, or escalate.

Sections:
    * DiagnosticLevel: severity levels with associated terminal colors.
    * DiagnosticKind: what kind of conflict was observed.
    * Diagnostic: immutable structured payload.
    * DiagnosticStats: aggregated per-level counts.
    * DiagnosticLog: mutable sink with subscriber callbacks.
    * FrozenDiagnosticLog: immutable snapshot container.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, cast

from yachalk import chalk

from formats.config.logging import get_logger
from formats.constants import MAX_RECORDED_DIAGNOSTICS

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from formats.config.logging import FormatsLogger


logger: FormatsLogger = get_logger(__name__)


class DiagnosticLevel(Enum):
    """Severity levels for diagnostics.

    Levels map to terminal colors and are ordered by importance: WARNING > INFO.
    """

    INFO = "info"
    WARNING = "warning"

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this severity level.

        Intended for human-readable output only; machine formats should not use colors.
        """
        return cast(
            "Callable[[str], str]",
            {
                DiagnosticLevel.INFO: chalk.blue,
                DiagnosticLevel.WARNING: chalk.yellow,
            }[self],
        )


class DiagnosticKind(Enum):
    """Kind of conflict a diagnostic reports.

    Attributes:
        AMBIGUOUS_EXTENSION: An extension is bound to several identifiers.
        AMBIGUOUS_SIGNATURE: A byte signature is bound to several identifiers.
        MULTIPLE_HANDLERS: A format gained a second reader or writer.
        REPLACED_FAVORITE: A per-format favorite handler was replaced.
        REPLACED_CODEC: A decoder or encoder was replaced.
        AMBIGUOUS_FORMAT: Several formats were inferred; the first one was used.
        AMBIGUOUS_CODING: Several codings were inferred; the first one was used.
        AMBIGUOUS_HANDLER: Several handlers apply and none is preferred.
        GLOBAL_FAVORITE_OVERRIDE: A global favorite won over a per-format one.
    """

    AMBIGUOUS_EXTENSION = "ambiguous_extension"
    AMBIGUOUS_SIGNATURE = "ambiguous_signature"
    MULTIPLE_HANDLERS = "multiple_handlers"
    REPLACED_FAVORITE = "replaced_favorite"
    REPLACED_CODEC = "replaced_codec"
    AMBIGUOUS_FORMAT = "ambiguous_format"
    AMBIGUOUS_CODING = "ambiguous_coding"
    AMBIGUOUS_HANDLER = "ambiguous_handler"
    GLOBAL_FAVORITE_OVERRIDE = "global_favorite_override"


@dataclass(frozen=True)
class Diagnostic:
    """Structured, non-fatal diagnostic.

    Attributes:
        level (DiagnosticLevel): Severity.
        kind (DiagnosticKind): Kind of conflict.
        subject (str): What the conflict is about (identifier, extension, signature).
        message (str): Human-readable message.
        choice (str | None): Name of what was picked, if a choice was made.
        candidates (tuple[str, ...]): Names of all the competing alternatives.
    """

    level: DiagnosticLevel
    kind: DiagnosticKind
    subject: str
    message: str
    choice: str | None = None
    candidates: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping of this diagnostic."""
        return {
            "level": self.level.value,
            "kind": self.kind.value,
            "subject": self.subject,
            "message": self.message,
            "choice": self.choice,
            "candidates": list(self.candidates),
        }


@dataclass(frozen=True)
class DiagnosticStats:
    """Aggregated counts for diagnostics by severity level."""

    n_info: int
    n_warning: int

    @property
    def total(self) -> int:
        """Return the total count of diagnostics."""
        return self.n_info + self.n_warning


@dataclass
class DiagnosticLog:
    """Mutable collection of diagnostics with optional subscribers.

    Each added diagnostic is appended, mirrored to the logger, then handed to
    every subscriber in subscription order. A subscriber may raise to escalate
    a diagnostic into an error; the exception propagates to the operation that
    emitted it.

    At most ``max_items`` diagnostics are kept (None keeps all of them); once
    full, the oldest entry is dropped for each new one. Subscribers and the
    logger still see every diagnostic.

    Attributes:
        max_items (int | None): Capacity of ``items``.
        items (deque[Diagnostic]): Recorded diagnostics, oldest first.
        listeners (list[Callable[[Diagnostic], None]]): Subscribed callbacks.
    """

    max_items: int | None = MAX_RECORDED_DIAGNOSTICS
    items: deque[Diagnostic] = field(
        init=False, repr=False, default_factory=lambda: deque[Diagnostic]()
    )
    listeners: list[Callable[[Diagnostic], None]] = field(default_factory=lambda: [])

    def __post_init__(self) -> None:
        self.items = deque(maxlen=self.max_items)

    def add(self, diagnostic: Diagnostic) -> Diagnostic:
        """Record a diagnostic and notify subscribers.

        Args:
            diagnostic (Diagnostic): The diagnostic to record.

        Returns:
            Diagnostic: The recorded diagnostic.
        """
        self.items.append(diagnostic)
        if diagnostic.level is DiagnosticLevel.WARNING:
            logger.warning("%s", diagnostic.message)
        else:
            logger.info("%s", diagnostic.message)
        for listener in list(self.listeners):
            listener(diagnostic)
        return diagnostic

    def add_info(
        self,
        kind: DiagnosticKind,
        subject: str,
        message: str,
        *,
        choice: str | None = None,
        candidates: Iterable[str] = (),
    ) -> Diagnostic:
        """Add an ``info`` diagnostic."""
        return self.add(
            Diagnostic(DiagnosticLevel.INFO, kind, subject, message, choice, tuple(candidates))
        )

    def add_warning(
        self,
        kind: DiagnosticKind,
        subject: str,
        message: str,
        *,
        choice: str | None = None,
        candidates: Iterable[str] = (),
    ) -> Diagnostic:
        """Add a ``warning`` diagnostic."""
        return self.add(
            Diagnostic(DiagnosticLevel.WARNING, kind, subject, message, choice, tuple(candidates))
        )

    def subscribe(self, listener: Callable[[Diagnostic], None]) -> Callable[[], None]:
        """Register a callback invoked for every future diagnostic.

        Args:
            listener (Callable[[Diagnostic], None]): Callback receiving each diagnostic.

        Returns:
            Callable[[], None]: A function that removes the subscription.
        """
        self.listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return _unsubscribe

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        """Return the recorded diagnostics of one kind, in insertion order."""
        return [d for d in self.items if d.kind is kind]

    def clear(self) -> None:
        """Forget all recorded diagnostics (subscribers are kept)."""
        self.items.clear()

    def reset_to(self, snapshot: FrozenDiagnosticLog) -> None:
        """Replace the recorded diagnostics with those of ``snapshot``.

        Subscribers are kept and are not notified.
        """
        self.items.clear()
        self.items.extend(snapshot.items)

    def freeze(self) -> FrozenDiagnosticLog:
        """Return an immutable snapshot of this log's diagnostics."""
        return FrozenDiagnosticLog(items=tuple(self.items))

    def stats(self) -> DiagnosticStats:
        """Return per-level counts for diagnostics in this log."""
        return compute_diagnostic_stats(self.items)

    def has_warning(self) -> bool:
        """Return True if the log contains warning diagnostics."""
        return any(d.level is DiagnosticLevel.WARNING for d in self.items)

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly mapping of counts by severity."""
        return diagnostics_counts_to_dict(self.items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class FrozenDiagnosticLog:
    """Immutable counterpart to `DiagnosticLog`."""

    items: tuple[Diagnostic, ...]

    def __iter__(self) -> Iterator[Diagnostic]:
        """Iterate over contained diagnostics in insertion order."""
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def stats(self) -> DiagnosticStats:
        """Return aggregated per-level counts for the contained diagnostics."""
        return compute_diagnostic_stats(self.items)

    def to_dict(self) -> dict[str, int]:
        """Return a JSON-friendly mapping of counts by severity."""
        return diagnostics_counts_to_dict(self.items)


def compute_diagnostic_stats(diagnostics: Iterable[Diagnostic]) -> DiagnosticStats:
    """Return per-level counts for a sequence of diagnostics.

    Args:
        diagnostics: the diagnostics to count.

    Returns:
        Per-level counts.
    """
    items = list(diagnostics)
    n_info: int = sum(1 for d in items if d.level is DiagnosticLevel.INFO)
    n_warn: int = sum(1 for d in items if d.level is DiagnosticLevel.WARNING)
    return DiagnosticStats(n_info=n_info, n_warning=n_warn)


def diagnostics_counts_to_dict(diagnostics: Iterable[Diagnostic]) -> dict[str, int]:
    """Return a JSON-friendly mapping of counts by severity for any iterable."""
    stats: DiagnosticStats = compute_diagnostic_stats(diagnostics)
    return {
        "info": stats.n_info,
        "warning": stats.n_warning,
    }
