# topmark:header:start
#
#   project      : Formats
#   file         : __init__.py
#   file_relpath : src/formats/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Diagnostic primitives for ambiguity, override and replacement reports.

Design:
    - Diagnostics are immutable `Diagnostic` instances.
    - Each registry owns a mutable `DiagnosticLog` sink; registration and
      resolution both report into it.
    - Snapshots are stored as an immutable `FrozenDiagnosticLog`.
"""

from __future__ import annotations

from formats.diagnostic.model import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticLevel,
    DiagnosticLog,
    DiagnosticStats,
    FrozenDiagnosticLog,
    compute_diagnostic_stats,
    diagnostics_counts_to_dict,
)

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLevel",
    "DiagnosticLog",
    "DiagnosticStats",
    "FrozenDiagnosticLog",
    "compute_diagnostic_stats",
    "diagnostics_counts_to_dict",
]
