# topmark:header:start
#
#   project      : Formats
#   file         : __init__.py
#   file_relpath : src/formats/builtins/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Bundled registrations that are opt-in for library users."""

from __future__ import annotations

from .codings import BUILTIN_CODINGS, register_builtin_codings

__all__ = ["BUILTIN_CODINGS", "register_builtin_codings"]
