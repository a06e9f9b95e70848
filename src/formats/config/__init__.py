# topmark:header:start
#
#   project      : Formats
#   file         : __init__.py
#   file_relpath : src/formats/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Configuration for Formats: logging setup and TOML declaration files.

Declarations can be kept in ``formats.toml`` or under ``[tool.formats]`` in
``pyproject.toml``; see [`formats.config.loader`][formats.config.loader].
"""

from __future__ import annotations

from .loader import (
    ObjectLoader,
    apply_declarations,
    find_declaration_file,
    load_declarations,
    load_into,
    load_toml_dict,
    parse_signature,
)

__all__ = [
    "ObjectLoader",
    "apply_declarations",
    "find_declaration_file",
    "load_declarations",
    "load_into",
    "load_toml_dict",
    "parse_signature",
]
