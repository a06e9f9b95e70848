# topmark:header:start
#
#   project      : Formats
#   file         : __init__.py
#   file_relpath : src/formats/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Subcommands of the ``formats`` CLI."""
