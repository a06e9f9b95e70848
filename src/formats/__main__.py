# topmark:header:start
#
#   project      : Formats
#   file         : __main__.py
#   file_relpath : src/formats/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Module entry point for running Formats via ``python -m formats``.

Delegates to :func:`formats.cli.main.cli`, the same entry point as the
``formats`` console script.
"""

from __future__ import annotations

from formats.cli.main import cli

if __name__ == "__main__":
    cli()
