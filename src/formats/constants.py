# topmark:header:start
#
#   project      : Formats
#   file         : constants.py
#   file_relpath : src/formats/constants.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Formats Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Final

try:
    FORMATS_VERSION: str = get_version("formats")
except PackageNotFoundError:  # running from a source checkout
    FORMATS_VERSION = "0.0.0"

# Byte-signature inference never looks further than this into a stream.
MAX_SIGNATURE_SIZE: Final[int] = 512

# Extensions must start with this delimiter (".png", ".tar.gz" is two levels).
EXTENSION_DELIMITER: Final[str] = "."

# Environment variable consulted for the internal log level.
LOG_LEVEL_ENV_VAR: Final[str] = "FORMATS_LOG_LEVEL"

# Entry point group scanned for third-party registrants.
PLUGIN_ENTRYPOINT_GROUP: Final[str] = "formats.plugins"

# Declaration files discovered in the working directory.
DECLARATION_FILE_NAME: Final[str] = "formats.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
PYPROJECT_TABLE: Final[tuple[str, str]] = ("tool", "formats")

# Prefix marking a signature written as hexadecimal in declaration files.
HEX_SIGNATURE_PREFIX: Final[str] = "hex:"

# Diagnostics kept by a log; older entries are discarded first.
MAX_RECORDED_DIAGNOSTICS: Final[int] = 1000
