# topmark:header:start
#
#   project      : Formats
#   file         : exit_codes.py
#   file_relpath : src/formats/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Exit codes for the Formats CLI.

Values follow the BSD `sysexits` convention so that scripts can tell a bad
declaration file from an unrecognised input.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the Formats CLI.

    Attributes:
        SUCCESS: Successful execution.
        FAILURE: Generic failure. Prefer a more specific code if available.
        USAGE_ERROR: Invalid flags/args. Mirrors BSD ``EX_USAGE (64)``.
        FILE_NOT_FOUND: Input path does not exist. Mirrors BSD ``EX_NOINPUT (66)``.
        UNSUPPORTED_FORMAT: Format unknown, or no handler/codec registered for it.
            Mirrors BSD ``EX_UNAVAILABLE (69)``.
        IO_ERROR: I/O error reading a file. Mirrors BSD ``EX_IOERR (74)``.
        PERMISSION_DENIED: Insufficient permissions. Mirrors BSD ``EX_NOPERM (77)``.
        CONFIG_ERROR: Malformed declarations or inconsistent preferences.
            Mirrors BSD ``EX_CONFIG (78)``.
    """

    SUCCESS = 0
    FAILURE = 1

    USAGE_ERROR = 64  # EX_USAGE
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    UNSUPPORTED_FORMAT = 69  # EX_UNAVAILABLE
    IO_ERROR = 74  # EX_IOERR
    PERMISSION_DENIED = 77  # EX_NOPERM
    CONFIG_ERROR = 78  # EX_CONFIG
