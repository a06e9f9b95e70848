# topmark:header:start
#
#   project      : Formats
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""CLI test helpers for running Formats in a controlled working directory.

`run_cli_in()` changes the process working directory to the given `tmp_path`
before invoking the Click CLI, so that relative paths and declaration-file
discovery are resolved against the temporary test directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Any, Iterator, Sequence

import pytest
from click.testing import CliRunner, Result

from formats.cli.exit_codes import ExitCode
from formats.cli.main import cli
from formats.config.logging import TRACE_LEVEL, setup_logging


def run_cli_in(
    tmp_path: Path,
    argv: Sequence[str],
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with `tmp_path` as the working directory.

    Args:
        tmp_path (Path): Pytest-provided temporary directory used as the CWD for the
            command invocation.
        argv (Sequence[str]): CLI argument vector, e.g. ``["guess", "kitten.png"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(cli, list(argv), input=input_text)
    finally:
        os.chdir(cwd)


def run_cli(
    argv: Sequence[str],
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does **not** depend on files created in
    ``tmp_path`` (e.g. ``version``) or when all provided paths are absolute.

    Args:
        argv (Sequence[str]): CLI argument vector, e.g. ``["--no-color", "version"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    return runner.invoke(cli, list(argv), input=input_text)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0).

    Args:
        result (Result): The Result object returned by `run_cli` or `run_cli_in`.
    """
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_UNSUPPORTED_FORMAT(result: Result) -> None:
    """Assert that the command exited with UNSUPPORTED_FORMAT (code 69).

    Args:
        result (Result): The Result object returned by `run_cli` or `run_cli_in`.
    """
    assert result.exit_code == ExitCode.UNSUPPORTED_FORMAT, result.output


def assert_USAGE_ERROR(result: Result) -> None:
    """Assert that the command exited with USAGE_ERROR (code 64).

    Args:
        result (Result): The Result object returned by `run_cli` or `run_cli_in`.
    """
    assert result.exit_code == ExitCode.USAGE_ERROR, result.output


PNG_DECLARATIONS = """
[[formats]]
name = "image/png"
extensions = [".png"]
signatures = ["hex:89504e470d0a1a0a"]
readers = ["tests.handlers_stub:ConfigHandler"]
"""


@pytest.fixture
def declarations(tmp_path: Path) -> Path:
    """Write a ``formats.toml`` declaring ``image/png`` (reader only) into `tmp_path`."""
    path = tmp_path / "formats.toml"
    path.write_text(PNG_DECLARATIONS, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_test_logging() -> Iterator[None]:
    """Re-attach TRACE logging to the real stderr after the CLI replaced it."""
    yield
    setup_logging(level=TRACE_LEVEL)
