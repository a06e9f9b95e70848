# topmark:header:start
#
#   project      : Formats
#   file         : test_main_and_version.py
#   file_relpath : tests/cli/test_main_and_version.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""CLI tests: group options and the `version` command."""

from __future__ import annotations

import json

import pytest

from formats.constants import FORMATS_VERSION
from tests.cli.conftest import assert_SUCCESS, assert_USAGE_ERROR, run_cli


def test_version_outputs_the_version() -> None:
    result = run_cli(["--no-color", "version"])

    assert_SUCCESS(result)
    assert result.output.strip() == FORMATS_VERSION


def test_version_verbose() -> None:
    result = run_cli(["--no-color", "-v", "version"])

    assert_SUCCESS(result)
    assert "Formats version:" in result.output
    assert FORMATS_VERSION in result.output


@pytest.mark.parametrize("fmt", ["json", "ndjson"])
def test_version_machine_formats(fmt: str) -> None:
    result = run_cli(["version", "--format", fmt])

    assert_SUCCESS(result)
    assert json.loads(result.stdout) == {"version": FORMATS_VERSION}


def test_no_subcommand_prints_a_hint() -> None:
    result = run_cli(["--no-color"])

    assert_SUCCESS(result)
    assert "Hint: use 'formats guess PATH...'" in result.output
    assert "guess" in result.output
    assert "resolve" in result.output


def test_verbose_and_quiet_are_exclusive() -> None:
    result = run_cli(["-v", "-q", "version"])

    assert_USAGE_ERROR(result)


def test_unknown_output_format_is_rejected() -> None:
    result = run_cli(["version", "--format", "yaml"])

    assert result.exit_code != 0
