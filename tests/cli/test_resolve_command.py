# topmark:header:start
#
#   project      : Formats
#   file         : test_resolve_command.py
#   file_relpath : tests/cli/test_resolve_command.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""CLI tests: `resolve` command output and exit codes."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from formats.cli.exit_codes import ExitCode
from tests.cli.conftest import assert_SUCCESS, assert_UNSUPPORTED_FORMAT, run_cli_in

if TYPE_CHECKING:
    from pathlib import Path


def test_resolve_reader_and_decoder(tmp_path: Path, declarations: Path) -> None:
    result = run_cli_in(
        tmp_path, ["resolve", "--no-plugins", "--format", "json", "kitten.png.gz"]
    )

    assert_SUCCESS(result)
    assert json.loads(result.stdout) == {
        "resource": "kitten.png.gz",
        "format": "image/png",
        "coding": "application/gzip",
        "reader": "config-handler",
        "decoder": "gzip_decoder",
        "diagnostics": [],
    }


def test_resolve_default_output(tmp_path: Path, declarations: Path) -> None:
    result = run_cli_in(tmp_path, ["--no-color", "resolve", "--no-plugins", "kitten.png"])

    assert_SUCCESS(result)
    lines = result.output.splitlines()
    assert lines[0] == "kitten.png"
    assert "  reader:   config-handler" in lines
    assert "  decoder:  -" in lines


def test_resolve_writer_without_writers(tmp_path: Path, declarations: Path) -> None:
    """The declared format has a reader only, so resolving a writer fails."""
    result = run_cli_in(tmp_path, ["resolve", "--no-plugins", "--writer", "kitten.png"])

    assert_UNSUPPORTED_FORMAT(result)
    assert "no writer registered for image/png" in result.output


def test_resolve_unknown_format(tmp_path: Path) -> None:
    result = run_cli_in(tmp_path, ["resolve", "--no-plugins", "--no-config", "kitten.png"])

    assert_UNSUPPORTED_FORMAT(result)
    assert "could not determine format" in result.output


def test_resolve_conflicting_global_favorites(tmp_path: Path) -> None:
    (tmp_path / "formats.toml").write_text(
        "[[formats]]\n"
        'name = "image/png"\n'
        'extensions = [".png"]\n'
        'readers = ["tests.handlers_stub:ConfigHandler", "tests.handlers_stub:SlashIO"]\n'
        "\n[preferences]\n"
        'readers = ["tests.handlers_stub:ConfigHandler", "tests.handlers_stub:SlashIO"]\n',
        encoding="utf-8",
    )

    result = run_cli_in(tmp_path, ["resolve", "--no-plugins", "kitten.png"])

    assert result.exit_code == ExitCode.CONFIG_ERROR, result.output
    assert "marked as favorites" in result.output


def test_resolve_content(tmp_path: Path, declarations: Path) -> None:
    (tmp_path / "kitten.dat").write_bytes(bytes.fromhex("89504e470d0a1a0a") + b"pixels")

    result = run_cli_in(
        tmp_path, ["resolve", "--no-plugins", "--content", "--format", "ndjson", "kitten.dat"]
    )

    assert_SUCCESS(result)
    assert json.loads(result.stdout)["reader"] == "config-handler"
