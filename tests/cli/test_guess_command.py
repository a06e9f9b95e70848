# topmark:header:start
#
#   project      : Formats
#   file         : test_guess_command.py
#   file_relpath : tests/cli/test_guess_command.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""CLI tests: `guess` command output and exit codes."""

from __future__ import annotations

import gzip
import json
from typing import TYPE_CHECKING

from formats.cli.exit_codes import ExitCode
from tests.cli.conftest import (
    assert_SUCCESS,
    assert_UNSUPPORTED_FORMAT,
    run_cli,
    run_cli_in,
)
from tests.handlers_stub import PNG_MAGIC

if TYPE_CHECKING:
    from pathlib import Path


def test_guess_from_discovered_declarations(tmp_path: Path, declarations: Path) -> None:
    """Files need not exist; declarations are discovered in the working directory."""
    result = run_cli_in(tmp_path, ["--no-color", "guess", "--no-plugins", "kitten.png.gz"])

    assert_SUCCESS(result)
    assert "FormattedPath: kitten.png.gz" in result.output
    assert "inferred format: image/png" in result.output
    assert "inferred coding: application/gzip" in result.output


def test_guess_unknown_format_exits_unsupported(tmp_path: Path) -> None:
    result = run_cli_in(
        tmp_path, ["--no-color", "guess", "--no-plugins", "--no-config", "kitten.png.gz"]
    )

    assert_UNSUPPORTED_FORMAT(result)
    assert "unknown format" in result.output
    assert "inferred coding: application/gzip" in result.output


def test_no_config_skips_discovery(tmp_path: Path, declarations: Path) -> None:
    result = run_cli_in(tmp_path, ["guess", "--no-plugins", "--no-config", "kitten.png"])

    assert_UNSUPPORTED_FORMAT(result)


def test_guess_json(tmp_path: Path, declarations: Path) -> None:
    result = run_cli_in(
        tmp_path, ["guess", "--no-plugins", "--format", "json", "a.png", "b.txt.xz"]
    )

    assert result.exit_code == ExitCode.UNSUPPORTED_FORMAT
    payload = json.loads(result.stdout)
    assert [e["resource"] for e in payload] == ["a.png", "b.txt.xz"]
    assert payload[0]["resolved_format"] == "image/png"
    assert payload[0]["format_guesses"] == ["image/png"]
    assert payload[0]["diagnostics"] == []
    assert payload[1]["resolved_format"] is None
    assert payload[1]["coding_guesses"] == ["application/x-xz"]
    assert "describe" not in payload[0]


def test_guess_ndjson(tmp_path: Path, declarations: Path) -> None:
    result = run_cli_in(tmp_path, ["guess", "--no-plugins", "--format", "ndjson", "a.png", "b.png"])

    assert_SUCCESS(result)
    lines = result.stdout.strip().splitlines()
    assert [json.loads(line)["resource"] for line in lines] == ["a.png", "b.png"]


def test_guess_content(tmp_path: Path, declarations: Path) -> None:
    (tmp_path / "kitten.dat").write_bytes(PNG_MAGIC + b"pixels")
    (tmp_path / "kitten.bin").write_bytes(gzip.compress(PNG_MAGIC))

    result = run_cli_in(
        tmp_path,
        ["guess", "--no-plugins", "--content", "--format", "json", "kitten.dat", "kitten.bin"],
    )

    payload = json.loads(result.stdout)
    assert payload[0]["resolved_format"] == "image/png"
    assert payload[1]["resolved_format"] is None
    assert payload[1]["coding_guesses"] == ["application/gzip"]
    assert result.exit_code == ExitCode.UNSUPPORTED_FORMAT


def test_guess_content_missing_file(tmp_path: Path) -> None:
    result = run_cli_in(
        tmp_path, ["guess", "--no-plugins", "--no-config", "--content", "absent.png"]
    )

    assert result.exit_code == ExitCode.FILE_NOT_FOUND, result.output


def test_guess_reports_ambiguity(tmp_path: Path) -> None:
    (tmp_path / "formats.toml").write_text(
        '[[formats]]\nname = "image/png"\nextensions = [".png"]\n\n'
        '[[formats]]\nname = "game/pong"\nextensions = [".png"]\n',
        encoding="utf-8",
    )

    result = run_cli_in(tmp_path, ["--no-color", "guess", "--no-plugins", "kitten.png"])

    assert_SUCCESS(result)
    assert "[warning] extension .png registered for multiple formats" in result.output
    assert "[warning] kitten.png: ambiguous format, assuming image/png" in result.output
    assert "inferred format possibilities:" in result.output


def test_quiet_hides_diagnostics(tmp_path: Path) -> None:
    (tmp_path / "formats.toml").write_text(
        '[[formats]]\nname = "image/png"\nextensions = [".png"]\n\n'
        '[[formats]]\nname = "game/pong"\nextensions = [".png"]\n',
        encoding="utf-8",
    )

    result = run_cli_in(tmp_path, ["--no-color", "-q", "guess", "--no-plugins", "kitten.png"])

    assert_SUCCESS(result)
    assert "[warning]" not in result.output


def test_guess_requires_a_path() -> None:
    result = run_cli(["guess"])

    assert result.exit_code != ExitCode.SUCCESS
