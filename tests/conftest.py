# topmark:header:start
#
#   project      : Formats
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Pytest configuration for the Formats test suite.

Notes:
    Tests never touch the process-wide default registry without isolation:
    use the ``registry`` fixture (a fresh `FormatRegistry`) or the
    ``default_registry`` fixture, which empties the default registry for the
    duration of the test and restores it afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeVar, cast

import pytest

from formats.config import logging
from formats.constants import LOG_LEVEL_ENV_VAR
from formats.registry import FormatRegistry, get_registry

F = TypeVar("F", bound=Callable[..., object])


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return cast("Callable[[F], F]", pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_formats_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the runtime log level is not forced via the environment during tests."""
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set logging to TRACE so failing tests show the full inference trail."""
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def registry() -> FormatRegistry:
    """Return a fresh, empty registry."""
    return FormatRegistry()


@pytest.fixture
def default_registry() -> Iterator[FormatRegistry]:
    """Yield the default registry, emptied for the test and restored afterwards."""
    reg = get_registry()
    with reg.isolated():
        reg.diagnostics.clear()
        yield reg
    reg.diagnostics.clear()
