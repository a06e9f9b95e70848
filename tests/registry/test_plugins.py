# topmark:header:start
#
#   project      : Formats
#   file         : test_plugins.py
#   file_relpath : tests/registry/test_plugins.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Tests for entry-point plugin discovery."""

from __future__ import annotations

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

from formats.constants import PLUGIN_ENTRYPOINT_GROUP
from formats.registry import plugins

if TYPE_CHECKING:
    import pytest

    from formats.registry import FormatRegistry


def register_pong(registry: FormatRegistry) -> None:
    """Well-behaved registrant."""
    registry.add_format("game/pong")
    registry.add_extension("game/pong", ".pong")


def register_broken(registry: FormatRegistry) -> None:
    """Registrant failing halfway through."""
    registry.add_format("game/broken")
    raise RuntimeError("plugin bug")


NOT_CALLABLE = "not a registrant"


def _entry_points(*targets: tuple[str, str]) -> EntryPoints:
    return EntryPoints(
        EntryPoint(name=name, value=f"{__name__}:{attr}", group=PLUGIN_ENTRYPOINT_GROUP)
        for name, attr in targets
    )


def _patch(monkeypatch: pytest.MonkeyPatch, eps: EntryPoints) -> None:
    monkeypatch.setattr(plugins, "entry_points", lambda: eps)


def test_plugins_register_into_the_given_registry(
    monkeypatch: pytest.MonkeyPatch, registry: FormatRegistry
) -> None:
    _patch(monkeypatch, _entry_points(("pong", "register_pong")))

    loaded = plugins.load_plugins(registry)

    assert loaded == ["pong"]
    assert registry.lookup_extension(".pong") == ("game/pong",)


def test_broken_plugins_are_skipped(
    monkeypatch: pytest.MonkeyPatch, registry: FormatRegistry
) -> None:
    """A failing or non-callable plugin does not stop the others from loading."""
    _patch(
        monkeypatch,
        _entry_points(
            ("broken", "register_broken"),
            ("missing", "does_not_exist"),
            ("constant", "NOT_CALLABLE"),
            ("pong", "register_pong"),
        ),
    )

    loaded = plugins.load_plugins(registry)

    assert loaded == ["pong"]
    assert registry.is_format("game/pong")


def test_other_groups_are_ignored(
    monkeypatch: pytest.MonkeyPatch, registry: FormatRegistry
) -> None:
    eps = EntryPoints(
        [EntryPoint(name="pong", value=f"{__name__}:register_pong", group="other.group")]
    )
    _patch(monkeypatch, eps)

    assert plugins.load_plugins(registry) == []
    assert registry.formats == ()
