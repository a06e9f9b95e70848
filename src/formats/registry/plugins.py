# topmark:header:start
#
#   project      : Formats
#   file         : plugins.py
#   file_relpath : src/formats/registry/plugins.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Discovery of third-party registrants via entry points.

A distribution contributes formats, codings, handlers and codecs by exposing a
callable in the ``formats.plugins`` entry point group:

```toml
[project.entry-points."formats.plugins"]
structures = "molecules.io:register_formats"
```

The callable receives the target [`FormatRegistry`][formats.registry.store.FormatRegistry]
and registers into it. Plugins are loaded in entry-point order; a plugin that
fails to import or raises while registering is logged and skipped so that one
broken distribution cannot take the others down.
"""

from __future__ import annotations

from importlib.metadata import EntryPoints, entry_points
from typing import TYPE_CHECKING, Any

from formats.config.logging import get_logger
from formats.constants import PLUGIN_ENTRYPOINT_GROUP

if TYPE_CHECKING:
    from formats.config.logging import FormatsLogger
    from formats.registry.store import FormatRegistry

logger: FormatsLogger = get_logger(__name__)


def load_plugins(registry: FormatRegistry, *, group: str = PLUGIN_ENTRYPOINT_GROUP) -> list[str]:
    """Run every registrant exposed in the entry point ``group``.

    Args:
        registry (FormatRegistry): Registry the plugins register into.
        group (str): Entry point group to scan.

    Returns:
        list[str]: Names of the entry points that registered successfully.
    """
    try:
        candidates: EntryPoints = entry_points().select(group=group)
    except Exception:
        logger.exception("Failed to read entry points")
        return []

    loaded: list[str] = []
    for ep in candidates:
        name: str = getattr(ep, "name", str(ep))
        try:
            provider: Any = ep.load()
        except Exception:
            logger.exception("Failed loading formats plugin %s", name)
            continue
        if not callable(provider):
            logger.warning("Entry point %s is not callable: %r", name, provider)
            continue
        try:
            provider(registry)
        except Exception:
            logger.exception("Formats plugin %s failed while registering", name)
            continue
        logger.debug("Loaded formats plugin %s", name)
        loaded.append(name)
    return loaded
