# topmark:header:start
#
#   project      : Formats
#   file         : __init__.py
#   file_relpath : src/formats/registry/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Registry of formats, codings and their handlers.

Most users register through the process-wide default registry:

```python
from formats.registry import get_registry

registry = get_registry()
registry.add_format("structure/x-pdb")
registry.add_extension("structure/x-pdb", ".pdb")
registry.add_reader("structure/x-pdb", PdbIO())
```

Tests and embedders can build isolated instances instead, or temporarily
empty the default one:

```python
with get_registry().isolated() as registry:
    ...  # registrations here are discarded on exit
```
"""

from __future__ import annotations

from .plugins import load_plugins
from .store import (
    FormatRegistry,
    HandlerTable,
    IdentifierMeta,
    get_registry,
    normalize_extension,
    normalize_signature,
    render_signature,
)

__all__ = [
    "FormatRegistry",
    "HandlerTable",
    "IdentifierMeta",
    "get_registry",
    "load_plugins",
    "normalize_extension",
    "normalize_signature",
    "render_signature",
]
