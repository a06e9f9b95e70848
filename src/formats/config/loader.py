# topmark:header:start
#
#   project      : Formats
#   file         : loader.py
#   file_relpath : src/formats/config/loader.py
#   license      : MIT
#   copyright    : (c) 2025 The Formats Authors
#
# topmark:header:end

"""Load declarative registrations from TOML.

Declarations live in a ``formats.toml`` file or in the ``[tool.formats]``
table of ``pyproject.toml``. Parsing is done with `tomlkit` and the result is
unwrapped to plain ``dict``/``list`` structures before validation.

Schema:
    ```toml
    [[formats]]
    name = "structure/x-pdb"
    extensions = [".pdb", ".ent"]
    signatures = ["HEADER", "hex:415441"]
    readers = ["molecules.io:PdbIO"]
    writers = ["molecules.io:PdbIO"]
    prefer_reader = "molecules.io:PdbIO"

    [[codings]]
    name = "application/gzip"
    extensions = [".gz"]
    signatures = ["hex:1f8b"]
    decoder = "formats.builtins.codings:gzip_decoder"
    encoder = "formats.builtins.codings:gzip_encoder"

    [preferences]
    readers = ["molecules.io:FastIO"]
    ```

Handler references are ``module:attribute`` import paths. A reference naming
a class is instantiated once per load, so the same path always yields the same
handler object (one ``PdbIO`` instance can be both reader and writer). Codec
references are stored as-is. Unknown keys and values of the wrong type raise
[`FormatsConfigError`][formats.errors.FormatsConfigError]; registry errors
(namespace clashes, duplicate handlers) propagate unchanged.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from formats.config.logging import get_logger
from formats.constants import (
    DECLARATION_FILE_NAME,
    HEX_SIGNATURE_PREFIX,
    PYPROJECT_FILE_NAME,
    PYPROJECT_TABLE,
)
from formats.errors import FormatsConfigError

if TYPE_CHECKING:
    from formats.config.logging import FormatsLogger
    from formats.registry.store import FormatRegistry

logger: FormatsLogger = get_logger(__name__)

TomlTable = dict[str, Any]

TOP_LEVEL_KEYS: Final[frozenset[str]] = frozenset({"formats", "codings", "preferences"})
FORMAT_KEYS: Final[frozenset[str]] = frozenset(
    {"name", "extensions", "signatures", "readers", "writers", "prefer_reader", "prefer_writer"}
)
CODING_KEYS: Final[frozenset[str]] = frozenset(
    {"name", "extensions", "signatures", "decoder", "encoder"}
)
PREFERENCE_KEYS: Final[frozenset[str]] = frozenset({"readers", "writers"})


# --- TOML file I/O ---


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file.

    Args:
        path (Path): TOML document to read (UTF-8).

    Returns:
        TomlTable: The parsed content as plain Python structures.

    Raises:
        FormatsConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as exc:
        logger.error("Error loading TOML from %s: %s", path, exc)
        raise FormatsConfigError(f"{path}: cannot read file: {exc}", path=path) from exc
    except TomlkitParseError as exc:
        logger.error("Error decoding TOML from %s: %s", path, exc)
        raise FormatsConfigError(f"{path}: invalid TOML: {exc}", path=path) from exc
    data: Any = doc.unwrap()
    return cast("TomlTable", data) if isinstance(data, dict) else {}


def _pyproject_table(data: TomlTable) -> TomlTable | None:
    table: Any = data
    for key in PYPROJECT_TABLE:
        if not isinstance(table, dict) or key not in table:
            return None
        table = table[key]
    if not isinstance(table, dict):
        raise FormatsConfigError("[tool.formats] must be a table")
    return cast("TomlTable", table)


def load_declarations(path: Path) -> TomlTable:
    """Return the declaration table stored in ``path``.

    For ``pyproject.toml`` this is the ``[tool.formats]`` table (empty when
    absent); for any other file it is the whole document.
    """
    data = load_toml_dict(path)
    if path.name == PYPROJECT_FILE_NAME:
        return _pyproject_table(data) or {}
    return data


def find_declaration_file(start: Path | None = None) -> Path | None:
    """Look for a declaration file in ``start`` and its parents.

    In each directory, ``formats.toml`` wins over a ``pyproject.toml`` that
    has a ``[tool.formats]`` table. The search stops at the first match.

    Args:
        start (Path | None): Directory to start from (current directory if None).

    Returns:
        Path | None: The declaration file, or None if there is none.
    """
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / DECLARATION_FILE_NAME
        if candidate.is_file():
            logger.debug("Found declaration file %s", candidate)
            return candidate
        pyproject = directory / PYPROJECT_FILE_NAME
        if pyproject.is_file() and _pyproject_table(load_toml_dict(pyproject)) is not None:
            logger.debug("Found [tool.formats] in %s", pyproject)
            return pyproject
    return None


# --- import-path resolution ---


class ObjectLoader:
    """Resolve ``module:attribute`` references, caching per loader.

    Handler references naming a class are instantiated (without arguments) the
    first time they are seen; later references to the same path return the
    same object.
    """

    def __init__(self) -> None:
        self._cache: dict[tuple[str, bool], object] = {}

    def load(self, ref: str, *, instantiate: bool = True) -> object:
        """Import and return the object named by ``ref``.

        Args:
            ref (str): ``"package.module:Attribute"`` (attribute may be dotted).
            instantiate (bool): Instantiate ``ref`` if it names a class.

        Returns:
            object: The referenced object (or its instance).

        Raises:
            FormatsConfigError: If ``ref`` is malformed or cannot be imported.
        """
        key = (ref, instantiate)
        if key in self._cache:
            return self._cache[key]

        module_name, sep, attr_path = ref.partition(":")
        if not sep or not module_name or not attr_path:
            raise FormatsConfigError(f"invalid import path {ref!r} (expected 'module:attribute')")
        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as exc:
            raise FormatsConfigError(f"cannot import {module_name!r}: {exc}", ref=ref) from exc
        for part in attr_path.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError as exc:
                raise FormatsConfigError(f"{ref!r}: no attribute {part!r}", ref=ref) from exc
        if instantiate and isinstance(obj, type):
            obj = obj()
        logger.trace("Loaded %s -> %r", ref, obj)
        self._cache[key] = obj
        return obj


# --- validation helpers ---


def _check_keys(table: TomlTable, allowed: frozenset[str], where: str) -> None:
    unknown = sorted(set(table) - allowed)
    if unknown:
        raise FormatsConfigError(f"{where}: unknown key(s): {', '.join(unknown)}")


def _get_str(table: TomlTable, key: str, where: str, *, required: bool = False) -> str | None:
    value = table.get(key)
    if value is None:
        if required:
            raise FormatsConfigError(f"{where}: missing required key {key!r}")
        return None
    if not isinstance(value, str):
        raise FormatsConfigError(f"{where}.{key}: expected a string, got {type(value).__name__}")
    return value


def _get_list(table: TomlTable, key: str, where: str) -> list[Any]:
    value = table.get(key, [])
    if not isinstance(value, list):
        raise FormatsConfigError(f"{where}.{key}: expected an array, got {type(value).__name__}")
    return value


def _get_str_list(table: TomlTable, key: str, where: str) -> list[str]:
    values = _get_list(table, key, where)
    for item in values:
        if not isinstance(item, str):
            raise FormatsConfigError(f"{where}.{key}: expected strings, got {item!r}")
    return values


def _get_tables(data: TomlTable, key: str) -> list[TomlTable]:
    values = _get_list(data, key, "declarations")
    for item in values:
        if not isinstance(item, dict):
            raise FormatsConfigError(f"{key}: expected an array of tables")
    return values


def parse_signature(value: Any, where: str = "signatures") -> bytes | str | list[int]:
    """Convert a declared signature to a value accepted by ``add_signature``.

    Strings prefixed with ``"hex:"`` are decoded as hexadecimal (whitespace
    allowed); other strings are kept (and later encoded as UTF-8); arrays of
    integers are kept as byte values.

    Raises:
        FormatsConfigError: If the value is neither, or the hex is invalid.
    """
    if isinstance(value, str):
        if value.startswith(HEX_SIGNATURE_PREFIX):
            digits = value[len(HEX_SIGNATURE_PREFIX) :]
            try:
                return bytes.fromhex(digits)
            except ValueError as exc:
                raise FormatsConfigError(f"{where}: invalid hex signature {value!r}") from exc
        return value
    if isinstance(value, list) and all(
        isinstance(b, int) and not isinstance(b, bool) for b in value
    ):
        return cast("list[int]", value)
    raise FormatsConfigError(f"{where}: expected a string or an array of bytes, got {value!r}")


# --- application ---


def apply_declarations(
    registry: FormatRegistry, data: TomlTable, *, loader: ObjectLoader | None = None
) -> None:
    """Register everything declared in ``data`` into ``registry``.

    Names are registered first, then extensions and signatures, handlers,
    per-format favorites, codecs and finally global preferences, so entries
    may refer to each other regardless of their order in the file.

    Args:
        registry (FormatRegistry): Registry to populate.
        data (TomlTable): Declaration table (see module docstring).
        loader (ObjectLoader | None): Loader to resolve import paths with;
            a fresh one (fresh handler instances) if None.

    Raises:
        FormatsConfigError: On unknown keys or ill-typed values.
    """
    objects = loader if loader is not None else ObjectLoader()
    _check_keys(data, TOP_LEVEL_KEYS, "declarations")
    formats = _get_tables(data, "formats")
    codings = _get_tables(data, "codings")
    preferences: Any = data.get("preferences", {})
    if not isinstance(preferences, dict):
        raise FormatsConfigError("preferences: expected a table")

    for i, entry in enumerate(formats):
        _check_keys(entry, FORMAT_KEYS, f"formats[{i}]")
        registry.add_format(cast("str", _get_str(entry, "name", f"formats[{i}]", required=True)))
    for i, entry in enumerate(codings):
        _check_keys(entry, CODING_KEYS, f"codings[{i}]")
        registry.add_coding(cast("str", _get_str(entry, "name", f"codings[{i}]", required=True)))

    for entry in (*formats, *codings):
        name: str = entry["name"]
        for ext in _get_str_list(entry, "extensions", name):
            registry.add_extension(name, ext)
        for sig in _get_list(entry, "signatures", name):
            registry.add_signature(name, parse_signature(sig, f"{name}.signatures"))

    for entry in formats:
        name = entry["name"]
        for ref in _get_str_list(entry, "readers", name):
            registry.add_reader(name, objects.load(ref))
        for ref in _get_str_list(entry, "writers", name):
            registry.add_writer(name, objects.load(ref))
        favorite_reader = _get_str(entry, "prefer_reader", name)
        if favorite_reader is not None:
            registry.prefer_reader(objects.load(favorite_reader), name)
        favorite_writer = _get_str(entry, "prefer_writer", name)
        if favorite_writer is not None:
            registry.prefer_writer(objects.load(favorite_writer), name)

    for entry in codings:
        name = entry["name"]
        decoder = _get_str(entry, "decoder", name)
        if decoder is not None:
            registry.set_decoder(name, cast("Any", objects.load(decoder, instantiate=False)))
        encoder = _get_str(entry, "encoder", name)
        if encoder is not None:
            registry.set_encoder(name, cast("Any", objects.load(encoder, instantiate=False)))

    prefs = cast("TomlTable", preferences)
    _check_keys(prefs, PREFERENCE_KEYS, "preferences")
    for ref in _get_str_list(prefs, "readers", "preferences"):
        registry.prefer_reader(objects.load(ref))
    for ref in _get_str_list(prefs, "writers", "preferences"):
        registry.prefer_writer(objects.load(ref))

    logger.info(
        "Applied declarations: %d format(s), %d coding(s)", len(formats), len(codings)
    )


def load_into(
    registry: FormatRegistry, path: Path, *, loader: ObjectLoader | None = None
) -> None:
    """Read declarations from ``path`` and apply them to ``registry``."""
    logger.debug("Loading declarations from %s", path)
    apply_declarations(registry, load_declarations(path), loader=loader)
