# pyright: reportAny=false, reportExplicitAny=false, reportUnknownVariableType=false
"""Raw configuration sources: TOML files and ``CAP_MANAGER_*`` variables.

Everything here works on plain nested dictionaries. Validation happens later,
once all sources have been merged.
"""

from __future__ import annotations

import copy
import os
import tomllib
from typing import TYPE_CHECKING, Any

import orjson

from cap_manager.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ENV_PREFIX = "CAP_MANAGER_"
ENV_SECTION_SEPARATOR = "__"

_BOOLEANS = {"true": True, "false": False}


def read_toml_file(path: Path) -> dict[str, Any]:
    """Load one TOML document as a dictionary.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ConfigLoadError: If the document is not valid TOML.
    """
    try:
        raw = path.read_bytes()
        return tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        msg = f"Failed to parse TOML file {path}: {e}"
        # lineno and colno exist on Python 3.14+ only
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def copy_value(value: Any) -> Any:
    """Return an independent copy of a configuration value."""
    return copy.deepcopy(value)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Layer ``override`` on top of ``base`` and return a new dictionary.

    Tables present on both sides merge key by key; for anything else the
    override wins. Neither argument is modified.
    """
    merged = copy.deepcopy(dict(base))
    for key, incoming in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(incoming, dict):
            merged[key] = deep_merge(current, incoming)
        else:
            merged[key] = copy.deepcopy(incoming)
    return merged


def parse_string_value(value: str) -> Any:
    """Coerce an environment string to the most specific TOML-like type.

    Tried in order: ``true``/``false`` (any case), integer, float (only when
    the text has a decimal point), JSON array or object. Anything else stays a
    string.

    Examples:
        >>> parse_string_value("FALSE")
        False
        >>> parse_string_value("8080")
        8080
        >>> parse_string_value("tasks.json")
        'tasks.json'
    """
    if value.lower() in _BOOLEANS:
        return _BOOLEANS[value.lower()]

    numeric_types: tuple[type[int] | type[float], ...] = (
        (int, float) if "." in value else (int,)
    )
    for numeric in numeric_types:
        try:
            return numeric(value)
        except ValueError:
            continue

    if value[:1] + value[-1:] in ("[]", "{}"):
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError:
            return value

    return value


def set_nested_key(d: dict[str, Any], key_path: str, value: Any) -> None:
    """Assign ``value`` at a dotted path, replacing non-table parents.

    Example:
        >>> target = {}
        >>> set_nested_key(target, "store.file", "tasks.json")
        >>> target
        {'store': {'file': 'tasks.json'}}
    """
    head, _, rest = key_path.partition(".")
    if not rest:
        d[head] = value
        return
    child = d.get(head)
    if not isinstance(child, dict):
        child = d[head] = {}
    set_nested_key(child, rest, value)


def parse_env_vars(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Collect configuration from environment variables.

    ``CAP_MANAGER_SERVER__PORT=8080`` yields ``{"server": {"port": 8080}}``.
    Names without the ``__`` separator (``CAP_MANAGER_DEBUG``,
    ``CAP_MANAGER_STRICT_CONFIG``) are switches read elsewhere and are
    skipped here.
    """
    values: dict[str, Any] = {}
    for name, raw in os.environ.items():
        suffix = name.removeprefix(prefix)
        if suffix == name or ENV_SECTION_SEPARATOR not in suffix:
            continue
        dotted = suffix.lower().replace(ENV_SECTION_SEPARATOR, ".")
        set_nested_key(values, dotted, parse_string_value(raw))
    return values
