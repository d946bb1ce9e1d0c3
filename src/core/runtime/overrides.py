"""Command-line overrides for CLI-integrated configuration types.

Overrides use dotted keys on the persisted form:

- ``server.port=9000`` sets a (possibly nested) key
- ``~server.debug`` removes a key

Values are parsed as JSON when possible (``9000``, ``true``, ``[1, 2]``)
and kept as plain strings otherwise.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from core.errors import BindingError


def parse_override(item: str) -> tuple[list[str], Any]:
    """Split ``key=value`` into its dotted key path and parsed value."""

    key, sep, raw = item.partition("=")
    key = key.strip()
    if not sep or not key:
        raise BindingError(f"command-line overrides must look like key=value, got {item!r}")
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return key.split("."), value


def _remove(data: dict[str, Any], dotpath: str) -> None:
    node: Any = data
    *parents, last = dotpath.split(".")
    for part in parents:
        node = node.get(part) if isinstance(node, dict) else None
    if not isinstance(node, dict) or last not in node:
        raise BindingError(f"cannot remove {dotpath!r}: no such key")
    del node[last]


def apply_overrides(data: dict[str, Any], overrides: Iterable[str]) -> dict[str, Any]:
    """Apply overrides in order, mutating and returning `data`."""

    for item in overrides:
        if item.startswith("~"):
            _remove(data, item[1:].strip())
            continue

        path, value = parse_override(item)
        node = data
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = value
    return data
