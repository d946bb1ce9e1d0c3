"""Recognized annotation names.

Read-only tables shared by every derivation. The order of the argument
tuples defines the slot order of `ResolvedArguments`.
"""

from __future__ import annotations

NAMESPACE = "from_config"

CLI_ANNOTATIONS: tuple[str, ...] = ("cli",)

TYPE_ARGUMENTS: tuple[str, ...] = ("path", "serialized", "serializer", "deserializer")

FIELD_ARGUMENTS: tuple[str, ...] = ("save",)
