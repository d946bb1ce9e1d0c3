"""Runtime view of field persistence overrides.

Meaning of `save`:
- absent or ``True``: persisted under the field name
- ``False`` or ``"skip"``: never written, never read
- any other string: persisted under that key
- a number: default value used when the key is absent
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from core.domain.descriptors import FieldDescriptor

SKIP = "skip"

SaveValue = Union[bool, int, float, str, None]


@dataclass(frozen=True)
class FieldBinding:
    name: str
    save: SaveValue = None

    @classmethod
    def from_descriptor(cls, descriptor: FieldDescriptor) -> "FieldBinding":
        save = descriptor.save.value if descriptor.save is not None else None
        return cls(name=descriptor.name, save=save)

    @property
    def excluded(self) -> bool:
        return self.save is False or self.save == SKIP

    @property
    def key(self) -> str:
        if isinstance(self.save, str) and self.save != SKIP:
            return self.save
        return self.name

    @property
    def has_default(self) -> bool:
        return isinstance(self.save, (int, float)) and not isinstance(self.save, bool)


def shared_keys(fields: Iterable[FieldBinding]) -> dict[str, list[str]]:
    """Persisted keys claimed by more than one stored field, with the field names."""

    owners: dict[str, list[str]] = {}
    for field in fields:
        if not field.excluded:
            owners.setdefault(field.key, []).append(field.name)
    return {key: names for key, names in owners.items() if len(names) > 1}


def describe_shared_keys(shared: dict[str, list[str]]) -> str:
    return "; ".join(
        f"key {key!r} is written by {', '.join(names)}" for key, names in shared.items()
    )
