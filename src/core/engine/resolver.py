"""Argument resolution.

Maps extracted name/value pairs onto a fixed, ordered set of recognized
argument names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from core.domain.models import LiteralValue, NameValue
from core.errors import DuplicateArgument, TooManyArguments, UnrecognizedArgumentName


@dataclass(frozen=True)
class ResolvedArguments:
    """One optional literal per recognized name, index-aligned with `names`."""

    names: tuple[str, ...]
    values: tuple[LiteralValue | None, ...]

    def __post_init__(self) -> None:
        if len(self.names) != len(self.values):
            raise ValueError("one value slot is required per recognized name")

    def get(self, name: str) -> LiteralValue | None:
        return self.values[self.names.index(name)]

    def __getitem__(self, index: int) -> LiteralValue | None:
        return self.values[index]

    def __iter__(self) -> Iterator[LiteralValue | None]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


def resolve_arguments(
    pairs: Sequence[NameValue],
    recognized: Sequence[str],
    *,
    type_name: str,
    field_name: str | None = None,
) -> ResolvedArguments:
    """Place each pair in the slot of its recognized name.

    The arity check runs before any name is looked at: no valid input can
    supply more entries than there are slots.
    """

    if len(pairs) > len(recognized):
        raise TooManyArguments(
            supplied=len(pairs),
            recognized=recognized,
            type_name=type_name,
            field_name=field_name,
        )

    slots: list[LiteralValue | None] = [None] * len(recognized)
    for pair in pairs:
        try:
            position = list(recognized).index(pair.name)
        except ValueError:
            raise UnrecognizedArgumentName(
                name=pair.name,
                recognized=recognized,
                type_name=type_name,
                field_name=field_name,
            ) from None
        previous = slots[position]
        if previous is not None:
            raise DuplicateArgument(
                name=pair.name,
                first=previous,
                second=pair.value,
                type_name=type_name,
                field_name=field_name,
            )
        slots[position] = pair.value

    return ResolvedArguments(names=tuple(recognized), values=tuple(slots))
