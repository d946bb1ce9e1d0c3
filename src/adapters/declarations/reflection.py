"""Declarations read from live classes.

Reads the markers recorded by `core.markers` on dataclasses, pydantic models
and plain annotated classes. `bind` runs the whole pipeline at run time and
returns a ready binding class, the reflection-driven counterpart of a
generated module. Plain classes can be checked but not bound: loading needs a
dataclass or a pydantic model.
"""

from __future__ import annotations

import dataclasses
import typing
from enum import Enum
from typing import Any, ClassVar, get_origin

from pydantic import BaseModel

from core.config import ConfSettings
from core.domain.models import DeclarationKind, FieldDeclaration, RawAnnotation, TypeDeclaration
from core.errors import DeclarationSourceError
from core.markers import ConfigAnnotation, annotations_of
from core.runtime.binding import ConfigBinding, binding_for
from core.services.derivation import derive


def _kind(cls: type) -> DeclarationKind:
    if issubclass(cls, Enum):
        return DeclarationKind.ENUM
    if issubclass(cls, tuple):
        return DeclarationKind.TUPLE_STRUCT
    return DeclarationKind.STRUCT


def _metadata_annotations(metadata: typing.Iterable[Any]) -> tuple[RawAnnotation, ...]:
    return tuple(item.annotation for item in metadata if isinstance(item, ConfigAnnotation))


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise DeclarationSourceError(f"cannot resolve annotations of {cls.__qualname__}: {exc}") from exc


def _fields(cls: type) -> tuple[FieldDeclaration, ...]:
    if issubclass(cls, BaseModel):
        return tuple(
            FieldDeclaration(name=name, annotations=_metadata_annotations(info.metadata))
            for name, info in cls.model_fields.items()
        )

    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls)]
    else:
        names = [
            name
            for name, hint in hints.items()
            if not name.startswith("_") and get_origin(hint) is not ClassVar and hint is not ClassVar
        ]

    fields: list[FieldDeclaration] = []
    for name in names:
        hint = hints.get(name)
        metadata = getattr(hint, "__metadata__", ()) if get_origin(hint) is typing.Annotated else ()
        fields.append(FieldDeclaration(name=name, annotations=_metadata_annotations(metadata)))
    return tuple(fields)


def reflect_type(cls: type) -> TypeDeclaration:
    kind = _kind(cls)
    return TypeDeclaration(
        name=cls.__name__,
        kind=kind,
        module=cls.__module__,
        annotations=annotations_of(cls),
        fields=_fields(cls) if kind is DeclarationKind.STRUCT else (),
    )


class ReflectedDeclarations:
    """`DeclarationSource` over already-imported classes."""

    def __init__(self, *types: type) -> None:
        self._types = types

    def declarations(self) -> list[TypeDeclaration]:
        return [reflect_type(cls) for cls in self._types]


def bind(cls: type, settings: ConfSettings | None = None) -> type[ConfigBinding]:
    """Derive `cls` and return its binding class.

    Raises the derivation error for invalid annotations and `BindingError` when
    `cls` cannot be validated or two fields persist under the same key.
    """

    settings = settings or ConfSettings()
    descriptor = derive(reflect_type(cls), settings).unwrap()
    return binding_for(cls, descriptor, settings=settings)
