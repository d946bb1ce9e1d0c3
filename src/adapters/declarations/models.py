"""Models for JSON declaration files.

Idea:
- Instead of importing Python code, a build tool can describe its types in a
  JSON file and let the engine check them. This format can also express
  shapes Python source never produces (unnamed fields, unions).

Example::

    {"types": [{"name": "AppConfig", "module": "app.settings",
                "annotations": [{"name": "from_config",
                                 "entries": [{"name": "path", "value": "app.json"}]}],
                "fields": [{"name": "host"}, {"name": "port"}]}]}
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from core.domain.models import (
    AnnotationEntry,
    AnnotationShape,
    DeclarationKind,
    EntryKind,
    FieldDeclaration,
    LiteralValue,
    RawAnnotation,
    TypeDeclaration,
)

JsonScalar = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class EntrySpec(BaseModel):
    kind: EntryKind = Field(default=EntryKind.NAME_VALUE)
    name: str | None = None
    value: JsonScalar = None

    def to_entry(self) -> AnnotationEntry:
        literal = LiteralValue.of(self.value) if self.value is not None else None
        return AnnotationEntry(kind=self.kind, name=self.name, value=literal)


class AnnotationSpec(BaseModel):
    name: str = Field(..., min_length=1)
    shape: AnnotationShape = Field(default=AnnotationShape.LIST)
    entries: list[EntrySpec] = Field(default_factory=list)

    def to_annotation(self) -> RawAnnotation:
        return RawAnnotation(
            name=self.name,
            shape=self.shape,
            entries=tuple(entry.to_entry() for entry in self.entries),
        )


class FieldSpec(BaseModel):
    name: str | None = None
    annotations: list[AnnotationSpec] = Field(default_factory=list)


class TypeSpec(BaseModel):
    name: str = Field(..., min_length=1)
    kind: DeclarationKind = Field(default=DeclarationKind.STRUCT)
    module: str | None = None
    annotations: list[AnnotationSpec] = Field(default_factory=list)
    fields: list[FieldSpec] = Field(default_factory=list)

    def to_declaration(self) -> TypeDeclaration:
        return TypeDeclaration(
            name=self.name,
            kind=self.kind,
            module=self.module,
            annotations=tuple(a.to_annotation() for a in self.annotations),
            fields=tuple(
                FieldDeclaration(
                    name=f.name,
                    annotations=tuple(a.to_annotation() for a in f.annotations),
                )
                for f in self.fields
            ),
        )


class DeclarationFile(BaseModel):
    types: list[TypeSpec] = Field(default_factory=list)
