"""Declaration models (Pydantic v2).

Why here:
- This is the boundary with the host declaration parser: a Python source
  scanner, runtime reflection or a JSON declaration file all hand the core
  a `TypeDeclaration` built from these models.
- Every model is frozen, so a declaration cannot change between two
  derivations of the same type.

Note:
- These models describe *what* was declared, not whether it is valid. All
  validation of annotation shape and cardinality lives in `core.engine`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr, model_validator
from pydantic.config import ConfigDict


Scalar = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


class LiteralKind(str, Enum):
    """Literal categories accepted as annotation argument values."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


_KIND_BY_TYPE: dict[type, LiteralKind] = {
    bool: LiteralKind.BOOLEAN,
    int: LiteralKind.INTEGER,
    float: LiteralKind.FLOAT,
    str: LiteralKind.STRING,
}


def is_literal(value: Any) -> bool:
    """True when `value` can be carried by a `LiteralValue`."""

    return type(value) in _KIND_BY_TYPE


class LiteralValue(BaseModel):
    """A tagged literal value.

    The kind is stored next to the value so that `1`, `1.0` and `True` stay
    distinct descriptors even though Python compares them equal.
    """

    model_config = ConfigDict(frozen=True)

    kind: LiteralKind = Field(..., description="Literal category.")
    value: Scalar = Field(..., description="The literal itself.")

    @model_validator(mode="after")
    def _kind_matches_value(self) -> "LiteralValue":
        actual = _KIND_BY_TYPE[type(self.value)]
        if actual is not self.kind:
            raise ValueError(f"literal {self.value!r} is {actual.value}, not {self.kind.value}")
        return self

    @classmethod
    def of(cls, value: Any) -> "LiteralValue":
        """Wrap a Python scalar, inferring its kind."""

        kind = _KIND_BY_TYPE.get(type(value))
        if kind is None:
            raise TypeError(f"{value!r} is not a string, integer, float or boolean literal")
        return cls(kind=kind, value=value)

    def render(self) -> str:
        """Python source form of the literal (used in messages and codegen)."""

        return repr(self.value)

    def __str__(self) -> str:
        return self.render()


class AnnotationShape(str, Enum):
    """Syntactic shape of an annotation.

    - LIST: `name(key=value, ...)`
    - WORD: bare `name`
    - NAME_VALUE: `name = value`
    """

    LIST = "list"
    WORD = "word"
    NAME_VALUE = "name_value"


class EntryKind(str, Enum):
    """Shape of one entry inside a list-form annotation."""

    NAME_VALUE = "name_value"
    FLAG = "flag"
    NESTED = "nested"
    POSITIONAL = "positional"


class AnnotationEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: EntryKind = Field(default=EntryKind.NAME_VALUE)
    name: str | None = Field(default=None, description="Argument name (name/value, flag, nested).")
    value: LiteralValue | None = Field(default=None, description="Literal value (name/value, positional).")

    @classmethod
    def name_value(cls, name: str, value: Any) -> "AnnotationEntry":
        literal = value if isinstance(value, LiteralValue) else LiteralValue.of(value)
        return cls(kind=EntryKind.NAME_VALUE, name=name, value=literal)

    @classmethod
    def flag(cls, name: str) -> "AnnotationEntry":
        return cls(kind=EntryKind.FLAG, name=name)

    @classmethod
    def nested(cls, name: str | None = None) -> "AnnotationEntry":
        return cls(kind=EntryKind.NESTED, name=name)

    @classmethod
    def positional(cls, value: Any) -> "AnnotationEntry":
        literal = value if isinstance(value, LiteralValue) else LiteralValue.of(value)
        return cls(kind=EntryKind.POSITIONAL, value=literal)

    def describe(self) -> str:
        """Short human description for diagnostics."""

        if self.kind is EntryKind.NAME_VALUE:
            return f"{self.name} = {self.value}"
        if self.kind is EntryKind.POSITIONAL:
            return f"positional literal {self.value}"
        if self.kind is EntryKind.FLAG:
            return f"bare flag `{self.name}`"
        if self.name:
            return f"non-literal argument `{self.name}`"
        return "nested argument list"


class RawAnnotation(BaseModel):
    """One declaration-level annotation as handed over by the host parser."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    shape: AnnotationShape = Field(default=AnnotationShape.LIST)
    entries: tuple[AnnotationEntry, ...] = Field(default=())

    @classmethod
    def list_of(cls, name: str, /, **arguments: Any) -> "RawAnnotation":
        """Build a list-form annotation from keyword arguments, in order."""

        return cls(
            name=name,
            shape=AnnotationShape.LIST,
            entries=tuple(AnnotationEntry.name_value(key, value) for key, value in arguments.items()),
        )

    @classmethod
    def word(cls, name: str) -> "RawAnnotation":
        return cls(name=name, shape=AnnotationShape.WORD)


class NameValue(BaseModel):
    """Normalized name/value pair extracted from a namespace annotation."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: LiteralValue


class DeclarationKind(str, Enum):
    """Data shape of an annotated type."""

    STRUCT = "struct"
    TUPLE_STRUCT = "tuple_struct"
    UNIT_STRUCT = "unit_struct"
    ENUM = "enum"
    UNION = "union"


class FieldDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = Field(
        default=None,
        description="Field name; None for positional (tuple-style) fields.",
    )
    annotations: tuple[RawAnnotation, ...] = Field(default=())


class TypeDeclaration(BaseModel):
    """Structured view of one type declaration."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Type name as declared.")
    kind: DeclarationKind = Field(default=DeclarationKind.STRUCT)
    module: str | None = Field(
        default=None,
        description="Dotted module the type lives in (needed by the code generator).",
    )
    annotations: tuple[RawAnnotation, ...] = Field(default=())
    fields: tuple[FieldDeclaration, ...] = Field(default=())
