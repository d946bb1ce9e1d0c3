"""Descriptors produced by the engine and consumed by the code generator.

Why a separate module:
- Declarations (`models.py`) are raw input; descriptors are the validated,
  canonical output. Keeping them apart makes the direction of the pipeline
  obvious.
- Descriptors are frozen: built once per type, never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.models import LiteralValue


class SourceKind(str, Enum):
    """Where the default configuration comes from."""

    PATH = "path"
    SERIALIZED = "serialized"


class InputSource(BaseModel):
    """Default input source of a configuration type.

    A single `kind` field makes "both" and "neither" unrepresentable once a
    descriptor exists.
    """

    model_config = ConfigDict(frozen=True)

    kind: SourceKind
    value: LiteralValue = Field(
        ...,
        description="Default path expression or inline serialized form.",
    )


class FieldDescriptor(BaseModel):
    """Persistence description of one named field."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    save: LiteralValue | None = Field(
        default=None,
        description="Persistence override; interpreted by the code generator.",
    )


class ConfigDescriptor(BaseModel):
    """Canonical description of how a type is populated and persisted."""

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(..., min_length=1)
    module: str | None = Field(default=None)
    source: InputSource
    serializer: LiteralValue | None = Field(
        default=None,
        description="Reference to a custom serializer; None means the default format handler.",
    )
    deserializer: LiteralValue | None = Field(
        default=None,
        description="Reference to a custom deserializer; None means the default format handler.",
    )
    cli_integration: bool = Field(
        default=False,
        description="True when the type carries a CLI-integration annotation.",
    )
    fields: tuple[FieldDescriptor, ...] = Field(default=())

    @property
    def source_path(self) -> LiteralValue | None:
        return self.source.value if self.source.kind is SourceKind.PATH else None

    @property
    def source_serialized(self) -> LiteralValue | None:
        return self.source.value if self.source.kind is SourceKind.SERIALIZED else None

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]
