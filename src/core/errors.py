"""Error taxonomy.

Every derivation error is fatal for the type it concerns and carries the
type (and field, when relevant) so the author can fix the annotation
without reading engine internals. The derivation service turns these into
result values; the engine itself just raises them.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.domain.models import AnnotationEntry, AnnotationShape, DeclarationKind, LiteralValue


def _names(names: Iterable[str]) -> str:
    return ", ".join(f"`{name}`" for name in names) or "(none)"


class SimpleConfError(Exception):
    """Base class for every error raised by this package."""


class ConfigDerivationError(SimpleConfError):
    """A type's annotations cannot be turned into a descriptor."""

    kind = "derivation_error"

    def __init__(self, detail: str, *, type_name: str, field_name: str | None = None) -> None:
        self.type_name = type_name
        self.field_name = field_name
        self.detail = detail
        super().__init__(f"{self.location}: {detail}")

    @property
    def location(self) -> str:
        if self.field_name is None:
            return self.type_name
        return f"{self.type_name}.{self.field_name}"


class MalformedAnnotationShape(ConfigDerivationError):
    kind = "malformed_annotation_shape"

    def __init__(
        self,
        *,
        namespace: str,
        shape: AnnotationShape,
        type_name: str,
        field_name: str | None = None,
    ) -> None:
        self.namespace = namespace
        self.shape = shape
        super().__init__(
            f"`{namespace}` must be used as `{namespace}(name = value, ...)`, "
            f"found {shape.value.replace('_', '/')} form",
            type_name=type_name,
            field_name=field_name,
        )


class UnsupportedAnnotationEntry(ConfigDerivationError):
    kind = "unsupported_annotation_entry"

    def __init__(
        self,
        *,
        namespace: str,
        entry: AnnotationEntry,
        type_name: str,
        field_name: str | None = None,
    ) -> None:
        self.namespace = namespace
        self.entry = entry
        super().__init__(
            f"`{namespace}` only accepts `name = literal` arguments, found {entry.describe()}",
            type_name=type_name,
            field_name=field_name,
        )


class TooManyArguments(ConfigDerivationError):
    kind = "too_many_arguments"

    def __init__(
        self,
        *,
        supplied: int,
        recognized: Sequence[str],
        type_name: str,
        field_name: str | None = None,
    ) -> None:
        self.supplied = supplied
        self.recognized = tuple(recognized)
        super().__init__(
            f"too many arguments: {supplied} supplied, at most {len(self.recognized)} "
            f"accepted ({_names(self.recognized)})",
            type_name=type_name,
            field_name=field_name,
        )


class UnrecognizedArgumentName(ConfigDerivationError):
    kind = "unrecognized_argument_name"

    def __init__(
        self,
        *,
        name: str,
        recognized: Sequence[str],
        type_name: str,
        field_name: str | None = None,
    ) -> None:
        self.name = name
        self.recognized = tuple(recognized)
        super().__init__(
            f"unsupported argument `{name}`; expected one of {_names(self.recognized)}",
            type_name=type_name,
            field_name=field_name,
        )


class DuplicateArgument(ConfigDerivationError):
    kind = "duplicate_argument"

    def __init__(
        self,
        *,
        name: str,
        first: LiteralValue,
        second: LiteralValue,
        type_name: str,
        field_name: str | None = None,
    ) -> None:
        self.name = name
        self.first = first
        self.second = second
        super().__init__(
            f"argument `{name}` given twice ({first} and {second})",
            type_name=type_name,
            field_name=field_name,
        )


class MissingInputSource(ConfigDerivationError):
    kind = "missing_input_source"

    def __init__(self, *, type_name: str) -> None:
        super().__init__(
            "expected either a `path` or a `serialized` argument",
            type_name=type_name,
        )


class ConflictingInputSource(ConfigDerivationError):
    kind = "conflicting_input_source"

    def __init__(self, *, path: LiteralValue, serialized: LiteralValue, type_name: str) -> None:
        self.path = path
        self.serialized = serialized
        super().__init__(
            f"`path` ({path}) and `serialized` ({serialized}) are mutually exclusive",
            type_name=type_name,
        )


class UnnamedFieldUnsupported(ConfigDerivationError):
    kind = "unnamed_field_unsupported"

    def __init__(self, *, position: int, type_name: str) -> None:
        self.position = position
        super().__init__(
            f"field #{position} has no name; only named fields are supported",
            type_name=type_name,
        )


class UnsupportedDataShape(ConfigDerivationError):
    kind = "unsupported_data_shape"

    def __init__(self, *, shape: DeclarationKind, type_name: str) -> None:
        self.shape = shape
        super().__init__(
            f"only plain structures with named fields are supported, found {shape.value.replace('_', ' ')}",
            type_name=type_name,
        )


class DeclarationSourceError(SimpleConfError):
    """A declaration source (file, module) cannot be read or parsed."""


class CodeGenerationError(SimpleConfError):
    """A descriptor cannot be rendered into a binding module."""


class BindingError(SimpleConfError):
    """A generated or reflected binding failed at run time."""
