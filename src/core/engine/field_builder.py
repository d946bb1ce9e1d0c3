"""Field descriptor construction."""

from __future__ import annotations

from core.domain.descriptors import FieldDescriptor
from core.domain.models import DeclarationKind, FieldDeclaration, TypeDeclaration
from core.engine.extractor import extract_name_values
from core.engine.names import FIELD_ARGUMENTS, NAMESPACE
from core.engine.resolver import resolve_arguments
from core.errors import UnnamedFieldUnsupported, UnsupportedDataShape


def build_field_descriptors(
    declaration: TypeDeclaration,
    *,
    namespace: str = NAMESPACE,
) -> tuple[FieldDescriptor, ...]:
    """One descriptor per field, in declaration order.

    Shape checks come first: a non-struct type or any unnamed field fails the
    whole type before a single field annotation is read.
    """

    if declaration.kind is not DeclarationKind.STRUCT:
        raise UnsupportedDataShape(shape=declaration.kind, type_name=declaration.name)

    named: list[tuple[str, FieldDeclaration]] = []
    for position, field in enumerate(declaration.fields):
        if field.name is None:
            raise UnnamedFieldUnsupported(position=position, type_name=declaration.name)
        named.append((field.name, field))

    return tuple(_build_field(declaration.name, name, field, namespace) for name, field in named)


def _build_field(type_name: str, name: str, field: FieldDeclaration, namespace: str) -> FieldDescriptor:
    pairs = extract_name_values(
        field.annotations,
        namespace,
        type_name=type_name,
        field_name=name,
    )
    (save,) = resolve_arguments(pairs, FIELD_ARGUMENTS, type_name=type_name, field_name=name)
    return FieldDescriptor(name=name, save=save)
