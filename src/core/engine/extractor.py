"""Annotation extraction.

Isolates the annotations that belong to one namespace and flattens them into
ordered name/value pairs. Cardinality is not checked here; see `resolver`.
"""

from __future__ import annotations

from typing import Iterable

from core.domain.models import AnnotationShape, EntryKind, NameValue, RawAnnotation
from core.errors import MalformedAnnotationShape, UnsupportedAnnotationEntry


def extract_name_values(
    annotations: Iterable[RawAnnotation],
    namespace: str,
    *,
    type_name: str,
    field_name: str | None = None,
) -> list[NameValue]:
    """Return the namespace's name/value pairs in declaration order.

    Several instances of the namespace annotation are flattened into one list.
    Raises `MalformedAnnotationShape` for a namespace annotation that is not
    list-form and `UnsupportedAnnotationEntry` for any entry that is not a
    plain `name = literal` pair.
    """

    pairs: list[NameValue] = []
    for annotation in annotations:
        if annotation.name != namespace:
            continue
        if annotation.shape is not AnnotationShape.LIST:
            raise MalformedAnnotationShape(
                namespace=namespace,
                shape=annotation.shape,
                type_name=type_name,
                field_name=field_name,
            )
        for entry in annotation.entries:
            if entry.kind is not EntryKind.NAME_VALUE or entry.name is None or entry.value is None:
                raise UnsupportedAnnotationEntry(
                    namespace=namespace,
                    entry=entry,
                    type_name=type_name,
                    field_name=field_name,
                )
            pairs.append(NameValue(name=entry.name, value=entry.value))
    return pairs


def has_annotation(annotations: Iterable[RawAnnotation], names: Iterable[str]) -> bool:
    """True if any annotation carries one of `names`, whatever its arguments."""

    wanted = set(names)
    return any(annotation.name in wanted for annotation in annotations)
