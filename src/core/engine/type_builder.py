"""Type descriptor construction.

Resolves the type-level namespace annotation into a `ConfigDescriptor`:
one input source (path or inline serialized form), optional serializer and
deserializer references and the CLI-integration flag.
"""

from __future__ import annotations

from typing import Sequence

from core.domain.descriptors import ConfigDescriptor, InputSource, SourceKind
from core.domain.models import TypeDeclaration
from core.engine.extractor import extract_name_values, has_annotation
from core.engine.field_builder import build_field_descriptors
from core.engine.names import CLI_ANNOTATIONS, NAMESPACE, TYPE_ARGUMENTS
from core.engine.resolver import ResolvedArguments, resolve_arguments
from core.errors import ConflictingInputSource, MissingInputSource


def resolve_input_source(arguments: ResolvedArguments, *, type_name: str) -> InputSource:
    """Pick the single default source out of `path` / `serialized`."""

    path = arguments.get("path")
    serialized = arguments.get("serialized")
    if path is not None and serialized is not None:
        raise ConflictingInputSource(path=path, serialized=serialized, type_name=type_name)
    if path is not None:
        return InputSource(kind=SourceKind.PATH, value=path)
    if serialized is not None:
        return InputSource(kind=SourceKind.SERIALIZED, value=serialized)
    raise MissingInputSource(type_name=type_name)


def build_config_descriptor(
    declaration: TypeDeclaration,
    *,
    namespace: str = NAMESPACE,
    cli_annotations: Sequence[str] = CLI_ANNOTATIONS,
) -> ConfigDescriptor:
    """Build the descriptor of one annotated type.

    Type-level arguments are resolved before the fields, so a broken type
    annotation is reported even when the field list is broken too.
    """

    pairs = extract_name_values(declaration.annotations, namespace, type_name=declaration.name)
    arguments = resolve_arguments(pairs, TYPE_ARGUMENTS, type_name=declaration.name)
    source = resolve_input_source(arguments, type_name=declaration.name)
    fields = build_field_descriptors(declaration, namespace=namespace)

    return ConfigDescriptor(
        type_name=declaration.name,
        module=declaration.module,
        source=source,
        serializer=arguments.get("serializer"),
        deserializer=arguments.get("deserializer"),
        cli_integration=has_annotation(declaration.annotations, cli_annotations),
        fields=fields,
    )
