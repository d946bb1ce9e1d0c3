"""Annotation-parsing and descriptor-construction engine.

Pure functions only: declaration in, descriptor out, or a
`ConfigDerivationError` raised at the first problem.
"""

from core.engine.extractor import extract_name_values, has_annotation
from core.engine.field_builder import build_field_descriptors
from core.engine.names import CLI_ANNOTATIONS, FIELD_ARGUMENTS, NAMESPACE, TYPE_ARGUMENTS
from core.engine.resolver import ResolvedArguments, resolve_arguments
from core.engine.type_builder import build_config_descriptor, resolve_input_source

__all__ = [
    "CLI_ANNOTATIONS",
    "FIELD_ARGUMENTS",
    "NAMESPACE",
    "TYPE_ARGUMENTS",
    "ResolvedArguments",
    "build_config_descriptor",
    "build_field_descriptors",
    "extract_name_values",
    "has_annotation",
    "resolve_arguments",
    "resolve_input_source",
]
