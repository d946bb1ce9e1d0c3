"""Host declaration parsers.

Each module implements `core.interfaces.declaration_source.DeclarationSource`
for one kind of input.
"""

from __future__ import annotations

from pathlib import Path

from adapters.declarations.loader import JsonDeclarations, load_declaration_file
from adapters.declarations.python_source import PythonSourceDeclarations, declarations_from_source
from adapters.declarations.reflection import ReflectedDeclarations, bind, reflect_type
from core.config import ConfSettings
from core.errors import DeclarationSourceError
from core.interfaces.declaration_source import DeclarationSource


def open_declarations(
    path: Path,
    settings: ConfSettings | None = None,
    *,
    module: str | None = None,
) -> DeclarationSource:
    """Pick a declaration source from the file extension (.py or .json)."""

    settings = settings or ConfSettings()
    suffix = path.suffix.lower()
    if suffix == ".py":
        return PythonSourceDeclarations(
            path,
            module=module,
            namespace=settings.namespace,
            encoding=settings.encoding,
        )
    if suffix == ".json":
        return JsonDeclarations(path, encoding=settings.encoding)
    raise DeclarationSourceError(f"{path}: expected a .py source or a .json declaration file")


__all__ = [
    "JsonDeclarations",
    "PythonSourceDeclarations",
    "ReflectedDeclarations",
    "bind",
    "declarations_from_source",
    "load_declaration_file",
    "open_declarations",
    "reflect_type",
]
