"""Declarations read from Python source, without importing it.

Every class decorated with the namespace decorator (called or bare) becomes a
declaration. Decorators map to annotations:

- ``@ns(key=literal, ...)`` -> list form, one name/value entry per keyword
- ``@ns`` -> word form
- positional literals, ``**kwargs`` and non-literal values are kept as
  positional / nested entries so the engine can reject them with context.

Fields are the annotated assignments of the class body. Field annotations come
from ``Annotated[T, ns(...)]`` metadata.
"""

from __future__ import annotations

import ast
import logging
from pathlib import Path
from typing import Iterator

from core.domain.models import (
    AnnotationEntry,
    AnnotationShape,
    DeclarationKind,
    FieldDeclaration,
    RawAnnotation,
    TypeDeclaration,
    is_literal,
)
from core.engine.names import NAMESPACE
from core.errors import DeclarationSourceError

logger = logging.getLogger(__name__)

_ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"}
_TUPLE_BASES = {"NamedTuple", "tuple"}
_UNION_BASES = {"Union"}


def _terminal_name(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _literal(node: ast.expr) -> tuple[bool, object]:
    """(True, value) when `node` is a string/number/bool literal."""

    if isinstance(node, ast.Constant) and is_literal(node.value):
        return True, node.value
    if (
        isinstance(node, ast.UnaryOp)
        and isinstance(node.op, (ast.USub, ast.UAdd))
        and isinstance(node.operand, ast.Constant)
        and type(node.operand.value) in (int, float)
    ):
        value = node.operand.value
        return True, -value if isinstance(node.op, ast.USub) else value
    return False, None


def annotation_from_node(node: ast.expr) -> RawAnnotation | None:
    """Convert a decorator or `Annotated` metadata expression."""

    if isinstance(node, ast.Call):
        name = _terminal_name(node.func)
        if name is None:
            return None
        entries: list[AnnotationEntry] = []
        for arg in node.args:
            ok, value = _literal(arg)
            entries.append(AnnotationEntry.positional(value) if ok else AnnotationEntry.nested())
        for keyword in node.keywords:
            ok, value = _literal(keyword.value)
            if keyword.arg is not None and ok:
                entries.append(AnnotationEntry.name_value(keyword.arg, value))
            else:
                entries.append(AnnotationEntry.nested(keyword.arg))
        return RawAnnotation(name=name, shape=AnnotationShape.LIST, entries=tuple(entries))

    name = _terminal_name(node)
    if name is None:
        return None
    return RawAnnotation.word(name)


def _unquote(node: ast.expr) -> ast.expr:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        try:
            return ast.parse(node.value, mode="eval").body
        except SyntaxError:
            return node
    return node


def _field_annotations(annotation: ast.expr) -> tuple[RawAnnotation, ...]:
    annotation = _unquote(annotation)
    if not isinstance(annotation, ast.Subscript) or _terminal_name(annotation.value) != "Annotated":
        return ()
    items = annotation.slice
    if not isinstance(items, ast.Tuple):
        return ()
    found = (annotation_from_node(item) for item in items.elts[1:])
    return tuple(a for a in found if a is not None)


def _is_class_var(annotation: ast.expr) -> bool:
    annotation = _unquote(annotation)
    target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
    return _terminal_name(target) == "ClassVar"


def _kind(node: ast.ClassDef) -> DeclarationKind:
    bases = {_terminal_name(base) for base in node.bases}
    if bases & _ENUM_BASES:
        return DeclarationKind.ENUM
    if bases & _TUPLE_BASES:
        return DeclarationKind.TUPLE_STRUCT
    if bases & _UNION_BASES:
        return DeclarationKind.UNION
    return DeclarationKind.STRUCT


def _fields(node: ast.ClassDef) -> tuple[FieldDeclaration, ...]:
    fields: list[FieldDeclaration] = []
    for statement in node.body:
        if not isinstance(statement, ast.AnnAssign) or not isinstance(statement.target, ast.Name):
            continue
        if _is_class_var(statement.annotation):
            continue
        fields.append(
            FieldDeclaration(
                name=statement.target.id,
                annotations=_field_annotations(statement.annotation),
            )
        )
    return tuple(fields)


def _classes(body: list[ast.stmt]) -> Iterator[ast.ClassDef]:
    """Class definitions in source order, nested ones after their parent."""

    for node in body:
        if isinstance(node, ast.ClassDef):
            yield node
            yield from _classes(node.body)


def declarations_from_source(
    text: str,
    *,
    module: str | None = None,
    namespace: str = NAMESPACE,
    filename: str = "<source>",
) -> list[TypeDeclaration]:
    """Parse `text` and return the namespace-annotated classes in order."""

    try:
        tree = ast.parse(text, filename=filename)
    except SyntaxError as exc:
        raise DeclarationSourceError(f"{filename}:{exc.lineno}: {exc.msg}") from exc

    declarations: list[TypeDeclaration] = []
    for node in _classes(tree.body):
        annotations = tuple(
            a for a in (annotation_from_node(d) for d in node.decorator_list) if a is not None
        )
        if not any(a.name == namespace for a in annotations):
            continue
        declarations.append(
            TypeDeclaration(
                name=node.name,
                kind=_kind(node),
                module=module,
                annotations=annotations,
                fields=_fields(node),
            )
        )
    logger.debug("Found %d annotated classes in %s", len(declarations), filename)
    return declarations


def module_name_for(path: Path) -> str:
    """Best-effort dotted module name: walk up while packages have __init__.py."""

    path = path.resolve()
    parts = [path.stem]
    parent = path.parent
    while (parent / "__init__.py").is_file():
        parts.append(parent.name)
        parent = parent.parent
    return ".".join(reversed(parts))


class PythonSourceDeclarations:
    """`DeclarationSource` backed by a `.py` file (never imported)."""

    def __init__(
        self,
        path: Path,
        *,
        module: str | None = None,
        namespace: str = NAMESPACE,
        encoding: str = "utf-8",
    ) -> None:
        self._path = path
        self._module = module
        self._namespace = namespace
        self._encoding = encoding

    def declarations(self) -> list[TypeDeclaration]:
        try:
            text = self._path.read_text(encoding=self._encoding)
        except OSError as exc:
            raise DeclarationSourceError(f"cannot read {self._path}: {exc}") from exc
        return declarations_from_source(
            text,
            module=self._module or module_name_for(self._path),
            namespace=self._namespace,
            filename=str(self._path),
        )
