"""Binding module generation.

Why this lives in adapters:
- Emitting source text is an infrastructure detail (Jinja2 templates).
- The core only produces `ConfigDescriptor`s; this module turns them into a
  Python module whose classes subclass `core.runtime.ConfigBinding`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from core.config import ConfSettings
from core.domain.descriptors import ConfigDescriptor, FieldDescriptor
from core.domain.models import LiteralKind, LiteralValue
from core.errors import BindingError, CodeGenerationError
from core.runtime.fields import FieldBinding, describe_shared_keys, shared_keys
from core.runtime.references import split_reference

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
_TEMPLATE_NAME = "bindings.py.j2"
_RUNTIME_NAMES = ("CliConfigBinding", "ConfigBinding", "FieldBinding")


def _get_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["py"] = repr
    return env


@dataclass
class _ImportTable:
    """`from module import name` lines, aliasing names that would collide."""

    bound: dict[str, tuple[str, str]] = field(default_factory=dict)
    lines: list[str] = field(default_factory=list)
    # Names defined by the generated module itself; imports never take them.
    reserved: set[str] = field(default_factory=set)

    def add(self, module: str, name: str) -> str:
        for local, origin in self.bound.items():
            if origin == (module, name):
                return local

        local = name
        counter = 2
        while local in self.bound or local in self.reserved:
            local = f"{name}_{counter}"
            counter += 1
        self.bound[local] = (module, name)
        alias = f" as {local}" if local != name else ""
        self.lines.append(f"from {module} import {name}{alias}")
        return local


@dataclass
class _BindingContext:
    class_name: str
    base: str
    type_name: str
    target: str
    default_path: str | None
    default_serialized: str | None
    serializer: str | None
    deserializer: str | None
    fields: tuple[FieldDescriptor, ...]


def _reference_expr(
    literal: LiteralValue | None,
    *,
    role: str,
    type_module: str,
    type_name: str,
    imports: _ImportTable,
) -> str | None:
    if literal is None:
        return None
    if literal.kind is not LiteralKind.STRING:
        raise CodeGenerationError(f"{type_name}: {role} must be a string reference, got {literal}")
    try:
        module, attr = split_reference(str(literal.value))
    except BindingError as exc:
        raise CodeGenerationError(f"{type_name}: {exc}") from exc

    head, _, rest = attr.partition(".")
    local = imports.add(module or type_module, head)
    return f"{local}.{rest}" if rest else local


def _context(
    descriptor: ConfigDescriptor,
    *,
    default_module: str | None,
    imports: _ImportTable,
) -> _BindingContext:
    module = descriptor.module or default_module
    if module is None:
        raise CodeGenerationError(
            f"{descriptor.type_name}: unknown module; pass the module the type lives in"
        )

    shared = shared_keys(FieldBinding.from_descriptor(f) for f in descriptor.fields)
    if shared:
        raise CodeGenerationError(f"{descriptor.type_name}: {describe_shared_keys(shared)}")

    target = imports.add(module, descriptor.type_name)
    path = descriptor.source_path
    serialized = descriptor.source_serialized
    return _BindingContext(
        class_name=f"{descriptor.type_name}Conf",
        base="CliConfigBinding" if descriptor.cli_integration else "ConfigBinding",
        type_name=descriptor.type_name,
        target=target,
        default_path=str(path.value) if path is not None else None,
        default_serialized=str(serialized.value) if serialized is not None else None,
        serializer=_reference_expr(
            descriptor.serializer,
            role="serializer",
            type_module=module,
            type_name=descriptor.type_name,
            imports=imports,
        ),
        deserializer=_reference_expr(
            descriptor.deserializer,
            role="deserializer",
            type_module=module,
            type_name=descriptor.type_name,
            imports=imports,
        ),
        fields=descriptor.fields,
    )


def render_module(
    descriptors: Sequence[ConfigDescriptor],
    *,
    source: str = "annotated configuration types",
    default_module: str | None = None,
    settings: ConfSettings | None = None,
) -> str:
    """Render one Python module holding a binding class per descriptor."""

    settings = settings or ConfSettings()
    reserved = set(_RUNTIME_NAMES) | {f"{d.type_name}Conf" for d in descriptors}
    imports = _ImportTable(reserved=reserved)
    bindings = [_context(d, default_module=default_module, imports=imports) for d in descriptors]
    seen: set[str] = set()
    for binding in bindings:
        if binding.class_name in seen:
            raise CodeGenerationError(f"{binding.type_name}: declared twice; binding classes must be unique")
        seen.add(binding.class_name)

    runtime_names = sorted({b.base for b in bindings} | {"FieldBinding"})
    template = _get_env().get_template(_TEMPLATE_NAME)
    return template.render(
        source=source,
        runtime_names=runtime_names,
        imports=imports.lines,
        bindings=bindings,
        encoding=settings.encoding,
        json_indent=settings.json_indent,
    )


def write_module(
    descriptors: Sequence[ConfigDescriptor],
    output_path: Path,
    *,
    source: str = "annotated configuration types",
    default_module: str | None = None,
    settings: ConfSettings | None = None,
) -> Path:
    settings = settings or ConfSettings()
    text = render_module(descriptors, source=source, default_module=default_module, settings=settings)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding=settings.encoding)
    logger.info("Wrote %d binding(s) to %s", len(descriptors), output_path)
    return output_path
