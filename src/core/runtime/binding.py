"""Runtime bindings.

A binding is a class exposing the `SimpleConf` operations for one target
type. Generated modules subclass `ConfigBinding` (or `CliConfigBinding` for
CLI-integrated types) and only fill in class attributes;
`binding_for` builds the same class at run time from a descriptor.

Supported targets are anything pydantic's `TypeAdapter` handles as a
structure: pydantic models and dataclasses.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any, Callable, ClassVar, List, Mapping, Optional, Sequence, TypeVar

import typer
from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from core.config import ConfSettings
from core.domain.descriptors import ConfigDescriptor, SourceKind
from core.domain.models import LiteralKind, LiteralValue
from core.errors import BindingError
from core.interfaces.simple_conf import SimpleConf
from core.runtime.fields import FieldBinding, describe_shared_keys, shared_keys
from core.runtime.formats import json_deserialize, json_serialize
from core.runtime.overrides import apply_overrides
from core.runtime.references import resolve_function

logger = logging.getLogger(__name__)

T = TypeVar("T")


@functools.lru_cache(maxsize=None)
def _type_adapter(target: type) -> TypeAdapter:
    """Validator for `target`; only pydantic models and dataclasses are supported."""

    try:
        return TypeAdapter(target)
    except PydanticSchemaGenerationError as exc:
        name = getattr(target, "__qualname__", repr(target))
        raise BindingError(
            f"{name}: cannot bind this type; use a dataclass or a pydantic model"
        ) from exc


class ConfigBinding(SimpleConf[T]):
    """Load/save operations driven by class attributes."""

    target: ClassVar[type]
    default_path: ClassVar[str | None] = None
    default_serialized: ClassVar[str | None] = None
    serializer: ClassVar[Callable[[dict[str, Any]], str] | None] = None
    deserializer: ClassVar[Callable[[str], Mapping[str, Any]] | None] = None
    fields: ClassVar[tuple[FieldBinding, ...]] = ()
    cli_integration: ClassVar[bool] = False
    encoding: ClassVar[str] = "utf-8"
    json_indent: ClassVar[int] = 2

    @classmethod
    def _label(cls) -> str:
        return getattr(cls.target, "__name__", repr(cls.target))

    # -- mapping level -----------------------------------------------------

    @classmethod
    def deserialize(cls, serialized: str) -> dict[str, Any]:
        """Turn text into the persisted mapping (custom or JSON handler)."""

        if cls.deserializer is not None:
            try:
                data = cls.deserializer(serialized)
            except Exception as exc:
                raise BindingError(f"{cls._label()}: deserializer failed: {exc}") from exc
        else:
            try:
                data = json_deserialize(serialized)
            except ValueError as exc:
                raise BindingError(f"{cls._label()}: invalid JSON: {exc}") from exc

        if not isinstance(data, Mapping):
            raise BindingError(
                f"{cls._label()}: expected a mapping at the top level, got {type(data).__name__}"
            )
        return dict(data)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> T:
        """Build an instance from the persisted mapping, honoring `save` overrides."""

        values: dict[str, Any] = {}
        for field in cls.fields:
            if field.excluded:
                continue
            if field.key in data:
                values[field.name] = data[field.key]
            elif field.has_default:
                values[field.name] = field.save

        try:
            return _type_adapter(cls.target).validate_python(values)
        except ValidationError as exc:
            raise BindingError(f"{cls._label()}: {exc}") from exc

    @classmethod
    def to_mapping(cls, instance: T) -> dict[str, Any]:
        if not isinstance(instance, cls.target):
            raise BindingError(f"expected a {cls._label()} instance, got {type(instance).__name__}")

        dumped = _type_adapter(cls.target).dump_python(instance, mode="json")
        return {
            field.key: dumped[field.name]
            for field in cls.fields
            if not field.excluded and field.name in dumped
        }

    # -- capability --------------------------------------------------------

    @classmethod
    def from_serialized(cls, serialized: str) -> T:
        return cls.from_mapping(cls.deserialize(serialized))

    @classmethod
    def from_path(cls, path: Path) -> T:
        return cls.from_serialized(cls._read(Path(path)))

    @classmethod
    def to_serialized(cls, instance: T) -> str:
        data = cls.to_mapping(instance)
        if cls.serializer is None:
            return json_serialize(data, indent=cls.json_indent)

        try:
            text = cls.serializer(data)
        except Exception as exc:
            raise BindingError(f"{cls._label()}: serializer failed: {exc}") from exc
        if not isinstance(text, str):
            raise BindingError(
                f"{cls._label()}: serializer returned {type(text).__name__}, expected str"
            )
        return text

    @classmethod
    def to_path(cls, instance: T, path: Path) -> None:
        path = Path(path)
        text = cls.to_serialized(instance)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding=cls.encoding)
        except OSError as exc:
            raise BindingError(f"{cls._label()}: cannot write {path}: {exc}") from exc
        logger.debug("Saved %s to %s", cls._label(), path)

    @classmethod
    def load_default(cls) -> T:
        """Load from the declared default source."""

        return cls.from_serialized(cls._default_text())

    # -- helpers -----------------------------------------------------------

    @classmethod
    def _read(cls, path: Path) -> str:
        try:
            return path.read_text(encoding=cls.encoding)
        except OSError as exc:
            raise BindingError(f"{cls._label()}: cannot read {path}: {exc}") from exc

    @classmethod
    def _default_text(cls) -> str:
        if cls.default_path is not None:
            return cls._read(Path(cls.default_path))
        if cls.default_serialized is not None:
            return cls.default_serialized
        raise BindingError(f"{cls._label()}: no default source declared")


class CliConfigBinding(ConfigBinding[T]):
    """Binding for types that opted into command-line integration."""

    cli_integration: ClassVar[bool] = True

    @classmethod
    def load_with_overrides(cls, path: Path | None = None, overrides: Sequence[str] = ()) -> T:
        """Load `path` (or the default source) and apply ``key=value`` overrides."""

        text = cls._read(Path(path)) if path is not None else cls._default_text()
        data = apply_overrides(cls.deserialize(text), overrides)
        return cls.from_mapping(data)

    @classmethod
    def typer_command(cls, func: Callable[[T], Any]) -> Callable[..., Any]:
        """Wrap `func(config)` into a typer command with --config/--set options.

        Example::

            @app.command()
            @AppConfigConf.typer_command
            def serve(config: AppConfig) -> None: ...
        """

        def command(
            config: Optional[Path] = typer.Option(
                None,
                "--config",
                "-c",
                help=f"Configuration file (default: {cls.default_path or 'inline default'}).",
            ),
            overrides: Optional[List[str]] = typer.Option(
                None,
                "--set",
                "-s",
                help="Override a value: key=value (dotted keys) or ~key to remove it.",
            ),
        ) -> Any:
            try:
                loaded = cls.load_with_overrides(config, overrides or ())
            except BindingError as exc:
                raise typer.BadParameter(str(exc)) from exc
            return func(loaded)

        # No functools.wraps: typer must see this signature, not func's.
        command.__name__ = func.__name__
        command.__qualname__ = func.__qualname__
        command.__doc__ = func.__doc__
        return command


def _reference(literal: LiteralValue | None, *, type_name: str, role: str) -> str | None:
    if literal is None:
        return None
    if literal.kind is not LiteralKind.STRING:
        raise BindingError(f"{type_name}: {role} must be a string reference, got {literal}")
    return str(literal.value)


def binding_for(
    target: type,
    descriptor: ConfigDescriptor,
    *,
    settings: ConfSettings | None = None,
) -> type[ConfigBinding]:
    """Build a binding class for `target` from its descriptor at run time."""

    settings = settings or ConfSettings()
    # Unsupported targets fail here, not on the first load.
    _type_adapter(target)
    fields = tuple(FieldBinding.from_descriptor(f) for f in descriptor.fields)
    shared = shared_keys(fields)
    if shared:
        raise BindingError(f"{descriptor.type_name}: {describe_shared_keys(shared)}")

    default_module = descriptor.module or target.__module__
    attrs: dict[str, Any] = {
        "target": target,
        "fields": fields,
        "encoding": settings.encoding,
        "json_indent": settings.json_indent,
        "__module__": target.__module__,
        "__doc__": f"Load/save capability for {descriptor.type_name}.",
    }

    default = str(descriptor.source.value.value)
    if descriptor.source.kind is SourceKind.PATH:
        attrs["default_path"] = default
    else:
        attrs["default_serialized"] = default

    for role in ("serializer", "deserializer"):
        reference = _reference(getattr(descriptor, role), type_name=descriptor.type_name, role=role)
        if reference is not None:
            attrs[role] = staticmethod(resolve_function(reference, default_module=default_module))

    base = CliConfigBinding if descriptor.cli_integration else ConfigBinding
    return type(base)(f"{descriptor.type_name}Conf", (base,), attrs)
