"""Annotation markers for Python configuration types.

Usage::

    @cli
    @from_config(path="app.json")
    @dataclass
    class AppConfig:
        host: str
        port: Annotated[int, from_config(save=8080)]

Markers only record what was written. The engine validates it, so a bare
`@from_config` or a positional argument is kept and rejected later with a
proper diagnostic.
"""

from __future__ import annotations

from typing import Any, TypeVar

from core.domain.models import AnnotationEntry, AnnotationShape, RawAnnotation, is_literal
from core.engine.names import CLI_ANNOTATIONS, NAMESPACE

CONFIG_ANNOTATIONS_ATTR = "__config_annotations__"

C = TypeVar("C", bound=type)


def record_annotation(cls: C, annotation: RawAnnotation) -> C:
    """Attach `annotation` to `cls`, keeping top-to-bottom decorator order."""

    existing = tuple(cls.__dict__.get(CONFIG_ANNOTATIONS_ATTR, ()))
    # Decorators run bottom-up, so each new one goes in front.
    setattr(cls, CONFIG_ANNOTATIONS_ATTR, (annotation, *existing))
    return cls


def annotations_of(cls: type) -> tuple[RawAnnotation, ...]:
    """Annotations declared on `cls` itself (not inherited)."""

    return tuple(cls.__dict__.get(CONFIG_ANNOTATIONS_ATTR, ()))


class ConfigAnnotation:
    """A recorded `from_config(...)` call.

    Works as a class decorator and as `typing.Annotated` metadata.
    """

    __slots__ = ("annotation",)

    def __init__(self, annotation: RawAnnotation) -> None:
        self.annotation = annotation

    def __call__(self, cls: C) -> C:
        return record_annotation(cls, self.annotation)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ConfigAnnotation) and other.annotation == self.annotation

    def __hash__(self) -> int:
        return hash(self.annotation)

    def __repr__(self) -> str:
        parts = [entry.describe() for entry in self.annotation.entries]
        return f"{self.annotation.name}({', '.join(parts)})"


def _entry(name: str | None, value: Any) -> AnnotationEntry:
    if not is_literal(value):
        return AnnotationEntry.nested(name)
    if name is None:
        return AnnotationEntry.positional(value)
    return AnnotationEntry.name_value(name, value)


def from_config(*args: Any, **kwargs: Any) -> Any:
    """Record a `from_config` annotation.

    `@from_config` used without parentheses records the word form.
    """

    if len(args) == 1 and not kwargs and isinstance(args[0], type):
        return record_annotation(args[0], RawAnnotation.word(NAMESPACE))

    entries = [_entry(None, value) for value in args]
    entries.extend(_entry(name, value) for name, value in kwargs.items())
    return ConfigAnnotation(
        RawAnnotation(name=NAMESPACE, shape=AnnotationShape.LIST, entries=tuple(entries))
    )


def cli(cls: C) -> C:
    """Opt a configuration type into command-line integration."""

    return record_annotation(cls, RawAnnotation.word(CLI_ANNOTATIONS[0]))
