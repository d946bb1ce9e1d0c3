"""Resolution of serializer/deserializer references.

Accepted forms:
- ``"package.module:function"`` (attribute path after the colon may be dotted)
- ``"package.module.function"``
- ``"function"``: looked up in the module of the annotated type
"""

from __future__ import annotations

import importlib
from typing import Any, Callable

from core.errors import BindingError


def _is_dotted_identifier(value: str) -> bool:
    return bool(value) and all(part.isidentifier() for part in value.split("."))


def split_reference(reference: str) -> tuple[str | None, str]:
    """Split a reference into (module or None, attribute path)."""

    ref = reference.strip()
    if ":" in ref:
        module, _, attr = ref.partition(":")
    elif "." in ref:
        module, _, attr = ref.rpartition(".")
    else:
        module, attr = "", ref

    if (module and not _is_dotted_identifier(module)) or not _is_dotted_identifier(attr):
        raise BindingError(f"invalid function reference {reference!r}")
    return (module or None), attr


def resolve_function(reference: str, *, default_module: str | None = None) -> Callable[..., Any]:
    """Import and return the callable named by `reference`."""

    module_name, attr = split_reference(reference)
    module_name = module_name or default_module
    if module_name is None:
        raise BindingError(f"function reference {reference!r} has no module to resolve it in")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise BindingError(f"cannot import {module_name!r} for {reference!r}: {exc}") from exc

    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise BindingError(f"{module_name!r} has no attribute {attr!r}") from None

    if not callable(target):
        raise BindingError(f"{reference!r} does not name a callable")
    return target
