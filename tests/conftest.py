from __future__ import annotations

import pytest

from core.config import ConfSettings
from core.domain.models import FieldDeclaration, RawAnnotation, TypeDeclaration


@pytest.fixture
def settings(monkeypatch, tmp_path) -> ConfSettings:
    """Settings isolated from the developer's .env files."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return ConfSettings(_env_file=None)


@pytest.fixture
def make_declaration():
    """Build a struct declaration from keyword arguments.

    `fields` items are either a name, None (unnamed) or a (name, {args}) pair.
    """

    def _make(name="AppConfig", *, fields=(), annotations=None, **type_args) -> TypeDeclaration:
        if annotations is None:
            annotations = (RawAnnotation.list_of("from_config", **type_args),)
        field_decls = []
        for item in fields:
            if isinstance(item, tuple):
                field_name, args = item
                field_decls.append(
                    FieldDeclaration(
                        name=field_name,
                        annotations=(RawAnnotation.list_of("from_config", **args),),
                    )
                )
            else:
                field_decls.append(FieldDeclaration(name=item))
        return TypeDeclaration(
            name=name,
            module="app.settings",
            annotations=tuple(annotations),
            fields=tuple(field_decls),
        )

    return _make
