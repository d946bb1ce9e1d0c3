"""
Tests for JSON declaration files and source selection.
"""

import json
from pathlib import Path

import pytest

from adapters.declarations import JsonDeclarations, PythonSourceDeclarations, open_declarations
from core.domain.models import DeclarationKind, EntryKind
from core.errors import (
    DeclarationSourceError,
    UnnamedFieldUnsupported,
    UnsupportedAnnotationEntry,
    UnsupportedDataShape,
)
from core.services.derivation import derive_source


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestJsonDeclarations:
    """Test declaration files as a source of shapes Python never produces."""

    def test_round_trip_into_declarations(self, tmp_path):
        path = _write(
            tmp_path / "types.json",
            {
                "types": [
                    {
                        "name": "AppConfig",
                        "module": "app.settings",
                        "annotations": [
                            {"name": "from_config", "entries": [{"name": "path", "value": "app.cfg"}]}
                        ],
                        "fields": [
                            {"name": "host"},
                            {"name": "port", "annotations": [
                                {"name": "from_config", "entries": [{"name": "save", "value": 80}]}
                            ]},
                        ],
                    }
                ]
            },
        )

        (declaration,) = JsonDeclarations(path).declarations()

        assert declaration.module == "app.settings"
        assert declaration.fields[1].annotations[0].entries[0].value.value == 80

    def test_unnamed_fields_and_unions(self, tmp_path, settings):
        annotations = [{"name": "from_config", "entries": [{"name": "path", "value": "a"}]}]
        path = _write(
            tmp_path / "types.json",
            {
                "types": [
                    {"name": "Pair", "annotations": annotations, "fields": [{}, {}]},
                    {"name": "Either", "kind": "union", "annotations": annotations},
                    {
                        "name": "Flagged",
                        "annotations": [{"name": "from_config", "entries": [{"kind": "flag", "name": "path"}]}],
                    },
                ]
            },
        )

        report = derive_source(JsonDeclarations(path), settings)

        assert [type(e) for e in report.errors] == [
            UnnamedFieldUnsupported,
            UnsupportedDataShape,
            UnsupportedAnnotationEntry,
        ]

    def test_flag_entry_is_parsed(self, tmp_path):
        path = _write(
            tmp_path / "types.json",
            {"types": [{"name": "A", "kind": "enum", "annotations": [
                {"name": "from_config", "entries": [{"kind": "flag", "name": "path"}]}
            ]}]},
        )

        (declaration,) = JsonDeclarations(path).declarations()

        assert declaration.kind is DeclarationKind.ENUM
        assert declaration.annotations[0].entries[0].kind is EntryKind.FLAG

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "types.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(DeclarationSourceError, match="invalid JSON"):
            JsonDeclarations(path).declarations()

    def test_invalid_structure(self, tmp_path):
        path = _write(tmp_path / "types.json", {"types": [{"name": ""}]})

        with pytest.raises(DeclarationSourceError, match="invalid declaration file"):
            JsonDeclarations(path).declarations()

    def test_missing_file(self, tmp_path):
        with pytest.raises(DeclarationSourceError, match="cannot read"):
            JsonDeclarations(tmp_path / "missing.json").declarations()


class TestOpenDeclarations:
    def test_by_extension(self, tmp_path, settings):
        assert isinstance(open_declarations(tmp_path / "a.py", settings), PythonSourceDeclarations)
        assert isinstance(open_declarations(tmp_path / "a.JSON", settings), JsonDeclarations)

    def test_unknown_extension(self, tmp_path, settings):
        with pytest.raises(DeclarationSourceError, match="expected a .py source"):
            open_declarations(tmp_path / "a.toml", settings)
