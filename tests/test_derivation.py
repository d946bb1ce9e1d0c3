"""
Tests for the derivation service (result values, aggregation).
"""

import logging

import pytest

from core.config import ConfSettings
from core.domain.models import FieldDeclaration, RawAnnotation, TypeDeclaration
from core.errors import ConflictingInputSource, MissingInputSource, TooManyArguments
from core.services.derivation import Derivation, DerivationReport, derive, derive_all, derive_source


class _StaticSource:
    def __init__(self, declarations):
        self._declarations = declarations

    def declarations(self):
        return list(self._declarations)


class TestDerive:
    """Test single-type derivation."""

    def test_success(self, settings, make_declaration):
        derivation = derive(make_declaration(fields=["a"], path="app.json"), settings)

        assert derivation.ok
        assert derivation.error is None
        assert derivation.unwrap().field_names == ["a"]

    def test_failure_is_returned_not_raised(self, settings, make_declaration):
        derivation = derive(make_declaration(path="a", serialized="b"), settings)

        assert not derivation.ok
        assert derivation.descriptor is None
        assert isinstance(derivation.error, ConflictingInputSource)

    def test_unwrap_reraises(self, settings, make_declaration):
        derivation = derive(make_declaration(), settings)

        with pytest.raises(MissingInputSource):
            derivation.unwrap()

    def test_failure_is_logged(self, settings, make_declaration, caplog):
        with caplog.at_level(logging.WARNING, logger="core.services.derivation"):
            derive(make_declaration(), settings)

        assert "Cannot derive AppConfig" in caplog.text

    def test_settings_namespace_is_used(self, monkeypatch, settings):
        monkeypatch.setenv("SIMPLE_CONF_NAMESPACE", "conf")
        custom = ConfSettings(_env_file=None)
        declaration = TypeDeclaration(
            name="App",
            annotations=(RawAnnotation.list_of("conf", path="app.json"),),
        )

        assert derive(declaration, custom).ok
        assert not derive(declaration, settings).ok

    def test_idempotent(self, settings, make_declaration):
        declaration = make_declaration(fields=[("a", {"save": 1})], path="app.json")

        assert derive(declaration, settings) == derive(declaration, settings)


class TestDeriveAll:
    def test_every_error_is_reported(self, settings, make_declaration):
        declarations = [
            make_declaration("First", path="a", serialized="b"),
            make_declaration("Good", path="good.json"),
            make_declaration("Second", fields=[("x", {"save": 1, "other": 2})], path="c"),
        ]

        report = derive_all(declarations, settings)

        assert not report.ok
        assert [d.type_name for d in report.derivations] == ["First", "Good", "Second"]
        assert [type(e) for e in report.errors] == [ConflictingInputSource, TooManyArguments]
        assert [d.type_name for d in report.descriptors] == ["Good"]

    def test_empty_input(self, settings):
        report = derive_all([], settings)

        assert report.ok
        assert report.descriptors == []

    def test_derive_source(self, settings):
        source = _StaticSource(
            [
                TypeDeclaration(
                    name="App",
                    annotations=(RawAnnotation.list_of("from_config", path="app.json"),),
                    fields=(FieldDeclaration(name="host"),),
                )
            ]
        )

        report = derive_source(source, settings)

        assert report.ok
        assert report.descriptors[0].type_name == "App"

    def test_extend(self, settings, make_declaration):
        report = DerivationReport()
        report.extend(derive_all([make_declaration(path="a")], settings))
        report.extend(derive_all([make_declaration("Other")], settings))

        assert len(report.derivations) == 2
        assert not report.ok


class TestDerivationValue:
    def test_ok_without_error(self, settings, make_declaration):
        descriptor = derive(make_declaration(path="a"), settings).unwrap()

        assert Derivation(type_name="AppConfig", descriptor=descriptor).ok

    def test_needs_exactly_one_outcome(self, settings, make_declaration):
        descriptor = derive(make_declaration(path="a"), settings).unwrap()
        error = derive(make_declaration(), settings).error

        with pytest.raises(ValueError, match="either a descriptor or an error"):
            Derivation(type_name="AppConfig")
        with pytest.raises(ValueError, match="either a descriptor or an error"):
            Derivation(type_name="AppConfig", descriptor=descriptor, error=error)
