"""
Tests for ConfigDescriptor construction.
"""

import pytest
from pydantic import ValidationError

from core.domain.descriptors import SourceKind
from core.domain.models import LiteralValue, RawAnnotation
from core.engine.type_builder import build_config_descriptor
from core.errors import (
    ConflictingInputSource,
    MissingInputSource,
    TooManyArguments,
    UnrecognizedArgumentName,
)


class TestInputSource:
    """Test resolution of the mutually exclusive input sources."""

    def test_path_source_with_plain_fields(self, make_declaration):
        declaration = make_declaration(fields=("host", "port", "debug"), path="app.cfg")

        descriptor = build_config_descriptor(declaration)

        assert descriptor.source_path == LiteralValue.of("app.cfg")
        assert descriptor.source_serialized is None
        assert descriptor.serializer is None
        assert descriptor.deserializer is None
        assert descriptor.cli_integration is False
        assert [(f.name, f.save) for f in descriptor.fields] == [
            ("host", None),
            ("port", None),
            ("debug", None),
        ]

    def test_serialized_source_with_overrides(self, make_declaration):
        declaration = make_declaration(serialized="{}", serializer="custom_ser", deserializer="custom_de")

        descriptor = build_config_descriptor(declaration)

        assert descriptor.source.kind is SourceKind.SERIALIZED
        assert descriptor.source_serialized == LiteralValue.of("{}")
        assert descriptor.source_path is None
        assert descriptor.serializer == LiteralValue.of("custom_ser")
        assert descriptor.deserializer == LiteralValue.of("custom_de")

    def test_both_sources_conflict(self, make_declaration):
        with pytest.raises(ConflictingInputSource, match="mutually exclusive"):
            build_config_descriptor(make_declaration(path="a", serialized="b"))

    def test_no_recognized_arguments_is_missing_source(self, make_declaration):
        with pytest.raises(MissingInputSource, match="AppConfig: expected either a `path` or a `serialized`"):
            build_config_descriptor(make_declaration())

    def test_only_overrides_is_missing_source(self, make_declaration):
        with pytest.raises(MissingInputSource):
            build_config_descriptor(make_declaration(serializer="ser"))

    def test_no_namespace_annotation_is_missing_source(self, make_declaration):
        declaration = make_declaration(annotations=[RawAnnotation.word("dataclass")])

        with pytest.raises(MissingInputSource):
            build_config_descriptor(declaration)

    def test_non_string_literals_pass_through(self, make_declaration):
        descriptor = build_config_descriptor(make_declaration(path=42))

        assert descriptor.source_path == LiteralValue.of(42)


class TestTypeArguments:
    def test_five_arguments_is_too_many(self, make_declaration):
        declaration = make_declaration(path="a", serialized="b", serializer="c", deserializer="d", extra="e")

        with pytest.raises(TooManyArguments):
            build_config_descriptor(declaration)

    def test_unknown_argument(self, make_declaration):
        with pytest.raises(UnrecognizedArgumentName, match="expected one of `path`, `serialized`"):
            build_config_descriptor(make_declaration(path="a", format="toml"))

    def test_arguments_split_over_two_annotations(self, make_declaration):
        declaration = make_declaration(
            annotations=[
                RawAnnotation.list_of("from_config", path="a.json"),
                RawAnnotation.list_of("from_config", serializer="ser"),
            ]
        )

        descriptor = build_config_descriptor(declaration)

        assert descriptor.source_path == LiteralValue.of("a.json")
        assert descriptor.serializer == LiteralValue.of("ser")


class TestCliIntegration:
    def test_flag_is_presence_based(self, make_declaration):
        declaration = make_declaration(
            annotations=[
                RawAnnotation.list_of("from_config", path="a.json"),
                RawAnnotation.list_of("cli", name="tool", about="whatever"),
            ]
        )

        assert build_config_descriptor(declaration).cli_integration is True

    def test_custom_marker_names(self, make_declaration):
        declaration = make_declaration(
            annotations=[RawAnnotation.list_of("from_config", path="a.json"), RawAnnotation.word("StructOpt")]
        )

        assert build_config_descriptor(declaration).cli_integration is False
        assert build_config_descriptor(declaration, cli_annotations=["StructOpt"]).cli_integration is True

    def test_custom_namespace(self, make_declaration):
        declaration = make_declaration(annotations=[RawAnnotation.list_of("conf", path="a.json")])

        descriptor = build_config_descriptor(declaration, namespace="conf")

        assert descriptor.source_path == LiteralValue.of("a.json")


class TestDescriptorProperties:
    def test_idempotent(self, make_declaration):
        declaration = make_declaration(fields=("a", ("b", {"save": "skip"})), path="app.cfg")

        assert build_config_descriptor(declaration) == build_config_descriptor(declaration)

    def test_descriptor_is_frozen(self, make_declaration):
        descriptor = build_config_descriptor(make_declaration(path="app.cfg"))

        with pytest.raises(ValidationError):
            descriptor.cli_integration = True

    def test_module_is_carried(self, make_declaration):
        assert build_config_descriptor(make_declaration(path="a")).module == "app.settings"
