"""
Tests for generated binding modules.
"""

import importlib.util
import json

import pytest

from adapters.code_generator import render_module, write_module
from adapters.declarations import reflect_type
from core.errors import CodeGenerationError
from core.runtime import CliConfigBinding, ConfigBinding
from core.services.derivation import derive, derive_all
import sample_configs
from sample_configs import AppConfig, InlineConfig, Renamed, ServerConfig, Service, ServiceConf


def _descriptors(settings, *types):
    report = derive_all([reflect_type(cls) for cls in types], settings)
    assert report.ok
    return report.descriptors


def _import_file(path):
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestRenderModule:
    """Test the rendered source text."""

    def test_compiles(self, settings):
        text = render_module(_descriptors(settings, AppConfig, InlineConfig, ServerConfig), settings=settings)

        compile(text, "<generated>", "exec")

    def test_imports_and_classes(self, settings):
        text = render_module(_descriptors(settings, AppConfig, InlineConfig, ServerConfig), settings=settings)

        assert "from core.runtime import CliConfigBinding, ConfigBinding, FieldBinding" in text
        assert "from sample_configs import AppConfig" in text
        assert "from sample_configs import upper_keys_serializer" in text
        assert "class AppConfigConf(ConfigBinding[AppConfig]):" in text
        assert "class ServerConfigConf(CliConfigBinding[ServerConfig]):" in text
        assert "serializer = staticmethod(upper_keys_serializer)" in text
        assert "FieldBinding('token', save='skip')," in text
        assert "FieldBinding('port', save=8080)," in text

    def test_inline_source_is_quoted(self, settings):
        text = render_module(_descriptors(settings, InlineConfig), settings=settings)

        assert "default_serialized = '{\"NAME\": \"svc\"}'" in text
        assert "default_path" not in text

    def test_colliding_names_are_aliased(self, settings, make_declaration):
        first = make_declaration("AppConfig", path="a.json", serializer="codec:dump")
        second = make_declaration("Other", path="b.json", serializer="legacy.codec:dump")
        descriptors = [derive(first, settings).unwrap(), derive(second, settings).unwrap()]

        text = render_module(descriptors, settings=settings)

        assert "from codec import dump\n" in text
        assert "from legacy.codec import dump as dump_2" in text
        assert "serializer = staticmethod(dump_2)" in text

    def test_generated_class_names_are_not_shadowed(self, settings, make_declaration):
        descriptors = [
            derive(make_declaration("App", path="a.json"), settings).unwrap(),
            derive(make_declaration("AppConf", path="b.json"), settings).unwrap(),
        ]

        text = render_module(descriptors, settings=settings)

        assert "from app.settings import App\n" in text
        assert "from app.settings import AppConf as AppConf_2" in text
        assert "class AppConf(ConfigBinding[App]):" in text
        assert "class AppConfConf(ConfigBinding[AppConf_2]):" in text
        assert "target = AppConf_2" in text

    def test_runtime_names_are_not_shadowed(self, settings, make_declaration):
        descriptor = derive(make_declaration("FieldBinding", path="a.json"), settings).unwrap()

        text = render_module([descriptor], settings=settings)

        assert "from app.settings import FieldBinding as FieldBinding_2" in text
        assert "class FieldBindingConf(ConfigBinding[FieldBinding_2]):" in text

    def test_shared_persisted_key(self, settings):
        with pytest.raises(CodeGenerationError, match="Renamed: key 'b' is written by a, b"):
            render_module(_descriptors(settings, Renamed), settings=settings)

    def test_same_type_twice(self, settings, make_declaration):
        first = make_declaration("Config", path="a.json")
        second = first.model_copy(update={"module": "other.settings"})
        descriptors = [derive(first, settings).unwrap(), derive(second, settings).unwrap()]

        with pytest.raises(CodeGenerationError, match="declared twice"):
            render_module(descriptors, settings=settings)

    def test_shared_imports_are_not_repeated(self, settings, make_declaration):
        descriptor = derive(
            make_declaration(path="a.json", serializer="codec:dump", deserializer="codec:load"),
            settings,
        ).unwrap()
        other = derive(make_declaration("Other", path="b.json", serializer="codec:dump"), settings).unwrap()

        text = render_module([descriptor, other], settings=settings)

        assert text.count("from codec import dump\n") == 1

    def test_dotted_attribute_reference(self, settings, make_declaration):
        descriptor = derive(make_declaration(path="a", serializer="codec:Codec.dump"), settings).unwrap()

        text = render_module([descriptor], settings=settings)

        assert "from codec import Codec" in text
        assert "serializer = staticmethod(Codec.dump)" in text

    def test_unknown_module(self, settings, make_declaration):
        declaration = make_declaration(path="a").model_copy(update={"module": None})

        with pytest.raises(CodeGenerationError, match="unknown module"):
            render_module([derive(declaration, settings).unwrap()], settings=settings)

    def test_default_module_fills_in(self, settings, make_declaration):
        declaration = make_declaration(path="a").model_copy(update={"module": None})

        text = render_module([derive(declaration, settings).unwrap()], default_module="pkg.conf", settings=settings)

        assert "from pkg.conf import AppConfig" in text

    def test_non_string_reference(self, settings, make_declaration):
        descriptor = derive(make_declaration(path="a", serializer=3), settings).unwrap()

        with pytest.raises(CodeGenerationError, match="serializer must be a string reference"):
            render_module([descriptor], settings=settings)

    def test_invalid_reference(self, settings, make_declaration):
        descriptor = derive(make_declaration(path="a", deserializer="not a ref"), settings).unwrap()

        with pytest.raises(CodeGenerationError, match="invalid function reference"):
            render_module([descriptor], settings=settings)


class TestGeneratedModule:
    def test_bindings_work_end_to_end(self, settings, tmp_path):
        path = write_module(
            _descriptors(settings, AppConfig, InlineConfig, ServerConfig),
            tmp_path / "generated_bindings.py",
            settings=settings,
        )
        module = _import_file(path)

        assert module.__all__ == ["AppConfigConf", "InlineConfigConf", "ServerConfigConf"]
        assert issubclass(module.AppConfigConf, ConfigBinding)
        assert issubclass(module.ServerConfigConf, CliConfigBinding)

        module.AppConfigConf.to_path(AppConfig(host="h", port=1), tmp_path / "app.json")
        assert module.AppConfigConf.from_path(tmp_path / "app.json") == AppConfig(host="h", port=1)
        assert module.InlineConfigConf.load_default() == InlineConfig(name="svc")

        server = module.ServerConfigConf.from_serialized('{"logLevel": "debug"}')
        assert (server.port, server.log_level) == (8080, "debug")
        assert json.loads(module.ServerConfigConf.to_serialized(server)) == {
            "host": "localhost",
            "port": 8080,
            "logLevel": "debug",
        }

    def test_binding_next_to_a_type_with_its_name(self, settings, tmp_path):
        path = write_module(
            _descriptors(settings, Service, ServiceConf),
            tmp_path / "service_bindings.py",
            settings=settings,
        )
        module = _import_file(path)

        assert module.ServiceConf.target is Service
        assert module.ServiceConfConf.target is sample_configs.ServiceConf
        assert module.ServiceConfConf.from_serialized('{"retries": 3}') == ServiceConf(retries=3)

    def test_write_creates_parent_directories(self, settings, tmp_path):
        target = tmp_path / "out" / "deep" / "bindings.py"

        write_module(_descriptors(settings, AppConfig), target, settings=settings)

        assert target.is_file()

    def test_settings_are_baked_in(self, settings, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "json_indent", 4)

        text = render_module(_descriptors(settings, AppConfig), settings=settings)

        assert "json_indent = 4" in text
        assert "encoding = 'utf-8'" in text


class TestEmptyInput:
    def test_empty_module(self, settings):
        text = render_module([], settings=settings)

        compile(text, "<generated>", "exec")
        assert "__all__ = [\n]" in text
