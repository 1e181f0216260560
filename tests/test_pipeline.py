# tests/test_pipeline.py
"""
End-to-end tests for CodegenPipeline.
"""

from __future__ import annotations

import pytest

from shapeforge.config.schema import CodegenSettings
from shapeforge.core.exceptions import GenerationError, ModelError, ShapeNotFoundError
from shapeforge.core.registry import build_registry
from shapeforge.model.loader import load_model_from_dict
from shapeforge.model.shapes import ShapeId
from shapeforge.pipeline import BASE_DEPENDENCIES, CodegenPipeline
from shapeforge.symbols.table import NAMING_COLLISION

WEATHER_FILES = [
    "Cargo.toml",
    "src/config.rs",
    "src/error.rs",
    "src/input.rs",
    "src/lib.rs",
    "src/operation_shape.rs",
    "src/output.rs",
    "src/protocol_serde.rs",
    "src/service.rs",
]


def weather_settings_with(**values):
    return CodegenSettings(service="example.weather#Weather", module_name="weather", **values)


class TestGeneratedFiles:
    def test_file_set(self, generate, weather_model, weather_settings):
        result = generate(weather_model, weather_settings)

        assert list(result.files) == WEATHER_FILES
        assert result.diagnostics == []

    def test_cargo_toml(self, generate, weather_model, weather_settings):
        cargo = generate(weather_model, weather_settings).files["Cargo.toml"]

        assert cargo.startswith('[package]\nname = "weather"\nversion = "0.0.1"\nedition = "2021"\n')
        assert 'aws-smithy-http-server = "0.1.0"' in cargo
        assert 'aws-smithy-types = "0.1.0"' in cargo
        for name, requirement in BASE_DEPENDENCIES.items():
            assert f'{name} = "{requirement}"' in cargo
        dependencies = cargo.split("[dependencies]\n", 1)[1].splitlines()
        assert dependencies == sorted(dependencies)

    def test_runtime_crates_from_a_local_path(self, generate, weather_model):
        settings = weather_settings_with(runtime={"relative_path": "../../rust-runtime"})

        cargo = generate(weather_model, settings).files["Cargo.toml"]

        assert 'aws-smithy-http-server = { path = "../../rust-runtime/aws-smithy-http-server" }' in cargo

    def test_operation_shapes(self, generate, weather_model, weather_settings):
        text = generate(weather_model, weather_settings).files["src/operation_shape.rs"]

        assert "/// Gets a city by id.\npub struct GetCity;" in text
        assert 'const NAME: &\'static str = "example.weather#GetCity";' in text
        assert "type Error = crate::error::GetCityError;" in text
        assert "type Error = std::convert::Infallible;" in text
        assert "impl GetCity {" not in text

    def test_operation_errors(self, generate, weather_model, weather_settings):
        text = generate(weather_model, weather_settings).files["src/error.rs"]

        assert "pub enum GetCityError {" in text
        assert "NoSuchResource(crate::error::NoSuchResource)," in text
        assert "ListCitiesError" not in text

    def test_error_parsers(self, generate, weather_model, weather_settings):
        text = generate(weather_model, weather_settings).files["src/protocol_serde.rs"]

        assert text.count("pub fn parse_http_generic_error(") == 1
        assert "pub fn parse_get_city_http_error(" in text
        assert "pub fn parse_list_cities_http_error(" in text
        assert "crate::protocol_serde::rest_json_1_errors::parse_generic_error" in text

    def test_crate_root(self, generate, weather_model, weather_settings):
        lib = generate(weather_model, weather_settings).files["src/lib.rs"]

        assert "//! Provides weather forecasts.\n//!\n//! Server crate for the `example.weather#Weather` service." in lib
        assert "pub mod config;" in lib
        assert "pub mod service;" in lib
        assert "mod protocol_serde;" in lib
        assert "pub mod protocol_serde;" not in lib
        assert "pub use crate::service::{Weather, WeatherBuilder, MissingOperationsError};" in lib

    def test_documentation_is_emitted_verbatim(self, generate, weather_document, weather_settings):
        shapes = weather_document["shapes"]
        shapes["example.weather#Weather"]["traits"]["smithy.api#documentation"] = (
            "Greets with a Ruby-style #{name} interpolation.\nKeeps <% raw %> markers."
        )
        shapes["example.weather#GetCity"]["traits"]["smithy.api#documentation"] = "Looks up #{cityId}."

        files = generate(load_model_from_dict(weather_document), weather_settings).files

        docs = "//! Greets with a Ruby-style #{name} interpolation.\n//! Keeps <% raw %> markers.\n"
        assert docs in files["src/lib.rs"]
        assert "/// Greets with a Ruby-style #{name} interpolation.\n" in files["src/service.rs"]
        assert "/// Looks up #{cityId}.\npub struct GetCity;" in files["src/operation_shape.rs"]

    def test_input_and_output_envelopes(self, generate, weather_model, weather_settings):
        files = generate(weather_model, weather_settings).files

        header = "#[non_exhaustive]\n#[derive(Debug, Clone, PartialEq)]\npub struct GetCityInput {\n"
        assert header in files["src/input.rs"]
        assert "    #[allow(missing_docs)]\n    pub city_id: " in files["src/input.rs"]
        assert "pub struct ListCitiesOutput {" in files["src/output.rs"]
        assert "pub mod input;" in files["src/lib.rs"]
        assert "pub mod output;" in files["src/lib.rs"]

    def test_services_without_errors_have_no_error_module(self, generate, queue_model, queue_settings):
        result = generate(queue_model, queue_settings)

        assert "src/error.rs" not in result.files
        assert "pub mod error;" not in result.files["src/lib.rs"]

    def test_runs_are_deterministic(self, generate, weather_document, weather_settings):
        first = generate(load_model_from_dict(weather_document), weather_settings)
        shuffled = dict(weather_document)
        shuffled["shapes"] = dict(reversed(list(weather_document["shapes"].items())))
        second = generate(load_model_from_dict(shuffled), weather_settings)

        assert first.files == second.files

    def test_independent_pipelines_do_not_share_state(
        self, generate, weather_model, weather_settings, s3_model, s3_settings
    ):
        weather = generate(weather_model, weather_settings)
        s3 = generate(s3_model, s3_settings)
        weather_again = generate(weather_model, weather_settings)

        assert weather.context.sections is not weather_again.context.sections
        assert "s3_errors" not in weather_again.files["src/lib.rs"]
        assert "s3_errors" in s3.files["src/lib.rs"]
        assert weather.files == weather_again.files

    def test_write(self, generate, weather_model, weather_settings, tmp_path):
        result = generate(weather_model, weather_settings)

        written = result.write(tmp_path / "weather")

        assert sorted(p.relative_to(tmp_path / "weather").as_posix() for p in written) == WEATHER_FILES
        assert (tmp_path / "weather" / "src" / "lib.rs").read_text(encoding="utf-8") == result.files["src/lib.rs"]


class TestPipelineOptions:
    def test_decorators_come_from_the_manifest(self, weather_model):
        settings = weather_settings_with(decorators={"disabled": ["SdkConfig", "GenericSmithySdkConfigSettings"]})

        result = CodegenPipeline(settings).run(weather_model)

        assert result.context.root_decorator.names() == ["IdempotencyToken", "S3"]
        assert "aws-types" not in result.files["Cargo.toml"]

    def test_explicit_registry(self, weather_model, weather_settings):
        registry = build_registry()

        context = CodegenPipeline(weather_settings, registry=registry).prepare(weather_model)

        assert context.root_decorator.names() == [c.name for c in registry.classes()]

    def test_without_normalization(self, prepare_context, weather_model):
        settings = weather_settings_with(codegen={"normalize_operations": False})

        context = prepare_context(weather_model, settings)

        assert context.model.get_shape(ShapeId.parse("example.weather.synthetic#GetCityInput")) is None

    def test_python_server_symbols(self, prepare_context, streaming_model):
        settings = CodegenSettings(
            service="example.stream#Streaming",
            module_name="streaming",
            codegen={"python_server": True},
        )

        context = prepare_context(streaming_model, settings)
        member = ShapeId.parse("example.stream.synthetic#UploadOutput$createdAt")

        assert context.expect_symbol_table().get(member).rendered == (
            "std::option::Option<aws_smithy_http_server_python::types::DateTime>"
        )

    def test_protocol_can_be_chosen(self, prepare_context, weather_model):
        settings = weather_settings_with(protocol="aws.protocols#restXml")

        with pytest.raises(ModelError, match="does not support requested protocol"):
            prepare_context(weather_model, settings)


class TestPipelineErrors:
    def test_unknown_service(self, generate, weather_model):
        settings = CodegenSettings(service="example.weather#Nope", module_name="nope")

        with pytest.raises(ShapeNotFoundError):
            generate(weather_model, settings)

    def test_target_must_be_a_service(self, generate, weather_model):
        settings = CodegenSettings(service="example.weather#GetCity", module_name="get_city")

        with pytest.raises(ModelError, match="Expected a service shape, got operation"):
            generate(weather_model, settings)

    def test_collisions_abort_the_run(self, generate, collision_model, collision_settings):
        with pytest.raises(GenerationError) as exc_info:
            generate(collision_model, collision_settings)

        codes = {d.code for d in exc_info.value.diagnostics}
        assert codes == {NAMING_COLLISION}
        assert len(exc_info.value.diagnostics) >= 2
        assert "Generation failed with" in str(exc_info.value)

    def test_prepare_only_reports_collisions(self, prepare_context, collision_model, collision_settings):
        context = prepare_context(collision_model, collision_settings)

        assert context.reporter.has_errors
        assert context.protocol is not None
