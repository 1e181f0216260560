# tests/test_sdk_config.py
"""
Tests for the service config decorators: shared SDK config conversion and
the idempotency token provider.
"""

from __future__ import annotations

from shapeforge.decorators.base import BaseDecorator
from shapeforge.decorators.plugins.idempotency_token import (
    IdempotencyTokenDecorator,
    IdempotencyTokenProviderCustomization,
    uses_idempotency_token,
)
from shapeforge.decorators.plugins.sdk_config import (
    GenericSmithySdkConfigSettings,
    NewFromShared,
    SdkConfigDecorator,
)
from shapeforge.model.shapes import ShapeId
from shapeforge.model.transform import OperationNormalizer
from shapeforge.sections.section import (
    BuilderBuild,
    BuilderImpl,
    BuilderStruct,
    ConfigImpl,
    ConfigStruct,
    CopySdkConfigToClientConfig,
    SdkConfigSection,
)
from shapeforge.sections.writable import render_to_string
from shapeforge.symbols.symbol import RuntimeConfig

QUEUE = ShapeId.parse("example.queue#Queue")


# =============================================================================
# SdkConfig
# =============================================================================


class TestSdkConfig:
    def test_new_from_shared(self):
        customization = NewFromShared(RuntimeConfig())

        text = render_to_string(customization.section(ConfigImpl()))

        assert "pub fn new(config: &aws_types::sdk_config::SdkConfig) -> Self {" in text
        assert "Builder::from(config).build()" in text
        assert render_to_string(customization.section(ConfigStruct())) == ""

    def test_config_module_conversions(self, generate, weather_model, weather_settings):
        result = generate(weather_model, weather_settings)

        config = result.files["src/config.rs"]

        assert "pub struct Config {" in config
        assert "impl From<&aws_types::sdk_config::SdkConfig> for Builder {" in config
        assert "impl From<&aws_types::sdk_config::SdkConfig> for Config {" in config
        assert "pub fn new(config: &aws_types::sdk_config::SdkConfig) -> Self {" in config
        assert 'aws-types = "0.1.0"' in result.files["Cargo.toml"]

    def test_generic_settings_are_copied(self, generate, weather_model, weather_settings):
        config = generate(weather_model, weather_settings).files["src/config.rs"]

        assert "builder.set_retry_config(input.retry_config().cloned());" in config
        assert "builder.set_timeout_config(input.timeout_config().cloned());" in config
        assert "builder.set_sleep_impl(input.sleep_impl());" in config
        assert "builder.set_http_connector(input.http_connector().cloned());" in config

    def test_without_generic_settings_the_builder_is_empty(self, generate, weather_model, weather_settings):
        config = generate(weather_model, weather_settings, [SdkConfigDecorator()]).files["src/config.rs"]

        assert "let mut builder = Builder::default();" in config
        assert "set_retry_config" not in config

    def test_extra_copy_fields_compose_in_decorator_order(self, generate, weather_model, weather_settings):
        class CopyRegion(BaseDecorator):
            name = "Region"
            order = -1

            def extra_sections(self, context):
                return [SdkConfigSection.copy_field("region")]

        config = generate(
            weather_model,
            weather_settings,
            [SdkConfigDecorator(), GenericSmithySdkConfigSettings(), CopyRegion()],
        ).files["src/config.rs"]

        assert "builder.set_region(input.region());" in config
        assert config.index("set_region") < config.index("set_retry_config")

    def test_section_binding_names_are_respected(self, prepare_context, weather_model, weather_settings):
        context = prepare_context(weather_model, weather_settings, [GenericSmithySdkConfigSettings()])
        context.root_decorator.register_sections(context)

        text = render_to_string(
            context.sections.render_joined(
                CopySdkConfigToClientConfig(sdk_config="shared", service_config_builder="conf")
            )
        )

        assert "conf.set_retry_config(shared.retry_config().cloned());" in text

    def test_not_selected(self, generate, weather_model, weather_settings):
        result = generate(weather_model, weather_settings, [])

        assert "SdkConfig" not in result.files["src/config.rs"]
        assert "aws-types" not in result.files["Cargo.toml"]


# =============================================================================
# Idempotency Token
# =============================================================================


class TestIdempotencyToken:
    def test_detection(self, queue_model, weather_model):
        queue = OperationNormalizer(QUEUE).transform(queue_model)
        weather_id = ShapeId.parse("example.weather#Weather")

        assert uses_idempotency_token(queue, queue.expect_shape(QUEUE))
        assert not uses_idempotency_token(weather_model, weather_model.expect_shape(weather_id))

    def test_customization_sections(self):
        customization = IdempotencyTokenProviderCustomization()

        assert render_to_string(customization.section(ConfigStruct())) == (
            "pub(crate) make_token: crate::idempotency_token::IdempotencyTokenProvider,\n"
        )
        assert render_to_string(customization.section(BuilderStruct())) == (
            "make_token: Option<crate::idempotency_token::IdempotencyTokenProvider>,\n"
        )
        assert "pub fn make_token(mut self" in render_to_string(customization.section(BuilderImpl()))
        assert render_to_string(customization.section(BuilderBuild())) == (
            "make_token: self.make_token.unwrap_or_else(crate::idempotency_token::default_provider),\n"
        )
        assert render_to_string(customization.section(ConfigImpl())) == ""

    def test_generated_for_services_with_tokens(self, generate, queue_model, queue_settings):
        result = generate(queue_model, queue_settings)

        config = result.files["src/config.rs"]

        assert "pub(crate) make_token: crate::idempotency_token::IdempotencyTokenProvider," in config
        assert "make_token: self.make_token.unwrap_or_else(crate::idempotency_token::default_provider)," in config
        assert "pub(crate) fn uuid_v4(input: u128) -> String {" in result.files["src/idempotency_token.rs"]
        assert 'fastrand = "2"' in result.files["Cargo.toml"]
        assert "pub mod idempotency_token;" in result.files["src/lib.rs"]

    def test_absent_for_services_without_tokens(self, generate, weather_model, weather_settings):
        result = generate(weather_model, weather_settings)

        assert "src/idempotency_token.rs" not in result.files
        assert "make_token" not in result.files["src/config.rs"]
        assert "fastrand" not in result.files["Cargo.toml"]

    def test_only_the_decorator(self, generate, queue_model, queue_settings):
        result = generate(queue_model, queue_settings, [IdempotencyTokenDecorator()])

        assert result.context.root_decorator.names() == ["IdempotencyToken"]
        assert "src/idempotency_token.rs" in result.files
