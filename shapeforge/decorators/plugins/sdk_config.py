# shapeforge/decorators/plugins/sdk_config.py
"""
Shared SDK config → service config.

SdkConfigDecorator adds:
- ``impl From<&SdkConfig> for Builder`` / ``for Config`` in the config module
- ``Config::new(&SdkConfig)`` on the service config

The body of ``From<&SdkConfig> for Builder`` is composed from the
``SdkConfig`` ad-hoc section: every decorator that wants a shared setting
copied declares a writer for it (GenericSmithySdkConfigSettings contributes
the resiliency settings).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import DECORATORS
from shapeforge.sections.customization import ConfigCustomization
from shapeforge.sections.section import (
    EMPTY_SECTION,
    ConfigImpl,
    CopySdkConfigToClientConfig,
    SdkConfigSection,
    ServiceConfig,
)
from shapeforge.sections.writable import Writable, writable
from shapeforge.symbols.symbol import RuntimeConfig, RuntimeType

from ..base import BaseDecorator, ExtraSection

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

logger = get_logger(__name__)

AWS_TYPES_CRATE = "aws-types"


def sdk_config_type(runtime_config: RuntimeConfig) -> RuntimeType:
    return RuntimeType(name="SdkConfig", namespace="aws_types::sdk_config")


class NewFromShared(ConfigCustomization):
    """``pub fn new(config: &SdkConfig) -> Self`` on the service config."""

    def __init__(self, runtime_config: RuntimeConfig):
        self.scope = {"SdkConfig": sdk_config_type(runtime_config)}

    def section(self, section: ServiceConfig) -> Writable:
        if isinstance(section, ConfigImpl):
            return writable(
                """
                /// Creates a new [service config](crate::Config) from a [shared `config`](#{SdkConfig}).
                pub fn new(config: &#{SdkConfig}) -> Self {
                    Builder::from(config).build()
                }
                """,
                **self.scope,
            )
        return EMPTY_SECTION


class GenericSmithySdkConfigSettings(BaseDecorator):
    """Copies the generic resiliency and connector settings from the shared config."""

    name = "GenericSmithySdkConfigSettings"
    order = 0

    def extra_sections(self, context: "CodegenContext") -> List[ExtraSection]:
        def write(section: CopySdkConfigToClientConfig) -> Writable:
            builder = section.service_config_builder
            sdk = section.sdk_config
            return writable(
                f"""
                // resiliency
                {builder}.set_retry_config({sdk}.retry_config().cloned());
                {builder}.set_timeout_config({sdk}.timeout_config().cloned());
                {builder}.set_sleep_impl({sdk}.sleep_impl());

                {builder}.set_http_connector({sdk}.http_connector().cloned());
                """
            )

        return [SdkConfigSection.create(write)]


class SdkConfigDecorator(BaseDecorator):
    """Construct the service config from a shared ``aws_types::SdkConfig``."""

    name = "SdkConfig"
    order = 0

    def config_customizations(
        self, context: "CodegenContext", base: List[ConfigCustomization]
    ) -> List[ConfigCustomization]:
        return base + [NewFromShared(context.runtime_config)]

    def extras(self, context: "CodegenContext", crate: "RustCrate") -> None:
        augment_builder = context.sections.render_joined(
            CopySdkConfigToClientConfig(sdk_config="input", service_config_builder="builder"),
            separator="",
        )
        crate.add_dependency(AWS_TYPES_CRATE, context.runtime_config.version)
        crate.with_module(
            "config",
            writable(
                """
                impl From<&#{SdkConfig}> for Builder {
                    fn from(input: &#{SdkConfig}) -> Self {
                        let mut builder = Builder::default();
                        #{augmentBuilder}

                        builder
                    }
                }

                impl From<&#{SdkConfig}> for Config {
                    fn from(sdk_config: &#{SdkConfig}) -> Self {
                        Builder::from(sdk_config).build()
                    }
                }
                """,
                SdkConfig=sdk_config_type(context.runtime_config),
                augmentBuilder=augment_builder,
            ),
        )
        logger.debug(f"{DECORATORS} {self.name}: wrote SdkConfig conversions into config module")


__all__ = [
    "SdkConfigDecorator",
    "GenericSmithySdkConfigSettings",
    "NewFromShared",
    "sdk_config_type",
]
