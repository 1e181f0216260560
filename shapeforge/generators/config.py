# shapeforge/generators/config.py
"""
Service config generator.

``Config`` and its ``Builder`` have no fields of their own; everything in
them comes from ServiceConfig contributions (ConfigStruct, ConfigImpl,
BuilderStruct, BuilderImpl, BuilderBuild), in decorator order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shapeforge.sections.section import (
    BuilderBuild,
    BuilderImpl,
    BuilderStruct,
    ConfigImpl,
    ConfigStruct,
)
from shapeforge.sections.writable import Writable, writable

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

CONFIG_MODULE = "config"


class ServiceConfigGenerator:
    def __init__(self, context: "CodegenContext"):
        self.context = context

    def render(self) -> Writable:
        sections = self.context.sections
        return writable(
            """
            /// Service configuration.
            pub struct Config {
                #{ConfigStruct}
            }

            impl std::fmt::Debug for Config {
                fn fmt(&self, f: &mut std::fmt::Formatter<'_>) -> std::fmt::Result {
                    let mut config = f.debug_struct("Config");
                    config.finish()
                }
            }

            impl Config {
                /// Constructs a config builder.
                pub fn builder() -> Builder {
                    Builder::default()
                }
                #{ConfigImpl}
            }

            /// Builder for creating a `Config`.
            #[derive(Default)]
            pub struct Builder {
                #{BuilderStruct}
            }

            impl Builder {
                /// Constructs a config builder.
                pub fn new() -> Self {
                    Self::default()
                }
                #{BuilderImpl}
                /// Builds a [`Config`].
                pub fn build(self) -> Config {
                    Config {
                        #{BuilderBuild}
                    }
                }
            }
            """,
            ConfigStruct=sections.render_joined(ConfigStruct()),
            ConfigImpl=sections.render_joined(ConfigImpl()),
            BuilderStruct=sections.render_joined(BuilderStruct()),
            BuilderImpl=sections.render_joined(BuilderImpl()),
            BuilderBuild=sections.render_joined(BuilderBuild()),
        )

    def write(self, crate: "RustCrate") -> None:
        crate.with_module(CONFIG_MODULE, self.render())


__all__ = ["ServiceConfigGenerator", "CONFIG_MODULE"]
