# shapeforge/decorators/plugins/idempotency_token.py
"""
Idempotency token provider on the service config.

Only active when some operation input member carries
``smithy.api#idempotencyToken``. It then adds a ``make_token`` field to the
config and its builder, defaulting to a random provider, and writes the
``idempotency_token`` inline module into the crate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import Shape
from shapeforge.sections.customization import ConfigCustomization
from shapeforge.sections.section import (
    EMPTY_SECTION,
    BuilderBuild,
    BuilderImpl,
    BuilderStruct,
    ConfigStruct,
    ServiceConfig,
)
from shapeforge.sections.writable import Writable, writable

from ..base import BaseDecorator

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

IDEMPOTENCY_TOKEN_TRAIT = "smithy.api#idempotencyToken"
PROVIDER = "crate::idempotency_token::IdempotencyTokenProvider"


def uses_idempotency_token(model: ShapeGraph, service: Shape) -> bool:
    for operation in model.contained_operations(service):
        if operation.input is None:
            continue
        input_shape = model.get_shape(operation.input)
        if input_shape is None:
            continue
        if any(m.has_trait_id(IDEMPOTENCY_TOKEN_TRAIT) for m in input_shape.members):
            return True
    return False


class IdempotencyTokenProviderCustomization(ConfigCustomization):
    def section(self, section: ServiceConfig) -> Writable:
        if isinstance(section, ConfigStruct):
            return writable(f"pub(crate) make_token: {PROVIDER},")
        if isinstance(section, BuilderStruct):
            return writable(f"make_token: Option<{PROVIDER}>,")
        if isinstance(section, BuilderImpl):
            return writable(
                f"""
                /// Sets the idempotency token provider to use for service calls that require tokens.
                pub fn make_token(mut self, make_token: impl Into<{PROVIDER}>) -> Self {{
                    self.make_token = Some(make_token.into());
                    self
                }}
                """
            )
        if isinstance(section, BuilderBuild):
            return writable(
                "make_token: self.make_token.unwrap_or_else(crate::idempotency_token::default_provider),"
            )
        return EMPTY_SECTION


class IdempotencyTokenDecorator(BaseDecorator):
    name = "IdempotencyToken"
    order = 0

    def config_customizations(
        self, context: "CodegenContext", base: List[ConfigCustomization]
    ) -> List[ConfigCustomization]:
        if not uses_idempotency_token(context.model, context.service):
            return base
        return base + [IdempotencyTokenProviderCustomization()]

    def extras(self, context: "CodegenContext", crate: "RustCrate") -> None:
        if not uses_idempotency_token(context.model, context.service):
            return
        crate.add_dependency("fastrand", "2")
        crate.with_module(
            "idempotency_token",
            writable(
                """
                use std::sync::Mutex;

                pub(crate) fn uuid_v4(input: u128) -> String {
                    let mut out = String::with_capacity(36);
                    // u4-aligned index into [input]
                    let mut rnd_idx: u8 = 0;
                    const HEX_CHARS: &[u8; 16] = b"0123456789abcdef";

                    for str_idx in 0..36 {
                        if str_idx == 8 || str_idx == 13 || str_idx == 18 || str_idx == 23 {
                            out.push('-');
                        // UUID version character
                        } else if str_idx == 14 {
                            out.push('4');
                        } else {
                            let mut dat: u8 = ((input >> (rnd_idx * 4)) & 0x0F) as u8;
                            // UUIDs used as idempotency tokens should be version 4, variant 1
                            if str_idx == 19 {
                                dat |= 0b00001000;
                            }
                            rnd_idx += 1;
                            out.push(HEX_CHARS[dat as usize] as char);
                        }
                    }
                    out
                }

                /// Default random idempotency token provider.
                pub fn default_provider() -> IdempotencyTokenProvider {
                    IdempotencyTokenProvider::random()
                }

                /// Generates idempotency tokens, randomly or from a fixed value.
                #[derive(Debug)]
                pub struct IdempotencyTokenProvider {
                    inner: Inner,
                }

                #[derive(Debug)]
                enum Inner {
                    Static(&'static str),
                    Random(Mutex<fastrand::Rng>),
                }

                impl From<&'static str> for IdempotencyTokenProvider {
                    fn from(token: &'static str) -> Self {
                        Self::fixed(token)
                    }
                }

                impl IdempotencyTokenProvider {
                    pub fn make_idempotency_token(&self) -> String {
                        match &self.inner {
                            Inner::Static(token) => token.to_string(),
                            Inner::Random(rng) => {
                                let input: u128 = rng.lock().unwrap().u128(..);
                                uuid_v4(input)
                            }
                        }
                    }

                    pub fn random() -> Self {
                        Self {
                            inner: Inner::Random(Mutex::new(fastrand::Rng::new())),
                        }
                    }

                    pub fn fixed(token: &'static str) -> Self {
                        Self {
                            inner: Inner::Static(token),
                        }
                    }
                }
                """
            ),
        )


__all__ = [
    "IdempotencyTokenDecorator",
    "IdempotencyTokenProviderCustomization",
    "uses_idempotency_token",
    "IDEMPOTENCY_TOKEN_TRAIT",
]
