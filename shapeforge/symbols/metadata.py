# shapeforge/symbols/metadata.py
"""
Metadata stages - attach derivable capabilities to resolved symbols.

These stages only annotate; they never change a symbol's name or type. The
generators query the result through ``metadata_for``.
"""

from __future__ import annotations

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import SYMBOLS
from shapeforge.model.shapes import Shape, ShapeKind
from shapeforge.model.traits import EnumTrait

from .provider import SymbolProvider, SymbolProviderStage
from .symbol import Derive, Symbol, SymbolMetadata

logger = get_logger(__name__)

RECORD_DERIVES = (Derive.DEBUG, Derive.CLONE, Derive.PARTIAL_EQ)
ENUM_DERIVES = (
    Derive.DEBUG,
    Derive.CLONE,
    Derive.PARTIAL_EQ,
    Derive.EQ,
    Derive.HASH,
    Derive.PARTIAL_ORD,
    Derive.ORD,
)


class BaseSymbolMetadataStage(SymbolProviderStage):
    """Assigns the default derives of generated records, unions and enums."""

    def resolve(self, shape: Shape) -> Symbol:
        symbol = self.inner.resolve(shape)
        if shape.kind in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            return symbol.with_metadata(symbol.metadata.with_derives(*RECORD_DERIVES))
        if shape.kind == ShapeKind.STRING and shape.has_trait(EnumTrait):
            return symbol.with_metadata(symbol.metadata.with_derives(*ENUM_DERIVES))
        return symbol


class StreamingShapeMetadataStage(SymbolProviderStage):
    """
    Drops equality derives from structures and unions with a streaming member.

    A stream cannot be compared without consuming it. Shapes without a
    streaming member keep whatever the inner stage assigned.
    """

    def resolve(self, shape: Shape) -> Symbol:
        symbol = self.inner.resolve(shape)
        if shape.kind not in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            return symbol
        if not self.model.has_streaming_member(shape):
            return symbol

        logger.debug(f"{SYMBOLS} Dropping PartialEq from streaming shape {shape.id}")
        return symbol.with_metadata(symbol.metadata.without_derives(Derive.PARTIAL_EQ, Derive.EQ))


def metadata_for(provider: SymbolProvider, shape: Shape) -> SymbolMetadata:
    """Metadata of ``shape``'s symbol as seen by downstream generators."""
    return provider.resolve(shape).metadata


__all__ = [
    "BaseSymbolMetadataStage",
    "StreamingShapeMetadataStage",
    "metadata_for",
    "RECORD_DERIVES",
    "ENUM_DERIVES",
]
