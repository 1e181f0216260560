# shapeforge/sections/registry.py
"""
Section Registry - the composition engine behind every extension point.

Sections are registered by family name with the context type their variants
must have. Decorators contribute render functions against a family; render()
calls every contribution in ascending (order, registration sequence) and
returns the non-empty fragments.

The registry is owned by one generation run (see CodegenContext). Once frozen
it rejects further registrations, so the set of contributors is fixed for
the rest of the run.

Failure policy: if a contribution raises, either while producing its
fragment or later while the fragment writes, the run aborts with a
CompositionError naming the decorator and the section.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from shapeforge.core.exceptions import (
    CompositionError,
    DuplicateSectionError,
    RegistrationError,
    UnknownSectionError,
)
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import SECTIONS

from .section import (
    EMPTY_SECTION,
    SECTION_FAMILIES,
    CopySdkConfigToClientConfig,
    Section,
    SectionWriter,
)
from .writable import CodeWriter, Writable, join

logger = get_logger(__name__)


@dataclass(frozen=True)
class Contribution:
    decorator: str
    order: int
    sequence: int
    render: SectionWriter


@dataclass(frozen=True)
class Fragment:
    """
    One decorator's rendered contribution to one section instance, or to a
    crate module when added from the ``hook`` (e.g. ``extras``).
    """

    decorator: str
    section: str
    writable: Writable
    hook: str = ""

    def __call__(self, writer: CodeWriter) -> None:
        try:
            self.writable(writer)
        except CompositionError:
            raise
        except Exception as e:
            raise CompositionError(self.decorator, self.section, str(e), hook=self.hook) from e


class SectionRegistry:
    """
    Named extension points and their ordered contributions.

    Examples:
        >>> registry = SectionRegistry.with_defaults()
        >>> registry.contribute("SdkConfig", decorator, write_region)
        >>> registry.freeze()
        >>> fragments = registry.render(CopySdkConfigToClientConfig("input", "builder"))
    """

    def __init__(self) -> None:
        self._types: Dict[str, Type[Section]] = {}
        self._contributions: Dict[str, List[Contribution]] = {}
        self._sequence = 0
        self._frozen = False

    @classmethod
    def with_defaults(cls) -> "SectionRegistry":
        """Registry with the built-in families and the SdkConfig ad-hoc section."""
        registry = cls()
        for family in SECTION_FAMILIES:
            registry.register(family.family, family)
        registry.register(CopySdkConfigToClientConfig.family, CopySdkConfigToClientConfig)
        return registry

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def _check_open(self, what: str) -> None:
        if self._frozen:
            raise RegistrationError(f"Cannot {what}: section registry is frozen for this run")

    def register(self, name: str, context_type: Type[Section]) -> None:
        """
        Declare an extension point.

        Registering the same name with the same context type again is a
        no-op; a different context type raises DuplicateSectionError.
        """
        self._check_open(f"register section {name!r}")
        existing = self._types.get(name)
        if existing is not None:
            if existing is not context_type:
                raise DuplicateSectionError(
                    f"Section {name!r} already registered with {existing.__name__}, "
                    f"cannot re-register with {context_type.__name__}"
                )
            return
        self._types[name] = context_type
        self._contributions[name] = []
        logger.debug(f"{SECTIONS} Registered section {name!r} ({context_type.__name__})")

    def contribute(self, name: str, decorator: Any, render_fn: SectionWriter) -> None:
        """
        Add ``decorator``'s render function to section ``name``.

        ``decorator`` supplies ``name`` and ``order`` attributes; a plain
        string is accepted as a name with order 0.
        """
        self._check_open(f"contribute to section {name!r}")
        if name not in self._types:
            raise UnknownSectionError(
                f"Unknown section {name!r}. Registered: {sorted(self._types)}"
            )
        decorator_name = decorator if isinstance(decorator, str) else getattr(decorator, "name")
        order = 0 if isinstance(decorator, str) else int(getattr(decorator, "order", 0))

        self._contributions[name].append(
            Contribution(decorator_name, order, self._sequence, render_fn)
        )
        self._sequence += 1

    def freeze(self) -> None:
        self._frozen = True
        logger.debug(
            f"{SECTIONS} Frozen with {len(self._types)} section(s), "
            f"{self._sequence} contribution(s)"
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def sections(self) -> List[str]:
        return sorted(self._types)

    def context_type(self, name: str) -> Optional[Type[Section]]:
        return self._types.get(name)

    def contributions(self, name: str) -> List[Contribution]:
        """Contributions to ``name`` in render order."""
        if name not in self._types:
            raise UnknownSectionError(f"Unknown section {name!r}")
        return sorted(self._contributions[name], key=lambda c: (c.order, c.sequence))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, section: Section) -> List[Fragment]:
        """
        Ordered, non-empty fragments for one section instance.

        Raises:
            UnknownSectionError: If the section's family was never registered
            RegistrationError: If the instance is not of the registered type
            CompositionError: If a contribution fails
        """
        name = section.family
        context_type = self._types.get(name)
        if context_type is None:
            raise UnknownSectionError(f"Unknown section {name!r}")
        if not isinstance(section, context_type):
            raise RegistrationError(
                f"Section {name!r} expects {context_type.__name__}, "
                f"got {type(section).__name__}"
            )

        fragments: List[Fragment] = []
        for contribution in self.contributions(name):
            try:
                produced = contribution.render(section)
            except CompositionError:
                raise
            except Exception as e:
                raise CompositionError(contribution.decorator, section.qualified_name, str(e)) from e

            if produced is None or produced is EMPTY_SECTION:
                continue
            fragments.append(Fragment(contribution.decorator, section.qualified_name, produced))

        logger.debug(
            f"{SECTIONS} {section.qualified_name}: {len(fragments)} fragment(s) "
            f"from {[f.decorator for f in fragments]}"
        )
        return fragments

    def render_joined(self, section: Section, separator: Optional[str] = None) -> Writable:
        """All fragments of ``section`` as a single Writable."""
        return join(self.render(section), separator)


__all__ = ["SectionRegistry", "Contribution", "Fragment"]
