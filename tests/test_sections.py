# tests/test_sections.py
"""
Tests for the section framework: CodeWriter templates, section variants and
the SectionRegistry composition rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import pytest

from shapeforge.core.exceptions import (
    CompositionError,
    DuplicateSectionError,
    RegistrationError,
    ShapeforgeError,
    UnknownSectionError,
)
from shapeforge.sections.registry import SectionRegistry
from shapeforge.sections.section import (
    EMPTY_SECTION,
    BuilderBuildPrelude,
    ConfigStruct,
    CopySdkConfigToClientConfig,
    LibRsBody,
    OperationImplBlock,
    SdkConfigSection,
    Section,
)
from shapeforge.sections.writable import (
    EMPTY_WRITABLE,
    CodeWriter,
    TemplateError,
    is_empty,
    join,
    render_to_string,
    writable,
)


@dataclass(frozen=True)
class Greeting(Section):
    family: ClassVar[str] = "Greeting"

    name: str = "world"


@dataclass(frozen=True)
class Farewell(Section):
    family: ClassVar[str] = "Greeting"


def greet(section):
    return writable("hello #{name}", name=section.name)


# =============================================================================
# CodeWriter
# =============================================================================


class TestCodeWriter:
    def test_block_indents_its_body(self):
        writer = CodeWriter()

        with writer.block("impl Weather"):
            writer.write("fn build() {}")

        assert writer.to_string() == "impl Weather {\n    fn build() {}\n}\n"

    def test_multiline_templates_are_dedented(self):
        writer = CodeWriter()

        with writer.indent():
            writer.write(
                """
                let a = 1;
                let b = 2;
                """
            )

        assert writer.lines == ["    let a = 1;", "    let b = 2;"]

    def test_placeholders_accept_values_and_writables(self):
        text = render_to_string(
            writable("let x: #{Blob} = #{value};", Blob="aws_smithy_types::Blob", value=writable("make()"))
        )

        assert text == "let x: aws_smithy_types::Blob = make();\n"

    def test_unbound_placeholder(self):
        with pytest.raises(TemplateError, match="missing"):
            CodeWriter().write("let x = #{missing};")

    def test_lone_placeholder_keeps_indentation(self):
        body = writable("a();\nb();")
        writer = CodeWriter()

        writer.write(
            """
            fn f() {
                #{body}
            }
            """,
            body=body,
        )

        assert writer.to_string() == "fn f() {\n    a();\n    b();\n}\n"

    def test_lone_placeholder_line_is_dropped_when_empty(self):
        writer = CodeWriter()

        writer.write("fn f() {\n    #{body}\n}", body=EMPTY_WRITABLE)

        assert writer.lines == ["fn f() {", "}"]

    def test_bound_values_are_not_parsed_as_templates(self):
        text = render_to_string(writable("/// #{Docs}", Docs="Greets with #{name} and <% if %>."))

        assert text == "/// Greets with #{name} and <% if %>.\n"

    def test_rust_braces_and_hashes_pass_through(self):
        text = render_to_string(writable('let p = "{#}{%}{{}}"; f(#{value});', value="x"))

        assert text == 'let p = "{#}{%}{{}}"; f(x);\n'

    def test_unbound_placeholder_is_a_shapeforge_error(self):
        with pytest.raises(ShapeforgeError) as exc_info:
            CodeWriter().write("#{missing}")

        assert isinstance(exc_info.value, TemplateError)
        assert str(exc_info.value) == "Unbound template variable: 'missing' is undefined"

    def test_to_string_trims_trailing_blank_lines(self):
        writer = CodeWriter()
        writer.write("a();")
        writer.write()
        writer.write()

        assert writer.to_string() == "a();\n"
        assert CodeWriter().to_string() == ""


class TestWritableHelpers:
    def test_join_with_blank_line_separator(self):
        fragment = join([writable("a();"), writable("b();")], separator="")

        assert render_to_string(fragment) == "a();\n\nb();\n"

    def test_join_without_separator(self):
        assert render_to_string(join([writable("a();"), writable("b();")])) == "a();\nb();\n"

    def test_is_empty(self):
        assert is_empty(EMPTY_WRITABLE)
        assert is_empty(writable(""))
        assert not is_empty(writable("x"))


# =============================================================================
# Section Variants
# =============================================================================


class TestSectionVariants:
    def test_qualified_names(self):
        assert OperationImplBlock(operation_name="GetCity").qualified_name == "OperationSection.OperationImplBlock"
        assert LibRsBody(module_name="weather").qualified_name == "LibRsSection.LibRsBody"
        assert ConfigStruct().family == "ServiceConfig"
        assert BuilderBuildPrelude(service_name="Weather").variant == "BuilderBuildPrelude"

    def test_variants_are_immutable(self):
        section = LibRsBody(module_name="weather")

        with pytest.raises(AttributeError):
            section.module_name = "other"  # type: ignore[misc]

    def test_copy_field(self):
        _, write = SdkConfigSection.copy_field("region")

        assert render_to_string(write(CopySdkConfigToClientConfig())) == (
            "builder.set_region(input.region());\n"
        )

    def test_copy_field_with_map_block(self):
        _, write = SdkConfigSection.copy_field("retry_config", writable("|c| c.clone()"))

        section = CopySdkConfigToClientConfig(sdk_config="shared", service_config_builder="b")

        assert render_to_string(write(section)) == (
            "b.set_retry_config(shared.retry_config().map(|c| c.clone()));\n"
        )


# =============================================================================
# SectionRegistry
# =============================================================================


class TestSectionRegistry:
    def test_defaults(self):
        registry = SectionRegistry.with_defaults()

        assert registry.sections() == [
            "LibRsSection",
            "OperationSection",
            "SdkConfig",
            "ServerBuilderSection",
            "ServiceConfig",
        ]
        assert registry.context_type("SdkConfig") is CopySdkConfigToClientConfig

    def test_re_registering_the_same_type_is_a_no_op(self):
        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.contribute("Greeting", "first", greet)

        registry.register("Greeting", Greeting)

        assert len(registry.contributions("Greeting")) == 1

    def test_registering_a_different_type_fails(self):
        registry = SectionRegistry()
        registry.register("Greeting", Greeting)

        with pytest.raises(DuplicateSectionError, match="Greeting"):
            registry.register("Greeting", Farewell)

    def test_contribute_to_unknown_section(self):
        with pytest.raises(UnknownSectionError, match="Nope"):
            SectionRegistry.with_defaults().contribute("Nope", "x", greet)

    def test_frozen_registry_rejects_changes(self):
        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RegistrationError, match="frozen"):
            registry.contribute("Greeting", "late", greet)
        with pytest.raises(RegistrationError, match="frozen"):
            registry.register("Other", Greeting)

    def test_render_orders_by_order_then_sequence(self):
        class Named:
            def __init__(self, name, order):
                self.name = name
                self.order = order

        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.contribute("Greeting", Named("late", 10), lambda s: writable("late"))
        registry.contribute("Greeting", Named("early-a", -5), lambda s: writable("early-a"))
        registry.contribute("Greeting", Named("early-b", -5), lambda s: writable("early-b"))
        registry.contribute("Greeting", "plain", lambda s: writable("plain"))

        fragments = registry.render(Greeting())

        assert [f.decorator for f in fragments] == ["early-a", "early-b", "plain", "late"]
        assert render_to_string(join(fragments)) == "early-a\nearly-b\nplain\nlate\n"

    def test_empty_contributions_are_skipped(self):
        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.contribute("Greeting", "silent", lambda s: EMPTY_SECTION)
        registry.contribute("Greeting", "none", lambda s: None)
        registry.contribute("Greeting", "loud", greet)

        fragments = registry.render(Greeting(name="there"))

        assert [f.decorator for f in fragments] == ["loud"]
        assert fragments[0].section == "Greeting.Greeting"
        assert render_to_string(registry.render_joined(Greeting(name="there"))) == "hello there\n"

    def test_render_unknown_family(self):
        with pytest.raises(UnknownSectionError):
            SectionRegistry().render(Greeting())

    def test_render_with_wrong_context_type(self):
        registry = SectionRegistry()
        registry.register("Greeting", Greeting)

        with pytest.raises(RegistrationError, match="expects Greeting"):
            registry.render(Farewell())

    def test_failing_contribution_is_attributed(self):
        def explode(section):
            raise ValueError("no region")

        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.contribute("Greeting", "Broken", explode)

        with pytest.raises(CompositionError) as exc_info:
            registry.render(Greeting())

        assert exc_info.value.decorator == "Broken"
        assert exc_info.value.section == "Greeting.Greeting"
        assert "no region" in str(exc_info.value)

    def test_failing_fragment_is_attributed_when_written(self):
        def explode(writer):
            raise RuntimeError("late failure")

        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.contribute("Greeting", "Lazy", lambda s: explode)

        fragments = registry.render(Greeting())

        with pytest.raises(CompositionError) as exc_info:
            render_to_string(join(fragments))
        assert exc_info.value.decorator == "Lazy"

    def test_unbound_placeholder_in_contribution_is_attributed(self):
        registry = SectionRegistry()
        registry.register("Greeting", Greeting)
        registry.contribute("Greeting", "Typo", lambda s: writable("hello #{nme}"))

        with pytest.raises(CompositionError, match="Typo"):
            render_to_string(registry.render_joined(Greeting()))
