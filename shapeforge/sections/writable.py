# shapeforge/sections/writable.py
"""
Writable fragments and the CodeWriter emission collaborator.

A Writable is a closure that writes text into a CodeWriter. Generators build
trees of Writables and only turn them into text at the very end, so
decorator contributions stay lazy and composable.

Template text is rendered by jinja2 with ``#{Name}`` as the variable
delimiter, so Rust braces never need escaping:

    writer.write(
        "let x = #{Blob}::new(#{inner});",
        Blob=RuntimeTypes.blob(rc),
        inner=writable("bytes"),
    )

Bound Writables are rendered to text before the template is. A placeholder
that is the only thing on its line is expanded at that line's indentation
(jinja's ``indent`` filter); if it renders to nothing the line is dropped.
Bound values are never parsed as templates, so user text such as model
documentation can contain ``#{...}`` safely.
"""

from __future__ import annotations

import textwrap
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, UndefinedError

from shapeforge.core.exceptions import TemplateError

Writable = Callable[["CodeWriter"], None]

_ENV = Environment(
    variable_start_string="#{",
    variable_end_string="}",
    block_start_string="<%",
    block_end_string="%>",
    comment_start_string="<%#",
    comment_end_string="#%>",
    undefined=StrictUndefined,
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


class CodeWriter:
    """
    Line-oriented text buffer with indentation.

    Examples:
        >>> w = CodeWriter()
        >>> with w.block("impl Foo"):
        ...     w.write("fn bar() {}")
        >>> print(w.to_string())
        impl Foo {
            fn bar() {}
        }
    """

    def __init__(self, indent_unit: str = "    "):
        self.indent_unit = indent_unit
        self._lines: List[str] = []
        self._level = 0

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def write(self, template: str = "", **scope: Any) -> "CodeWriter":
        """Write a (possibly multi-line) template at the current indentation."""
        normalized = _normalize(template)
        text = render_template(normalized, scope)
        if normalized and not text:
            return self
        prefix = self.indent_unit * self._level
        for line in text.split("\n") if text else [""]:
            self._lines.append(f"{prefix}{line}" if line.strip() else "")
        return self

    def include(self, fragment: Optional[Writable]) -> "CodeWriter":
        if fragment is not None:
            fragment(self)
        return self

    def include_all(self, fragments: Iterable[Writable]) -> "CodeWriter":
        for fragment in fragments:
            fragment(self)
        return self

    @contextmanager
    def indent(self) -> Iterator["CodeWriter"]:
        self._level += 1
        try:
            yield self
        finally:
            self._level -= 1

    @contextmanager
    def block(self, header: str, closer: str = "}", **scope: Any) -> Iterator["CodeWriter"]:
        """Write ``header {``, indent the body, then write ``closer``."""
        self.write(f"{header} {{", **scope)
        with self.indent():
            yield self
        self.write(closer)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def is_empty(self) -> bool:
        return not any(line.strip() for line in self._lines)

    def to_string(self) -> str:
        lines = list(self._lines)
        while lines and not lines[-1].strip():
            lines.pop()
        return "\n".join(lines) + "\n" if lines else ""


def _normalize(template: str) -> str:
    """Dedent a triple-quoted template and trim its surrounding blank lines."""
    text = textwrap.dedent(template)
    if text.startswith("\n"):
        text = text[1:]
    return text.rstrip()


def _lone_placeholder(line: str) -> Optional[str]:
    stripped = line.strip()
    if stripped.startswith("#{") and stripped.endswith("}"):
        name = stripped[2:-1]
        if name.isidentifier():
            return name
    return None


@lru_cache(maxsize=1024)
def _compile(template: str) -> Template:
    """Compile a template, turning lone placeholder lines into indented blocks."""
    lines: List[str] = []
    for line in template.split("\n"):
        name = _lone_placeholder(line)
        if name is None:
            lines.append(line)
            continue
        indent = line[: len(line) - len(line.lstrip())]
        lines.append(f"<% if {name}.strip() %>")
        lines.append(f"{indent}#{{{name}|indent({len(indent)})}}")
        lines.append("<% endif %>")
    try:
        return _ENV.from_string("\n".join(lines))
    except TemplateSyntaxError as e:
        raise TemplateError(f"Invalid template (line {e.lineno}): {e.message}") from e


def _value_text(value: Any) -> str:
    if callable(value):
        return render_to_string(value).rstrip("\n")
    return str(value)


def render_template(template: str, scope: Mapping[str, Any]) -> str:
    """
    Render a normalized template with ``scope`` bound.

    Raises:
        TemplateError: If a placeholder has no binding in ``scope``
    """
    compiled = _compile(template)
    values: Dict[str, str] = {name: _value_text(value) for name, value in scope.items()}
    try:
        return compiled.render(values).rstrip("\n")
    except UndefinedError as e:
        raise TemplateError(f"Unbound template variable: {e.message}") from e


# =============================================================================
# Writable Helpers
# =============================================================================


def writable(template: str = "", **scope: Any) -> Writable:
    """A Writable that writes ``template`` with ``scope`` bound."""

    def write(writer: CodeWriter) -> None:
        writer.write(template, **scope)

    return write


def _write_nothing(writer: CodeWriter) -> None:
    return None


EMPTY_WRITABLE: Writable = _write_nothing


def join(fragments: Iterable[Writable], separator: Optional[str] = None) -> Writable:
    """Concatenate fragments, optionally writing ``separator`` between them."""
    items = list(fragments)

    def write(writer: CodeWriter) -> None:
        for index, fragment in enumerate(items):
            if index and separator is not None:
                writer.write(separator)
            fragment(writer)

    return write


def render_to_string(fragment: Writable) -> str:
    writer = CodeWriter()
    fragment(writer)
    return writer.to_string()


def is_empty(fragment: Writable) -> bool:
    return fragment is EMPTY_WRITABLE or not render_to_string(fragment).strip()


__all__ = [
    "Writable",
    "CodeWriter",
    "TemplateError",
    "render_template",
    "writable",
    "join",
    "render_to_string",
    "is_empty",
    "EMPTY_WRITABLE",
]
