# shapeforge/generators/crate.py
"""
RustCrate - the output artifact of a run.

Generators and decorator extras add fragments to modules; nothing becomes
text until ``render``. Modules are rendered in path order and fragments in
the order they were added.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import GENERATOR
from shapeforge.sections.registry import Fragment
from shapeforge.sections.writable import CodeWriter, Writable
from shapeforge.symbols.symbol import RuntimeConfig

logger = get_logger(__name__)

LIB_RS = "src/lib.rs"


def module_path(module: str) -> str:
    """File path of a module (``config`` → ``src/config.rs``, ``lib`` → ``src/lib.rs``)."""
    if module in ("lib", "crate"):
        return LIB_RS
    return f"src/{module.replace('::', '/')}.rs"


class RustCrate:
    """
    Files of the generated crate.

    Examples:
        >>> crate = RustCrate("weather", "0.0.1", RuntimeConfig())
        >>> crate.with_module("config", writable("pub struct Config;"))
        >>> sorted(crate.render())
        ['Cargo.toml', 'src/config.rs']
    """

    def __init__(self, module_name: str, module_version: str, runtime_config: RuntimeConfig):
        self.module_name = module_name
        self.module_version = module_version
        self.runtime_config = runtime_config
        self._modules: Dict[str, List[Writable]] = {}
        self._dependencies: Dict[str, str] = {}
        self._contributor: Optional[str] = None

    def with_module(self, module: str, fragment: Writable) -> "RustCrate":
        path = module_path(module)
        if self._contributor is not None:
            fragment = Fragment(self._contributor, path, fragment, hook="extras")
        self._modules.setdefault(path, []).append(fragment)
        return self

    @contextmanager
    def contributed_by(self, decorator: str) -> Iterator["RustCrate"]:
        """Attribute fragments added inside the block to ``decorator``."""
        previous, self._contributor = self._contributor, decorator
        try:
            yield self
        finally:
            self._contributor = previous

    def modules(self) -> List[str]:
        return sorted(self._modules)

    def has_module(self, module: str) -> bool:
        return module_path(module) in self._modules

    # -------------------------------------------------------------------------
    # Dependencies
    # -------------------------------------------------------------------------

    def add_runtime_dependency(self, suffix: str) -> None:
        """Depend on ``<crate_prefix>-<suffix>`` at the configured version or path."""
        rc = self.runtime_config
        name = f"{rc.crate_prefix}-{suffix}"
        if rc.relative_path:
            self._dependencies[name] = f'{{ path = "{rc.relative_path}/{name}" }}'
        else:
            self._dependencies[name] = f'"{rc.version}"'

    def add_dependency(self, name: str, requirement: str) -> None:
        self._dependencies[name] = f'"{requirement}"'

    def cargo_toml(self) -> str:
        lines = [
            "[package]",
            f'name = "{self.module_name}"',
            f'version = "{self.module_version}"',
            'edition = "2021"',
            "",
            "[dependencies]",
        ]
        lines.extend(f"{name} = {req}" for name, req in sorted(self._dependencies.items()))
        return "\n".join(lines) + "\n"

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> Dict[str, str]:
        """Path → file text, including Cargo.toml."""
        files: Dict[str, str] = {"Cargo.toml": self.cargo_toml()}
        for path in self.modules():
            writer = CodeWriter()
            for index, fragment in enumerate(self._modules[path]):
                if index:
                    writer.write("")
                fragment(writer)
            files[path] = writer.to_string()
        logger.debug(f"{GENERATOR} Rendered {len(files)} file(s) for {self.module_name}")
        return dict(sorted(files.items()))


__all__ = ["RustCrate", "module_path", "LIB_RS"]
