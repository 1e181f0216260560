# shapeforge/core/registry.py
"""
Decorator Registry.

Decorators are registered from an explicit list of built-in classes plus,
optionally, the packages a DecoratorManifest names for scanning. There is
no import-time side-effect registration: the set of decorators taking part
in a run is exactly what ``build_registry`` assembled and ``select``
returned.

Usage:
    registry = build_registry(settings.decorators.scan_packages)
    decorators = registry.instantiate(registry.select(settings.decorators))
"""

from __future__ import annotations

import importlib
import pkgutil
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Sequence, Type

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import DECORATORS

from .exceptions import DuplicateDecoratorError, RegistrationError

if TYPE_CHECKING:
    from shapeforge.config.schema import DecoratorManifest

logger = get_logger(__name__)


# =============================================================================
# DecoratorRegistry Class
# =============================================================================


@dataclass
class DecoratorRegistry:
    """
    Name → decorator class, in registration order.

    Args:
        name: Registry name (for error messages)
        required_method: Method name that decorator classes must have
        name_attr: Attribute containing the decorator name
        check_module_match: If True, scanning only registers classes defined
            in the scanned module (not ones it imported)
    """

    name: str = "decorator"
    required_method: str = "transform_model"
    name_attr: str = "name"
    check_module_match: bool = True
    _decorators: Dict[str, Type[Any]] = field(default_factory=dict, repr=False)

    def get(self, decorator_name: str) -> Type[Any]:
        if decorator_name not in self._decorators:
            raise RegistrationError(
                f"Unknown {self.name}: {decorator_name!r}. Available: {self.list_available()}"
            )
        return self._decorators[decorator_name]

    def list_available(self) -> List[str]:
        return sorted(self._decorators.keys())

    def classes(self) -> List[Type[Any]]:
        """Registered classes in registration order."""
        return list(self._decorators.values())

    def __contains__(self, decorator_name: object) -> bool:
        return decorator_name in self._decorators

    def __len__(self) -> int:
        return len(self._decorators)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, decorator_class: Type[Any]) -> None:
        """Register one decorator class; the same class twice is a no-op."""
        if not hasattr(decorator_class, self.required_method):
            raise RegistrationError(
                f"{self.name} {decorator_class.__name__} missing required "
                f"method {self.required_method!r}"
            )

        name = getattr(decorator_class, self.name_attr, "")
        if not name:
            raise RegistrationError(
                f"{self.name} {decorator_class.__name__} has an empty {self.name_attr!r}"
            )

        existing = self._decorators.get(name)
        if existing is not None:
            if existing is not decorator_class:
                raise DuplicateDecoratorError(
                    f"Duplicate {self.name}: {name!r}. "
                    f"Found in {existing.__module__}.{existing.__qualname__} and "
                    f"{decorator_class.__module__}.{decorator_class.__qualname__}"
                )
            return

        self._decorators[name] = decorator_class
        logger.debug(f"{DECORATORS} Registered {self.name}: {name!r}")

    def register_all(self, decorator_classes: Iterable[Type[Any]]) -> None:
        for decorator_class in decorator_classes:
            self.register(decorator_class)

    def scan_package(self, package_name: str) -> None:
        """
        Register every decorator class defined in ``package_name``'s modules.

        Modules are visited in name order (non-recursive). A module that
        fails to import fails the scan.

        Raises:
            RegistrationError: If the package or one of its modules can't be imported
        """
        try:
            package = importlib.import_module(package_name)
        except ImportError as e:
            raise RegistrationError(f"Cannot import decorator package {package_name!r}: {e}") from e

        package_path = getattr(package, "__path__", None)
        if not package_path:
            self._scan_module(package)
            return

        modules = sorted(
            modname
            for _, modname, ispkg in pkgutil.iter_modules(package_path, prefix=f"{package.__name__}.")
            if not ispkg
        )
        for modname in modules:
            try:
                module = importlib.import_module(modname)
            except Exception as e:
                raise RegistrationError(f"Cannot import decorator module {modname!r}: {e}") from e
            self._scan_module(module)

        logger.debug(
            f"{DECORATORS} Scanned {package_name}: {len(self._decorators)} {self.name}(s) registered"
        )

    def _scan_module(self, module: Any) -> None:
        for attr in dir(module):
            if attr.startswith("_"):
                continue

            obj = getattr(module, attr)
            if not isinstance(obj, type):
                continue
            if not hasattr(obj, self.required_method):
                continue
            # Abstract bases leave the name empty.
            if not getattr(obj, self.name_attr, ""):
                continue
            if self.check_module_match and obj.__module__ != module.__name__:
                continue

            self.register(obj)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select(self, manifest: "DecoratorManifest") -> List[Type[Any]]:
        """
        Classes taking part in a run, in registration order.

        Raises:
            RegistrationError: If the manifest names an unknown decorator
        """
        named = list(manifest.enabled or []) + list(manifest.disabled)
        unknown = sorted(n for n in named if n not in self._decorators)
        if unknown:
            raise RegistrationError(
                f"Decorator manifest names unknown {self.name}(s) {unknown}. "
                f"Available: {self.list_available()}"
            )

        selected = []
        for name, decorator_class in self._decorators.items():
            if manifest.enabled is not None and name not in manifest.enabled:
                continue
            if name in manifest.disabled:
                continue
            selected.append(decorator_class)

        logger.info(f"{DECORATORS} Selected {[getattr(c, self.name_attr) for c in selected]}")
        return selected

    @staticmethod
    def instantiate(decorator_classes: Sequence[Type[Any]]) -> List[Any]:
        return [decorator_class() for decorator_class in decorator_classes]


# =============================================================================
# Pre-configured Registry
# =============================================================================


def build_registry(scan_packages: Sequence[str] = ()) -> DecoratorRegistry:
    """Registry holding the built-in decorators plus any scanned packages."""
    from shapeforge.decorators.plugins import BUILTIN_DECORATORS

    registry = DecoratorRegistry()
    registry.register_all(BUILTIN_DECORATORS)
    for package_name in scan_packages:
        registry.scan_package(package_name)
    return registry


__all__ = ["DecoratorRegistry", "build_registry"]
