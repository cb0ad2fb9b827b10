"""Resolution of plugin implementation classes.

Two class reference forms are understood:

``"my_module.sub.MyPlugin"``
    Imported from the running interpreter.
``"my_dist:my_module.sub.MyPlugin"``
    Shipped in the installed distribution ``my_dist``; the installed
    version must match the descriptor's ``version`` before the class is
    imported.
"""
from __future__ import annotations

import importlib
import importlib.metadata
import logging
from abc import ABC, abstractmethod

from cluster_plugins.registry.descriptor import PluginDescriptor

logger = logging.getLogger(__name__)


class PluginLoadError(Exception):
    """Raised when a descriptor's implementation class cannot be resolved."""

    def __init__(self, class_ref: str, reason: str) -> None:
        self.class_ref = class_ref
        self.reason = reason
        super().__init__(f"Cannot load plugin class {class_ref!r}: {reason}")


class PluginLoader(ABC):
    """Turns a descriptor into the class that implements it."""

    @abstractmethod
    def resolve(self, descriptor: PluginDescriptor) -> type:
        """Return the implementation class for *descriptor*.

        Raises
        ------
        PluginLoadError
            If the class cannot be found or its package does not match.
        """


class ImportPluginLoader(PluginLoader):
    """Resolve classes with :mod:`importlib`, checking package versions."""

    def resolve(self, descriptor: PluginDescriptor) -> type:
        if descriptor.package is not None:
            self._check_package_version(descriptor)
        return self._import_class(descriptor.class_path)

    @staticmethod
    def _check_package_version(descriptor: PluginDescriptor) -> None:
        package = descriptor.package
        assert package is not None
        try:
            installed = importlib.metadata.version(package)
        except importlib.metadata.PackageNotFoundError as exc:
            raise PluginLoadError(descriptor.klass, f"package {package!r} is not installed") from exc
        if descriptor.version is not None and installed != descriptor.version:
            raise PluginLoadError(
                descriptor.klass,
                f"package {package!r} is at version {installed}, "
                f"descriptor requires {descriptor.version}",
            )

    @staticmethod
    def _import_class(class_path: str) -> type:
        module_name, _, attr_name = class_path.rpartition(".")
        if not module_name or not attr_name:
            raise PluginLoadError(class_path, "expected a dotted 'module.ClassName' path")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise PluginLoadError(class_path, f"cannot import module {module_name!r}: {exc}") from exc
        candidate = getattr(module, attr_name, None)
        if candidate is None:
            raise PluginLoadError(class_path, f"module {module_name!r} has no attribute {attr_name!r}")
        if not isinstance(candidate, type):
            raise PluginLoadError(class_path, f"{attr_name!r} is not a class")
        logger.debug("Resolved plugin class %s", class_path)
        return candidate


__all__ = ["ImportPluginLoader", "PluginLoadError", "PluginLoader"]
