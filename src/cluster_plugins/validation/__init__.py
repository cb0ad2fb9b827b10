"""Descriptor validation and construction probe."""
from __future__ import annotations

from cluster_plugins.validation.loader import ImportPluginLoader, PluginLoader, PluginLoadError
from cluster_plugins.validation.probe import probe_plugin
from cluster_plugins.validation.validator import (
    MISSING_VERSION_MESSAGE,
    PluginValidator,
    ValidationReport,
)

__all__ = [
    "MISSING_VERSION_MESSAGE",
    "ImportPluginLoader",
    "PluginLoadError",
    "PluginLoader",
    "PluginValidator",
    "ValidationReport",
    "probe_plugin",
]
