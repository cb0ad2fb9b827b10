"""Plugin registry codec and descriptor model."""
from __future__ import annotations

from cluster_plugins.registry.codec import (
    CLUSTER_PROPS_PATH,
    PLUGIN_KEY,
    Registry,
    extract_registry,
    registry_transform,
    replace_registry,
)
from cluster_plugins.registry.descriptor import (
    PACKAGE_SEPARATOR,
    PluginDescriptor,
    describe_errors,
    package_of,
)

__all__ = [
    "CLUSTER_PROPS_PATH",
    "PACKAGE_SEPARATOR",
    "PLUGIN_KEY",
    "PluginDescriptor",
    "Registry",
    "describe_errors",
    "extract_registry",
    "package_of",
    "registry_transform",
    "replace_registry",
]
