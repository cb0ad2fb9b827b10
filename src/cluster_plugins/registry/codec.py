"""Plugin registry codec.

The plugin registry lives under a single key of the outer cluster
document. This module extracts it (an absent key is an empty registry)
and puts a modified registry back, leaving every sibling key untouched.
"""
from __future__ import annotations

import copy
from typing import Callable

from cluster_plugins.atomic.document import NO_CHANGE, Document, _NoChange
from cluster_plugins.errors import StoreError

PLUGIN_KEY: str = "plugin"
CLUSTER_PROPS_PATH: str = "/clusterprops.json"

Registry = dict[str, dict[str, object]]
RegistryFunction = Callable[[Registry], "Registry | _NoChange"]


def extract_registry(document: Document, key: str = PLUGIN_KEY) -> Registry:
    """Return a deep copy of the registry held in *document*.

    Raises
    ------
    ValueError
        If the registry key holds something other than a JSON object.
    """
    registry = document.get(key)
    if registry is None:
        return {}
    if not isinstance(registry, dict):
        raise ValueError(
            f"Registry key {key!r} must hold a JSON object, got {type(registry).__name__}"
        )
    return copy.deepcopy(registry)


def replace_registry(document: Document, registry: Registry, key: str = PLUGIN_KEY) -> Document:
    """Return a copy of *document* with only the registry key replaced."""
    updated = dict(document)
    updated[key] = registry
    return updated


def registry_transform(
    modifier: RegistryFunction, key: str = PLUGIN_KEY
) -> Callable[[Document], "Document | _NoChange"]:
    """Lift a registry-level function into a whole-document transform.

    ``NO_CHANGE`` from *modifier* is passed through untouched. A registry
    key that does not hold a JSON object raises :class:`StoreError`.
    """

    def transform(document: Document) -> "Document | _NoChange":
        try:
            registry = extract_registry(document, key)
        except ValueError as exc:
            raise StoreError(f"Cannot decode plugin registry: {exc}") from exc
        modified = modifier(registry)
        if modified is NO_CHANGE:
            return NO_CHANGE
        return replace_registry(document, modified, key)

    return transform


__all__ = [
    "CLUSTER_PROPS_PATH",
    "PLUGIN_KEY",
    "Registry",
    "RegistryFunction",
    "extract_registry",
    "registry_transform",
    "replace_registry",
]
