"""Coordination store interface and reference backends."""
from __future__ import annotations

from cluster_plugins.store.base import (
    NO_VERSION,
    BadVersionError,
    CoordinationStore,
    CoordinationStoreError,
    NoNodeError,
    StoreInterruptedError,
    StoreUnavailableError,
    VersionedSnapshot,
)
from cluster_plugins.store.file import FileCoordinationStore
from cluster_plugins.store.memory import InMemoryCoordinationStore

__all__ = [
    "NO_VERSION",
    "BadVersionError",
    "CoordinationStore",
    "CoordinationStoreError",
    "FileCoordinationStore",
    "InMemoryCoordinationStore",
    "NoNodeError",
    "StoreInterruptedError",
    "StoreUnavailableError",
    "VersionedSnapshot",
]
