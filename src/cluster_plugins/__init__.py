"""cluster-plugins: cluster-wide plugin registry kept in a coordination store.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import cluster_plugins
>>> cluster_plugins.__version__
'0.1.0'

Service
-------
>>> from cluster_plugins import ClusterPluginsService, InMemoryCoordinationStore
>>> service = ClusterPluginsService(InMemoryCoordinationStore())
>>> service.list_plugins()
{}

Atomic updates
--------------
>>> from cluster_plugins import AtomicDocumentUpdater, RetryPolicy, NO_CHANGE

Commands
--------
>>> from cluster_plugins import AddPlugin, RemovePlugin, UpdatePlugin, apply_command
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from cluster_plugins.errors import (
    ClusterPluginsError,
    ContentionError,
    OperationCancelledError,
    PluginConflictError,
    PluginValidationError,
    StoreError,
)

# ---------------------------------------------------------------------------
# Coordination store
# ---------------------------------------------------------------------------
from cluster_plugins.store import (
    NO_VERSION,
    BadVersionError,
    CoordinationStore,
    FileCoordinationStore,
    InMemoryCoordinationStore,
    NoNodeError,
    StoreInterruptedError,
    StoreUnavailableError,
    VersionedSnapshot,
)

# ---------------------------------------------------------------------------
# Atomic updates
# ---------------------------------------------------------------------------
from cluster_plugins.atomic import NO_CHANGE, AtomicDocumentUpdater, RetryPolicy, UpdateOutcome

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
from cluster_plugins.registry import (
    CLUSTER_PROPS_PATH,
    PLUGIN_KEY,
    PluginDescriptor,
    extract_registry,
    replace_registry,
)

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
from cluster_plugins.validation import (
    ImportPluginLoader,
    PluginLoader,
    PluginLoadError,
    PluginValidator,
    ValidationReport,
)

# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
from cluster_plugins.commands import (
    AddPlugin,
    PluginCommand,
    RemovePlugin,
    UpdatePlugin,
    apply_command,
    parse_command,
)

# ---------------------------------------------------------------------------
# Service / configuration
# ---------------------------------------------------------------------------
from cluster_plugins.config import ClusterPluginsConfig, RetrySettings
from cluster_plugins.api import ClusterPluginsService, PluginResponse, read_plugins

__all__ = [
    # Version
    "__version__",
    # Errors
    "ClusterPluginsError",
    "ContentionError",
    "OperationCancelledError",
    "PluginConflictError",
    "PluginValidationError",
    "StoreError",
    # Store
    "NO_VERSION",
    "BadVersionError",
    "CoordinationStore",
    "FileCoordinationStore",
    "InMemoryCoordinationStore",
    "NoNodeError",
    "StoreInterruptedError",
    "StoreUnavailableError",
    "VersionedSnapshot",
    # Atomic updates
    "NO_CHANGE",
    "AtomicDocumentUpdater",
    "RetryPolicy",
    "UpdateOutcome",
    # Registry
    "CLUSTER_PROPS_PATH",
    "PLUGIN_KEY",
    "PluginDescriptor",
    "extract_registry",
    "replace_registry",
    # Validation
    "ImportPluginLoader",
    "PluginLoadError",
    "PluginLoader",
    "PluginValidator",
    "ValidationReport",
    # Commands
    "AddPlugin",
    "PluginCommand",
    "RemovePlugin",
    "UpdatePlugin",
    "apply_command",
    "parse_command",
    # Service / configuration
    "ClusterPluginsConfig",
    "ClusterPluginsService",
    "PluginResponse",
    "RetrySettings",
    "read_plugins",
]
