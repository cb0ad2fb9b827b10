"""Exception hierarchy for cluster-plugins.

Failure kinds
-------------
PluginValidationError   : Malformed descriptor, missing version or a failed
                          construction probe. Raised before any store access.
PluginConflictError     : Duplicate add target, or missing remove/update target.
ContentionError         : Compare-and-set retry budget exhausted.
StoreError              : Coordination store unavailable or other I/O fault.
OperationCancelledError : The caller cancelled the operation.
"""
from __future__ import annotations


class ClusterPluginsError(Exception):
    """Base class for every error raised by cluster-plugins."""


class PluginValidationError(ClusterPluginsError, ValueError):
    """Raised when a plugin descriptor or command payload is invalid.

    Parameters
    ----------
    errors:
        Human-readable error messages, one per failed check.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors: list[str] = list(errors)
        super().__init__("; ".join(self.errors) or "invalid plugin descriptor")


class PluginConflictError(ClusterPluginsError):
    """Raised when a command conflicts with the current registry state.

    Parameters
    ----------
    plugin_name:
        The plugin the command targeted.
    message:
        Human-readable conflict description.
    """

    def __init__(self, plugin_name: str, message: str) -> None:
        self.plugin_name = plugin_name
        self.errors: list[str] = [message]
        super().__init__(message)

    @classmethod
    def already_exists(cls, plugin_name: str) -> "PluginConflictError":
        return cls(plugin_name, f"{plugin_name} already exists")

    @classmethod
    def no_such_plugin(cls, plugin_name: str) -> "PluginConflictError":
        return cls(plugin_name, f"No such plugin: {plugin_name}")


class ContentionError(ClusterPluginsError):
    """Raised when concurrent writers prevented a commit within the retry budget.

    The operation had no effect; callers may retry the whole command.
    """

    def __init__(self, path: str, attempts: int) -> None:
        self.path = path
        self.attempts = attempts
        super().__init__(
            f"Gave up updating {path!r} after {attempts} attempt(s) "
            "due to concurrent modification"
        )


class StoreError(ClusterPluginsError, OSError):
    """Raised when the coordination store cannot be read or written."""


class OperationCancelledError(ClusterPluginsError):
    """Raised when the caller cancelled an operation before it committed."""


__all__ = [
    "ClusterPluginsError",
    "ContentionError",
    "OperationCancelledError",
    "PluginConflictError",
    "PluginValidationError",
    "StoreError",
]
