"""Registry commands and their pure semantics.

Each command maps the current registry to a new registry, to ``NO_CHANGE``
when nothing needs writing, or raises :class:`PluginConflictError`. The
input registry is never mutated, so a command can be re-run safely
against a fresh read after a lost compare-and-set.

Commands
--------
AddPlugin    : Insert a descriptor under a name that is not yet taken.
RemovePlugin : Delete an existing entry.
UpdatePlugin : Replace an existing entry; an identical payload is a no-op.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Union

from cluster_plugins.atomic.document import NO_CHANGE, _NoChange
from cluster_plugins.errors import PluginConflictError
from cluster_plugins.registry.codec import Registry


@dataclass(frozen=True)
class AddPlugin:
    """Register a new plugin."""

    descriptor: dict[str, object] = field(hash=False)
    name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.descriptor.get("name", "")))


@dataclass(frozen=True)
class RemovePlugin:
    """Remove a plugin by name."""

    name: str


@dataclass(frozen=True)
class UpdatePlugin:
    """Replace the descriptor of an existing plugin."""

    descriptor: dict[str, object] = field(hash=False)
    name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.descriptor.get("name", "")))


PluginCommand = Union[AddPlugin, RemovePlugin, UpdatePlugin]


def apply_command(registry: Registry, command: PluginCommand) -> "Registry | _NoChange":
    """Apply *command* to *registry* and return the resulting registry.

    Parameters
    ----------
    registry:
        Current registry; left unmodified.
    command:
        The command to apply.

    Returns
    -------
    Registry | NO_CHANGE
        The new registry, or ``NO_CHANGE`` when nothing needs writing.

    Raises
    ------
    PluginConflictError
        If the command's target already exists (add) or is missing
        (remove, update).
    TypeError
        If *command* is not a known command type.
    """
    if isinstance(command, AddPlugin):
        return _add(registry, command)
    if isinstance(command, RemovePlugin):
        return _remove(registry, command)
    if isinstance(command, UpdatePlugin):
        return _update(registry, command)
    raise TypeError(f"Unknown plugin command: {type(command).__name__}")


def _add(registry: Registry, command: AddPlugin) -> Registry:
    if command.name in registry:
        raise PluginConflictError.already_exists(command.name)
    updated = dict(registry)
    updated[command.name] = copy.deepcopy(command.descriptor)
    return updated


def _remove(registry: Registry, command: RemovePlugin) -> Registry:
    if command.name not in registry:
        raise PluginConflictError.no_such_plugin(command.name)
    return {name: entry for name, entry in registry.items() if name != command.name}


def _update(registry: Registry, command: UpdatePlugin) -> "Registry | _NoChange":
    existing = registry.get(command.name)
    if existing is None:
        raise PluginConflictError.no_such_plugin(command.name)
    if _same_json(existing, command.descriptor):
        return NO_CHANGE
    updated = dict(registry)
    updated[command.name] = copy.deepcopy(command.descriptor)
    return updated


def _same_json(left: object, right: object) -> bool:
    """Deep equality that keeps JSON types apart (``true`` != ``1`` != ``1.0``)."""
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        assert isinstance(right, dict)
        return left.keys() == right.keys() and all(
            _same_json(value, right[key]) for key, value in left.items()
        )
    if isinstance(left, list):
        assert isinstance(right, list)
        return len(left) == len(right) and all(
            _same_json(a, b) for a, b in zip(left, right)
        )
    return left == right


__all__ = [
    "AddPlugin",
    "PluginCommand",
    "RemovePlugin",
    "UpdatePlugin",
    "apply_command",
]
