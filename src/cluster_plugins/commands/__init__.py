"""Registry commands, their pure semantics and wire decoding."""
from __future__ import annotations

from cluster_plugins.commands.processor import (
    AddPlugin,
    PluginCommand,
    RemovePlugin,
    UpdatePlugin,
    apply_command,
)
from cluster_plugins.commands.wire import COMMAND_NAMES, parse_command

__all__ = [
    "COMMAND_NAMES",
    "AddPlugin",
    "PluginCommand",
    "RemovePlugin",
    "UpdatePlugin",
    "apply_command",
    "parse_command",
]
