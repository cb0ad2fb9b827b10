"""Decoding of edit request bodies into registry commands.

Accepted bodies::

    {"add": {<descriptor>}}
    {"remove": "<name>"}
    {"update": {<descriptor>}}
"""
from __future__ import annotations

from collections.abc import Mapping

from cluster_plugins.commands.processor import AddPlugin, PluginCommand, RemovePlugin, UpdatePlugin
from cluster_plugins.errors import PluginValidationError

COMMAND_NAMES: tuple[str, ...] = ("add", "remove", "update")


def parse_command(body: object) -> PluginCommand:
    """Decode one request body into a :data:`PluginCommand`.

    Raises
    ------
    PluginValidationError
        If the body does not name exactly one known command, or the
        command's payload has the wrong type.
    """
    if not isinstance(body, Mapping):
        raise PluginValidationError(["Request body must be a JSON object"])

    unknown = sorted(str(key) for key in body if key not in COMMAND_NAMES)
    if unknown:
        raise PluginValidationError([f"Unknown command: {name}" for name in unknown])
    if len(body) != 1:
        raise PluginValidationError(
            [f"Expected exactly one of {', '.join(COMMAND_NAMES)}; got {len(body)}"]
        )

    name, payload = next(iter(body.items()))
    if name == "remove":
        if not isinstance(payload, str) or not payload:
            raise PluginValidationError(["remove: expected a plugin name"])
        return RemovePlugin(payload)

    if not isinstance(payload, Mapping):
        raise PluginValidationError([f"{name}: expected a plugin descriptor object"])
    descriptor = dict(payload)
    if name == "add":
        return AddPlugin(descriptor)
    return UpdatePlugin(descriptor)


__all__ = ["COMMAND_NAMES", "parse_command"]
