"""Service facade over the shared plugin registry.

Exposes the read path and the three edit commands, plus the
request/response envelope consumed by an HTTP binding layer:

``GET /cluster/plugin``
    :meth:`ClusterPluginsService.handle_get` returns
    ``{"plugin": {<name>: <descriptor>, ...}}``.
``POST /cluster/plugin``
    :meth:`ClusterPluginsService.handle_post` takes one of
    ``{"add": {...}}``, ``{"remove": "<name>"}`` or ``{"update": {...}}``.

Validation and conflict failures come back as a non-empty list of error
strings with nothing written. Contention, store and cancellation failures
are raised to the caller.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field

from cluster_plugins.atomic.document import decode_document
from cluster_plugins.atomic.updater import AtomicDocumentUpdater, UpdateOutcome, store_errors
from cluster_plugins.commands.processor import (
    AddPlugin,
    PluginCommand,
    RemovePlugin,
    UpdatePlugin,
    apply_command,
)
from cluster_plugins.commands.wire import parse_command
from cluster_plugins.config import ClusterPluginsConfig
from cluster_plugins.errors import PluginConflictError, PluginValidationError, StoreError
from cluster_plugins.registry.codec import (
    CLUSTER_PROPS_PATH,
    PLUGIN_KEY,
    Registry,
    extract_registry,
    registry_transform,
)
from cluster_plugins.store.base import CoordinationStore
from cluster_plugins.validation.validator import PluginValidator

logger = logging.getLogger(__name__)


def read_plugins(
    store: CoordinationStore,
    path: str = CLUSTER_PROPS_PATH,
    key: str = PLUGIN_KEY,
) -> Registry:
    """Return the current plugin registry without modifying anything.

    A missing document or a document without the registry key yields an
    empty mapping.

    Raises
    ------
    StoreError
        If the store is unavailable or the document cannot be decoded.
    OperationCancelledError
        If the read was interrupted.
    """
    with store_errors(path):
        snapshot = store.read(path)
    try:
        return extract_registry(decode_document(snapshot.data), key)
    except ValueError as exc:
        raise StoreError(f"Error reading cluster property {path!r}: {exc}") from exc


@dataclass
class PluginResponse:
    """Envelope returned for an edit request.

    Attributes
    ----------
    errors:
        Human-readable failure messages; empty on success.
    outcome:
        Update outcome when the command went through.
    """

    errors: list[str] = field(default_factory=list)
    outcome: UpdateOutcome | None = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, object]:
        if self.errors:
            return {"errors": list(self.errors)}
        return {}


class ClusterPluginsService:
    """Read and edit the cluster-wide plugin registry.

    Parameters
    ----------
    store:
        Coordination store holding the cluster document.
    validator:
        Descriptor validator; defaults to :class:`PluginValidator`.
    config:
        Document location and retry settings.
    cancel_event:
        Optional event that cancels in-flight updates when set.

    Example
    -------
    ::

        service = ClusterPluginsService(InMemoryCoordinationStore())
        service.add({"name": "p1", "class": "my_mod.P1"})
        service.list_plugins()
    """

    def __init__(
        self,
        store: CoordinationStore,
        validator: PluginValidator | None = None,
        config: ClusterPluginsConfig | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._store = store
        self._validator = validator or PluginValidator()
        self._config = config or ClusterPluginsConfig()
        self._updater = AtomicDocumentUpdater(
            store,
            retry_policy=self._config.retry.to_policy(),
            cancel_event=cancel_event,
        )

    @property
    def config(self) -> ClusterPluginsConfig:
        return self._config

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def list_plugins(self) -> Registry:
        """Return the current registry, ``{}`` when nothing is stored yet."""
        return read_plugins(self._store, self._config.document_path, self._config.plugin_key)

    # ------------------------------------------------------------------
    # Edit commands
    # ------------------------------------------------------------------

    def add(self, descriptor: Mapping[str, object]) -> UpdateOutcome:
        """Register a new plugin. See :meth:`execute`."""
        return self.execute(AddPlugin(dict(descriptor)))

    def remove(self, name: str) -> UpdateOutcome:
        """Remove a plugin by name. See :meth:`execute`."""
        return self.execute(RemovePlugin(name))

    def update(self, descriptor: Mapping[str, object]) -> UpdateOutcome:
        """Replace an existing plugin's descriptor. See :meth:`execute`."""
        return self.execute(UpdatePlugin(dict(descriptor)))

    def execute(self, command: PluginCommand) -> UpdateOutcome:
        """Validate *command* and commit it to the shared registry.

        Raises
        ------
        PluginValidationError
            If the descriptor is invalid; the store is not touched.
        PluginConflictError
            If the target already exists (add) or is missing (remove,
            update); nothing is written.
        ContentionError
            If concurrent writers exhausted the retry budget.
        StoreError
            If the store failed.
        OperationCancelledError
            If the update was cancelled.
        """
        if isinstance(command, (AddPlugin, UpdatePlugin)):
            self._validator.validate_or_raise(command.descriptor)

        outcome = self._updater.apply(
            self._config.document_path,
            registry_transform(
                lambda registry: apply_command(registry, command),
                self._config.plugin_key,
            ),
        )
        logger.info(
            "%s %s: %s after %d attempt(s)",
            type(command).__name__,
            command.name,
            "committed" if outcome.written else "unchanged",
            outcome.attempts,
        )
        return outcome

    # ------------------------------------------------------------------
    # Request envelope
    # ------------------------------------------------------------------

    def handle_get(self) -> dict[str, object]:
        """Body for ``GET /cluster/plugin``."""
        return {PLUGIN_KEY: self.list_plugins()}

    def handle_post(self, body: object) -> PluginResponse:
        """Decode and execute one ``POST /cluster/plugin`` body."""
        try:
            command = parse_command(body)
            outcome = self.execute(command)
        except (PluginValidationError, PluginConflictError) as exc:
            logger.info("Rejected plugin edit: %s", exc)
            return PluginResponse(errors=list(exc.errors))
        return PluginResponse(outcome=outcome)


__all__ = ["ClusterPluginsService", "PluginResponse", "read_plugins"]
