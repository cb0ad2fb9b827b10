"""In-memory coordination store.

A thread-safe stand-in for a real coordination service. Besides the two
store primitives it records call counts and supports scripted faults, so
concurrent-writer scenarios can be reproduced deterministically.

Example
-------
::

    store = InMemoryCoordinationStore()
    store.inject_conflict("/clusterprops.json", lambda data: b'{"plugin": {}}')
    # the next compare_and_set on that path now loses the race once
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict, deque
from typing import Callable

from cluster_plugins.store.base import (
    NO_VERSION,
    BadVersionError,
    CoordinationStore,
    CoordinationStoreError,
    NoNodeError,
    VersionedSnapshot,
)

logger = logging.getLogger(__name__)

CompetingWrite = Callable[[bytes | None], bytes]


class InMemoryCoordinationStore(CoordinationStore):
    """Dictionary-backed :class:`CoordinationStore`.

    Attributes
    ----------
    get_calls:
        Number of :meth:`get` calls served (including failed ones).
    cas_calls:
        Number of :meth:`compare_and_set` calls attempted.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._nodes: dict[str, tuple[bytes, int]] = {}
        self._competing_writes: dict[str, deque[CompetingWrite]] = defaultdict(deque)
        self._faults: dict[str, deque[CoordinationStoreError]] = defaultdict(deque)
        self.get_calls = 0
        self.cas_calls = 0

    # ------------------------------------------------------------------
    # CoordinationStore
    # ------------------------------------------------------------------

    def get(self, path: str) -> VersionedSnapshot:
        with self._lock:
            self.get_calls += 1
            self._raise_scripted_fault("get")
            node = self._nodes.get(path)
            if node is None:
                raise NoNodeError(path)
            data, version = node
            return VersionedSnapshot(data=data, version=version)

    def compare_and_set(self, path: str, expected_version: int, data: bytes) -> int:
        with self._lock:
            self.cas_calls += 1
            self._raise_scripted_fault("compare_and_set")
            pending = self._competing_writes.get(path)
            if pending:
                self._write(path, pending.popleft())
            current = self._nodes.get(path)
            current_version = current[1] if current is not None else NO_VERSION
            if current_version != expected_version:
                raise BadVersionError(
                    path,
                    f"expected version {expected_version}, found {current_version}",
                )
            new_version = current_version + 1
            self._nodes[path] = (bytes(data), new_version)
            return new_version

    # ------------------------------------------------------------------
    # Seeding / fault injection
    # ------------------------------------------------------------------

    def put(self, path: str, data: bytes) -> int:
        """Unconditionally write *data* at *path* and return the new version."""
        with self._lock:
            return self._write(path, lambda _old: data)

    def inject_conflict(self, path: str, competing_write: CompetingWrite) -> None:
        """Run *competing_write* just before the next compare-and-set on *path*.

        The callable receives the currently stored bytes (or None) and returns
        the bytes another writer commits, which bumps the version so the
        in-flight compare-and-set is rejected.
        """
        with self._lock:
            self._competing_writes[path].append(competing_write)

    def fail_next(self, operation: str, error: CoordinationStoreError) -> None:
        """Raise *error* from the next call to *operation* (``get`` or ``compare_and_set``)."""
        if operation not in ("get", "compare_and_set"):
            raise ValueError(f"Unknown store operation {operation!r}")
        with self._lock:
            self._faults[operation].append(error)

    def version_of(self, path: str) -> int:
        with self._lock:
            node = self._nodes.get(path)
            return node[1] if node is not None else NO_VERSION

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _write(self, path: str, competing_write: CompetingWrite) -> int:
        current = self._nodes.get(path)
        old_data = current[0] if current is not None else None
        new_version = (current[1] if current is not None else NO_VERSION) + 1
        self._nodes[path] = (competing_write(old_data), new_version)
        logger.debug("Out-of-band write to %s (version=%d)", path, new_version)
        return new_version

    def _raise_scripted_fault(self, operation: str) -> None:
        faults = self._faults.get(operation)
        if faults:
            raise faults.popleft()


__all__ = ["InMemoryCoordinationStore"]
