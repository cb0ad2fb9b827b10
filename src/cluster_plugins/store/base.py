"""Coordination store interface.

The coordination store is the single source of truth for the cluster
document. Only two primitives are required: a versioned read and a
compare-and-set write. Everything else (sessions, watches, connection
management) belongs to the concrete client.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

NO_VERSION: int = -1
"""Version reported for an absent node; as an expected version it means "create"."""


# ---------------------------------------------------------------------------
# Store-level signals
# ---------------------------------------------------------------------------


class CoordinationStoreError(Exception):
    """Base class for signals raised by a coordination store client."""

    def __init__(self, path: str, message: str = "") -> None:
        self.path = path
        super().__init__(message or path)


class NoNodeError(CoordinationStoreError):
    """The requested path does not exist."""


class BadVersionError(CoordinationStoreError):
    """A compare-and-set was rejected because the stored version moved on."""


class StoreUnavailableError(CoordinationStoreError):
    """The store could not be reached or refused the request."""


class StoreInterruptedError(CoordinationStoreError):
    """The calling thread was interrupted while waiting on the store."""


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VersionedSnapshot:
    """Raw document bytes together with the store-assigned version stamp.

    Attributes
    ----------
    data:
        Document bytes, or None when the node is absent.
    version:
        Store generation counter; :data:`NO_VERSION` when absent.
    """

    data: bytes | None
    version: int = NO_VERSION

    @property
    def exists(self) -> bool:
        return self.version != NO_VERSION


# ---------------------------------------------------------------------------
# Client interface
# ---------------------------------------------------------------------------


class CoordinationStore(ABC):
    """Versioned get / compare-and-set over named paths."""

    @abstractmethod
    def get(self, path: str) -> VersionedSnapshot:
        """Read the node at *path*.

        Raises
        ------
        NoNodeError
            If nothing is stored at *path*.
        StoreUnavailableError
            If the store cannot serve the read.
        StoreInterruptedError
            If the calling thread was interrupted.
        """

    @abstractmethod
    def compare_and_set(self, path: str, expected_version: int, data: bytes) -> int:
        """Write *data* only if the node is still at *expected_version*.

        An *expected_version* of :data:`NO_VERSION` creates the node and
        fails if it already exists.

        Returns
        -------
        int
            The new version of the node.

        Raises
        ------
        BadVersionError
            If the stored version differs from *expected_version*.
        StoreUnavailableError
            If the store cannot serve the write.
        StoreInterruptedError
            If the calling thread was interrupted.
        """

    def read(self, path: str) -> VersionedSnapshot:
        """Like :meth:`get`, but report an absent node as an empty snapshot."""
        try:
            return self.get(path)
        except NoNodeError:
            return VersionedSnapshot(data=None, version=NO_VERSION)


__all__ = [
    "NO_VERSION",
    "BadVersionError",
    "CoordinationStore",
    "CoordinationStoreError",
    "NoNodeError",
    "StoreInterruptedError",
    "StoreUnavailableError",
    "VersionedSnapshot",
]
