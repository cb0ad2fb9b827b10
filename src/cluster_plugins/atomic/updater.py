"""Optimistic read-modify-write over a single coordination-store document.

Every mutation is expressed as a pure *transform* from the current decoded
document to a new one. :class:`AtomicDocumentUpdater` reads the document
and its version, applies the transform and commits the result with a
compare-and-set guarded by that version. When another writer committed in
between, the write is rejected and the whole cycle starts again from a
fresh read, so no update is ever applied to stale data.

Retry behaviour
---------------
Version conflicts : retried with capped exponential backoff, up to
                    ``RetryPolicy.max_attempts`` attempts in total.
Store outage      : surfaced immediately as :class:`StoreError`.
Cancellation      : checked before each attempt and during each backoff
                    wait; surfaced as :class:`OperationCancelledError`.
"""
from __future__ import annotations

import logging
import random
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable

from cluster_plugins.atomic.document import (
    NO_CHANGE,
    Document,
    _NoChange,
    decode_document,
    encode_document,
)
from cluster_plugins.errors import ContentionError, OperationCancelledError, StoreError
from cluster_plugins.store.base import (
    BadVersionError,
    CoordinationStore,
    CoordinationStoreError,
    StoreInterruptedError,
)

logger = logging.getLogger(__name__)

Transform = Callable[[Document], "Document | _NoChange"]


@contextmanager
def store_errors(path: str) -> Iterator[None]:
    """Translate store signals raised inside the block into cluster-plugins errors.

    Version conflicts pass through untouched for the retry loop to handle.
    """
    try:
        yield
    except BadVersionError:
        raise
    except StoreInterruptedError as exc:
        raise OperationCancelledError(f"Interrupted while accessing {path!r}") from exc
    except CoordinationStoreError as exc:
        raise StoreError(f"Error accessing cluster document {path!r}: {exc}") from exc


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds on the compare-and-set retry loop.

    Attributes
    ----------
    max_attempts:
        Total number of read/transform/write cycles before giving up.
    initial_backoff_seconds:
        Wait after the first conflict.
    max_backoff_seconds:
        Upper bound on any single wait.
    multiplier:
        Growth factor applied to the wait after each conflict.
    jitter:
        Fraction of the wait added at random, so contenders spread out.
    """

    max_attempts: int = 10
    initial_backoff_seconds: float = 0.01
    max_backoff_seconds: float = 1.0
    multiplier: float = 2.0
    jitter: float = 0.1

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_backoff_seconds < 0 or self.max_backoff_seconds < 0:
            raise ValueError("backoff durations must be >= 0")
        if self.multiplier < 1.0:
            raise ValueError(f"multiplier must be >= 1.0, got {self.multiplier}")
        if not 0.0 <= self.jitter <= 1.0:
            raise ValueError(f"jitter must be within [0, 1], got {self.jitter}")

    def backoff_for(self, conflict_number: int) -> float:
        """Return the wait in seconds after the *conflict_number*-th conflict (1-based)."""
        base = self.initial_backoff_seconds * (self.multiplier ** (conflict_number - 1))
        delay = min(self.max_backoff_seconds, base)
        if self.jitter and delay:
            delay += random.uniform(0.0, delay * self.jitter)
        return min(self.max_backoff_seconds, delay)


@dataclass(frozen=True)
class UpdateOutcome:
    """Result of a successful :meth:`AtomicDocumentUpdater.apply` call.

    Attributes
    ----------
    written:
        False when the transform reported no change and nothing was written.
    attempts:
        Number of read/transform cycles it took.
    version:
        Store version after the commit, or the version read when nothing
        was written.
    """

    written: bool
    attempts: int
    version: int | None = None


class AtomicDocumentUpdater:
    """Apply pure transforms to a shared document with compare-and-set retries.

    Parameters
    ----------
    store:
        Coordination store holding the document.
    retry_policy:
        Retry bounds; defaults to :class:`RetryPolicy`.
    cancel_event:
        Optional event; once set, the updater aborts before the next attempt
        or immediately if it is waiting out a backoff.

    Example
    -------
    ::

        updater = AtomicDocumentUpdater(store)
        updater.apply("/clusterprops.json", lambda doc: {**doc, "k": "v"})
    """

    def __init__(
        self,
        store: CoordinationStore,
        retry_policy: RetryPolicy | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._store = store
        self._retry_policy = retry_policy or RetryPolicy()
        self._cancel_event = cancel_event or threading.Event()

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    def apply(self, path: str, transform: Transform) -> UpdateOutcome:
        """Run *transform* against the document at *path* and commit its result.

        Parameters
        ----------
        path:
            Store path of the document.
        transform:
            Pure function from the current document (``{}`` when absent) to
            the document to persist, or ``NO_CHANGE``. It may run several
            times; exceptions it raises propagate with nothing written.

        Returns
        -------
        UpdateOutcome
            Whether a write happened and how many attempts it took.

        Raises
        ------
        ContentionError
            If every attempt lost a race with another writer.
        StoreError
            On any store failure other than a version conflict.
        OperationCancelledError
            If the operation was cancelled before committing.
        """
        policy = self._retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            self._check_cancelled(path)
            with store_errors(path):
                snapshot = self._store.read(path)
            try:
                document = decode_document(snapshot.data)
            except ValueError as exc:
                raise StoreError(f"Cannot decode document at {path!r}: {exc}") from exc
            if not snapshot.exists:
                logger.debug("No document at %s yet; starting from an empty one", path)

            result = transform(document)
            if result is NO_CHANGE:
                logger.debug("No change for %s; skipping write", path)
                return UpdateOutcome(written=False, attempts=attempt, version=snapshot.version)

            data = encode_document(result)
            try:
                with store_errors(path):
                    new_version = self._store.compare_and_set(path, snapshot.version, data)
            except BadVersionError:
                logger.debug(
                    "Version conflict on %s (attempt %d/%d, read version %d)",
                    path,
                    attempt,
                    policy.max_attempts,
                    snapshot.version,
                )
                if attempt < policy.max_attempts:
                    self._wait(path, policy.backoff_for(attempt))
                continue

            logger.debug("Committed %s at version %d (attempt %d)", path, new_version, attempt)
            return UpdateOutcome(written=True, attempts=attempt, version=new_version)

        logger.warning(
            "Retry budget exhausted for %s after %d attempt(s)", path, policy.max_attempts
        )
        raise ContentionError(path, policy.max_attempts)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_cancelled(self, path: str) -> None:
        if self._cancel_event.is_set():
            raise OperationCancelledError(f"Update of {path!r} was cancelled")

    def _wait(self, path: str, delay: float) -> None:
        if self._cancel_event.wait(delay):
            raise OperationCancelledError(f"Update of {path!r} was cancelled during backoff")


__all__ = [
    "AtomicDocumentUpdater",
    "RetryPolicy",
    "Transform",
    "UpdateOutcome",
    "store_errors",
]
