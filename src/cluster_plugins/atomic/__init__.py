"""Compare-and-set update loop over the shared cluster document."""
from __future__ import annotations

from cluster_plugins.atomic.document import NO_CHANGE, decode_document, encode_document
from cluster_plugins.atomic.updater import (
    AtomicDocumentUpdater,
    RetryPolicy,
    Transform,
    UpdateOutcome,
    store_errors,
)

__all__ = [
    "NO_CHANGE",
    "AtomicDocumentUpdater",
    "RetryPolicy",
    "Transform",
    "UpdateOutcome",
    "decode_document",
    "encode_document",
    "store_errors",
]
