"""File-backed coordination store for single-host development.

Each path is kept as one JSON envelope under a root directory::

    {"version": 3, "data": "<document text>"}

Writes go to a temporary file that replaces the envelope atomically, so a
reader never observes a half-written document. Version checks are guarded
by an in-process lock only; this backend does not coordinate separate
processes and is not a substitute for a real coordination service.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from cluster_plugins.store.base import (
    NO_VERSION,
    BadVersionError,
    CoordinationStore,
    NoNodeError,
    StoreUnavailableError,
    VersionedSnapshot,
)

logger = logging.getLogger(__name__)


class FileCoordinationStore(CoordinationStore):
    """Store each node as a versioned JSON envelope on local disk.

    Parameters
    ----------
    root:
        Directory holding the envelopes. Created on first write.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)
        self._lock = threading.Lock()

    def get(self, path: str) -> VersionedSnapshot:
        with self._lock:
            envelope = self._load(path)
        if envelope is None:
            raise NoNodeError(path)
        return VersionedSnapshot(
            data=envelope["data"].encode("utf-8"),
            version=int(envelope["version"]),
        )

    def compare_and_set(self, path: str, expected_version: int, data: bytes) -> int:
        with self._lock:
            envelope = self._load(path)
            current_version = int(envelope["version"]) if envelope is not None else NO_VERSION
            if current_version != expected_version:
                raise BadVersionError(
                    path,
                    f"expected version {expected_version}, found {current_version}",
                )
            new_version = current_version + 1
            self._store(path, {"version": new_version, "data": data.decode("utf-8")})
        logger.debug("Wrote %s at version %d", path, new_version)
        return new_version

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _file_for(self, path: str) -> Path:
        name = path.strip("/").replace("/", "__") or "root"
        return self._root / f"{name}.node"

    def _load(self, path: str) -> dict[str, object] | None:
        file_path = self._file_for(path)
        if not file_path.exists():
            return None
        try:
            return json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailableError(path, f"Cannot read {file_path}: {exc}") from exc

    def _store(self, path: str, envelope: dict[str, object]) -> None:
        file_path = self._file_for(path)
        tmp_name: str | None = None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._root, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(envelope, fh)
            os.replace(tmp_name, file_path)
            tmp_name = None
        except OSError as exc:
            raise StoreUnavailableError(path, f"Cannot write {file_path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)


__all__ = ["FileCoordinationStore"]
