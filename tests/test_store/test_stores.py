"""Tests for the in-memory and file-backed coordination stores."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from cluster_plugins.store.base import (
    NO_VERSION,
    BadVersionError,
    CoordinationStore,
    NoNodeError,
    StoreUnavailableError,
    VersionedSnapshot,
)
from cluster_plugins.store.file import FileCoordinationStore
from cluster_plugins.store.memory import InMemoryCoordinationStore

PATH = "/clusterprops.json"


@pytest.fixture(params=["memory", "file"])
def any_store(request: pytest.FixtureRequest, tmp_path: Path) -> CoordinationStore:
    if request.param == "memory":
        return InMemoryCoordinationStore()
    return FileCoordinationStore(tmp_path / "store")


# ---------------------------------------------------------------------------
# Shared contract
# ---------------------------------------------------------------------------


class TestStoreContract:
    def test_get_missing_raises_no_node(self, any_store: CoordinationStore) -> None:
        with pytest.raises(NoNodeError):
            any_store.get(PATH)

    def test_read_missing_is_empty_snapshot(self, any_store: CoordinationStore) -> None:
        snapshot = any_store.read(PATH)
        assert snapshot == VersionedSnapshot(data=None, version=NO_VERSION)
        assert snapshot.exists is False

    def test_create_with_no_version(self, any_store: CoordinationStore) -> None:
        version = any_store.compare_and_set(PATH, NO_VERSION, b'{"a": 1}')
        assert version == 0
        snapshot = any_store.get(PATH)
        assert snapshot.data == b'{"a": 1}'
        assert snapshot.version == 0
        assert snapshot.exists is True

    def test_create_twice_conflicts(self, any_store: CoordinationStore) -> None:
        any_store.compare_and_set(PATH, NO_VERSION, b"{}")
        with pytest.raises(BadVersionError):
            any_store.compare_and_set(PATH, NO_VERSION, b"{}")

    def test_update_with_matching_version(self, any_store: CoordinationStore) -> None:
        any_store.compare_and_set(PATH, NO_VERSION, b"{}")
        assert any_store.compare_and_set(PATH, 0, b'{"b": 2}') == 1
        assert any_store.get(PATH).data == b'{"b": 2}'

    def test_stale_version_rejected_and_data_kept(self, any_store: CoordinationStore) -> None:
        any_store.compare_and_set(PATH, NO_VERSION, b"{}")
        any_store.compare_and_set(PATH, 0, b'{"x": 1}')
        with pytest.raises(BadVersionError):
            any_store.compare_and_set(PATH, 0, b'{"y": 1}')
        assert any_store.get(PATH).data == b'{"x": 1}'


# ---------------------------------------------------------------------------
# In-memory specifics
# ---------------------------------------------------------------------------


class TestInMemoryStore:
    def test_counts_calls(self) -> None:
        store = InMemoryCoordinationStore()
        store.read(PATH)
        store.compare_and_set(PATH, NO_VERSION, b"{}")
        assert store.get_calls == 1
        assert store.cas_calls == 1

    def test_put_bumps_version(self) -> None:
        store = InMemoryCoordinationStore()
        assert store.put(PATH, b"{}") == 0
        assert store.put(PATH, b"{}") == 1
        assert store.version_of(PATH) == 1

    def test_injected_conflict_applies_once(self) -> None:
        store = InMemoryCoordinationStore()
        store.put(PATH, b"old")
        store.inject_conflict(PATH, lambda data: (data or b"") + b"+other")
        with pytest.raises(BadVersionError):
            store.compare_and_set(PATH, 0, b"mine")
        assert store.get(PATH).data == b"old+other"
        assert store.compare_and_set(PATH, 1, b"mine") == 2

    def test_fail_next_raises_scripted_error_once(self) -> None:
        store = InMemoryCoordinationStore()
        store.fail_next("get", StoreUnavailableError(PATH))
        with pytest.raises(StoreUnavailableError):
            store.get(PATH)
        with pytest.raises(NoNodeError):
            store.get(PATH)

    def test_fail_next_unknown_operation(self) -> None:
        with pytest.raises(ValueError):
            InMemoryCoordinationStore().fail_next("delete", StoreUnavailableError(PATH))


# ---------------------------------------------------------------------------
# File-backed specifics
# ---------------------------------------------------------------------------


class TestFileStore:
    def test_envelope_on_disk(self, tmp_path: Path) -> None:
        store = FileCoordinationStore(tmp_path)
        store.compare_and_set(PATH, NO_VERSION, b'{"plugin": {}}')
        files = list(tmp_path.glob("*.node"))
        assert len(files) == 1
        envelope = json.loads(files[0].read_text(encoding="utf-8"))
        assert envelope == {"version": 0, "data": '{"plugin": {}}'}

    def test_survives_new_instance(self, tmp_path: Path) -> None:
        FileCoordinationStore(tmp_path).compare_and_set(PATH, NO_VERSION, b"{}")
        assert FileCoordinationStore(tmp_path).get(PATH).version == 0

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = FileCoordinationStore(tmp_path)
        store.compare_and_set(PATH, NO_VERSION, b"{}")
        store.compare_and_set(PATH, 0, b"{}")
        assert list(tmp_path.glob("*.tmp")) == []

    def test_corrupt_envelope_is_unavailable(self, tmp_path: Path) -> None:
        store = FileCoordinationStore(tmp_path)
        store.compare_and_set(PATH, NO_VERSION, b"{}")
        next(tmp_path.glob("*.node")).write_text("not json", encoding="utf-8")
        with pytest.raises(StoreUnavailableError):
            store.get(PATH)

    def test_failed_replace_cleans_up_temp_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def failing_replace(src: str, dst: object) -> None:
            raise OSError("disk full")

        store = FileCoordinationStore(tmp_path)
        monkeypatch.setattr("cluster_plugins.store.file.os.replace", failing_replace)
        with pytest.raises(StoreUnavailableError):
            store.compare_and_set(PATH, NO_VERSION, b"{}")
        monkeypatch.undo()
        assert list(tmp_path.glob("*.tmp")) == []
        assert store.read(PATH).exists is False
