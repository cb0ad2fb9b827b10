"""Tests for cluster_plugins.errors."""
from __future__ import annotations

import pytest

from cluster_plugins.errors import (
    ClusterPluginsError,
    ContentionError,
    OperationCancelledError,
    PluginConflictError,
    PluginValidationError,
    StoreError,
)


@pytest.mark.parametrize(
    "error",
    [
        PluginValidationError(["bad"]),
        PluginConflictError.already_exists("p1"),
        ContentionError("/clusterprops.json", 3),
        StoreError("down"),
        OperationCancelledError("stop"),
    ],
)
def test_all_errors_share_base(error: Exception) -> None:
    assert isinstance(error, ClusterPluginsError)


class TestPluginValidationError:
    def test_errors_kept_in_order(self) -> None:
        error = PluginValidationError(["first", "second"])
        assert error.errors == ["first", "second"]
        assert str(error) == "first; second"

    def test_is_value_error(self) -> None:
        assert isinstance(PluginValidationError(["x"]), ValueError)

    def test_empty_list_has_message(self) -> None:
        assert str(PluginValidationError([])) == "invalid plugin descriptor"


class TestPluginConflictError:
    def test_already_exists(self) -> None:
        error = PluginConflictError.already_exists("p1")
        assert str(error) == "p1 already exists"
        assert error.plugin_name == "p1"
        assert error.errors == ["p1 already exists"]

    def test_no_such_plugin(self) -> None:
        error = PluginConflictError.no_such_plugin("missing")
        assert str(error) == "No such plugin: missing"


class TestContentionError:
    def test_attributes(self) -> None:
        error = ContentionError("/clusterprops.json", 10)
        assert error.path == "/clusterprops.json"
        assert error.attempts == 10
        assert "10 attempt(s)" in str(error)


def test_store_error_is_os_error() -> None:
    assert isinstance(StoreError("x"), OSError)
