"""Tests for cluster_plugins.config."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cluster_plugins.atomic.updater import RetryPolicy
from cluster_plugins.config import CONFIG_ENV_VAR, ClusterPluginsConfig, RetrySettings
from cluster_plugins.registry.codec import CLUSTER_PROPS_PATH, PLUGIN_KEY

_YAML = """\
document_path: /clusters/a/props.json
plugin_key: plugins
retry:
  max_attempts: 3
  initial_backoff_seconds: 0.5
"""


class TestDefaults:
    def test_defaults(self) -> None:
        config = ClusterPluginsConfig()
        assert config.document_path == CLUSTER_PROPS_PATH
        assert config.plugin_key == PLUGIN_KEY
        assert config.retry.max_attempts == 10

    def test_retry_settings_to_policy(self) -> None:
        policy = RetrySettings(max_attempts=4, jitter=0.0).to_policy()
        assert isinstance(policy, RetryPolicy)
        assert policy.max_attempts == 4
        assert policy.jitter == 0.0


class TestLoad:
    def test_yaml_string(self) -> None:
        config = ClusterPluginsConfig.load(_YAML)
        assert config.document_path == "/clusters/a/props.json"
        assert config.plugin_key == "plugins"
        assert config.retry.max_attempts == 3
        assert config.retry.initial_backoff_seconds == 0.5
        assert config.retry.max_backoff_seconds == 1.0

    def test_yaml_path(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(_YAML, encoding="utf-8")
        assert ClusterPluginsConfig.load(path).plugin_key == "plugins"

    def test_yaml_path_as_string(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(_YAML, encoding="utf-8")
        assert ClusterPluginsConfig.load(str(path)).plugin_key == "plugins"

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("plugin_key: from-env\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert ClusterPluginsConfig.load().plugin_key == "from-env"

    def test_no_source_no_env_is_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert ClusterPluginsConfig.load() == ClusterPluginsConfig()

    def test_empty_yaml_is_default(self) -> None:
        assert ClusterPluginsConfig.from_yaml("") == ClusterPluginsConfig()


class TestInvalid:
    def test_non_mapping_yaml(self) -> None:
        with pytest.raises(ValueError, match="mapping"):
            ClusterPluginsConfig.from_yaml("- a\n- b\n")

    def test_zero_attempts(self) -> None:
        with pytest.raises(ValidationError):
            ClusterPluginsConfig.from_yaml("retry:\n  max_attempts: 0\n")

    def test_jitter_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            RetrySettings(jitter=1.5)

    def test_empty_plugin_key(self) -> None:
        with pytest.raises(ValidationError):
            ClusterPluginsConfig(plugin_key="")
