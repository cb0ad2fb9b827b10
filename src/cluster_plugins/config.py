"""Configuration for cluster-plugins.

Settings can be built in code or loaded from YAML::

    document_path: /clusterprops.json
    plugin_key: plugin
    retry:
      max_attempts: 10
      initial_backoff_seconds: 0.01
      max_backoff_seconds: 1.0

The CLI reads the file named by ``CLUSTER_PLUGINS_CONFIG`` when no
``--config`` option is given.
"""
from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field

from cluster_plugins.atomic.updater import RetryPolicy
from cluster_plugins.registry.codec import CLUSTER_PROPS_PATH, PLUGIN_KEY

CONFIG_ENV_VAR: str = "CLUSTER_PLUGINS_CONFIG"


class RetrySettings(BaseModel):
    """Compare-and-set retry bounds, see :class:`RetryPolicy`."""

    max_attempts: int = Field(default=10, ge=1)
    initial_backoff_seconds: float = Field(default=0.01, ge=0.0)
    max_backoff_seconds: float = Field(default=1.0, ge=0.0)
    multiplier: float = Field(default=2.0, ge=1.0)
    jitter: float = Field(default=0.1, ge=0.0, le=1.0)

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            initial_backoff_seconds=self.initial_backoff_seconds,
            max_backoff_seconds=self.max_backoff_seconds,
            multiplier=self.multiplier,
            jitter=self.jitter,
        )


class ClusterPluginsConfig(BaseModel):
    """Top-level settings.

    Attributes
    ----------
    document_path:
        Store path of the cluster document.
    plugin_key:
        Key of the plugin registry within the cluster document.
    retry:
        Compare-and-set retry bounds.
    """

    document_path: str = Field(default=CLUSTER_PROPS_PATH, min_length=1)
    plugin_key: str = Field(default=PLUGIN_KEY, min_length=1)
    retry: RetrySettings = Field(default_factory=RetrySettings)

    @classmethod
    def load(cls, yaml_source: Union[str, Path, None] = None) -> "ClusterPluginsConfig":
        """Load settings from a YAML file path, a YAML string, or the environment.

        With no *yaml_source*, the file named by ``CLUSTER_PLUGINS_CONFIG``
        is used if set; otherwise the defaults apply.

        Raises
        ------
        ValueError
            If the YAML is not a mapping.
        pydantic.ValidationError
            If a setting has an invalid value.
        """
        if yaml_source is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if not env_path:
                return cls()
            yaml_source = Path(env_path)
        if isinstance(yaml_source, Path):
            return cls.from_yaml(yaml_source.read_text(encoding="utf-8"))
        # Could be a file path string or raw YAML; try file first
        path = Path(yaml_source)
        if "\n" not in yaml_source and path.is_file():
            return cls.from_yaml(path.read_text(encoding="utf-8"))
        return cls.from_yaml(yaml_source)

    @classmethod
    def from_yaml(cls, yaml_text: str) -> "ClusterPluginsConfig":
        data = yaml.safe_load(io.StringIO(yaml_text))
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("Configuration YAML must be a mapping.")
        return cls.model_validate(data)


__all__ = ["CONFIG_ENV_VAR", "ClusterPluginsConfig", "RetrySettings"]
