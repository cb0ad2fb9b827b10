"""Shared fixtures for cluster-plugins tests."""
from __future__ import annotations

import pytest

from cluster_plugins.api import ClusterPluginsService
from cluster_plugins.config import ClusterPluginsConfig, RetrySettings
from cluster_plugins.registry.descriptor import PluginDescriptor
from cluster_plugins.store.memory import InMemoryCoordinationStore
from cluster_plugins.validation.loader import PluginLoader, PluginLoadError
from cluster_plugins.validation.validator import PluginValidator


# ---------------------------------------------------------------------------
# Plugin implementations used by the construction probe
# ---------------------------------------------------------------------------


class RecordingPlugin:
    """Plugin that records configure/close calls on the class."""

    instances: list["RecordingPlugin"] = []

    def __init__(self) -> None:
        self.config: dict[str, object] | None = None
        self.closed = False
        RecordingPlugin.instances.append(self)

    def configure(self, config: dict[str, object]) -> None:
        self.config = config

    def close(self) -> None:
        self.closed = True


class ExplodingConstructorPlugin:
    def __init__(self) -> None:
        raise RuntimeError("constructor blew up")


class RejectingConfigPlugin(RecordingPlugin):
    def configure(self, config: dict[str, object]) -> None:
        raise ValueError(f"bad config: {sorted(config)}")


class PlainPlugin:
    """Plugin without configure() or close()."""


class StaticPluginLoader(PluginLoader):
    """Resolve class references from a fixed table."""

    def __init__(self, classes: dict[str, type]) -> None:
        self._classes = classes
        self.resolved: list[str] = []

    def resolve(self, descriptor: PluginDescriptor) -> type:
        self.resolved.append(descriptor.klass)
        try:
            return self._classes[descriptor.klass]
        except KeyError:
            raise PluginLoadError(descriptor.klass, "unknown class") from None


PLUGIN_CLASSES: dict[str, type] = {
    "com.foo.P1": RecordingPlugin,
    "com.foo.P2": PlainPlugin,
    "pkg:Foo": RecordingPlugin,
    "com.foo.Exploding": ExplodingConstructorPlugin,
    "com.foo.RejectingConfig": RejectingConfigPlugin,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_recording_plugin() -> None:
    RecordingPlugin.instances.clear()


@pytest.fixture()
def probe_instances() -> list[RecordingPlugin]:
    """Every RecordingPlugin (or subclass) constructed during the test."""
    return RecordingPlugin.instances


@pytest.fixture()
def store() -> InMemoryCoordinationStore:
    return InMemoryCoordinationStore()


@pytest.fixture()
def loader() -> StaticPluginLoader:
    return StaticPluginLoader(dict(PLUGIN_CLASSES))


@pytest.fixture()
def validator(loader: StaticPluginLoader) -> PluginValidator:
    return PluginValidator(loader)


@pytest.fixture()
def fast_config() -> ClusterPluginsConfig:
    return ClusterPluginsConfig(
        retry=RetrySettings(
            max_attempts=50,
            initial_backoff_seconds=0.0,
            max_backoff_seconds=0.0,
            jitter=0.0,
        )
    )


@pytest.fixture()
def service(
    store: InMemoryCoordinationStore,
    validator: PluginValidator,
    fast_config: ClusterPluginsConfig,
) -> ClusterPluginsService:
    return ClusterPluginsService(store, validator=validator, config=fast_config)
