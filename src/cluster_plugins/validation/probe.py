"""Transient construction of a plugin to prove its descriptor is usable."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from cluster_plugins.registry.descriptor import PluginDescriptor
from cluster_plugins.validation.loader import PluginLoader, PluginLoadError

logger = logging.getLogger(__name__)


@contextmanager
def probe_plugin(loader: PluginLoader, descriptor: PluginDescriptor) -> Iterator[object]:
    """Construct the plugin described by *descriptor* for the duration of the block.

    The instance is configured with ``descriptor.config`` when one is given
    (via its ``configure`` method) and is closed on every exit path,
    including a failure while configuring it. Errors raised by ``close``
    are logged rather than masking the outcome of the probe.

    Raises
    ------
    PluginLoadError
        If the class cannot be resolved or does not accept configuration.
    Exception
        Whatever the plugin's constructor or ``configure`` raised.
    """
    plugin_class = loader.resolve(descriptor)
    instance: object | None = None
    try:
        instance = plugin_class()
        if descriptor.config is not None:
            configure = getattr(instance, "configure", None)
            if not callable(configure):
                raise PluginLoadError(
                    descriptor.klass,
                    "config was provided but the plugin has no configure() method",
                )
            configure(descriptor.config)
        yield instance
    finally:
        if instance is not None:
            _release(descriptor, instance)


def _release(descriptor: PluginDescriptor, instance: object) -> None:
    close = getattr(instance, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception:
        logger.warning("Error closing probe instance of %s", descriptor.klass, exc_info=True)


__all__ = ["probe_plugin"]
