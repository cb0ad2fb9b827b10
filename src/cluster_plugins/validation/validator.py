"""Plugin descriptor validator.

Runs before any store access. Checks are applied in a fixed order and
every applicable failure is reported, not just the first:

1. ``package``   : a packaged class reference must come with a version.
2. ``structure`` : the descriptor must match :class:`PluginDescriptor`.
3. ``probe``     : the plugin must be constructible from the descriptor.

The probe is skipped when the structure check failed, since there is no
usable class reference to build from.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from pydantic import ValidationError

from cluster_plugins.errors import PluginValidationError
from cluster_plugins.registry.descriptor import PluginDescriptor, describe_errors, package_of
from cluster_plugins.validation.loader import ImportPluginLoader, PluginLoader
from cluster_plugins.validation.probe import probe_plugin

logger = logging.getLogger(__name__)

MISSING_VERSION_MESSAGE: str = "Using package. must provide version"


@dataclass
class ValidationReport:
    """Outcome of validating one descriptor.

    Attributes
    ----------
    errors:
        Human-readable messages; empty when the descriptor is valid.
    descriptor:
        The parsed descriptor when the structure check passed.
    """

    errors: list[str] = field(default_factory=list)
    descriptor: PluginDescriptor | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise :class:`PluginValidationError` if any check failed."""
        if self.errors:
            raise PluginValidationError(self.errors)


class PluginValidator:
    """Validates plugin descriptors ahead of any registry mutation.

    Parameters
    ----------
    loader:
        Resolves implementation classes for the construction probe.
        Defaults to :class:`ImportPluginLoader`.
    """

    def __init__(self, loader: PluginLoader | None = None) -> None:
        self._loader = loader or ImportPluginLoader()

    def validate(self, raw: Mapping[str, object]) -> ValidationReport:
        """Run every applicable check against the raw descriptor *raw*.

        Returns
        -------
        ValidationReport
            All accumulated errors, plus the parsed descriptor if it had a
            valid shape.
        """
        report = ValidationReport()

        if package_of(raw.get("class")) is not None and raw.get("version") is None:
            report.errors.append(MISSING_VERSION_MESSAGE)

        try:
            report.descriptor = PluginDescriptor.parse(raw)
        except ValidationError as exc:
            report.errors.extend(describe_errors(exc))
            return report

        report.errors.extend(self._probe(report.descriptor))
        if report.errors:
            logger.debug("Descriptor %r failed validation: %s", raw.get("name"), report.errors)
        return report

    def validate_or_raise(self, raw: Mapping[str, object]) -> PluginDescriptor:
        """Validate *raw* and return the parsed descriptor.

        Raises
        ------
        PluginValidationError
            Carrying every accumulated error message.
        """
        report = self.validate(raw)
        report.raise_for_errors()
        assert report.descriptor is not None
        return report.descriptor

    def _probe(self, descriptor: PluginDescriptor) -> list[str]:
        try:
            with probe_plugin(self._loader, descriptor):
                pass
        except Exception as exc:
            logger.error("Error instantiating plugin %s", descriptor.klass, exc_info=True)
            return [str(exc) or type(exc).__name__]
        return []


__all__ = ["MISSING_VERSION_MESSAGE", "PluginValidator", "ValidationReport"]
