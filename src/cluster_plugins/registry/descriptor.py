"""Plugin descriptor shape.

A descriptor is stored as the raw JSON object the client submitted, so
unknown fields survive untouched. :class:`PluginDescriptor` is only used
to check that the object has the required shape and to give typed access
to the well-known fields.

Example descriptor::

    {
        "name": "my-api",
        "class": "my_pkg:my_pkg.api.MyApi",
        "version": "1.2.0",
        "path-prefix": "my",
        "config": {"threshold": 3}
    }
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

PACKAGE_SEPARATOR: str = ":"


class PluginDescriptor(BaseModel):
    """Typed view of a plugin descriptor.

    Attributes
    ----------
    name:
        Unique registry key of the plugin.
    klass:
        Implementation reference, serialised as ``class``. A reference of the
        form ``"<package>:<module>.<Class>"`` denotes a class shipped in an
        installed package and requires ``version``.
    version:
        Package version the class must be loaded from.
    path_prefix:
        Optional URL path prefix the plugin is mounted under.
    config:
        Free-form configuration handed to the plugin on construction.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    klass: str = Field(alias="class", min_length=1)
    version: str | None = None
    path_prefix: str | None = Field(default=None, alias="path-prefix")
    config: dict[str, Any] | None = None

    @field_validator("name", "klass")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @property
    def package(self) -> str | None:
        """Name of the package the class ships in, or None for a plain import path."""
        return package_of(self.klass)

    @property
    def class_path(self) -> str:
        """Import path of the class, without any package qualifier."""
        if self.package is None:
            return self.klass
        return self.klass.split(PACKAGE_SEPARATOR, 1)[1]

    @classmethod
    def parse(cls, raw: Mapping[str, object]) -> "PluginDescriptor":
        """Validate *raw* into a descriptor.

        Raises
        ------
        pydantic.ValidationError
            If *raw* does not have the required shape.
        """
        return cls.model_validate(dict(raw))


def package_of(class_ref: object) -> str | None:
    """Return the package qualifier of *class_ref*, if it has one.

    A separator at position 0 does not name a package.
    """
    if not isinstance(class_ref, str):
        return None
    index = class_ref.find(PACKAGE_SEPARATOR)
    if index <= 0:
        return None
    return class_ref[:index]


def describe_errors(error: ValidationError) -> list[str]:
    """Flatten a pydantic error into one human-readable message per violation."""
    messages: list[str] = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "descriptor"
        messages.append(f"{location}: {detail.get('msg', 'invalid value')}")
    return messages


__all__ = [
    "PACKAGE_SEPARATOR",
    "PluginDescriptor",
    "describe_errors",
    "package_of",
]
