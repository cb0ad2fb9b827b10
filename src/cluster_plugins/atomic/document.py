"""Outer cluster document encoding and the no-change sentinel."""
from __future__ import annotations

import json
from typing import Final


class _NoChange:
    """Marker returned by a transform that wants nothing written."""

    _instance: "_NoChange | None" = None

    def __new__(cls) -> "_NoChange":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_CHANGE"

    def __bool__(self) -> bool:
        return False


NO_CHANGE: Final = _NoChange()

Document = dict[str, object]


def decode_document(data: bytes | None) -> Document:
    """Decode stored bytes into the outer document; absent or empty means ``{}``.

    Raises
    ------
    ValueError
        If the bytes are not a JSON object.
    """
    if not data:
        return {}
    decoded = json.loads(data.decode("utf-8"))
    if not isinstance(decoded, dict):
        raise ValueError(
            f"Cluster document must be a JSON object, got {type(decoded).__name__}"
        )
    return decoded


def encode_document(document: Document) -> bytes:
    """Serialise the outer document as indented UTF-8 JSON, preserving key order."""
    return json.dumps(document, indent=2).encode("utf-8")


__all__ = ["NO_CHANGE", "Document", "decode_document", "encode_document"]
