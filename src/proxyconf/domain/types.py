"""Scalar kinds and configuration enums."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class PrimitiveType(StrEnum):
    """Kinds of scalar an entry value can hold."""

    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    BOOL = "Boolean"
    NULL = "Null"


def kind_of(value: Any) -> PrimitiveType:
    """Return the PrimitiveType of a scalar entry value."""
    # bool is a subclass of int, so it must be tested first.
    if isinstance(value, bool):
        return PrimitiveType.BOOL
    if isinstance(value, int):
        return PrimitiveType.INTEGER
    if isinstance(value, float):
        return PrimitiveType.FLOAT
    if value is None:
        return PrimitiveType.NULL
    return PrimitiveType.STRING


class UpstreamProto(StrEnum):
    """Protocols a proxy may speak to an upstream."""

    H1_ONLY = "h1-only"
    H2_ONLY = "h2-only"
    H2_OR_H1 = "h2-or-h1"


class SelectionKind(StrEnum):
    """Upstream selection strategies."""

    ROUND_ROBIN = "round-robin"
    RANDOM = "random"
    FNV_HASH = "fnv-hash"
    KETAMA = "ketama"

    @property
    def is_hashing(self) -> bool:
        return self in (SelectionKind.FNV_HASH, SelectionKind.KETAMA)
