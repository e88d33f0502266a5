"""
Type aliases and raw value classification.

A raw value is whatever a JSON-like parser hands us. The coercion engine
never inspects it directly; it first classifies it into one of the closed
RawKind variants below and dispatches on that.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from enum import Enum
from typing import Any


Number = numbers.Number
Dict = dict[str, Any]


class RawKind(Enum):
    """The shapes a raw payload value can take."""
    TEXT = "text"
    NUMBER = "number"
    MAPPING = "mapping"
    NULL = "null"
    OTHER = "other"  # lists, booleans, anything else


def is_number(value: Any) -> bool:
    """True for numeric values. Booleans are deliberately excluded."""
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def classify_raw(value: Any) -> RawKind:
    """Classify a raw payload value."""
    if value is None:
        return RawKind.NULL
    if isinstance(value, str):
        return RawKind.TEXT
    if is_number(value):
        return RawKind.NUMBER
    if isinstance(value, Mapping):
        return RawKind.MAPPING
    return RawKind.OTHER
