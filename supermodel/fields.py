"""
Field Descriptors — static metadata for one declared field of a model.

A descriptor is built once per (model type, field name) by the introspector
and then shared by every instance of that type. It answers three questions
the coercion engine needs on every assignment:

    name           — which attribute the value lands on
    declared_type  — what the class annotation says
    optional       — whether the annotation admits None

and derives the unwrapped base type, the field kind, and (for relationship
fields) the related model type.
"""

from __future__ import annotations

import inspect
import numbers
import types
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union, get_args, get_origin


class FieldKind(Enum):
    """How the coercion engine treats a field."""
    TEXT = "text"
    NUMBER = "number"
    MODEL = "model"
    OTHER = "other"  # booleans, dates, collections: not coerced


def is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def split_optional(tp: Any) -> tuple[Any, bool]:
    """
    Strip an Optional wrapper.

    Returns the unwrapped type and whether None was allowed. A union of
    several non-None members is returned as a union of those members.
    """
    if not is_union(tp):
        return tp, False

    args = get_args(tp)
    members = tuple(arg for arg in args if arg is not type(None))
    if len(members) == len(args):
        return tp, False
    if len(members) == 1:
        return members[0], True
    return Union[members], True


def is_text_type(tp: Any) -> bool:
    return tp is str


def is_number_type(tp: Any) -> bool:
    """int, float, Decimal, Fraction, numbers.Number and friends. Never bool."""
    if not inspect.isclass(tp) or get_origin(tp) is not None or tp is bool:
        return False
    return issubclass(tp, numbers.Number) or tp is Decimal


def describe_type(tp: Any) -> str:
    """Short human-readable name of an annotation."""
    if isinstance(tp, str):
        return tp
    if inspect.isclass(tp) and get_origin(tp) is None:
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One declared field of a model type.

    Immutable. The descriptor cache guarantees a single descriptor per
    (model type, field name) for the lifetime of the process.
    """
    name: str
    declared_type: Any
    optional: bool = False
    related_model: Optional[type] = None

    @property
    def base_type(self) -> Any:
        """The declared type with any Optional wrapper removed."""
        return split_optional(self.declared_type)[0]

    @property
    def is_relationship(self) -> bool:
        return self.related_model is not None

    @property
    def kind(self) -> FieldKind:
        base = self.base_type
        if is_text_type(base):
            return FieldKind.TEXT
        if is_number_type(base):
            return FieldKind.NUMBER
        if self.related_model is not None:
            return FieldKind.MODEL
        return FieldKind.OTHER

    @property
    def type_description(self) -> str:
        """Type name with a trailing '?' for optional fields, e.g. 'str?'."""
        description = describe_type(self.base_type)
        if self.optional:
            description += "?"
        return description

    def __str__(self) -> str:
        return f"@property {self.name}: {self.type_description}"
