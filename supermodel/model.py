"""
SuperModel — base class for models built from untyped mappings.

Subclasses declare their fields as annotated class attributes:

    class Address(SuperModel):
        city: Optional[str] = None

    class Person(SuperModel):
        name: Optional[str] = None
        age: Optional[int] = None
        address: Optional[Address] = None

    person = Person({"name": "Ann", "age": "42", "address": {"city": "X"}})
    person.to_dict()  # {"name": "Ann", "age": 42, "address": <Address ...>}

Every subclass is registered in the model registry when it is defined, so
other models can refer to it as a relationship field.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, ClassVar, Optional, TypeVar

from . import coercion, serialization
from .cache import Descriptors
from .coercion import NullPolicy
from .introspection import descriptors_for
from .numeric import parse_number
from .registry import default_registry
from .types import Dict

M = TypeVar("M", bound="SuperModel")


class SuperModel:
    """
    Mutable record populated by the coercion engine.

    Args:
        data: Optional raw mapping applied right after construction.
    """

    __supermodel__: ClassVar[bool] = True

    def __init_subclass__(cls, register: bool = True, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if register:
            default_registry.register(cls)

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        if data is not None:
            self.update(data)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls: type[M],
        data: Mapping[str, Any],
        null_policy: Optional[NullPolicy] = None,
    ) -> M:
        return coercion.build(cls, data, null_policy=null_policy)

    @classmethod
    def from_list(
        cls: type[M],
        items: Iterable[Mapping[str, Any]],
        null_policy: Optional[NullPolicy] = None,
    ) -> list[M]:
        """Build one model per mapping, preserving order."""
        return coercion.build_many(cls, items, null_policy=null_policy)

    @classmethod
    def descriptors(cls) -> Descriptors:
        return descriptors_for(cls)

    @classmethod
    def number_from_string(cls, text: str) -> Optional[Decimal]:
        return parse_number(text)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def update(
        self,
        data: Mapping[str, Any],
        null_policy: Optional[NullPolicy] = None,
    ) -> None:
        """Apply a raw mapping onto this instance."""
        coercion.apply(self, data, null_policy=null_policy)

    def set_value(
        self,
        key: str,
        value: Any,
        null_policy: Optional[NullPolicy] = None,
    ) -> None:
        """Apply a single raw key/value pair."""
        coercion.assign(self, key, value, null_policy=null_policy)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self, nulls: bool = False) -> Dict:
        return serialization.to_dict(self, nulls)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict(nulls=True) == other.to_dict(nulls=True)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self.to_dict().items())
        return f"{type(self).__name__}({fields})"


# =============================================================================
# CALLER-FACING API
# =============================================================================

def construct(
    model_type: type[M],
    mapping: Mapping[str, Any],
    null_policy: Optional[NullPolicy] = None,
) -> M:
    """Build a model instance from a raw mapping."""
    return coercion.build(model_type, mapping, null_policy=null_policy)


def update(
    model: Any,
    mapping: Mapping[str, Any],
    null_policy: Optional[NullPolicy] = None,
) -> None:
    """Apply new raw values onto an existing instance."""
    coercion.apply(model, mapping, null_policy=null_policy)


def to_dict(model: Any, nulls: bool = False) -> Dict:
    """Serialize a model's declared fields."""
    return serialization.to_dict(model, nulls)


def from_list(
    model_type: type[M],
    mappings: Iterable[Mapping[str, Any]],
    null_policy: Optional[NullPolicy] = None,
) -> list[M]:
    """Build one model per mapping, preserving order."""
    return coercion.build_many(model_type, mappings, null_policy=null_policy)
