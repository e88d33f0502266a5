"""
Serializer — turns a model back into an untyped mapping.

Values are written exactly as they sit on the instance, in descriptor order.
Nested models are not serialized recursively; callers that need a fully
untyped tree call to_dict() on the nested value themselves.
"""

from __future__ import annotations

from typing import Any, Optional

from .introspection import Introspector, default_introspector
from .types import Dict


def to_dict(
    model: Any,
    nulls: bool = False,
    *,
    introspector: Optional[Introspector] = None,
) -> Dict:
    """
    Serialize a model's declared fields.

    Args:
        model: The instance to read.
        nulls: When True, unset fields appear with a None value;
            when False they are omitted.
    """
    introspector = introspector or default_introspector

    result: Dict = {}
    for descriptor in introspector.descriptors_for(model):
        value = getattr(model, descriptor.name, None)
        if value is not None:
            result[descriptor.name] = value
        elif nulls:
            result[descriptor.name] = None
    return result
