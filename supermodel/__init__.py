# SuperModel
# Typed models from untyped mappings

"""
Reflection-driven conversion between loosely-typed mappings (parsed JSON)
and typed model instances.

Declare a model by subclassing SuperModel with annotated fields; build it
from a mapping, update it, and serialize it back with to_dict().
"""

import logging

from .coercion import NullPolicy, assign
from .exceptions import ModelDefinitionError, SuperModelError, UnknownModelError
from .fields import FieldDescriptor, FieldKind
from .introspection import Introspector, descriptors_for
from .model import SuperModel, construct, from_list, to_dict, update
from .numeric import parse_number
from .registry import ModelRegistry, default_registry
from .types import Dict, Number

__version__ = "0.1.0"

__all__ = [
    "Dict",
    "FieldDescriptor",
    "FieldKind",
    "Introspector",
    "ModelDefinitionError",
    "ModelRegistry",
    "NullPolicy",
    "Number",
    "SuperModel",
    "SuperModelError",
    "UnknownModelError",
    "assign",
    "construct",
    "default_registry",
    "descriptors_for",
    "from_list",
    "parse_number",
    "to_dict",
    "update",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
