"""
Exceptions for SuperModel.

The conversion core itself never raises: malformed payloads degrade to
skipped fields. These exceptions only surface at the edges, when a caller
asks for something that cannot exist (an unregistered model name, a
registration of something that is not a model).
"""

from __future__ import annotations


class SuperModelError(Exception):
    """Base class for all SuperModel errors."""
    pass


class UnknownModelError(SuperModelError, LookupError):
    """Raised when a model name is not present in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No model registered under '{name}'")


class ModelDefinitionError(SuperModelError, TypeError):
    """Raised when something that is not a model type is registered."""
    pass
