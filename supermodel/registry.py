"""
Model Registry — the set of known model types.

Model classes register themselves when they are defined (see
SuperModel.__init_subclass__). The introspector consults the registry to
decide whether a field's type is another model, i.e. a relationship.

Each type is indexed twice:
    qualified name  — "package.module.Person", always unique
    short name      — "Person", resolved only when unambiguous
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from .exceptions import ModelDefinitionError, UnknownModelError

logger = logging.getLogger(__name__)

# Class attribute every model type carries
MODEL_MARKER = "__supermodel__"


def qualified_name(model_type: type) -> str:
    return f"{model_type.__module__}.{model_type.__qualname__}"


def has_model_marker(tp: Any) -> bool:
    return isinstance(tp, type) and getattr(tp, MODEL_MARKER, False) is True


class ModelRegistry:
    """Process-wide lookup of model types by name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_qualified_name: dict[str, type] = {}
        self._by_short_name: dict[str, list[type]] = {}

    def register(self, model_type: type) -> type:
        """Register a model type. Re-registering a name replaces the old type."""
        if not has_model_marker(model_type):
            raise ModelDefinitionError(
                f"{model_type!r} is not a model type and cannot be registered"
            )

        key = qualified_name(model_type)
        with self._lock:
            previous = self._by_qualified_name.get(key)
            self._by_qualified_name[key] = model_type

            same_name = self._by_short_name.setdefault(model_type.__name__, [])
            if previous is not None and previous in same_name:
                same_name.remove(previous)
            same_name.append(model_type)

        logger.debug("Registered model %s", key)
        return model_type

    def unregister(self, model_type: type) -> None:
        key = qualified_name(model_type)
        with self._lock:
            if self._by_qualified_name.get(key) is model_type:
                del self._by_qualified_name[key]
            same_name = self._by_short_name.get(model_type.__name__, [])
            if model_type in same_name:
                same_name.remove(model_type)

    def lookup(self, name: str) -> Optional[type]:
        """
        Find a model type by qualified or short name.

        Returns None when the name is unknown or when a short name is
        shared by several registered types.
        """
        with self._lock:
            model_type = self._by_qualified_name.get(name)
            if model_type is not None:
                return model_type

            candidates = self._by_short_name.get(name, [])
            if len(candidates) == 1:
                return candidates[0]

        if len(candidates) > 1:
            logger.debug(
                "Model name '%s' is ambiguous: %s",
                name, ", ".join(qualified_name(c) for c in candidates),
            )
        return None

    def get(self, name: str) -> type:
        """Like lookup(), but raises UnknownModelError on a miss."""
        model_type = self.lookup(name)
        if model_type is None:
            raise UnknownModelError(name)
        return model_type

    def is_model(self, tp: Any) -> bool:
        """True if tp is a model type known to this registry."""
        if not has_model_marker(tp):
            return False
        with self._lock:
            return self._by_qualified_name.get(qualified_name(tp)) is tp

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._by_qualified_name)

    def __contains__(self, tp: Any) -> bool:
        return self.is_model(tp)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_qualified_name)


# =============================================================================
# GLOBAL STATE (In-Memory, Process Lifetime)
# =============================================================================

default_registry = ModelRegistry()
