"""
Descriptor Cache — per-model-type field descriptors, computed once.

The first lookup for a type pays the introspection cost; every later lookup,
from any instance of that exact type, gets the same tuple back. Entries are
never invalidated: model shapes are assumed fixed once classes are defined.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable

from .fields import FieldDescriptor

Descriptors = tuple[FieldDescriptor, ...]


@dataclass(frozen=True)
class CacheInfo:
    """Counters for cache observability."""
    hits: int
    misses: int
    size: int


class DescriptorCache:
    """
    Mapping of model type to its descriptor tuple.

    Insertion is insert-if-absent under a re-entrant lock, so concurrent
    first lookups of the same type run the factory exactly once.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[type, Descriptors] = {}
        self._hits = 0
        self._misses = 0

    def get_or_compute(
        self,
        model_type: type,
        factory: Callable[[type], Descriptors],
    ) -> Descriptors:
        """Return the cached tuple, computing and storing it on first use."""
        cached = self._entries.get(model_type)
        if cached is not None:
            with self._lock:
                self._hits += 1
            return cached

        with self._lock:
            cached = self._entries.get(model_type)
            if cached is not None:
                self._hits += 1
                return cached

            descriptors = tuple(factory(model_type))
            self._entries[model_type] = descriptors
            self._misses += 1
            return descriptors

    def __contains__(self, model_type: type) -> bool:
        return model_type in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(hits=self._hits, misses=self._misses, size=len(self._entries))

    def clear(self) -> None:
        """Drop all entries. Only meant for tests."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0


default_cache = DescriptorCache()
