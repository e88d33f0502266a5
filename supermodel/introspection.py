"""
Introspector — builds Field Descriptors from a model's class annotations.

Fields are the annotated class attributes of the model and its bases, in
declaration order (bases first), excluding ClassVar annotations and
underscore-prefixed names. Each annotation is resolved to a type, stripped
of Optional, and checked against the model registry to detect
relationships.

Postponed annotations ("from __future__ import annotations", quoted
forward references) are evaluated against the defining module. Names the
module cannot resolve are looked up in the registry, which lets two models
in different modules refer to each other by name. An annotation that still
cannot be resolved is kept verbatim and the field is treated as OTHER.
"""

from __future__ import annotations

import inspect
import logging
import sys
from typing import Any, ClassVar, Optional, get_origin, get_type_hints

from .cache import DescriptorCache, Descriptors, default_cache
from .fields import FieldDescriptor, split_optional
from .registry import ModelRegistry, default_registry

logger = logging.getLogger(__name__)

_RESOLUTION_ERRORS = (NameError, AttributeError, SyntaxError, TypeError)


def _is_class_var(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    return isinstance(annotation, str) and annotation.replace("typing.", "").startswith("ClassVar")


class Introspector:
    """
    Supplies the descriptors of a model type, introspecting on first use.

    Args:
        registry: Where relationship targets are looked up.
        cache: Where computed descriptor tuples are kept.
    """

    def __init__(
        self,
        registry: Optional[ModelRegistry] = None,
        cache: Optional[DescriptorCache] = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self.cache = cache if cache is not None else default_cache

    def descriptors_for(self, model: Any) -> Descriptors:
        """Descriptors for a model type (or the type of a model instance)."""
        model_type = model if isinstance(model, type) else type(model)
        return self.cache.get_or_compute(model_type, self._introspect)

    def descriptor_for(self, model: Any, name: str) -> Optional[FieldDescriptor]:
        """The descriptor named `name`, or None when the model has no such field."""
        for descriptor in self.descriptors_for(model):
            if descriptor.name == name:
                return descriptor
        return None

    # -------------------------------------------------------------------------
    # Introspection (runs once per model type)
    # -------------------------------------------------------------------------

    def _introspect(self, model_type: type) -> Descriptors:
        descriptors = []
        for name, annotation in self._declared_fields(model_type).items():
            base, optional = split_optional(annotation)
            related = base if self.registry.is_model(base) else None
            descriptor = FieldDescriptor(
                name=name,
                declared_type=annotation,
                optional=optional,
                related_model=related,
            )
            logger.debug("%s %s", model_type.__qualname__, descriptor)
            descriptors.append(descriptor)
        return tuple(descriptors)

    def _declared_fields(self, model_type: type) -> dict[str, Any]:
        try:
            hints = get_type_hints(model_type)
        except _RESOLUTION_ERRORS as exc:
            logger.debug(
                "Falling back to per-field resolution for %s: %s",
                model_type.__qualname__, exc,
            )
            hints = None

        fields: dict[str, Any] = {}
        for klass in reversed(model_type.__mro__):
            if klass is object:
                continue
            own = inspect.get_annotations(klass)
            if not own:
                continue
            namespace = self._namespace_for(klass) if hints is None else None
            for name, annotation in own.items():
                if name.startswith("_"):
                    continue
                if hints is not None:
                    annotation = hints.get(name, annotation)
                else:
                    annotation = self._resolve(annotation, namespace)
                if _is_class_var(annotation):
                    continue
                fields[name] = annotation
        return fields

    def _namespace_for(self, klass: type) -> dict[str, Any]:
        """Registry short names, overridden by the defining module's globals."""
        namespace: dict[str, Any] = {}
        for qualified in self.registry.names():
            short = qualified.rsplit(".", 1)[-1]
            model_type = self.registry.lookup(short)
            if model_type is not None:
                namespace[short] = model_type
        module = sys.modules.get(klass.__module__)
        if module is not None:
            namespace.update(vars(module))
        namespace.setdefault(klass.__name__, klass)
        return namespace

    def _resolve(self, annotation: Any, namespace: dict[str, Any]) -> Any:
        """
        Resolve one annotation against `namespace`.

        The annotation is hung on a throwaway class so get_type_hints does
        the evaluation; one unresolvable field then cannot spoil the rest.
        """
        holder = type("_Annotation", (), {"__annotations__": {"value": annotation}})
        try:
            return get_type_hints(holder, globalns=namespace)["value"]
        except _RESOLUTION_ERRORS:
            logger.debug("Unresolved annotation %r", annotation)
            return annotation


# =============================================================================
# GLOBAL STATE (In-Memory, Process Lifetime)
# =============================================================================

default_introspector = Introspector()


def descriptors_for(model: Any) -> Descriptors:
    """Descriptors of a model type from the process-wide introspector."""
    return default_introspector.descriptors_for(model)
