"""
Coercion Engine — assigns raw payload values onto model fields.

For every key of an incoming mapping the engine finds the field's
descriptor and decides whether and how the raw value may land on it:

    TEXT field    text → as is          number → str(number)
    NUMBER field  number → as is        text → parsed decimal, if it parses
    MODEL field   mapping → new instance of the related model, built recursively
    OTHER field   never assigned, a warning names the uncovered type

Keys without a field are stored as plain attributes (or ignored, see
Settings.store_unknown_keys); keys naming a class attribute or a dunder
are always ignored. Nothing here raises: a value that cannot be
coerced leaves the field at its previous value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional, TypeVar

from .config import get_settings
from .fields import FieldDescriptor, FieldKind
from .introspection import Introspector, default_introspector
from .numeric import parse_number, to_number_type
from .types import RawKind, classify_raw

logger = logging.getLogger(__name__)

M = TypeVar("M")


class NullPolicy(Enum):
    """What an explicit null in a payload does to a declared field."""
    SKIP = "skip"    # leave the field untouched
    CLEAR = "clear"  # set the field to None


def _resolve_policy(null_policy: Optional[NullPolicy]) -> NullPolicy:
    if null_policy is not None:
        return null_policy
    return NullPolicy(get_settings().null_policy)


def assign(
    model: Any,
    key: str,
    raw_value: Any,
    *,
    null_policy: Optional[NullPolicy] = None,
    introspector: Optional[Introspector] = None,
) -> None:
    """
    Apply one raw key/value pair to a model. Never raises.

    Args:
        model: The instance being populated.
        key: Payload key, matched against field names.
        raw_value: Untyped payload value.
        null_policy: Handling of explicit nulls. Defaults to the configured policy.
        introspector: Descriptor source. Defaults to the process-wide one.
    """
    introspector = introspector or default_introspector
    descriptor = introspector.descriptor_for(model, key)

    if descriptor is None:
        _assign_unknown(model, key, raw_value)
        return

    raw_kind = classify_raw(raw_value)

    if raw_kind == RawKind.NULL:
        if _resolve_policy(null_policy) == NullPolicy.CLEAR:
            setattr(model, key, None)
        return

    value = _coerce(descriptor, raw_value, raw_kind, null_policy, introspector)
    if value is not None:
        setattr(model, key, value)


def _coerce(
    descriptor: FieldDescriptor,
    raw_value: Any,
    raw_kind: RawKind,
    null_policy: Optional[NullPolicy],
    introspector: Introspector,
) -> Optional[Any]:
    """The value to assign, or None to leave the field alone."""
    kind = descriptor.kind

    if kind == FieldKind.TEXT:
        if raw_kind == RawKind.TEXT:
            return raw_value
        if raw_kind == RawKind.NUMBER:
            return str(raw_value)
        logger.debug(
            "Skipping %s: cannot assign %s to text field",
            descriptor.name, type(raw_value).__name__,
        )
        return None

    if kind == FieldKind.NUMBER:
        if raw_kind == RawKind.NUMBER:
            return raw_value
        if raw_kind == RawKind.TEXT:
            parsed = parse_number(raw_value)
            if parsed is None:
                return None
            return to_number_type(parsed, descriptor.base_type)
        logger.debug(
            "Skipping %s: cannot assign %s to numeric field",
            descriptor.name, type(raw_value).__name__,
        )
        return None

    if kind == FieldKind.MODEL:
        if raw_kind != RawKind.MAPPING:
            logger.debug(
                "Skipping %s: %s payload expects a mapping, got %s",
                descriptor.name, descriptor.related_model.__qualname__,
                type(raw_value).__name__,
            )
            return None
        return build(
            descriptor.related_model,
            raw_value,
            null_policy=null_policy,
            introspector=introspector,
        )

    logger.warning(
        "Unhandled field type: %s: %s = %r",
        descriptor.name, descriptor.type_description, raw_value,
    )
    return None


def _assign_unknown(model: Any, key: str, raw_value: Any) -> None:
    """Raw pass-through for keys that have no declared field."""
    if not get_settings().store_unknown_keys:
        logger.debug("Ignoring unknown key %r on %s", key, type(model).__qualname__)
        return
    if not isinstance(key, str) or key.startswith("__") or hasattr(type(model), key):
        # methods, properties and dunders belong to the class, not the payload
        logger.debug(
            "Ignoring unknown key %r on %s: reserved attribute",
            key, type(model).__qualname__,
        )
        return
    try:
        setattr(model, key, raw_value)
    except (AttributeError, TypeError) as exc:
        logger.debug(
            "Cannot store unknown key %r on %s: %s",
            key, type(model).__qualname__, exc,
        )


# =============================================================================
# MAPPING-LEVEL OPERATIONS
# =============================================================================

def apply(
    model: M,
    mapping: Mapping[str, Any],
    *,
    null_policy: Optional[NullPolicy] = None,
    introspector: Optional[Introspector] = None,
) -> M:
    """Assign every key of `mapping` onto `model`, in mapping order."""
    if not isinstance(mapping, Mapping):
        logger.debug(
            "Ignoring %s payload for %s: not a mapping",
            type(mapping).__name__, type(model).__qualname__,
        )
        return model
    for key, raw_value in mapping.items():
        assign(
            model,
            key,
            raw_value,
            null_policy=null_policy,
            introspector=introspector,
        )
    return model


def build(
    model_type: type[M],
    mapping: Mapping[str, Any],
    *,
    null_policy: Optional[NullPolicy] = None,
    introspector: Optional[Introspector] = None,
) -> M:
    """Create an empty instance of `model_type` and populate it from `mapping`."""
    return apply(model_type(), mapping, null_policy=null_policy, introspector=introspector)


def build_many(
    model_type: type[M],
    mappings: Iterable[Mapping[str, Any]],
    *,
    null_policy: Optional[NullPolicy] = None,
    introspector: Optional[Introspector] = None,
) -> list[M]:
    """One instance per mapping, input order preserved."""
    return [
        build(model_type, mapping, null_policy=null_policy, introspector=introspector)
        for mapping in mappings
    ]
