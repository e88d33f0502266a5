"""
Tests for the Introspector, Descriptor Cache and Model Registry.

These tests verify that:
1. Declared fields are enumerated in declaration order, bases first
2. ClassVar and private annotations are not fields
3. Relationships are detected through the registry
4. Descriptors are computed once per model type and then reused
5. Unresolvable annotations degrade to OTHER fields instead of failing
"""

import threading
import time
from typing import ClassVar, Optional

import pytest

from supermodel import SuperModel
from supermodel.cache import CacheInfo, DescriptorCache
from supermodel.exceptions import ModelDefinitionError, UnknownModelError
from supermodel.fields import FieldDescriptor, FieldKind
from supermodel.introspection import Introspector, default_introspector, descriptors_for
from supermodel.registry import ModelRegistry, default_registry, qualified_name


class Gadget(SuperModel):
    label: Optional[str] = None
    weight: Optional[float] = None


class Owner(SuperModel):
    name: str
    gadget: Optional[Gadget] = None
    tags: Optional[list] = None
    active: bool = False
    kind: ClassVar[str] = "owner"
    _secret: Optional[str] = None


class SpecialOwner(Owner):
    rank: Optional[int] = None


class Bare(SuperModel):
    pass


class Fleet(SuperModel):
    flagship: Optional["Vessel"] = None


class Vessel(SuperModel):
    hull: Optional[str] = None


def make_twin():
    class Twin(SuperModel, register=False):
        size: Optional[int] = None
    return Twin


def names(descriptors):
    return [d.name for d in descriptors]


# =============================================================================
# FIELD ENUMERATION
# =============================================================================

class TestFieldEnumeration:
    """Test which annotations become fields, and in what order."""

    def test_declaration_order(self):
        assert names(descriptors_for(Owner)) == ["name", "gadget", "tags", "active"]

    def test_class_var_and_private_names_are_skipped(self):
        field_names = names(descriptors_for(Owner))
        assert "kind" not in field_names
        assert "_secret" not in field_names

    def test_inherited_fields_come_first(self):
        assert names(descriptors_for(SpecialOwner)) == [
            "name", "gadget", "tags", "active", "rank",
        ]

    def test_model_without_fields_yields_empty_tuple(self):
        assert descriptors_for(Bare) == ()

    def test_instance_and_type_give_same_descriptors(self):
        assert descriptors_for(Owner()) is descriptors_for(Owner)

    def test_descriptor_lookup_by_name(self):
        descriptor = default_introspector.descriptor_for(Owner, "active")
        assert descriptor == FieldDescriptor("active", bool)
        assert default_introspector.descriptor_for(Owner, "missing") is None


# =============================================================================
# TYPE RESOLUTION
# =============================================================================

class TestTypeResolution:
    """Test optionality and relationship detection."""

    def test_required_field(self):
        name = default_introspector.descriptor_for(Owner, "name")
        assert name.optional is False
        assert name.declared_type is str
        assert name.kind == FieldKind.TEXT

    def test_relationship_detected(self):
        gadget = default_introspector.descriptor_for(Owner, "gadget")
        assert gadget.optional is True
        assert gadget.related_model is Gadget
        assert gadget.kind == FieldKind.MODEL

    def test_quoted_forward_reference(self):
        flagship = default_introspector.descriptor_for(Fleet, "flagship")
        assert flagship.related_model is Vessel

    def test_unregistered_model_is_not_a_relationship(self):
        Twin = make_twin()

        class Pair(SuperModel, register=False):
            twin: Optional[Twin] = None

        twin = default_introspector.descriptor_for(Pair, "twin")
        assert twin.related_model is None
        assert twin.kind == FieldKind.OTHER

    def test_local_names_resolve_through_registry(self):
        class Harbor(SuperModel):
            port: Optional[str] = None

        class Dock(SuperModel):
            harbor: "Optional[Harbor]" = None
            mystery: "Optional[Nonexistent]" = None

        try:
            harbor = default_introspector.descriptor_for(Dock, "harbor")
            assert harbor.related_model is Harbor
            assert harbor.optional is True

            mystery = default_introspector.descriptor_for(Dock, "mystery")
            assert mystery.declared_type == "Optional[Nonexistent]"
            assert mystery.kind == FieldKind.OTHER
        finally:
            default_registry.unregister(Harbor)
            default_registry.unregister(Dock)


# =============================================================================
# DESCRIPTOR CACHE
# =============================================================================

class TestDescriptorCache:
    """Test that introspection happens once per model type."""

    def test_second_lookup_hits_cache(self):
        introspector = Introspector(cache=DescriptorCache())

        first = introspector.descriptors_for(Owner)
        second = introspector.descriptors_for(Owner())

        assert first is second
        info = introspector.cache.info()
        assert info.misses == 1
        assert info.hits == 1

    def test_later_instances_reuse_descriptors(self):
        introspector = Introspector(cache=DescriptorCache())
        for _ in range(5):
            introspector.descriptors_for(Gadget())
        assert introspector.cache.info().misses == 1

    def test_subclass_gets_its_own_entry(self):
        introspector = Introspector(cache=DescriptorCache())
        introspector.descriptors_for(Owner)
        introspector.descriptors_for(SpecialOwner)

        assert Owner in introspector.cache
        assert SpecialOwner in introspector.cache
        assert introspector.cache.info().misses == 2

    def test_factory_runs_once(self):
        cache = DescriptorCache()
        calls = []

        def factory(model_type):
            calls.append(model_type)
            return [FieldDescriptor("x", int)]

        a = cache.get_or_compute(Gadget, factory)
        b = cache.get_or_compute(Gadget, factory)

        assert a == b == (FieldDescriptor("x", int),)
        assert calls == [Gadget]

    def test_concurrent_first_lookups_compute_once(self):
        cache = DescriptorCache()
        calls = []
        barrier = threading.Barrier(8)

        def factory(model_type):
            calls.append(model_type)
            time.sleep(0.01)
            return ()

        def worker():
            barrier.wait()
            cache.get_or_compute(Vessel, factory)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert calls == [Vessel]

    def test_concurrent_hits_are_all_counted(self):
        cache = DescriptorCache()
        cache.get_or_compute(Vessel, lambda t: ())

        def worker():
            for _ in range(200):
                cache.get_or_compute(Vessel, lambda t: ())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.info() == CacheInfo(hits=1600, misses=1, size=1)

    def test_clear(self):
        cache = DescriptorCache()
        cache.get_or_compute(Gadget, lambda t: ())
        cache.clear()
        assert len(cache) == 0
        assert cache.info().misses == 0


# =============================================================================
# MODEL REGISTRY
# =============================================================================

class TestModelRegistry:
    """Test registration and lookup of model types."""

    def test_subclasses_register_themselves(self):
        assert Gadget in default_registry
        assert default_registry.lookup(qualified_name(Gadget)) is Gadget

    def test_register_false_opts_out(self):
        Twin = make_twin()
        assert Twin not in default_registry

    def test_lookup_by_short_name(self):
        registry = ModelRegistry()
        registry.register(Gadget)
        assert registry.lookup("Gadget") is Gadget
        assert registry.get("Gadget") is Gadget

    def test_unknown_name(self):
        registry = ModelRegistry()
        assert registry.lookup("Gadget") is None
        with pytest.raises(UnknownModelError, match="Gadget"):
            registry.get("Gadget")

    def test_non_model_cannot_be_registered(self):
        with pytest.raises(ModelDefinitionError):
            ModelRegistry().register(int)

    def test_ambiguous_short_name(self):
        def first():
            class Twin(SuperModel, register=False):
                pass
            return Twin

        def second():
            class Twin(SuperModel, register=False):
                pass
            return Twin

        registry = ModelRegistry()
        a, b = registry.register(first()), registry.register(second())

        assert registry.lookup("Twin") is None
        assert registry.lookup(qualified_name(a)) is a
        assert registry.lookup(qualified_name(b)) is b

    def test_redefinition_replaces_previous_type(self):
        registry = ModelRegistry()
        old, new = make_twin(), make_twin()
        registry.register(old)
        registry.register(new)

        assert registry.lookup("Twin") is new
        assert not registry.is_model(old)
        assert len(registry) == 1

    def test_unregister(self):
        registry = ModelRegistry()
        registry.register(Gadget)
        registry.unregister(Gadget)
        assert registry.lookup("Gadget") is None
        assert registry.names() == []
