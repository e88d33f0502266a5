"""
Tests for the Serializer.

These tests verify that:
1. Flat models round-trip through construction and serialization
2. Unset fields are omitted or written as None on request
3. Values are written as they are held, nested models included
"""

from typing import Optional

from supermodel import SuperModel
from supermodel.serialization import to_dict


class Maker(SuperModel):
    brand: Optional[str] = None


class Item(SuperModel):
    sku: str
    label: Optional[str] = None
    count: int = 0
    price: Optional[float] = None
    maker: Optional[Maker] = None


# =============================================================================
# ROUND TRIP
# =============================================================================

class TestRoundTrip:
    """Test construct-then-serialize on flat payloads."""

    def test_flat_payload_round_trips(self):
        payload = {"sku": "W-1", "label": "Widget", "count": 3, "price": 9.5}
        assert to_dict(Item.from_dict(payload)) == payload

    def test_undeclared_keys_are_dropped(self):
        payload = {"sku": "W-1", "label": "Widget", "colour": "red"}
        assert to_dict(Item.from_dict(payload)) == {
            "sku": "W-1",
            "label": "Widget",
            "count": 0,
        }

    def test_descriptor_order(self):
        item = Item.from_dict({"price": 1.0, "label": "a", "sku": "b"})
        assert list(to_dict(item)) == ["sku", "label", "count", "price"]


# =============================================================================
# NULL HANDLING
# =============================================================================

class TestNulls:
    """Test omission and inclusion of unset fields."""

    def test_unset_fields_omitted(self):
        assert to_dict(Item()) == {"count": 0}

    def test_unset_fields_included_as_none(self):
        assert to_dict(Item(), nulls=True) == {
            "sku": None,
            "label": None,
            "count": 0,
            "price": None,
            "maker": None,
        }

    def test_defaults_are_present_values(self):
        assert to_dict(Item())["count"] == 0


# =============================================================================
# VALUES AS HELD
# =============================================================================

class TestValuesAsHeld:
    """Test that serialization does not re-coerce values."""

    def test_nested_model_written_as_is(self):
        item = Item.from_dict({"maker": {"brand": "Acme"}})
        result = to_dict(item)
        assert result["maker"] is item.maker

    def test_values_set_directly_are_not_coerced(self):
        item = Item()
        item.count = "many"
        assert to_dict(item)["count"] == "many"

    def test_model_method_matches_function(self):
        item = Item.from_dict({"sku": "X", "price": "2.5"})
        assert item.to_dict() == to_dict(item) == {"sku": "X", "count": 0, "price": 2.5}
