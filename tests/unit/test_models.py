"""Tests for domain models."""

import pytest
from pydantic import ValidationError

from trip_assistant.data.models import (
    CartItem,
    CartItemFields,
    Recommendation,
    TripFields,
    User,
    cart_items_from_days,
    cart_total,
)


def test_recommendation_reads_type_key():
    rec = Recommendation.model_validate(
        {"type": "hotel", "title": "Taj", "price": 4500, "included": True}
    )
    assert rec.kind == "hotel"
    assert rec.model_dump(by_alias=True)["type"] == "hotel"


@pytest.mark.parametrize(
    "raw, expected",
    [(3500, 3500), (3500.4, 3500), ("3,500", 3500), ("2500.0", 2500)],
)
def test_recommendation_price_coercion(raw, expected):
    rec = Recommendation.model_validate({"type": "activity", "title": "Kayak", "price": raw})
    assert rec.price == expected


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        CartItemFields(kind="activity", title="Kayak", price=-1)


def test_cart_item_defaults():
    item = CartItemFields(kind="activity", title="Kayak")
    assert item.included is True
    assert item.provider is None
    assert item.trip_id is None
    assert item.day_number is None
    assert item.price == 0


def test_cart_item_wire_format():
    item = CartItem(id="c1", trip_id="t1", kind="flight", title="6E 123", price=3500, day_number=1)
    data = item.model_dump(mode="json", by_alias=True)
    assert data["tripId"] == "t1"
    assert data["type"] == "flight"
    assert data["dayNumber"] == 1


def test_trip_fields_wire_keys():
    fields = TripFields.model_validate(
        {
            "title": "Goa",
            "from": "Bangalore",
            "to": "Goa",
            "startDate": "2025-12-01",
            "endDate": "2025-12-03",
            "theme": "Beach & Chill",
            "budget": 50000,
        }
    )
    assert fields.origin == "Bangalore"
    data = fields.model_dump(by_alias=True)
    assert data["from"] == "Bangalore"
    assert data["to"] == "Goa"
    assert data["startDate"] == "2025-12-01"


def test_password_hash_roundtrip():
    user = User(id="u1", username="asha", password_hash=User.hash_password("s3cret"))
    assert user.password_hash.startswith("$2b$")
    assert "s3cret" not in user.password_hash
    assert user.verify_password("s3cret")
    assert not user.verify_password("wrong")


def test_password_hash_not_serialized():
    user = User(id="u1", username="asha", password_hash=User.hash_password("pw"))
    assert "passwordHash" not in user.model_dump(by_alias=True)
    assert "password_hash" not in user.model_dump()


def test_malformed_hash_does_not_verify():
    user = User(id="u1", username="asha", password_hash="plaintext")
    assert not user.verify_password("plaintext")


def test_cart_items_from_days(sample_plan):
    items = cart_items_from_days("t1", sample_plan.days)
    assert len(items) == 9
    assert all(item.trip_id == "t1" and item.included for item in items)
    assert [item.day_number for item in items] == [1, 1, 1, 2, 2, 2, 3, 3, 3]


def test_cart_total_counts_included_only():
    items = [
        CartItem(id="a", kind="hotel", title="A", price=1000),
        CartItem(id="b", kind="hotel", title="B", price=2000, included=False),
    ]
    assert cart_total(items) == 1000
