"""
Data models and storage for the Trip Assistant service.
"""

from trip_assistant.data.models import (
    CartItem,
    CartItemFields,
    DayPlan,
    Recommendation,
    Trip,
    TripFields,
    User,
    cart_items_from_days,
    cart_total,
)
from trip_assistant.data.repository import (
    DuplicateUsernameError,
    DynamoDBRepository,
    InMemoryRepository,
    TripRepository,
)

__all__ = [
    "CartItem",
    "CartItemFields",
    "DayPlan",
    "DuplicateUsernameError",
    "DynamoDBRepository",
    "InMemoryRepository",
    "Recommendation",
    "Trip",
    "TripFields",
    "TripRepository",
    "User",
    "cart_items_from_days",
    "cart_total",
]
