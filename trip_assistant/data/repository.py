"""
Repositories for users, trips and cart items.

``TripRepository`` is the storage interface the services depend on. Two
backings implement it: ``InMemoryRepository`` (process lifetime, used by
default and in tests) and ``DynamoDBRepository`` (single-table design).

Updates are shallow merges: a top-level field present in ``updates``
replaces the stored value wholesale, so ``days`` is never deep-merged.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from trip_assistant.data.dynamodb import DynamoDBClient
from trip_assistant.data.models import (
    CartItem,
    CartItemFields,
    Trip,
    TripFields,
    User,
)
from trip_assistant.utils.error_handling import ConflictError, ValidationError
from trip_assistant.utils.helpers import generate_id
from trip_assistant.utils.logging import get_logger

logger = get_logger(__name__)


class DuplicateUsernameError(ConflictError):
    """Raised when a username is already taken."""


def _merge(model: Any, updates: dict[str, Any]) -> Any:
    """Shallow-merge ``updates`` (field names or aliases) into ``model``."""
    data = model.model_dump()
    data.update(updates)
    try:
        return type(model).model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid update for {type(model).__name__}", e) from e


def _to_fields(fields: CartItemFields | dict[str, Any]) -> CartItemFields:
    if isinstance(fields, CartItemFields):
        return fields
    try:
        return CartItemFields.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError("Invalid cart item", e) from e


class TripRepository(ABC):
    """Storage operations for users, trips and cart items."""

    # --- Users ---

    @abstractmethod
    def create_user(self, username: str, password: str) -> User: ...

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    def verify_password(self, user: User, password: str) -> bool:
        return user.verify_password(password)

    # --- Trips ---

    @abstractmethod
    def create_trip(self, fields: TripFields, user_id: str | None) -> Trip: ...

    @abstractmethod
    def get_trip(self, trip_id: str) -> Trip | None: ...

    @abstractmethod
    def get_trips_by_user(self, user_id: str) -> list[Trip]: ...

    @abstractmethod
    def update_trip(self, trip_id: str, updates: dict[str, Any]) -> Trip | None: ...

    @abstractmethod
    def delete_trip(self, trip_id: str) -> bool: ...

    # --- Cart items ---

    @abstractmethod
    def create_cart_item(self, fields: CartItemFields | dict[str, Any]) -> CartItem: ...

    def create_cart_items(
        self, batch: Iterable[CartItemFields | dict[str, Any]]
    ) -> list[CartItem]:
        """Validate the whole batch, then store it in order."""
        validated = [_to_fields(fields) for fields in batch]
        items = [self.create_cart_item(fields) for fields in validated]
        logger.info(f"Created {len(items)} cart items in batch")
        return items

    @abstractmethod
    def get_cart_items(self, trip_id: str) -> list[CartItem]: ...

    @abstractmethod
    def update_cart_item(
        self, item_id: str, updates: dict[str, Any]
    ) -> CartItem | None: ...

    @abstractmethod
    def delete_cart_item(self, item_id: str) -> bool: ...


class InMemoryRepository(TripRepository):
    """Dict-backed repository. Contents live as long as the process."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._trips: dict[str, Trip] = {}
        self._cart_items: dict[str, CartItem] = {}
        self._lock = threading.Lock()

    # --- Users ---

    def create_user(self, username: str, password: str) -> User:
        with self._lock:
            if any(u.username == username for u in self._users.values()):
                raise DuplicateUsernameError(f"Username already exists: {username}")
            user = User(
                id=generate_id(),
                username=username,
                password_hash=User.hash_password(password),
            )
            self._users[user.id] = user
        return user

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next(
            (u for u in self._users.values() if u.username == username), None
        )

    # --- Trips ---

    def create_trip(self, fields: TripFields, user_id: str | None) -> Trip:
        trip = Trip(id=generate_id(), user_id=user_id, **fields.model_dump())
        with self._lock:
            self._trips[trip.id] = trip
        return trip

    def get_trip(self, trip_id: str) -> Trip | None:
        return self._trips.get(trip_id)

    def get_trips_by_user(self, user_id: str) -> list[Trip]:
        return [t for t in self._trips.values() if t.user_id == user_id]

    def update_trip(self, trip_id: str, updates: dict[str, Any]) -> Trip | None:
        with self._lock:
            trip = self._trips.get(trip_id)
            if trip is None:
                return None
            updated = _merge(trip, {**updates, "id": trip.id})
            self._trips[trip_id] = updated
        return updated

    def delete_trip(self, trip_id: str) -> bool:
        with self._lock:
            return self._trips.pop(trip_id, None) is not None

    # --- Cart items ---

    def create_cart_item(self, fields: CartItemFields | dict[str, Any]) -> CartItem:
        fields = _to_fields(fields)
        item = CartItem(id=generate_id(), **fields.model_dump())
        with self._lock:
            self._cart_items[item.id] = item
        logger.debug(
            f"Created cart item {item.id} for trip {item.trip_id} "
            f"(day {item.day_number}, {item.kind})"
        )
        return item

    def get_cart_items(self, trip_id: str) -> list[CartItem]:
        items = [i for i in self._cart_items.values() if i.trip_id == trip_id]
        logger.debug(
            f"getCartItems for trip {trip_id}: {len(items)} of "
            f"{len(self._cart_items)} items"
        )
        return items

    def update_cart_item(
        self, item_id: str, updates: dict[str, Any]
    ) -> CartItem | None:
        with self._lock:
            item = self._cart_items.get(item_id)
            if item is None:
                return None
            updated = _merge(item, {**updates, "id": item.id})
            self._cart_items[item_id] = updated
        return updated

    def delete_cart_item(self, item_id: str) -> bool:
        with self._lock:
            return self._cart_items.pop(item_id, None) is not None


class DynamoDBRepository(TripRepository):
    """
    Single-table DynamoDB backing.

    Access patterns:
        user:      PK=USER#id          SK=PROFILE   GSI1PK=USERNAME#name
        trip:      PK=TRIP#id          SK=METADATA  GSI1PK=USER#id#TRIP
        cart item: PK=CARTITEM#id      SK=METADATA  GSI1PK=TRIP#id#CART

    GSI1SK is the creation timestamp plus the position within a batch, so
    GSI queries return insertion order even for items written in one tick.
    Username uniqueness is a read-then-write check, so two concurrent
    registrations of the same name can both succeed.
    """

    def __init__(self, db: DynamoDBClient):
        self.db = db

    # --- Helpers ---

    def _to_item(
        self,
        pk: str,
        entity_type: str,
        data: dict[str, Any],
        gsi1pk: str | None = None,
        now: str | None = None,
        position: int = 0,
    ) -> dict[str, Any]:
        now = now or datetime.now(UTC).isoformat()
        item: dict[str, Any] = {
            "PK": pk,
            "SK": "METADATA" if entity_type != "User" else "PROFILE",
            "EntityType": entity_type,
            "Version": 1,
            "Data": data,
            "Metadata": {"createdAt": now, "updatedAt": now},
        }
        if gsi1pk:
            item["GSI1PK"] = gsi1pk
            item["GSI1SK"] = f"{now}#{position:06d}#{pk}"
        return item

    # --- Users ---

    def create_user(self, username: str, password: str) -> User:
        if self.get_user_by_username(username):
            raise DuplicateUsernameError(f"Username already exists: {username}")
        user = User(
            id=generate_id(),
            username=username,
            password_hash=User.hash_password(password),
        )
        data = user.model_dump(mode="json")
        data["password_hash"] = user.password_hash
        self.db.put_item(
            self._to_item(f"USER#{user.id}", "User", data, f"USERNAME#{username}")
        )
        return user

    def get_user(self, user_id: str) -> User | None:
        item = self.db.get_item(f"USER#{user_id}", "PROFILE")
        if not item:
            return None
        return User.model_validate(item["Data"])

    def get_user_by_username(self, username: str) -> User | None:
        items = self.db.query_gsi1(f"USERNAME#{username}", limit=1)
        if not items:
            return None
        return User.model_validate(items[0]["Data"])

    # --- Trips ---

    def _put_trip(self, trip: Trip) -> None:
        self.db.put_item(
            self._to_item(
                f"TRIP#{trip.id}",
                "Trip",
                trip.model_dump(mode="json"),
                f"USER#{trip.user_id}#TRIP" if trip.user_id else None,
            )
        )

    def create_trip(self, fields: TripFields, user_id: str | None) -> Trip:
        trip = Trip(id=generate_id(), user_id=user_id, **fields.model_dump())
        self._put_trip(trip)
        return trip

    def get_trip(self, trip_id: str) -> Trip | None:
        item = self.db.get_item(f"TRIP#{trip_id}", "METADATA")
        if not item:
            return None
        return Trip.model_validate(item["Data"])

    def get_trips_by_user(self, user_id: str) -> list[Trip]:
        items = self.db.query_gsi1(f"USER#{user_id}#TRIP")
        return [Trip.model_validate(i["Data"]) for i in items]

    def update_trip(self, trip_id: str, updates: dict[str, Any]) -> Trip | None:
        trip = self.get_trip(trip_id)
        if trip is None:
            return None
        updated = _merge(trip, {**updates, "id": trip.id})
        self.db.update_item(
            f"TRIP#{trip_id}", "METADATA", {"Data": updated.model_dump(mode="json")}
        )
        return updated

    def delete_trip(self, trip_id: str) -> bool:
        if self.get_trip(trip_id) is None:
            return False
        self.db.delete_item(f"TRIP#{trip_id}", "METADATA")
        return True

    # --- Cart items ---

    def _cart_item(
        self, item: CartItem, now: str | None = None, position: int = 0
    ) -> dict[str, Any]:
        return self._to_item(
            f"CARTITEM#{item.id}",
            "CartItem",
            item.model_dump(mode="json"),
            f"TRIP#{item.trip_id}#CART" if item.trip_id else None,
            now=now,
            position=position,
        )

    def create_cart_item(self, fields: CartItemFields | dict[str, Any]) -> CartItem:
        fields = _to_fields(fields)
        item = CartItem(id=generate_id(), **fields.model_dump())
        self.db.put_item(self._cart_item(item))
        return item

    def create_cart_items(
        self, batch: Iterable[CartItemFields | dict[str, Any]]
    ) -> list[CartItem]:
        items = [
            CartItem(id=generate_id(), **_to_fields(fields).model_dump())
            for fields in batch
        ]
        now = datetime.now(UTC).isoformat()
        self.db.batch_write(
            [
                self._cart_item(item, now=now, position=index)
                for index, item in enumerate(items)
            ]
        )
        logger.info(f"Created {len(items)} cart items in batch")
        return items

    def get_cart_items(self, trip_id: str) -> list[CartItem]:
        items = self.db.query_gsi1(f"TRIP#{trip_id}#CART")
        return [CartItem.model_validate(i["Data"]) for i in items]

    def update_cart_item(
        self, item_id: str, updates: dict[str, Any]
    ) -> CartItem | None:
        raw = self.db.get_item(f"CARTITEM#{item_id}", "METADATA")
        if not raw:
            return None
        updated = _merge(CartItem.model_validate(raw["Data"]), {**updates, "id": item_id})
        self.db.update_item(
            f"CARTITEM#{item_id}", "METADATA", {"Data": updated.model_dump(mode="json")}
        )
        return updated

    def delete_cart_item(self, item_id: str) -> bool:
        if not self.db.get_item(f"CARTITEM#{item_id}", "METADATA"):
            return False
        self.db.delete_item(f"CARTITEM#{item_id}", "METADATA")
        return True
