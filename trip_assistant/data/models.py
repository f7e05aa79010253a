"""
Domain models for the trip assistant.

Entities (User, Trip, CartItem) serialize with camelCase keys to match the
JSON the web client exchanges. Day plans and recommendations keep the
snake_case keys Gemini is prompted to produce.
"""

from datetime import UTC, datetime
from typing import Annotated, Any

from passlib.context import CryptContext
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TRIP_BUDGET_MIN = 10_000
TRIP_BUDGET_MAX = 500_000

# Longest chat message accepted before anything is sent to Gemini
MAX_MESSAGE_LENGTH = 5000


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _coerce_price(value: Any) -> Any:
    """Accept 3500.0 or "3,500" from the model and keep integers."""
    if isinstance(value, float):
        return int(round(value))
    if isinstance(value, str):
        digits = value.replace(",", "").strip()
        if digits.replace(".", "", 1).isdigit():
            return int(round(float(digits)))
    return value


# Integer field that also takes the floats and "3,500" strings Gemini writes
WholeNumber = Annotated[int, BeforeValidator(_coerce_price)]


class Recommendation(BaseModel):
    """A priced line item inside a day plan."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(alias="type")
    title: str
    details: str = ""
    provider: str | None = None
    price: WholeNumber = Field(default=0, ge=0)
    included: bool = True


class DayPlan(BaseModel):
    """One day of an itinerary."""

    day_number: int = Field(ge=1)
    date: str | None = None
    theme: str | None = None
    summary: str = ""
    ai_summary: str | None = None
    recommendations: list[Recommendation] = Field(default_factory=list)


class User(CamelModel):
    """Registered user. The password is only ever stored as a salted hash."""

    id: str
    username: str
    password_hash: str = Field(exclude=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        # Unrecognised hashes (e.g. a plaintext value) never match
        if pwd_context.identify(self.password_hash) is None:
            return False
        return pwd_context.verify(password, self.password_hash)


class TripFields(CamelModel):
    """Caller-supplied trip fields, before an id and timestamp are assigned."""

    title: str
    origin: str = Field(alias="from")
    destination: str = Field(alias="to")
    start_date: str
    end_date: str
    theme: str
    budget: int
    days: list[DayPlan] = Field(default_factory=list)


class Trip(TripFields):
    """A persisted itinerary."""

    id: str
    user_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class CartItemFields(CamelModel):
    """Caller-supplied cart item fields."""

    trip_id: str | None = None
    kind: str = Field(alias="type", min_length=1)
    title: str = Field(min_length=1)
    details: str = ""
    provider: str | None = None
    price: WholeNumber = Field(default=0, ge=0)
    included: bool = True
    day_number: int | None = None


class CartItem(CartItemFields):
    """A priced, includable line item attached to a trip."""

    id: str


def cart_total(items: list[CartItem]) -> int:
    """Sum the prices of included items."""
    return sum(item.price for item in items if item.included)


def cart_items_from_days(trip_id: str, days: list[DayPlan]) -> list[CartItemFields]:
    """One cart item per recommendation, in day then recommendation order."""
    return [
        CartItemFields(
            trip_id=trip_id,
            kind=rec.kind,
            title=rec.title,
            details=rec.details,
            provider=rec.provider,
            price=rec.price,
            included=True,
            day_number=day.day_number,
        )
        for day in days
        for rec in day.recommendations
    ]
