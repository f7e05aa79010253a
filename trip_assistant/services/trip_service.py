"""
Trip service: the operations behind the trip and cart endpoints.

Combines the repository with the AI Gateway. Lookups of unknown ids raise
``ResourceNotFoundError``; Gemini failures surface as
``GenerationFailedError`` from the gateway.
"""

from collections import Counter, defaultdict
from typing import Any

from trip_assistant.agents.gateway import AIGateway
from trip_assistant.agents.vibes import GENERIC_VIBES
from trip_assistant.data.models import (
    CamelModel,
    CartItem,
    Trip,
    TripFields,
    cart_items_from_days,
    cart_total,
)
from trip_assistant.data.plan_models import (
    AdvancedOptions,
    BudgetOptimization,
    GeneratedPlan,
    ModificationResult,
    SmartRecommendations,
    Travelers,
    UserInsights,
)
from trip_assistant.data.repository import TripRepository
from trip_assistant.services.cache_service import CacheService
from trip_assistant.utils.error_handling import (
    GenerationFailedError,
    ResourceNotFoundError,
    safe_execute,
)
from trip_assistant.utils.logging import get_logger

logger = get_logger(__name__)


class CartSummary(CamelModel):
    """Included total, overall and per item type."""

    total: int
    included_count: int
    item_count: int
    by_type: dict[str, int]


class TripService:
    """Trip generation, cart management and trip analyses."""

    def __init__(
        self,
        repo: TripRepository,
        gateway: AIGateway,
        vibe_cache: CacheService | None = None,
        default_user_id: str = "default-user",
    ):
        self.repo = repo
        self.gateway = gateway
        self.vibe_cache = vibe_cache
        self.default_user_id = default_user_id

    # --- Lookups ---

    def get_trip(self, trip_id: str) -> Trip:
        trip = self.repo.get_trip(trip_id)
        if trip is None:
            raise ResourceNotFoundError(f"Trip not found: {trip_id}")
        return trip

    def get_cart(self, trip_id: str) -> list[CartItem]:
        return self.repo.get_cart_items(trip_id)

    def cart_summary(self, trip_id: str) -> CartSummary:
        self.get_trip(trip_id)
        items = self.repo.get_cart_items(trip_id)
        by_type: dict[str, int] = defaultdict(int)
        for item in items:
            if item.included:
                by_type[item.kind] += item.price
        return CartSummary(
            total=cart_total(items),
            included_count=sum(1 for item in items if item.included),
            item_count=len(items),
            by_type=dict(by_type),
        )

    # --- Cart ---

    def update_cart_item(self, item_id: str, updates: dict[str, Any]) -> CartItem:
        item = self.repo.update_cart_item(item_id, updates)
        if item is None:
            raise ResourceNotFoundError(f"Cart item not found: {item_id}")
        return item

    def delete_cart_item(self, item_id: str) -> None:
        if not self.repo.delete_cart_item(item_id):
            raise ResourceNotFoundError(f"Cart item not found: {item_id}")

    # --- Vibes ---

    async def suggest_vibes(self, destination: str) -> list[str]:
        key = f"vibes:{destination.lower().strip()}"
        if self.vibe_cache:
            cached = self.vibe_cache.get(key)
            if cached:
                logger.debug(f"Vibe cache hit for {destination}")
                return list(cached)

        vibes = await self.gateway.suggest_vibes(destination)
        # The generic fallback means Gemini failed; try again next time
        if self.vibe_cache and vibes != GENERIC_VIBES:
            self.vibe_cache.set(key, vibes)
        return vibes

    # --- Generation ---

    async def generate_trip(
        self,
        origin: str,
        destination: str,
        start_date: str,
        end_date: str,
        theme: str,
        budget: int,
        custom_request: str | None = None,
        advanced_options: AdvancedOptions | None = None,
        travelers: Travelers | None = None,
        user_id: str | None = None,
    ) -> tuple[Trip, GeneratedPlan]:
        """
        Generate an itinerary, store it as a trip and fill its cart.

        One cart item is created per recommendation. If storing the cart
        fails the trip and any stored items are deleted again.

        Raises:
            GenerationFailedError: If generation or storage fails
        """
        plan = await self.gateway.generate_itinerary(
            origin,
            destination,
            start_date,
            end_date,
            theme,
            budget,
            custom_request=custom_request,
            advanced_options=advanced_options,
            travelers=travelers,
        )

        trip = self.repo.create_trip(
            TripFields(
                title=plan.title,
                origin=origin,
                destination=destination,
                start_date=start_date,
                end_date=end_date,
                theme=theme,
                budget=budget,
                days=plan.days,
            ),
            user_id or self.default_user_id,
        )

        try:
            items = self.repo.create_cart_items(cart_items_from_days(trip.id, plan.days))
        except Exception as e:
            logger.error(f"Storing cart for trip {trip.id} failed, rolling back: {e!s}")
            self._discard_trip(trip.id)
            raise GenerationFailedError(
                "Failed to save generated trip", "Trip Service", e
            ) from e

        logger.info(
            f"Trip {trip.id} created with {len(trip.days)} days and "
            f"{len(items)} cart items"
        )
        return trip, plan

    def _discard_trip(self, trip_id: str) -> None:
        # Best effort: failures here are logged, not raised
        for item in safe_execute(self.repo.get_cart_items, trip_id, default=[]):
            safe_execute(self.repo.delete_cart_item, item.id)
        safe_execute(self.repo.delete_trip, trip_id)

    # --- Modification ---

    async def modify_trip(
        self, trip_id: str, action: str, params: dict[str, Any] | None = None
    ) -> tuple[Trip, ModificationResult]:
        """
        Apply a trip action through Gemini and persist the result.

        The cart is re-derived from the modified days: the trip's existing
        items are replaced by one item per recommendation of the new plan.
        A new item matching an excluded old one (same day, type and title)
        stays excluded.
        """
        trip = self.get_trip(trip_id)
        result = await self.gateway.execute_action(action, params or {}, trip)

        updated = self.repo.update_trip(trip_id, result.trip.updates())
        if updated is None:
            raise ResourceNotFoundError(f"Trip not found: {trip_id}")

        self._rebuild_cart(updated)
        logger.info(f"Trip {trip_id} modified by {action}: {result.changes}")
        return updated, result

    def _rebuild_cart(self, trip: Trip) -> None:
        old_items = self.repo.get_cart_items(trip.id)
        excluded = {
            (item.day_number, item.kind, item.title)
            for item in old_items
            if not item.included
        }
        new_items = cart_items_from_days(trip.id, trip.days)
        for fields in new_items:
            if (fields.day_number, fields.kind, fields.title) in excluded:
                fields.included = False

        # New items go in first; a failed write leaves the old cart in place
        self.repo.create_cart_items(new_items)
        for item in old_items:
            self.repo.delete_cart_item(item.id)

    # --- Analyses ---

    async def optimize_budget(self, trip_id: str) -> BudgetOptimization:
        return await self.gateway.optimize_budget(self.get_trip(trip_id))

    async def recommendations(
        self, trip_id: str, day_number: int | None = None
    ) -> SmartRecommendations:
        return await self.gateway.smart_recommendations(
            self.get_trip(trip_id), day_number
        )

    def build_profile(self, user_id: str) -> dict[str, Any]:
        """Summarize a user's stored trips for insight generation."""
        trips = self.repo.get_trips_by_user(user_id)
        budgets = [t.budget for t in trips]
        themes = Counter(t.theme for t in trips)
        return {
            "userId": user_id,
            "tripCount": len(trips),
            "destinations": sorted({t.destination for t in trips}),
            "favoriteThemes": [theme for theme, _ in themes.most_common(3)],
            "totalBudget": sum(budgets),
            "averageBudget": sum(budgets) // len(budgets) if budgets else 0,
            "trips": [
                {
                    "to": t.destination,
                    "from": t.origin,
                    "theme": t.theme,
                    "budget": t.budget,
                    "startDate": t.start_date,
                    "endDate": t.end_date,
                    "days": len(t.days),
                }
                for t in trips
            ],
        }

    async def user_insights(
        self, user_id: str | None = None, extra: dict[str, Any] | None = None
    ) -> UserInsights:
        profile = self.build_profile(user_id or self.default_user_id)
        if extra:
            profile.update(extra)
        return await self.gateway.user_insights(profile)
