"""
Trip, cart and analysis endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from trip_assistant.api.dependencies import get_trip_service
from trip_assistant.api.schemas import (
    CartItemUpdate,
    GenerateTripRequest,
    ModifyTripRequest,
    RecommendationsRequest,
    VibesRequest,
)
from trip_assistant.services.trip_service import TripService

router = APIRouter(prefix="/api", tags=["trips"])

Trips = Annotated[TripService, Depends(get_trip_service)]


@router.post("/vibes")
async def suggest_vibes(body: VibesRequest, trips: Trips):
    """Suggest travel vibes for a destination."""
    return {"vibes": await trips.suggest_vibes(body.destination)}


@router.post("/generate-trip")
async def generate_trip(body: GenerateTripRequest, trips: Trips):
    """Generate an itinerary, store the trip and fill its cart."""
    trip, plan = await trips.generate_trip(
        body.origin,
        body.destination,
        body.start_date,
        body.end_date,
        body.theme,
        body.budget,
        custom_request=body.custom_request,
        advanced_options=body.advanced_options,
        travelers=body.travelers,
        user_id=body.user_id,
    )
    return {
        "trip": trip.model_dump(mode="json", by_alias=True),
        "plan": plan.model_dump(mode="json", by_alias=True),
    }


@router.get("/trips/{trip_id}")
async def get_trip(trip_id: str, trips: Trips):
    return trips.get_trip(trip_id).model_dump(mode="json", by_alias=True)


@router.get("/trips/{trip_id}/cart")
async def get_cart(trip_id: str, trips: Trips):
    return [
        item.model_dump(mode="json", by_alias=True)
        for item in trips.get_cart(trip_id)
    ]


@router.get("/trips/{trip_id}/cart/summary")
async def get_cart_summary(trip_id: str, trips: Trips):
    return trips.cart_summary(trip_id).model_dump(by_alias=True)


@router.patch("/cart/{item_id}")
async def update_cart_item(item_id: str, body: CartItemUpdate, trips: Trips):
    item = trips.update_cart_item(item_id, body.model_dump(exclude_unset=True))
    return item.model_dump(mode="json", by_alias=True)


@router.delete("/cart/{item_id}")
async def delete_cart_item(item_id: str, trips: Trips):
    trips.delete_cart_item(item_id)
    return {"success": True}


@router.post("/trips/{trip_id}/modify")
async def modify_trip(trip_id: str, body: ModifyTripRequest, trips: Trips):
    """Apply a trip action directly, without the chat confirmation step."""
    trip, result = await trips.modify_trip(trip_id, body.action, body.params)
    return {
        "trip": trip.model_dump(mode="json", by_alias=True),
        "changes": result.changes,
        "suggestion": result.suggestion,
    }


@router.post("/trips/{trip_id}/optimize-budget")
async def optimize_budget(trip_id: str, trips: Trips):
    result = await trips.optimize_budget(trip_id)
    return result.model_dump(mode="json", by_alias=True)


@router.post("/trips/{trip_id}/recommendations")
async def recommendations(
    trip_id: str,
    trips: Trips,
    body: Annotated[RecommendationsRequest | None, Body()] = None,
):
    day_number = body.day_number if body else None
    result = await trips.recommendations(trip_id, day_number)
    return result.model_dump(mode="json", by_alias=True)
