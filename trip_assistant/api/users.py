"""
User profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from trip_assistant.api.dependencies import get_trip_service
from trip_assistant.api.schemas import InsightsRequest
from trip_assistant.services.trip_service import TripService

router = APIRouter(prefix="/api/user", tags=["users"])


@router.post("/insights")
async def user_insights(
    trips: Annotated[TripService, Depends(get_trip_service)],
    body: Annotated[InsightsRequest | None, Body()] = None,
):
    """Travel personality and suggestions built from the user's trips."""
    body = body or InsightsRequest()
    result = await trips.user_insights(body.user_id, body.profile)
    return result.model_dump(mode="json", by_alias=True)
