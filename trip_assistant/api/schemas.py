"""
Request bodies for the HTTP API.

Bodies use the client's camelCase keys. Any body that fails validation is
answered with 400 by the app's error handlers.
"""

from typing import Annotated, Any

from pydantic import ConfigDict, Field, StringConstraints

from trip_assistant.data.models import (
    MAX_MESSAGE_LENGTH,
    TRIP_BUDGET_MAX,
    TRIP_BUDGET_MIN,
    CamelModel,
)
from trip_assistant.data.plan_models import AdvancedOptions, Travelers, TripDetails
from trip_assistant.services.speech_service import SpeechProvider

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ChatMessage = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, min_length=1, max_length=MAX_MESSAGE_LENGTH
    ),
]


class VibesRequest(CamelModel):
    destination: NonEmptyStr


class GenerateTripRequest(CamelModel):
    origin: NonEmptyStr = Field(alias="from")
    destination: NonEmptyStr = Field(alias="to")
    start_date: NonEmptyStr
    end_date: NonEmptyStr
    theme: NonEmptyStr
    budget: int = Field(ge=TRIP_BUDGET_MIN, le=TRIP_BUDGET_MAX)
    custom_request: str | None = None
    advanced_options: AdvancedOptions | None = None
    travelers: Travelers | None = None
    user_id: str | None = None


class CartItemUpdate(CamelModel):
    """Partial cart item update; only the keys sent are changed."""

    model_config = ConfigDict(extra="forbid")

    kind: NonEmptyStr | None = Field(default=None, alias="type")
    title: NonEmptyStr | None = None
    details: str | None = None
    provider: str | None = None
    price: int | None = Field(default=None, ge=0)
    included: bool | None = None
    day_number: int | None = None


class ChatRequest(CamelModel):
    message: ChatMessage
    trip_id: str | None = None


class DetectActionRequest(ChatRequest):
    session_id: str | None = None


class ModifyTripRequest(CamelModel):
    action: NonEmptyStr
    params: dict[str, Any] = Field(default_factory=dict)


class RecommendationsRequest(CamelModel):
    day_number: int | None = Field(default=None, ge=1)


class InsightsRequest(CamelModel):
    user_id: str | None = None
    profile: dict[str, Any] | None = None


class PlanningIntentRequest(CamelModel):
    message: ChatMessage
    conversation_history: list[str] = Field(default_factory=list)


class ExtractDetailsRequest(CamelModel):
    message: ChatMessage
    existing_details: TripDetails | None = None
    available_vibes: list[str] = Field(default_factory=list)


class SpeechRequest(CamelModel):
    text: NonEmptyStr
    voice_id: str | None = None
    provider: SpeechProvider = SpeechProvider.ELEVENLABS
