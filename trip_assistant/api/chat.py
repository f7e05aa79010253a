"""
Chat endpoints: free-form replies, action detection with the confirmation
flow, and trip-planning extraction.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from trip_assistant.agents.gateway import AIGateway
from trip_assistant.api.dependencies import get_conversation_service, get_gateway
from trip_assistant.api.schemas import (
    ChatRequest,
    DetectActionRequest,
    ExtractDetailsRequest,
    PlanningIntentRequest,
)
from trip_assistant.services.conversation_service import ConversationService

router = APIRouter(prefix="/api", tags=["chat"])

Conversations = Annotated[ConversationService, Depends(get_conversation_service)]
Gateway = Annotated[AIGateway, Depends(get_gateway)]


@router.post("/chat")
async def chat(body: ChatRequest, conversations: Conversations):
    return {"response": await conversations.chat(body.message, body.trip_id)}


@router.post("/detect-action")
async def detect_action(body: DetectActionRequest, conversations: Conversations):
    """
    Classify a message and advance the chat session.

    The response is the classification plus ``sessionId`` and the session's
    ``state``; ``reply`` carries text for the user and ``result`` the applied
    modification when the action ran straight away.
    """
    outcome = await conversations.handle_message(
        body.message, body.trip_id, body.session_id
    )
    return {
        **outcome.detection.model_dump(mode="json", by_alias=True),
        "sessionId": outcome.session_id,
        "state": outcome.state.value,
        "reply": outcome.reply,
        "result": (
            outcome.result.model_dump(mode="json", by_alias=True)
            if outcome.result
            else None
        ),
    }


@router.post("/chat/sessions/{session_id}/confirm")
async def confirm_action(session_id: str, conversations: Conversations):
    outcome = await conversations.confirm(session_id)
    return outcome.model_dump(mode="json", by_alias=True)


@router.post("/chat/sessions/{session_id}/reject")
async def reject_action(session_id: str, conversations: Conversations):
    return {"message": conversations.reject(session_id)}


@router.post("/detect-itinerary-planning")
async def detect_itinerary_planning(body: PlanningIntentRequest, gateway: Gateway):
    result = await gateway.detect_planning_intent(
        body.message, body.conversation_history
    )
    return result.model_dump(mode="json", by_alias=True)


@router.post("/extract-trip-details")
async def extract_trip_details(body: ExtractDetailsRequest, gateway: Gateway):
    result = await gateway.extract_trip_details(
        body.message, body.existing_details, body.available_vibes
    )
    return result.model_dump(mode="json", by_alias=True)
