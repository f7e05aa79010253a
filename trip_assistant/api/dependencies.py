"""
FastAPI dependencies resolving the services held on ``app.state``.
"""

from fastapi import Request

from trip_assistant.agents.gateway import AIGateway

from trip_assistant.services.conversation_service import ConversationService
from trip_assistant.services.speech_service import SpeechService
from trip_assistant.services.trip_service import TripService


def get_trip_service(request: Request) -> TripService:
    return request.app.state.trip_service


def get_conversation_service(request: Request) -> ConversationService:
    return request.app.state.conversation_service


def get_speech_service(request: Request) -> SpeechService:
    return request.app.state.speech_service


def get_gateway(request: Request) -> AIGateway:
    return request.app.state.gateway
