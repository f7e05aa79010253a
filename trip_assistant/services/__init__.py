"""
Services composing storage and the AI Gateway.
"""

from trip_assistant.services.cache_service import (
    CacheService,
    DynamoDBCache,
    InMemoryCache,
)
from trip_assistant.services.conversation_service import (
    ConversationService,
    SessionState,
    SessionStore,
)
from trip_assistant.services.speech_service import SpeechProvider, SpeechService
from trip_assistant.services.trip_service import CartSummary, TripService

__all__ = [
    "CacheService",
    "CartSummary",
    "ConversationService",
    "DynamoDBCache",
    "InMemoryCache",
    "SessionState",
    "SessionStore",
    "SpeechProvider",
    "SpeechService",
    "TripService",
]
