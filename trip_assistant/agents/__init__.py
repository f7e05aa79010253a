"""
Gemini-backed agents for the Trip Assistant service.
"""

from trip_assistant.agents.base import AgentConfig, BaseAgent, EmptyResponseError
from trip_assistant.agents.budget import BudgetAgent
from trip_assistant.agents.conversation import ConversationAgent
from trip_assistant.agents.gateway import AIGateway
from trip_assistant.agents.itinerary import ItineraryAgent
from trip_assistant.agents.recommendation import RecommendationAgent
from trip_assistant.agents.vibes import VibesAgent

__all__ = [
    "AIGateway",
    "AgentConfig",
    "BaseAgent",
    "BudgetAgent",
    "ConversationAgent",
    "EmptyResponseError",
    "ItineraryAgent",
    "RecommendationAgent",
    "VibesAgent",
]
