"""
AI Gateway: one entry point for every Gemini-backed operation.

Operations with a fallback policy (vibes, chat, action detection, planning
intent, detail extraction) never raise. Operations with a raise policy
(itinerary, action execution, budget, recommendations, insights) raise
``GenerationFailedError`` instead of inventing data.
"""

from typing import Any

from google import genai

from trip_assistant.agents.budget import BudgetAgent
from trip_assistant.agents.conversation import ConversationAgent
from trip_assistant.agents.itinerary import ItineraryAgent
from trip_assistant.agents.recommendation import RecommendationAgent
from trip_assistant.agents.vibes import VibesAgent
from trip_assistant.config import TripAssistantConfig
from trip_assistant.config import config as default_config
from trip_assistant.data.models import Trip
from trip_assistant.data.plan_models import (
    ActionDetection,
    AdvancedOptions,
    BudgetOptimization,
    ExtractedTripDetails,
    GeneratedPlan,
    ModificationResult,
    PlanningIntent,
    SmartRecommendations,
    Travelers,
    TripDetails,
    UserInsights,
)


class AIGateway:
    """Facade over the specialised agents.

    Pass ``client`` to share one genai client across agents; otherwise each
    agent creates its own on first use.
    """

    def __init__(
        self,
        config: TripAssistantConfig | None = None,
        client: genai.Client | None = None,
    ):
        config = config or default_config
        self.vibes_agent = VibesAgent.from_settings(config, client)
        self.itinerary_agent = ItineraryAgent.from_settings(config, client)
        self.conversation_agent = ConversationAgent.from_settings(config, client)
        self.budget_agent = BudgetAgent.from_settings(config, client)
        self.recommendation_agent = RecommendationAgent.from_settings(config, client)

    # --- Fallback policy ---

    async def suggest_vibes(self, destination: str) -> list[str]:
        return await self.vibes_agent.suggest(destination)

    async def chat(self, message: str, trip: Trip | None = None) -> str:
        return await self.conversation_agent.chat(message, trip)

    async def detect_action(
        self, message: str, trip: Trip | None = None
    ) -> ActionDetection:
        return await self.conversation_agent.detect_action(message, trip)

    async def detect_planning_intent(
        self, message: str, history: list[str] | None = None
    ) -> PlanningIntent:
        return await self.itinerary_agent.detect_planning_intent(message, history)

    async def extract_trip_details(
        self,
        message: str,
        existing: TripDetails | None = None,
        available_vibes: list[str] | None = None,
    ) -> ExtractedTripDetails:
        return await self.itinerary_agent.extract_trip_details(
            message, existing, available_vibes
        )

    # --- Raise policy ---

    async def generate_itinerary(
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
    ) -> GeneratedPlan:
        return await self.itinerary_agent.generate_plan(
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

    async def execute_action(
        self, action: str, params: dict[str, Any], trip: Trip
    ) -> ModificationResult:
        return await self.conversation_agent.execute_action(action, params, trip)

    async def optimize_budget(self, trip: Trip) -> BudgetOptimization:
        return await self.budget_agent.optimize(trip)

    async def smart_recommendations(
        self, trip: Trip, day_number: int | None = None
    ) -> SmartRecommendations:
        return await self.recommendation_agent.smart_recommendations(trip, day_number)

    async def user_insights(self, profile: dict[str, Any]) -> UserInsights:
        return await self.recommendation_agent.user_insights(profile)
