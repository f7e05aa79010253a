"""
Recommendation agent.

Suggests additions for an existing trip and builds a travel profile
summary for a user.
"""

from typing import Any

from trip_assistant.agents.base import BaseAgent
from trip_assistant.agents.conversation import trip_context
from trip_assistant.data.models import Trip
from trip_assistant.data.plan_models import SmartRecommendations, UserInsights
from trip_assistant.prompts.templates import RECOMMENDATIONS, USER_INSIGHTS
from trip_assistant.utils.error_handling import GenerationFailedError
from trip_assistant.utils.helpers import to_prompt_json


class RecommendationAgent(BaseAgent):
    """Personalized suggestions for trips and travellers."""

    agent_type = "recommendation"
    default_name = "Recommendation Agent"
    default_instructions = (
        "You recommend activities, restaurants and destinations that fit "
        "a traveller's plans and history. Answer only with JSON."
    )

    async def smart_recommendations(
        self, trip: Trip, day_number: int | None = None
    ) -> SmartRecommendations:
        """
        Suggest additions for ``trip``, focused on one day when given.

        Raises:
            GenerationFailedError: If no usable suggestions were produced
        """
        day_focus = f" day (Day Number: {day_number})" if day_number else ""
        try:
            return await self._generate_json(
                RECOMMENDATIONS.render(
                    trip=to_prompt_json(trip_context(trip)), day_focus=day_focus
                ),
                SmartRecommendations,
            )
        except Exception as e:
            self.log.error(f"Error generating recommendations for {trip.id}: {e!s}")
            raise GenerationFailedError(
                "Failed to generate recommendations", self.name, e
            ) from e

    async def user_insights(self, profile: dict[str, Any]) -> UserInsights:
        """
        Analyze a user's travel profile.

        Raises:
            GenerationFailedError: If no usable insights were produced
        """
        try:
            return await self._generate_json(
                USER_INSIGHTS.render(profile=to_prompt_json(profile)), UserInsights
            )
        except Exception as e:
            self.log.error(f"Error generating user insights: {e!s}")
            raise GenerationFailedError(
                "Failed to generate user insights", self.name, e
            ) from e
