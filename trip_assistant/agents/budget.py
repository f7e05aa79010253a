"""
Budget optimization agent.
"""

from trip_assistant.agents.base import BaseAgent
from trip_assistant.agents.conversation import trip_context
from trip_assistant.data.models import Trip
from trip_assistant.data.plan_models import BudgetOptimization
from trip_assistant.prompts.templates import BUDGET
from trip_assistant.utils.error_handling import GenerationFailedError
from trip_assistant.utils.helpers import to_prompt_json


class BudgetAgent(BaseAgent):
    """Breaks down a trip's spend and proposes cheaper swaps."""

    agent_type = "budget"
    default_name = "Budget Agent"
    default_instructions = (
        "You are a travel budget analyst. You find realistic savings "
        "without ruining the trip, and answer only with JSON."
    )
    default_temperature = 0.4

    async def optimize(self, trip: Trip) -> BudgetOptimization:
        """
        Analyze ``trip``'s budget.

        Raises:
            GenerationFailedError: If no usable analysis was produced
        """
        try:
            result = await self._generate_json(
                BUDGET.render(trip=to_prompt_json(trip_context(trip))),
                BudgetOptimization,
            )
        except Exception as e:
            self.log.error(f"Error analyzing budget for trip {trip.id}: {e!s}")
            raise GenerationFailedError("Failed to analyze budget", self.name, e) from e

        if result.total_cost is None:
            result.total_cost = sum(result.breakdown.values())
        return result
