"""
Itinerary agent.

Generates day-by-day trip plans, and reads trip-planning details out of
free-text chat messages.
"""

from datetime import date

from trip_assistant.agents.base import BaseAgent
from trip_assistant.data.plan_models import (
    AdvancedOptions,
    ExtractedTripDetails,
    GeneratedPlan,
    PlanningIntent,
    TripDetails,
    Travelers,
)
from trip_assistant.prompts.templates import (
    EXTRACT_DETAILS,
    ITINERARY,
    PLANNING_INTENT,
)
from trip_assistant.utils.error_handling import GenerationFailedError
from trip_assistant.utils.helpers import format_price, to_prompt_json

HISTORY_WINDOW = 5


class ItineraryAgent(BaseAgent):
    """Builds itineraries with priced flight, hotel and activity items."""

    agent_type = "itinerary"
    default_name = "Itinerary Agent"
    default_instructions = (
        "You are an expert Indian travel planner. You produce realistic "
        "itineraries priced in Indian rupees and answer only with JSON."
    )

    async def generate_plan(
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
        """
        Generate an itinerary.

        There is no fallback plan: any failure, including a reply that does
        not decode into a plan with at least one day, raises.

        Raises:
            GenerationFailedError: If no usable plan was produced
        """
        travelers_section = ""
        if travelers:
            travelers_section = (
                f"\n\nTRAVELERS: {travelers.describe()}. Adjust pricing and "
                "accommodation size accordingly (e.g., hotel rooms, flight "
                "seats, activity capacity)."
            )
        custom_section = ""
        if custom_request and custom_request.strip():
            custom_section = (
                f'\n\nCUSTOM REQUIREMENTS: "{custom_request.strip()}" - '
                "Incorporate these preferences into the itinerary."
            )
        options = advanced_options.prompt_options() if advanced_options else []
        options_section = f"\n\nOPTIONS: {', '.join(options)}" if options else ""

        prompt = ITINERARY.render(
            origin=origin,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            theme=theme,
            budget=format_price(budget),
            travelers=travelers_section,
            custom_request=custom_section,
            options=options_section,
        )

        try:
            plan = await self._generate_json(prompt, GeneratedPlan)
        except Exception as e:
            self.log.error(f"Error generating trip plan to {destination}: {e!s}")
            raise GenerationFailedError(
                "Failed to generate trip plan", self.name, e
            ) from e

        self.log.info(
            f"Generated {len(plan.days)}-day plan '{plan.title}' for {destination}"
        )
        return plan

    async def detect_planning_intent(
        self, message: str, history: list[str] | None = None
    ) -> PlanningIntent:
        """Decide whether ``message`` asks for a new trip. Never raises."""
        history_section = ""
        if history:
            recent = "\n".join(history[-HISTORY_WINDOW:])
            history_section = f"\n\nPrevious conversation:\n{recent}"

        try:
            return await self._generate_json(
                PLANNING_INTENT.render(message=message, history=history_section),
                PlanningIntent,
            )
        except Exception as e:
            self.log.error(f"Error detecting itinerary planning intent: {e!s}")
            return PlanningIntent()

    async def extract_trip_details(
        self,
        message: str,
        existing: TripDetails | None = None,
        available_vibes: list[str] | None = None,
    ) -> ExtractedTripDetails:
        """Pull trip form fields out of ``message``. Never raises."""
        existing_section = ""
        if existing:
            existing_section = (
                "\n\nExisting details collected so far:\n"
                + to_prompt_json(existing.model_dump(by_alias=True, exclude_none=True))
            )
        vibes_section = ""
        if available_vibes:
            vibes_section = (
                f"\n\nAvailable vibes to match against: {', '.join(available_vibes)}"
            )

        try:
            return await self._generate_json(
                EXTRACT_DETAILS.render(
                    message=message,
                    existing=existing_section,
                    vibes=vibes_section,
                    today=date.today().isoformat(),
                ),
                ExtractedTripDetails,
            )
        except Exception as e:
            self.log.error(f"Error extracting trip details: {e!s}")
            return ExtractedTripDetails()
