"""
Structured results decoded from Gemini replies.

Every gateway operation parses the model's JSON into one of these models.
A reply that does not fit is rejected rather than passed on half-typed.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trip_assistant.data.models import CamelModel, DayPlan, WholeNumber


class TripAction(str, Enum):
    """Trip modification actions Gemini is asked to recognise."""

    MODIFY_BUDGET = "modify_budget"
    ADD_ACTIVITY = "add_activity"
    REMOVE_ACTIVITY = "remove_activity"
    CHANGE_HOTEL = "change_hotel"
    ADD_DAY = "add_day"
    REMOVE_DAY = "remove_day"
    CHANGE_THEME = "change_theme"
    OPTIMIZE_BUDGET = "optimize_budget"


class GeneratedPlan(BaseModel):
    """Itinerary returned by itinerary generation."""

    title: str = Field(min_length=1)
    ai_summary: str | None = None
    days: list[DayPlan] = Field(min_length=1)


class ActionDetection(CamelModel):
    """Intent classification for a chat message."""

    has_action: bool = False
    action: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    reasoning: str = ""
    needs_confirmation: bool = False
    confirmation_message: str = ""
    response: str | None = None

    @field_validator("params", mode="before")
    @classmethod
    def default_params(cls, value: Any) -> Any:
        return value or {}

    @classmethod
    def no_action(cls, response: str | None = None, reasoning: str = "") -> "ActionDetection":
        return cls(has_action=False, reasoning=reasoning, response=response)


class ModifiedTrip(CamelModel):
    """Trip fields Gemini may rewrite; absent fields stay as they are."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    theme: str | None = None
    budget: WholeNumber | None = None
    start_date: str | None = None
    end_date: str | None = None
    days: list[DayPlan] = Field(min_length=1)

    def updates(self) -> dict[str, Any]:
        """Fields to shallow-merge into the stored trip."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        }


class ModificationResult(BaseModel):
    """Outcome of executing a trip action."""

    trip: ModifiedTrip
    changes: list[str] = Field(default_factory=list)
    suggestion: str | None = None


class BudgetSwap(CamelModel):
    title: str
    description: str = ""
    current_item: str = ""
    suggested_item: str = ""
    savings: WholeNumber = 0


class PackageTier(CamelModel):
    total_cost: WholeNumber
    description: str = ""


class PackageAlternatives(BaseModel):
    budget: PackageTier | None = None
    standard: PackageTier | None = None
    luxury: PackageTier | None = None


class HiddenGem(BaseModel):
    title: str
    description: str = ""
    price: WholeNumber = 0
    category: str = ""


class BudgetOptimization(CamelModel):
    """Spend breakdown plus ways to save."""

    breakdown: dict[str, WholeNumber] = Field(default_factory=dict)
    total_cost: WholeNumber | None = None
    optimizations: list[BudgetSwap] = Field(default_factory=list)
    alternatives: PackageAlternatives = Field(default_factory=PackageAlternatives)
    hidden_gems: list[HiddenGem] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)


class SuggestedActivity(CamelModel):
    type: str = "activity"
    title: str
    description: str = ""
    price: WholeNumber | None = None
    timing: str | None = None
    reasoning: str = ""
    day_number: int | None = None


class PopularAddition(BaseModel):
    title: str
    percentage: WholeNumber = Field(ge=0, le=100)
    reason: str = ""


class ActivitySequence(BaseModel):
    title: str
    activities: list[str] = Field(default_factory=list)
    reasoning: str = ""


class LocalInsight(BaseModel):
    type: str = "tip"
    title: str
    description: str = ""
    relevance: str | None = None

    @field_validator("type")
    @classmethod
    def known_type(cls, value: str) -> str:
        value = value.lower()
        return value if value in {"weather", "event", "tip"} else "tip"


class SmartRecommendations(CamelModel):
    recommendations: list[SuggestedActivity] = Field(default_factory=list)
    people_also_added: list[PopularAddition] = Field(default_factory=list)
    sequences: list[ActivitySequence] = Field(default_factory=list)
    local_insights: list[LocalInsight] = Field(default_factory=list)


class TravelPersonality(BaseModel):
    type: str
    description: str = ""
    traits: list[str] = Field(default_factory=list)


class InsightCard(BaseModel):
    title: str
    description: str = ""
    icon: str | None = None


class Achievement(BaseModel):
    title: str
    description: str = ""
    icon: str | None = None
    unlocked: bool = False


class DestinationSuggestion(CamelModel):
    destination: str
    reason: str = ""
    best_time: str | None = None
    estimated_budget: WholeNumber | None = None


class NextStep(BaseModel):
    suggestion: str
    reason: str = ""


class UserInsights(CamelModel):
    travel_personality: TravelPersonality
    insights: list[InsightCard] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    recommendations: list[DestinationSuggestion] = Field(default_factory=list)
    next_steps: list[NextStep] = Field(default_factory=list)


class TripDetails(BaseModel):
    """Trip form fields recovered from free text; any may be missing."""

    model_config = ConfigDict(populate_by_name=True)

    origin: str | None = Field(default=None, alias="from")
    destination: str | None = Field(default=None, alias="to")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    vibe: str | None = None
    budget: WholeNumber | None = None
    custom_request: str | None = Field(default=None, alias="customRequest")


class PlanningIntent(CamelModel):
    wants_to_plan: bool = False
    extracted_details: TripDetails = Field(default_factory=TripDetails)
    missing_fields: list[str] = Field(default_factory=list)
    message: str = ""


class ExtractedTripDetails(TripDetails):
    updated: bool = False


class AdvancedOptions(CamelModel):
    """Optional generation switches from the trip form."""

    select_all: bool | None = None
    include_flights: bool | None = None
    auto_book: bool | None = None
    local_recommendations: bool | None = None

    def prompt_options(self) -> list[str]:
        options = []
        if self.include_flights is False:
            options.append("No flights")
        elif self.include_flights is True:
            options.append("Include flights with airlines/timings")
        if self.auto_book:
            options.append("Bookable online")
        if self.local_recommendations:
            options.append("Local experiences")
        return options


class Travelers(BaseModel):
    adults: int = Field(default=1, ge=1)
    children: int = Field(default=0, ge=0)

    def describe(self) -> str:
        text = f"{self.adults} {'adult' if self.adults == 1 else 'adults'}"
        if self.children:
            text += f", {self.children} {'child' if self.children == 1 else 'children'}"
        return text
