"""Tests for models decoded from Gemini replies."""

import pytest
from pydantic import ValidationError

from trip_assistant.data.plan_models import (
    ActionDetection,
    AdvancedOptions,
    BudgetOptimization,
    DestinationSuggestion,
    GeneratedPlan,
    LocalInsight,
    ModifiedTrip,
    PopularAddition,
    SmartRecommendations,
    TripDetails,
    Travelers,
)


def test_generated_plan_requires_days():
    with pytest.raises(ValidationError):
        GeneratedPlan.model_validate({"title": "Empty", "days": []})


def test_generated_plan_without_flights_or_hotels():
    plan = GeneratedPlan.model_validate(
        {
            "title": "Local walk",
            "days": [
                {
                    "day_number": 1,
                    "summary": "Walk",
                    "recommendations": [
                        {"type": "activity", "title": "Heritage walk", "price": 0}
                    ],
                }
            ],
        }
    )
    assert plan.days[0].recommendations[0].kind == "activity"


def test_action_detection_camel_case():
    detection = ActionDetection.model_validate(
        {
            "hasAction": True,
            "action": "modify_budget",
            "params": None,
            "needsConfirmation": True,
            "confirmationMessage": "Reduce budget?",
        }
    )
    assert detection.has_action
    assert detection.params == {}
    assert detection.model_dump(by_alias=True)["confirmationMessage"] == "Reduce budget?"


def test_no_action():
    detection = ActionDetection.no_action(response="Hi")
    assert not detection.has_action
    assert detection.action is None
    assert detection.response == "Hi"


def test_modified_trip_updates_skip_missing_fields():
    modified = ModifiedTrip.model_validate(
        {
            "budget": 40000,
            "days": [{"day_number": 1, "recommendations": []}],
            "title": None,
            "from": "ignored",
        }
    )
    updates = modified.updates()
    assert set(updates) == {"budget", "days"}


def test_percentage_bounds():
    with pytest.raises(ValidationError):
        PopularAddition(title="Cruise", percentage=140)


def test_fractional_numbers_are_rounded():
    recs = SmartRecommendations.model_validate_json(
        '{"peopleAlsoAdded": [{"title": "Cruise", "percentage": 72.6}]}'
    )
    budget = BudgetOptimization.model_validate(
        {
            "breakdown": {"flights": 7000.5, "hotels": "12,000"},
            "totalCost": 19000.4,
            "optimizations": [{"title": "Swap hotel", "savings": 1500.7}],
            "alternatives": {"budget": {"totalCost": 30000.2}},
            "hiddenGems": [{"title": "Chorao island", "price": 99.9}],
        }
    )

    assert recs.people_also_added[0].percentage == 73
    assert budget.breakdown == {"flights": 7000, "hotels": 12000}
    assert budget.total_cost == 19000
    assert budget.optimizations[0].savings == 1501
    assert budget.alternatives.budget.total_cost == 30000
    assert budget.hidden_gems[0].price == 100


def test_destination_estimate_accepts_float():
    suggestion = DestinationSuggestion.model_validate(
        {"destination": "Hampi", "estimatedBudget": 25000.0}
    )
    assert suggestion.estimated_budget == 25000


def test_local_insight_unknown_type_becomes_tip():
    assert LocalInsight(type="Festival", title="Carnival").type == "tip"
    assert LocalInsight(type="WEATHER", title="Monsoon").type == "weather"


def test_smart_recommendations_keys():
    recs = SmartRecommendations.model_validate(
        {
            "recommendations": [{"type": "restaurant", "title": "Fisherman's Wharf", "dayNumber": 2}],
            "peopleAlsoAdded": [{"title": "Dolphin trip", "percentage": 75}],
        }
    )
    assert recs.recommendations[0].day_number == 2
    assert recs.people_also_added[0].percentage == 75


def test_trip_details_aliases():
    details = TripDetails.model_validate({"from": "Pune", "to": "Goa", "startDate": "2025-12-01"})
    assert details.origin == "Pune"
    assert details.model_dump(by_alias=True, exclude_none=True) == {
        "from": "Pune",
        "to": "Goa",
        "startDate": "2025-12-01",
    }


def test_advanced_options_prompt_options():
    options = AdvancedOptions.model_validate({"includeFlights": False, "localRecommendations": True})
    assert options.prompt_options() == ["No flights", "Local experiences"]


def test_travelers_describe():
    assert Travelers(adults=2, children=1).describe() == "2 adults, 1 child"
    assert Travelers(adults=1).describe() == "1 adult"
