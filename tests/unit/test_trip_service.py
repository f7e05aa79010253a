"""Tests for the trip service."""

from unittest.mock import MagicMock

import pytest

from trip_assistant.agents.vibes import GENERIC_VIBES
from trip_assistant.data.models import DayPlan, Recommendation
from trip_assistant.data.plan_models import (
    AdvancedOptions,
    BudgetOptimization,
    ModificationResult,
    ModifiedTrip,
    TravelPersonality,
    UserInsights,
)
from trip_assistant.services.cache_service import InMemoryCache
from trip_assistant.services.trip_service import TripService
from trip_assistant.utils.error_handling import (
    GenerationFailedError,
    ResourceNotFoundError,
)


@pytest.fixture
def service(repo, mock_gateway):
    return TripService(repo, mock_gateway, vibe_cache=InMemoryCache())


async def generate(service, **overrides):
    kwargs = {
        "origin": "Bangalore",
        "destination": "Goa",
        "start_date": "2025-12-01",
        "end_date": "2025-12-03",
        "theme": "Beach & Chill",
        "budget": 50000,
    }
    kwargs.update(overrides)
    return await service.generate_trip(**kwargs)


async def test_generate_trip_creates_trip_and_cart(service, mock_gateway, sample_plan):
    mock_gateway.generate_itinerary.return_value = sample_plan

    trip, plan = await generate(service)

    assert plan is sample_plan
    assert trip.title == "Goa Beach Escape"
    assert trip.origin == "Bangalore"
    assert trip.user_id == "default-user"
    assert len(trip.days) == 3
    items = service.get_cart(trip.id)
    assert len(items) == 9
    assert all(item.included for item in items)
    assert [i.day_number for i in items] == [1, 1, 1, 2, 2, 2, 3, 3, 3]
    assert sum(i.price for i in items) == 18000


async def test_generate_trip_passes_options(service, mock_gateway, sample_plan):
    mock_gateway.generate_itinerary.return_value = sample_plan
    options = AdvancedOptions(include_flights=False)

    trip, _ = await generate(
        service, custom_request="No seafood", advanced_options=options, user_id="u-9"
    )

    kwargs = mock_gateway.generate_itinerary.call_args.kwargs
    assert kwargs["custom_request"] == "No seafood"
    assert kwargs["advanced_options"] is options
    assert trip.user_id == "u-9"


async def test_generate_trip_failure_stores_nothing(service, mock_gateway, repo):
    mock_gateway.generate_itinerary.side_effect = GenerationFailedError(
        "Failed to generate trip plan", "Itinerary Agent"
    )

    with pytest.raises(GenerationFailedError):
        await generate(service)

    assert repo.get_trips_by_user("default-user") == []


async def test_rollback_failure_keeps_original_error(
    service, mock_gateway, repo, sample_plan
):
    mock_gateway.generate_itinerary.return_value = sample_plan
    repo.create_cart_items = MagicMock(side_effect=RuntimeError("disk full"))
    repo.delete_trip = MagicMock(side_effect=RuntimeError("table gone"))

    with pytest.raises(GenerationFailedError) as exc_info:
        await generate(service)

    assert "disk full" in str(exc_info.value)
    repo.delete_trip.assert_called_once()


async def test_generate_trip_rolls_back_on_cart_failure(
    service, mock_gateway, repo, sample_plan
):
    mock_gateway.generate_itinerary.return_value = sample_plan
    repo.create_cart_items = MagicMock(side_effect=RuntimeError("disk full"))

    with pytest.raises(GenerationFailedError) as exc_info:
        await generate(service)

    assert exc_info.value.message == "Failed to save generated trip"
    assert repo.get_trips_by_user("default-user") == []


def test_get_trip_not_found(service):
    with pytest.raises(ResourceNotFoundError):
        service.get_trip("missing")


async def test_cart_summary(service, mock_gateway, sample_plan):
    mock_gateway.generate_itinerary.return_value = sample_plan
    trip, _ = await generate(service)
    flight = next(i for i in service.get_cart(trip.id) if i.kind == "flight")

    service.update_cart_item(flight.id, {"included": False})
    summary = service.cart_summary(trip.id)

    assert summary.total == 17000
    assert summary.item_count == 9
    assert summary.included_count == 8
    assert summary.by_type == {"flight": 2000, "hotel": 6000, "activity": 9000}
    assert "includedCount" in summary.model_dump(by_alias=True)


async def test_reincluding_item_restores_total(service, mock_gateway, sample_plan):
    mock_gateway.generate_itinerary.return_value = sample_plan
    trip, _ = await generate(service)
    hotel = next(i for i in service.get_cart(trip.id) if i.kind == "hotel")

    service.update_cart_item(hotel.id, {"included": False})
    assert service.cart_summary(trip.id).total == 18000 - hotel.price

    service.update_cart_item(hotel.id, {"included": True})
    summary = service.cart_summary(trip.id)
    assert summary.total == 18000
    assert summary.included_count == 9


async def test_plan_without_flights_or_hotels(service, mock_gateway, plan_factory):
    mock_gateway.generate_itinerary.return_value = plan_factory(
        days=2, recs_per_day=2, kinds=("activity", "restaurant")
    )

    trip, _ = await generate(service)
    items = service.get_cart(trip.id)
    summary = service.cart_summary(trip.id)

    assert {i.kind for i in items} == {"activity", "restaurant"}
    assert summary.total == 6000
    assert summary.by_type == {"activity": 2000, "restaurant": 4000}


def test_cart_summary_unknown_trip(service):
    with pytest.raises(ResourceNotFoundError):
        service.cart_summary("missing")


def test_update_and_delete_missing_item(service):
    with pytest.raises(ResourceNotFoundError):
        service.update_cart_item("missing", {"included": False})
    with pytest.raises(ResourceNotFoundError):
        service.delete_cart_item("missing")


async def test_suggest_vibes_cached(service, mock_gateway):
    mock_gateway.suggest_vibes.return_value = ["Northern Lights", "Hot Springs"]

    first = await service.suggest_vibes("Reykjavik")
    second = await service.suggest_vibes("  reykjavik ")

    assert first == second == ["Northern Lights", "Hot Springs"]
    mock_gateway.suggest_vibes.assert_awaited_once()


async def test_suggest_vibes_generic_not_cached(service, mock_gateway):
    mock_gateway.suggest_vibes.return_value = list(GENERIC_VIBES)

    await service.suggest_vibes("Reykjavik")
    await service.suggest_vibes("Reykjavik")

    assert mock_gateway.suggest_vibes.await_count == 2


async def test_modify_trip_rebuilds_cart(service, mock_gateway, sample_trip, repo):
    repo.create_cart_items([{"tripId": sample_trip.id, "type": "hotel", "title": "Old"}])
    new_days = [
        DayPlan(
            day_number=1,
            recommendations=[
                Recommendation(kind="hotel", title="Cheaper Stay", price=1500),
                Recommendation(kind="activity", title="Spa", price=2500),
            ],
        )
    ]
    mock_gateway.execute_action.return_value = ModificationResult(
        trip=ModifiedTrip(budget=40000, days=new_days),
        changes=["Budget reduced"],
    )

    trip, result = await service.modify_trip(
        sample_trip.id, "modify_budget", {"budgetChange": -10000}
    )

    assert trip.budget == 40000
    assert trip.destination == "Goa"
    assert trip.title == sample_trip.title
    assert result.changes == ["Budget reduced"]
    titles = sorted(i.title for i in repo.get_cart_items(sample_trip.id))
    assert titles == ["Cheaper Stay", "Spa"]


def spa_day_result():
    return ModificationResult(
        trip=ModifiedTrip(
            days=[
                DayPlan(
                    day_number=1,
                    recommendations=[
                        Recommendation(kind="hotel", title="Old", price=3000),
                        Recommendation(kind="activity", title="Spa", price=2500),
                    ],
                )
            ]
        ),
        changes=["Added a spa"],
    )


async def test_modify_trip_keeps_excluded_items_excluded(
    service, mock_gateway, sample_trip, repo
):
    (old,) = repo.create_cart_items(
        [{"tripId": sample_trip.id, "type": "hotel", "title": "Old", "dayNumber": 1}]
    )
    repo.update_cart_item(old.id, {"included": False})
    mock_gateway.execute_action.return_value = spa_day_result()

    await service.modify_trip(sample_trip.id, "add_activity", {})

    items = {i.title: i for i in repo.get_cart_items(sample_trip.id)}
    assert set(items) == {"Old", "Spa"}
    assert items["Old"].id != old.id
    assert not items["Old"].included
    assert items["Spa"].included


async def test_modify_trip_failed_cart_write_keeps_old_cart(
    service, mock_gateway, sample_trip, repo
):
    repo.create_cart_items(
        [{"tripId": sample_trip.id, "type": "hotel", "title": "Old"}]
    )
    mock_gateway.execute_action.return_value = spa_day_result()
    repo.create_cart_items = MagicMock(side_effect=RuntimeError("throttled"))

    with pytest.raises(RuntimeError):
        await service.modify_trip(sample_trip.id, "add_activity", {})

    assert [i.title for i in repo.get_cart_items(sample_trip.id)] == ["Old"]


async def test_modify_unknown_trip(service, mock_gateway):
    with pytest.raises(ResourceNotFoundError):
        await service.modify_trip("missing", "add_day")
    mock_gateway.execute_action.assert_not_called()


async def test_optimize_budget(service, mock_gateway, sample_trip):
    mock_gateway.optimize_budget.return_value = BudgetOptimization(total_cost=1)

    result = await service.optimize_budget(sample_trip.id)

    assert result.total_cost == 1
    assert mock_gateway.optimize_budget.call_args.args[0].id == sample_trip.id


async def test_recommendations_day_focus(service, mock_gateway, sample_trip):
    await service.recommendations(sample_trip.id, day_number=2)

    args = mock_gateway.smart_recommendations.call_args.args
    assert args[1] == 2


def test_build_profile(service, sample_trip):
    profile = service.build_profile("user-1")

    assert profile["tripCount"] == 1
    assert profile["destinations"] == ["Goa"]
    assert profile["favoriteThemes"] == ["Beach & Chill"]
    assert profile["averageBudget"] == 50000
    assert profile["trips"][0]["days"] == 3


def test_build_profile_no_trips(service):
    profile = service.build_profile("nobody")

    assert profile["tripCount"] == 0
    assert profile["averageBudget"] == 0


async def test_user_insights_merges_extra(service, mock_gateway, sample_trip):
    mock_gateway.user_insights.return_value = UserInsights(
        travel_personality=TravelPersonality(type="Beach Lover")
    )

    insights = await service.user_insights("user-1", {"homeCity": "Bangalore"})

    assert insights.travel_personality.type == "Beach Lover"
    profile = mock_gateway.user_insights.call_args.args[0]
    assert profile["tripCount"] == 1
    assert profile["homeCity"] == "Bangalore"
