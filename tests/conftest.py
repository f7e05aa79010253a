"""
Pytest configuration for the Trip Assistant tests.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from trip_assistant.agents.gateway import AIGateway
from trip_assistant.config import APIConfig, SystemConfig, TripAssistantConfig
from trip_assistant.data.models import DayPlan, Recommendation, TripFields
from trip_assistant.data.plan_models import GeneratedPlan
from trip_assistant.data.repository import InMemoryRepository
from trip_assistant.utils import LogLevel, setup_logging


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    setup_logging(LogLevel.DEBUG)


def gemini_response(text):
    """A generate_content response whose .text is ``text`` (dicts become JSON)."""
    response = MagicMock()
    response.text = text if text is None or isinstance(text, str) else json.dumps(text)
    return response


@pytest.fixture
def mock_gemini_client():
    """Mock Gemini client for testing."""
    mock_client = MagicMock()
    mock_client.aio = MagicMock()
    mock_client.aio.models = MagicMock()
    mock_client.aio.models.generate_content = AsyncMock(
        return_value=gemini_response("Test response")
    )
    return mock_client


@pytest.fixture
def queue_replies(mock_gemini_client):
    """Make successive generate_content calls return the given replies in order.

    Exception instances in the sequence are raised instead.
    """

    def queue(*texts):
        mock_gemini_client.aio.models.generate_content.side_effect = [
            t if isinstance(t, BaseException) else gemini_response(t) for t in texts
        ]
        return mock_gemini_client.aio.models.generate_content

    return queue


@pytest.fixture
def test_config():
    """Test application configuration."""
    return TripAssistantConfig(
        api=APIConfig(
            gemini_api_key="test-key",
            elevenlabs_api_key="test-eleven",
            sonic_api_key="test-sonic",
            dynamodb_table_name="trip-assistant-test",
        ),
        system=SystemConfig(log_level=LogLevel.DEBUG, environment="test"),
    )


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def mock_gateway():
    """AIGateway double; async methods are AsyncMocks."""
    return MagicMock(spec=AIGateway)


def make_plan(
    days=3,
    recs_per_day=3,
    title="Goa Beach Escape",
    kinds=("flight", "hotel", "activity"),
):
    return GeneratedPlan(
        title=title,
        ai_summary="Sun, sand and seafood.",
        days=[
            DayPlan(
                day_number=d,
                date=f"2025-12-{d:02d}",
                summary=f"Day {d} in Goa",
                recommendations=[
                    Recommendation(
                        kind=kinds[r % len(kinds)],
                        title=f"Item {d}.{r}",
                        details="Details",
                        provider="Provider",
                        price=1000 * (r + 1),
                    )
                    for r in range(recs_per_day)
                ],
            )
            for d in range(1, days + 1)
        ],
    )


@pytest.fixture
def plan_factory():
    return make_plan


@pytest.fixture
def sample_plan():
    return make_plan()


@pytest.fixture
def sample_trip(repo, sample_plan):
    return repo.create_trip(
        TripFields(
            title=sample_plan.title,
            origin="Bangalore",
            destination="Goa",
            start_date="2025-12-01",
            end_date="2025-12-03",
            theme="Beach & Chill",
            budget=50000,
            days=sample_plan.days,
        ),
        "user-1",
    )
