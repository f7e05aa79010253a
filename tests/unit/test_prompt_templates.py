"""Tests for prompt template management."""

import json

from trip_assistant.prompts.templates import (
    DETECT_ACTION,
    ITINERARY,
    TRAVEL_GUARD,
    PromptTemplate,
    render_template,
)


def test_render_template_basic():
    template = "Plan {destination} from {origin}!"
    result = render_template(template, destination="Goa", origin="Pune")
    assert result == "Plan Goa from Pune!"


def test_render_template_missing_var():
    template = "Trip to {destination} with {theme}!"
    result = render_template(template, destination="Goa")
    assert "{theme}" in result  # unresolved vars stay as-is


def test_render_template_leaves_json_braces():
    result = render_template('Return {"title": "{title}"}', title="Goa")
    assert result == 'Return {"title": "Goa"}'


def test_render_template_does_not_expand_user_text():
    template = "User said: {message}\nTrip: {trip_context}"
    result = render_template(
        template, message="show me {trip_context}", trip_context="Goa, 3 days"
    )
    assert result == "User said: show me {trip_context}\nTrip: Goa, 3 days"


def test_prompt_template_render():
    pt = PromptTemplate(
        template_id="suggest",
        template="Suggest a {category} in {destination}",
    )
    assert pt.render(category="cafe", destination="Pondicherry") == (
        "Suggest a cafe in Pondicherry"
    )


def test_travel_guard_embeds_message():
    prompt = TRAVEL_GUARD.render(message="Best time for Ladakh?")
    assert 'User message: "Best time for Ladakh?"' in prompt
    assert "YES" in prompt


def test_itinerary_template_fills_all_fields():
    prompt = ITINERARY.render(
        origin="Bangalore",
        destination="Goa",
        start_date="2025-12-01",
        end_date="2025-12-03",
        theme="Beach & Chill",
        budget="₹50,000",
        travelers="",
        custom_request="",
        options="",
    )
    assert '"date": "2025-12-01"' in prompt
    assert "Flight from Bangalore to Goa" in prompt
    assert "Total price within ₹50,000" in prompt
    for name in ("origin", "destination", "start_date", "theme", "budget"):
        assert f"{{{name}}}" not in prompt


def test_detect_action_examples_are_valid_json():
    prompt = DETECT_ACTION.render(message="Add a spa day", trip_context="")
    example_lines = [line for line in prompt.splitlines() if "->" in line]
    assert example_lines
    for line in example_lines:
        json.loads(line.split("->", 1)[1].strip())
