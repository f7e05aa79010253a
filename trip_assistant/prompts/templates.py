"""
Prompt templates for the Gemini-backed agents.

Templates use ``{name}`` placeholders filled by ``render_template``. Literal
JSON braces in the templates are left alone because only the named
variables are substituted.
"""

import re

from pydantic import BaseModel

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def render_template(template: str, **kwargs: str) -> str:
    """
    Fill ``{name}`` placeholders in one pass, leaving unknown ones as-is.

    Substituted values are never scanned again, so user text containing
    ``{trip_context}`` stays literal.
    """
    return _PLACEHOLDER.sub(
        lambda match: str(kwargs[match[1]]) if match[1] in kwargs else match[0],
        template,
    )


class PromptTemplate(BaseModel):
    """A named prompt with its template text."""

    template_id: str
    template: str
    description: str | None = None

    def render(self, **kwargs: str) -> str:
        """Render this template with the given variables."""
        return render_template(self.template, **kwargs)


TRAVEL_ONLY_REPLY = (
    "I'm a Travel Assistant, and I can only help you with travel-related "
    "planning and information. Please ask me about trip planning, "
    "destinations, itineraries, or any travel-related questions!"
)

TRAVEL_GUARD = PromptTemplate(
    template_id="travel_guard",
    description="YES/NO classifier for travel-related messages",
    template="""You are a travel query validator. Determine if the following user message is related to travel planning, trip modification, destination information, itinerary planning, or travel assistance.

User message: "{message}"

Respond with ONLY "YES" if the message is travel-related (e.g., questions about destinations, trip planning, itinerary changes, travel recommendations, booking modifications, travel dates, accommodations, activities, restaurants, transportation, travel budgets, travel tips, or any trip-related inquiries).

Respond with "NO" if it's completely unrelated to travel (e.g., general knowledge questions, or non-travel topics like coding, mathematics, etc.).

Response:""",
)

VIBES = PromptTemplate(
    template_id="vibes",
    template=(
        "Generate 6 unique travel vibes/themes for {destination}. Each vibe "
        "should be 2-4 words, catchy, and capture different travel "
        'experiences. Examples: "Beach & Chill", "Adventure Sports", '
        '"Cultural Heritage". Return only a JSON array of strings, no '
        "explanation."
    ),
)

ITINERARY = PromptTemplate(
    template_id="itinerary",
    template="""Create a {destination} trip from {origin}, {start_date} to {end_date}. Theme: {theme}. Budget: {budget}.{travelers}{custom_request}{options}

Return ONLY valid JSON:
{
  "title": "Trip title (60 chars max)",
  "ai_summary": "2-3 sentence overview",
  "days": [
    {
      "day_number": 1,
      "date": "{start_date}",
      "theme": "Day theme",
      "summary": "Day overview",
      "recommendations": [
        { "type": "flight", "title": "Flight from {origin} to {destination}", "details": "Airline and timing", "provider": "IndiGo/Air India/SpiceJet", "price": 3500, "included": true },
        { "type": "hotel", "title": "Hotel name", "details": "Description", "provider": "MakeMyTrip/Booking.com", "price": 2500, "included": true },
        { "type": "activity", "title": "Activity name", "details": "Description", "provider": "Local operator", "price": 800, "included": true }
      ]
    }
  ]
}

Rules:
- 3-6 recommendations per day (flights only on Day 1 and last day)
- Hotels each day with realistic pricing
- Activities match theme: {theme}
- Total price within {budget}
- Prices are whole rupees
- All recommendations: type, title, details, provider, price, included=true""",
)

CHAT = PromptTemplate(
    template_id="chat",
    template="""You are a helpful AI travel assistant. The user is asking: "{message}"{trip_context}

Provide a helpful, concise response. If the user is asking to modify their trip, provide specific suggestions.""",
)

DETECT_ACTION = PromptTemplate(
    template_id="detect_action",
    template="""You are an AI assistant that detects user intent for trip modifications.

User message: "{message}"
{trip_context}
Analyze if the user wants to modify their trip. Detect actions like:
- modify_budget: Change the total budget
- add_activity: Add a new activity to a day
- remove_activity: Remove an activity
- change_hotel: Change hotel recommendation
- add_day: Add another day to the trip
- remove_day: Remove a day from the trip
- change_theme: Change the trip theme/vibe
- optimize_budget: Ask for budget optimization suggestions

Return ONLY a valid JSON object with this structure:
{
  "hasAction": true/false,
  "action": "action_type" or null,
  "params": { ... parameters needed for the action ... },
  "reasoning": "Brief explanation of what user wants",
  "needsConfirmation": true/false,
  "confirmationMessage": "Message to show user before applying",
  "response": "Reply to show the user when there is no action" or null
}

Examples:
User: "Make it cheaper" -> {"hasAction": true, "action": "modify_budget", "params": {"budgetChange": -500}, "reasoning": "User wants to reduce budget", "needsConfirmation": true, "confirmationMessage": "Reduce budget by ₹500?"}
User: "Add a spa day" -> {"hasAction": true, "action": "add_activity", "params": {"dayNumber": 1, "activityType": "spa"}, "reasoning": "User wants spa activity", "needsConfirmation": true, "confirmationMessage": "Add a spa activity to Day 1?"}
User: "What should I pack?" -> {"hasAction": false, "action": null, "params": {}, "reasoning": "User asking for information only", "needsConfirmation": false, "confirmationMessage": ""}""",
)

EXECUTE_ACTION = PromptTemplate(
    template_id="execute_action",
    template="""You are an AI travel agent modifying an existing trip.

Action: {action}
Parameters: {params}
Current Trip: {trip}

Modify the trip according to the action and return the updated trip in the same JSON structure as the original trip.
Make sure to:
- Keep the same structure and keys
- Update only what's necessary
- Recalculate prices if budget changed
- Maintain realistic recommendations

Return ONLY a valid JSON object:
{
  "trip": { ...the full modified trip... },
  "changes": ["Short description of each change"],
  "suggestion": "One follow-up suggestion for the traveller" or null
}""",
)

BUDGET = PromptTemplate(
    template_id="budget",
    template="""Analyze this trip's budget and provide optimization suggestions:

{trip}

Return ONLY a valid JSON object with:
{
  "breakdown": { "flights": number, "hotels": number, "activities": number },
  "totalCost": number,
  "optimizations": [
    {
      "title": "Short swap title",
      "description": "How this saves money",
      "currentItem": "Current option",
      "suggestedItem": "Cheaper alternative",
      "savings": number
    }
  ],
  "alternatives": {
    "budget": { "totalCost": number, "description": "What changes" },
    "standard": { "totalCost": number, "description": "What changes" },
    "luxury": { "totalCost": number, "description": "What changes" }
  },
  "hiddenGems": [
    { "title": "Name", "description": "Why it is worth it", "price": number, "category": "activity/food/stay" }
  ],
  "insights": ["Free-text budget insight"]
}

All amounts are whole rupees.""",
)

RECOMMENDATIONS = PromptTemplate(
    template_id="recommendations",
    template="""Generate smart recommendations for a trip{day_focus}:

Trip Context: {trip}

Based on the trip theme, current activities, and typical traveler preferences, suggest:
- Additional activities that complement existing ones
- Restaurant recommendations
- Best times to visit places
- Local tips and insights

Return ONLY a valid JSON object with this structure:
{
  "recommendations": [
    {
      "type": "activity" | "restaurant" | "hotel" | "experience",
      "title": "Recommendation name",
      "description": "Why this fits the trip",
      "price": number,
      "timing": "morning/afternoon/evening/night",
      "reasoning": "Why this is suggested",
      "dayNumber": number (if applicable)
    }
  ],
  "sequences": [
    {
      "title": "Perfect day sequence",
      "activities": ["Activity 1", "Activity 2", "Activity 3"],
      "reasoning": "Why this sequence works well"
    }
  ],
  "localInsights": [
    {
      "type": "weather" | "event" | "tip",
      "title": "Insight title",
      "description": "Detailed insight",
      "relevance": "Why this matters for the trip"
    }
  ],
  "peopleAlsoAdded": [
    {
      "title": "Activity name",
      "percentage": number (0-100),
      "reason": "Why similar travelers add this"
    }
  ]
}""",
)

USER_INSIGHTS = PromptTemplate(
    template_id="user_insights",
    template="""You are an AI travel personality analyzer. Based on this user's travel history and preferences, generate personalized insights:

User Profile: {profile}

Analyze and return ONLY a valid JSON object with:
{
  "travelPersonality": {
    "type": "Adventure Seeker" | "Luxury Explorer" | "Budget Traveler" | "Cultural Enthusiast" | "Beach Lover",
    "description": "Detailed personality description",
    "traits": ["trait1", "trait2", "trait3"]
  },
  "insights": [
    { "title": "Insight title", "description": "Detailed insight", "icon": "emoji" }
  ],
  "recommendations": [
    {
      "destination": "Recommended destination",
      "reason": "Why this matches the user's profile",
      "bestTime": "Season/month to visit",
      "estimatedBudget": number
    }
  ],
  "achievements": [
    { "title": "Achievement name", "description": "What user accomplished", "icon": "emoji", "unlocked": true/false }
  ],
  "nextSteps": [
    { "suggestion": "Personalized suggestion", "reason": "Why this fits the user" }
  ]
}""",
)

PLANNING_INTENT = PromptTemplate(
    template_id="planning_intent",
    template="""You are an AI assistant that detects if a user wants to plan a new trip itinerary. Analyze the user's message and conversation history.

User message: "{message}"{history}

Determine:
1. Does the user want to plan a NEW trip itinerary? (e.g., "I want to plan a trip", "Help me create an itinerary", "Plan a vacation")
2. If yes, extract any trip details mentioned: origin, destination, start date, end date, vibe/theme (match common vibes like "Beach & Chill", "Adventure Sports", "Cultural Heritage", "Food & Dining", "Party & Nightlife"), budget in INR, and custom requirements.

Return ONLY a valid JSON object:
{
  "wantsToPlan": true/false,
  "extractedDetails": {
    "from": "origin city" or null,
    "to": "destination city" or null,
    "startDate": "YYYY-MM-DD" or null,
    "endDate": "YYYY-MM-DD" or null,
    "vibe": "vibe name" or null,
    "budget": number (in INR) or null,
    "customRequest": "custom requirements text" or null
  },
  "missingFields": ["from", "to", "startDate", "endDate", "vibe", "budget"],
  "message": "Response asking for missing information or confirming details"
}

If the user doesn't want to plan, return:
{"wantsToPlan": false, "extractedDetails": {}, "missingFields": [], "message": ""}""",
)

EXTRACT_DETAILS = PromptTemplate(
    template_id="extract_details",
    template="""Extract trip planning details from the user's message. Focus only on new information mentioned in this message.

User message: "{message}"{existing}{vibes}

Extract or update:
- from: Origin city/location
- to: Destination city/location
- startDate: Start date in YYYY-MM-DD format (if relative like "next week", calculate actual date from today, {today})
- endDate: End date in YYYY-MM-DD format
- vibe: Match to one of the available vibes if provided, or suggest a vibe name
- budget: Budget amount in INR
- customRequest: Any additional custom requirements

Return ONLY a valid JSON object:
{
  "from": "city name" or null,
  "to": "city name" or null,
  "startDate": "YYYY-MM-DD" or null,
  "endDate": "YYYY-MM-DD" or null,
  "vibe": "vibe name" or null,
  "budget": number or null,
  "customRequest": "text" or null,
  "updated": true/false
}""",
)
