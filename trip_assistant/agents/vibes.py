"""
Vibe suggestion agent.

Well-known destinations are answered from a fixed catalogue; anything else
goes to Gemini. A failed or unusable reply falls back to a generic list so
the trip form always has something to offer.
"""

from trip_assistant.agents.base import BaseAgent
from trip_assistant.prompts.templates import VIBES

MAX_VIBES = 6

GENERIC_VIBES = [
    "Adventure",
    "Relaxation",
    "Culture",
    "Food & Dining",
    "Nature",
    "Photography",
]

_GOA = ["Beach & Chill", "Party & Nightlife", "Cultural Exploration", "Adventure Sports", "Food & Dining", "Nature & Wildlife"]
_BANGALORE = ["Tech & Innovation", "Garden City Exploration", "Nightlife & Entertainment", "Cultural Heritage", "Food & Cuisine", "Shopping & Markets"]
_DELHI = ["Historical Monuments", "Street Food Tour", "Shopping & Markets", "Cultural Heritage", "Nightlife & Entertainment", "Spiritual Sites"]

DESTINATION_VIBES: dict[str, list[str]] = {
    # India
    "goa": _GOA,
    "goa, india": _GOA,
    "bangalore": _BANGALORE,
    "bangalore, india": _BANGALORE,
    "bengaluru": _BANGALORE,
    "delhi": _DELHI,
    "new delhi": _DELHI,
    "mumbai": ["Bollywood Experience", "Street Food & Cuisine", "Shopping & Markets", "Nightlife & Entertainment", "Historical Sites", "Coastal Views"],
    "pune": ["Historical Forts", "Cultural Heritage", "Food & Cuisine", "Educational Tours", "Adventure Sports", "Nightlife"],
    "hyderabad": ["Royal Heritage", "Food & Biryani", "Historical Monuments", "Shopping & Pearls", "Cultural Experiences", "Tech & Innovation"],
    "chennai": ["Beach & Temples", "Cultural Heritage", "Food & Cuisine", "Shopping & Markets", "Historical Sites", "Classical Arts"],
    "kolkata": ["Cultural Heritage", "Street Food & Cuisine", "Historical Sites", "Art & Literature", "Shopping & Markets", "River Cruises"],
    "jaipur": ["Royal Heritage", "Palaces & Forts", "Shopping & Handicrafts", "Cultural Experiences", "Food & Cuisine", "Photography"],
    "udaipur": ["Romantic Getaway", "Palaces & Lakes", "Cultural Heritage", "Food & Cuisine", "Boat Rides", "Shopping"],
    "varanasi": ["Spiritual Journey", "Ganges Experience", "Cultural Heritage", "Yoga & Meditation", "Food & Cuisine", "Photography"],
    "rishikesh": ["Adventure Sports", "Yoga & Meditation", "Spiritual Experience", "Nature & Wildlife", "River Activities", "Mountain Views"],
    "varkala": ["Beach & Chill", "Cliff Views", "Ayurveda & Wellness", "Food & Cuisine", "Photography", "Relaxation"],
    # International
    "paris": ["Romantic Getaway", "Art & Culture", "Historic Sites", "Food & Wine", "Shopping", "Photography"],
    "london": ["Historic Sites", "Museums & Art", "Shopping", "Food & Pubs", "Theater & Entertainment", "Parks & Gardens"],
    "new york": ["City Exploration", "Entertainment & Shows", "Shopping", "Food & Dining", "Museums & Art", "Nightlife"],
    "tokyo": ["Modern & Traditional", "Food & Sushi", "Shopping", "Temples & Culture", "Technology", "Entertainment"],
    "dubai": ["Luxury Experience", "Modern Architecture", "Shopping", "Entertainment", "Desert Safari", "Food & Dining"],
    "singapore": ["Modern City", "Food & Culture", "Shopping", "Entertainment", "Gardens & Parks", "Family Friendly"],
    "bangkok": ["Temples & Culture", "Street Food", "Shopping", "Nightlife", "Massage & Wellness", "Markets"],
    "bali": ["Beach & Relaxation", "Temples & Culture", "Adventure Sports", "Food & Dining", "Yoga & Wellness", "Nature"],
}


def lookup_destination_vibes(destination: str) -> list[str] | None:
    """Exact match first, then either string containing the other."""
    key = destination.lower().strip()
    if not key:
        return None
    if key in DESTINATION_VIBES:
        return list(DESTINATION_VIBES[key])
    for name, vibes in DESTINATION_VIBES.items():
        if name in key or key in name:
            return list(vibes)
    return None


class VibesAgent(BaseAgent):
    """Suggests short travel-style labels for a destination."""

    agent_type = "vibes"
    default_name = "Vibes Agent"
    default_instructions = "You suggest short, catchy travel themes for destinations."
    default_temperature = 0.9

    async def suggest(self, destination: str) -> list[str]:
        """
        Suggest up to six vibes for ``destination``. Never raises.

        Args:
            destination: Free-text destination name

        Returns:
            Vibe labels
        """
        fixed = lookup_destination_vibes(destination)
        if fixed:
            self.log.info(f"Using fixed vibes for {destination}")
            return fixed

        try:
            vibes = await self._generate_list(VIBES.render(destination=destination))
            vibes = [v.strip() for v in vibes if v and v.strip()]
            if vibes:
                return vibes[:MAX_VIBES]
            self.log.warning(f"Gemini returned no vibes for {destination}")
        except Exception as e:
            self.log.error(f"Error generating vibes for {destination}: {e!s}")

        self.log.info(f"Using generic fallback vibes for {destination}")
        return list(GENERIC_VIBES)
