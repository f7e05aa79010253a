"""
AI trip planning service powered by Google Gemini.

Users submit travel parameters and receive a day-by-day itinerary whose
flights, hotels and activities populate a cart. The itinerary can then be
modified conversationally, optimized for budget, and extended with
personalized recommendations.
"""

__version__ = "0.1.0"
