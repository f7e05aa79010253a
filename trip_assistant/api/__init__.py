"""
HTTP API for the Trip Assistant service.
"""

from trip_assistant.api.app import create_app

__all__ = ["create_app"]
