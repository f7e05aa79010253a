"""
Prompt templates for the Gemini agents.
"""
