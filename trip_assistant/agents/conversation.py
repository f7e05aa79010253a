"""
Conversation agent for the trip assistant.

Answers free-form travel questions, classifies chat messages into trip
modification actions, and applies those actions by asking Gemini to
rewrite the trip.
"""

from typing import Any

from trip_assistant.agents.base import BaseAgent, EmptyResponseError
from trip_assistant.data.models import Trip
from trip_assistant.data.plan_models import ActionDetection, ModificationResult
from trip_assistant.prompts.templates import (
    CHAT,
    DETECT_ACTION,
    EXECUTE_ACTION,
    TRAVEL_GUARD,
    TRAVEL_ONLY_REPLY,
)
from trip_assistant.utils.error_handling import GenerationFailedError
from trip_assistant.utils.helpers import to_prompt_json

CHAT_FALLBACK_REPLY = "I'm sorry, I'm having trouble right now. Please try again."
CHAT_EMPTY_REPLY = "I'm sorry, I couldn't process that request."


def trip_context(trip: Trip | None) -> dict[str, Any] | None:
    """The trip as the prompts show it: wire keys, no storage metadata."""
    if trip is None:
        return None
    return trip.model_dump(
        mode="json", by_alias=True, exclude={"id", "user_id", "created_at"}
    )


class ConversationAgent(BaseAgent):
    """Travel chat, intent classification and trip rewriting."""

    agent_type = "conversation"
    default_name = "Conversation Agent"
    default_instructions = (
        "You are a helpful AI travel assistant. Provide personalized, "
        "friendly and concise travel advice."
    )
    default_temperature = 0.8

    async def is_travel_related(self, message: str) -> bool:
        """
        Ask Gemini whether ``message`` is about travel.

        Only an explicit "NO" rejects the message. If the guard call itself
        fails the message is let through.
        """
        try:
            answer = await self._generate(
                TRAVEL_GUARD.render(message=message), temperature=0.0
            )
        except Exception as e:
            self.log.warning(f"Travel guard failed, proceeding anyway: {e!s}")
            return True
        return answer.strip().strip(".").upper() != "NO"

    async def chat(self, message: str, trip: Trip | None = None) -> str:
        """
        Generate a free-form reply. Never raises.

        Args:
            message: User's message
            trip: Trip the conversation is about (optional)

        Returns:
            Reply text
        """
        try:
            if not await self.is_travel_related(message):
                self.log.info("Chat message rejected - not travel-related")
                return TRAVEL_ONLY_REPLY

            context = trip_context(trip)
            context_section = (
                f"\n\nContext: The user has a trip planned: {to_prompt_json(context, indent=None)}"
                if context
                else ""
            )
            return await self._generate(
                CHAT.render(message=message, trip_context=context_section)
            )
        except EmptyResponseError:
            return CHAT_EMPTY_REPLY
        except Exception as e:
            self.log.error(f"Error in chat: {e!s}")
            return CHAT_FALLBACK_REPLY

    async def detect_action(
        self, message: str, trip: Trip | None = None
    ) -> ActionDetection:
        """
        Classify ``message`` as a trip modification or plain conversation.

        Off-topic messages come back as no-action with the canned
        travel-only reply. Failures come back as no-action. Never raises.
        """
        if not await self.is_travel_related(message):
            self.log.info("Action detection rejected - not travel-related")
            return ActionDetection.no_action(
                response=TRAVEL_ONLY_REPLY, reasoning="Query is not travel-related"
            )

        context = trip_context(trip)
        context_section = (
            f"\nCurrent trip context: {to_prompt_json(context)}\n" if context else ""
        )
        try:
            detection = await self._generate_json(
                DETECT_ACTION.render(message=message, trip_context=context_section),
                ActionDetection,
            )
        except Exception as e:
            self.log.error(f"Error detecting action: {e!s}")
            return ActionDetection.no_action()

        if detection.has_action and not detection.action:
            self.log.warning("Detection flagged an action without naming it")
            return ActionDetection.no_action(
                response=detection.response, reasoning=detection.reasoning
            )
        return detection

    async def execute_action(
        self, action: str, params: dict[str, Any], trip: Trip
    ) -> ModificationResult:
        """
        Apply ``action`` to ``trip`` and return the rewritten plan.

        Raises:
            GenerationFailedError: If Gemini does not return a usable trip
        """
        prompt = EXECUTE_ACTION.render(
            action=action,
            params=to_prompt_json(params, indent=None),
            trip=to_prompt_json(trip_context(trip)),
        )
        try:
            result = await self._generate_json(prompt, ModificationResult)
        except Exception as e:
            self.log.error(f"Error executing {action}: {e!s}")
            raise GenerationFailedError("Failed to modify trip", self.name, e) from e

        if not result.changes:
            result.changes = [f"{action} applied"]
        if result.suggestion is None:
            result.suggestion = "Trip updated successfully!"
        return result
