"""
Base agent class for the trip assistant.

Every Gemini-backed agent inherits from ``BaseAgent``: it owns the genai
client, sends a single-turn prompt through the async API, and decodes the
reply into a pydantic model after stripping markdown code fences.
"""

from dataclasses import dataclass
from typing import TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, TypeAdapter

from trip_assistant.config import DEFAULT_MODEL, TripAssistantConfig
from trip_assistant.utils.error_handling import TripAssistantError, with_async_retry
from trip_assistant.utils.helpers import strip_code_fences
from trip_assistant.utils.logging import AgentLogger

M = TypeVar("M", bound=BaseModel)


class EmptyResponseError(TripAssistantError):
    """Gemini returned no text."""


@dataclass
class AgentConfig:
    """Configuration for an agent."""

    name: str
    instructions: str
    model: str = DEFAULT_MODEL
    temperature: float = 0.7
    max_tokens: int | None = None
    max_attempts: int = 1


class BaseAgent:
    """
    Base class for the Gemini-backed agents.

    Subclasses declare their defaults as class attributes; `from_settings`
    overlays the per-agent model settings from the service configuration.

    The genai client is created on first use, so a service started without
    GEMINI_API_KEY still boots; the calls that need Gemini fail instead.
    """

    agent_type: str = ""
    default_name: str = "Agent"
    default_instructions: str = ""
    default_temperature: float = 0.7

    def __init__(
        self, config: AgentConfig | None = None, client: genai.Client | None = None
    ):
        """
        Initialize a base agent.

        Args:
            config: Configuration for the agent (defaults from the class)
            client: Shared genai client (optional, created lazily)
        """
        self.config = config or AgentConfig(
            name=self.default_name,
            instructions=self.default_instructions,
            temperature=self.default_temperature,
        )
        self._client = client
        self.log = AgentLogger(self.config.name)

    @classmethod
    def from_settings(
        cls, settings: TripAssistantConfig, client: genai.Client | None = None
    ):
        """Build the agent with its model settings from the service config."""
        model = settings.get_agent_model(cls.agent_type)
        return cls(
            AgentConfig(
                name=cls.default_name,
                instructions=cls.default_instructions,
                model=model.name,
                temperature=model.temperature,
                max_tokens=model.max_tokens,
                max_attempts=settings.system.llm_max_attempts,
            ),
            client,
        )

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client()
        return self._client

    @property
    def name(self) -> str:
        """Get the name of the agent."""
        return self.config.name

    @property
    def instructions(self) -> str:
        """Get the instructions for the agent."""
        return self.config.instructions

    async def _generate(self, prompt: str, temperature: float | None = None) -> str:
        """
        Send a single-turn prompt and return the reply text.

        Args:
            prompt: Prompt text
            temperature: Override for the configured temperature

        Returns:
            Reply text

        Raises:
            EmptyResponseError: If Gemini returns no text
        """
        temperature = self.config.temperature if temperature is None else temperature
        self.log.log_llm_input(self.config.model, prompt, temperature)

        config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=self.config.max_tokens,
            system_instruction=self.instructions,
        )
        contents = [
            types.Content(role="user", parts=[types.Part.from_text(text=prompt)])
        ]

        async def call():
            return await self.client.aio.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=config,
            )

        response = await with_async_retry(call, max_attempts=self.config.max_attempts)
        text = response.text
        self.log.log_llm_output(self.config.model, text)
        if not text or not text.strip():
            raise EmptyResponseError(f"{self.name} received an empty response")
        return text

    async def _generate_json(self, prompt: str, model_cls: type[M]) -> M:
        """Generate and decode the fenced-or-bare JSON reply into ``model_cls``."""
        text = await self._generate(prompt)
        return model_cls.model_validate_json(strip_code_fences(text))

    async def _generate_list(self, prompt: str) -> list[str]:
        """Generate and decode a JSON array of strings."""
        text = await self._generate(prompt)
        return TypeAdapter(list[str]).validate_json(strip_code_fences(text))
