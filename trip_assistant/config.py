"""
Configuration for the Trip Assistant service.

Everything is read from the environment (a ``.env`` file is loaded first):
Gemini and text-to-speech keys, the storage backing, and per-agent model
settings. Missing keys never stop the service from starting; the operations
that need them fail when called.
"""

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, field_validator

load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"

# Agent key -> (environment prefix, default temperature)
AGENT_DEFAULTS: dict[str, tuple[str, float]] = {
    "vibes": ("VIBES", 0.9),
    "itinerary": ("ITINERARY", 0.7),
    "conversation": ("CONVERSATION", 0.8),
    "budget": ("BUDGET", 0.4),
    "recommendation": ("RECOMMENDATION", 0.7),
}


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackend(str, Enum):
    """Where trips, users and cart items live."""

    MEMORY = "memory"
    DYNAMODB = "dynamodb"


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


class AgentModelConfig(BaseModel):
    """Gemini model settings for one agent."""

    name: str = Field(..., description="Gemini model id")
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    max_tokens: int | None = Field(default=None, description="Output token cap")

    @field_validator("max_tokens")
    @classmethod
    def zero_means_unlimited(cls, value: int | None) -> int | None:
        return value or None

    @classmethod
    def from_env(cls, prefix: str, temperature: float = 0.7) -> "AgentModelConfig":
        """Read ``<PREFIX>_MODEL``, ``<PREFIX>_TEMPERATURE`` and ``<PREFIX>_MAX_TOKENS``."""
        return cls(
            name=os.getenv(f"{prefix}_MODEL", DEFAULT_MODEL),
            temperature=float(os.getenv(f"{prefix}_TEMPERATURE", str(temperature))),
            max_tokens=_env_int(f"{prefix}_MAX_TOKENS", 0),
        )


class MissingKeysError(Exception):
    """A required API key is not set."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required API keys: {', '.join(missing)}")


class APIConfig(BaseModel):
    """Credentials and endpoints for Gemini, speech providers and DynamoDB."""

    gemini_api_key: str = ""
    elevenlabs_api_key: str | None = None
    sonic_api_key: str | None = None
    aws_region: str = "ap-south-1"
    dynamodb_table_name: str = "trip-assistant"
    dynamodb_endpoint: str | None = Field(
        default=None, description="Local DynamoDB URL, e.g. http://localhost:8000"
    )

    @classmethod
    def from_env(cls) -> "APIConfig":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY"),
            sonic_api_key=os.getenv("SONIC_API_KEY"),
            aws_region=os.getenv("AWS_REGION", "ap-south-1"),
            dynamodb_table_name=os.getenv("DYNAMODB_TABLE_NAME", "trip-assistant"),
            dynamodb_endpoint=os.getenv("DYNAMODB_ENDPOINT"),
        )

    def check_keys(self, raise_error: bool = False) -> bool:
        """
        Report missing keys.

        Only the Gemini key is required; a missing speech key just disables
        that provider and is logged as a warning.

        Raises:
            MissingKeysError: If ``raise_error`` and the Gemini key is missing
        """
        speech_missing = [
            name
            for name, value in (
                ("ELEVENLABS_API_KEY", self.elevenlabs_api_key),
                ("SONIC_API_KEY", self.sonic_api_key),
            )
            if not value
        ]
        if speech_missing:
            logger.warning(
                f"Speech keys not set ({', '.join(speech_missing)}); "
                "those providers will be unavailable"
            )

        if self.gemini_api_key:
            return True
        logger.error("GEMINI_API_KEY is not set")
        if raise_error:
            raise MissingKeysError(["GEMINI_API_KEY"])
        return False


class SystemConfig(BaseModel):
    """Service behaviour settings."""

    log_level: LogLevel = LogLevel.INFO
    environment: str = "development"
    storage_backend: StorageBackend = StorageBackend.MEMORY
    vibe_cache_ttl: int = Field(default=3600, description="Seconds a vibe list is cached")
    llm_max_attempts: int = Field(default=1, description="1 disables Gemini retries")
    default_user_id: str = Field(
        default="default-user", description="Owner of trips generated anonymously"
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "SystemConfig":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            log_level=LogLevel(os.getenv("LOG_LEVEL", "INFO").upper()),
            environment=os.getenv("ENVIRONMENT", "development"),
            storage_backend=StorageBackend(
                os.getenv("STORAGE_BACKEND", "memory").lower()
            ),
            vibe_cache_ttl=_env_int("VIBE_CACHE_TTL", 3600),
            llm_max_attempts=_env_int("LLM_MAX_ATTEMPTS", 1),
            default_user_id=os.getenv("DEFAULT_USER_ID", "default-user"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


class ConfigurationError(Exception):
    """The configuration cannot be used."""


@dataclass
class TripAssistantConfig:
    """API, system and per-agent settings for one service instance."""

    api: APIConfig = field(default_factory=APIConfig.from_env)
    system: SystemConfig = field(default_factory=SystemConfig.from_env)
    agent_models: dict[str, AgentModelConfig] = field(default_factory=dict)

    def __post_init__(self):
        if not self.agent_models:
            self.agent_models = {
                key: AgentModelConfig.from_env(prefix, temperature)
                for key, (prefix, temperature) in AGENT_DEFAULTS.items()
            }

    def reload(self) -> None:
        """Re-read every section from the current environment, in place."""
        self.api = APIConfig.from_env()
        self.system = SystemConfig.from_env()
        self.agent_models = {}
        self.__post_init__()

    def validate(self, raise_error: bool = False) -> bool:
        """
        Check keys and numeric settings.

        Args:
            raise_error: Raise ConfigurationError instead of returning False

        Returns:
            True if the configuration is usable
        """
        problems = []
        try:
            self.api.check_keys(raise_error=True)
        except MissingKeysError as e:
            problems.append(str(e))
        if self.system.vibe_cache_ttl < 0:
            problems.append("VIBE_CACHE_TTL cannot be negative")
        if self.system.llm_max_attempts < 1:
            problems.append("LLM_MAX_ATTEMPTS must be at least 1")

        if not problems:
            return True
        message = "; ".join(problems)
        logger.error(f"Configuration problems: {message}")
        if raise_error:
            raise ConfigurationError(message)
        return False

    def get_agent_model(self, agent_type: str) -> AgentModelConfig:
        """Settings for ``agent_type``, or the default model if it is unknown."""
        return self.agent_models.get(agent_type, AgentModelConfig(name=DEFAULT_MODEL))


# Shared instance; initialize_config reloads it in place
config = TripAssistantConfig()


def initialize_config(
    custom_config_path: str | None = None,
    validate: bool = True,
    raise_on_error: bool = False,
) -> TripAssistantConfig:
    """
    Load an optional extra .env file and validate the shared configuration.

    Args:
        custom_config_path: .env file whose values override the environment
        validate: Whether to validate after loading
        raise_on_error: Raise ConfigurationError when validation fails

    Raises:
        FileNotFoundError: If ``custom_config_path`` does not exist
    """
    if custom_config_path:
        if not os.path.exists(custom_config_path):
            message = f"Custom configuration file not found: {custom_config_path}"
            logger.error(message)
            raise FileNotFoundError(message)
        logger.info(f"Loading configuration from {custom_config_path}")
        load_dotenv(custom_config_path, override=True)
        config.reload()

    if validate and not config.validate(raise_error=raise_on_error):
        logger.warning(
            "AI endpoints will return errors until GEMINI_API_KEY is set. "
            "Optional: ELEVENLABS_API_KEY, SONIC_API_KEY, STORAGE_BACKEND, "
            "DYNAMODB_TABLE_NAME, DYNAMODB_ENDPOINT"
        )
    return config
