"""
Utility modules for the Trip Assistant service.
"""

from trip_assistant.config import LogLevel
from trip_assistant.utils.error_handling import (
    AgentExecutionError,
    APIError,
    ConflictError,
    GenerationFailedError,
    ResourceNotFoundError,
    TripAssistantError,
    ValidationError,
    safe_execute,
    with_async_retry,
)
from trip_assistant.utils.helpers import (
    format_price,
    generate_id,
    generate_session_id,
    safe_serialize,
    strip_code_fences,
    to_prompt_json,
)
from trip_assistant.utils.logging import AgentLogger, get_logger, setup_logging

__all__ = [
    "APIError",
    "AgentExecutionError",
    "AgentLogger",
    "ConflictError",
    "GenerationFailedError",
    "LogLevel",
    "ResourceNotFoundError",
    "TripAssistantError",
    "ValidationError",
    "format_price",
    "generate_id",
    "generate_session_id",
    "get_logger",
    "safe_execute",
    "safe_serialize",
    "setup_logging",
    "strip_code_fences",
    "to_prompt_json",
    "with_async_retry",
]
