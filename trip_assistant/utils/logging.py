"""
Logging setup for the Trip Assistant service.

All modules log through loguru. ``get_logger`` binds the module name and
``AgentLogger`` binds the agent name, so Gemini traffic can be filtered per
agent in the log stream.
"""

import os
import sys

from loguru import logger

from trip_assistant.config import LogLevel

PROMPT_PREVIEW_CHARS = 200

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)


def get_logger(name: str):
    """Logger carrying ``name`` (normally the module's ``__name__``)."""
    return logger.bind(name=name)


def setup_logging(
    log_level: LogLevel | str = LogLevel.INFO, log_file: str | None = None
):
    """
    Replace loguru's default sink with the service's sinks.

    Args:
        log_level: Minimum level to emit
        log_file: Optional file to also write to, rotated at 10 MB
    """
    if isinstance(log_level, str):
        log_level = LogLevel(log_level.upper())

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=log_level.value, colorize=True)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=log_level.value,
            rotation="10 MB",
            compression="zip",
        )

    logger.info(f"Logging initialized with level {log_level.value}")


def _preview(text: str | None) -> str:
    if not text:
        return "<empty>"
    text = " ".join(text.split())
    if len(text) <= PROMPT_PREVIEW_CHARS:
        return text
    return text[:PROMPT_PREVIEW_CHARS] + "..."


class AgentLogger:
    """Logger bound to one Gemini agent."""

    def __init__(self, agent_name: str):
        self.agent_name = agent_name
        self.logger = logger.bind(agent_name=agent_name)

    def debug(self, message: str):
        self.logger.debug(f"[{self.agent_name}] {message}")

    def info(self, message: str):
        self.logger.info(f"[{self.agent_name}] {message}")

    def warning(self, message: str):
        self.logger.warning(f"[{self.agent_name}] {message}")

    def error(self, message: str):
        self.logger.error(f"[{self.agent_name}] {message}")

    def log_llm_input(self, model: str, prompt: str, temperature: float):
        """Record a prompt about to be sent (length and a short preview)."""
        self.logger.bind(model=model).debug(
            f"[{self.agent_name}] LLM request: {model} (temperature {temperature}, "
            f"{len(prompt)} chars): {_preview(prompt)}"
        )

    def log_llm_output(self, model: str, text: str | None):
        """Record the reply text Gemini returned."""
        self.logger.bind(model=model).debug(
            f"[{self.agent_name}] LLM response: {model} "
            f"({len(text or '')} chars): {_preview(text)}"
        )
