"""
Exception types and retry helpers for the Trip Assistant service.

Every exception carries the HTTP status the API layer answers with, so
routes raise domain errors and never build error responses themselves.
"""

import traceback
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

T = TypeVar("T")


class TripAssistantError(Exception):
    """
    Root of the service's exceptions.

    ``message`` is the text shown to API clients. ``str(error)`` also
    includes the wrapped cause, for the logs.
    """

    status_code: int = 500

    def __init__(self, message: str, original_error: Exception | None = None):
        self.message = message
        self.original_error = original_error
        detail = message
        if original_error is not None:
            detail += f" - caused by {type(original_error).__name__}: {original_error}"
        super().__init__(detail)


class APIError(TripAssistantError):
    """An upstream HTTP service (speech providers) failed."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service_name: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        self.service_name = service_name
        self.upstream_status = status_code
        where = f"{service_name} HTTP {status_code}" if status_code else service_name
        super().__init__(f"{where}: {message}", original_error)


class AgentExecutionError(TripAssistantError):
    """A Gemini agent call or its reply decoding failed."""

    def __init__(
        self, message: str, agent_name: str, original_error: Exception | None = None
    ):
        self.agent_name = agent_name
        super().__init__(f"[{agent_name}] {message}", original_error)


class GenerationFailedError(AgentExecutionError):
    """Gemini produced no usable result for an operation with no fallback."""

    def __init__(
        self, message: str, agent_name: str, original_error: Exception | None = None
    ):
        super().__init__(message, agent_name, original_error)
        # Shown to the user as is
        self.message = message


class ValidationError(TripAssistantError):
    """Bad input from the client or a malformed stored record."""

    status_code = 400


class ResourceNotFoundError(TripAssistantError):
    status_code = 404


class ConflictError(TripAssistantError):
    """The request does not fit the current state (taken username, stale confirm)."""

    status_code = 409


async def with_async_retry(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 1,
    min_wait_seconds: float = 1.0,
    max_wait_seconds: float = 10.0,
    retry_exceptions: tuple = (Exception,),
) -> T:
    """
    Await ``func`` with exponential backoff between failed attempts.

    With ``max_attempts=1`` the call is made exactly once and its exception
    propagates unchanged. Exceptions outside ``retry_exceptions`` are never
    retried.

    Args:
        func: Zero-argument coroutine factory
        max_attempts: Attempts before giving up
        min_wait_seconds: Lower bound on the backoff
        max_wait_seconds: Upper bound on the backoff
        retry_exceptions: Exception types worth another attempt
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception_type(retry_exceptions),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait_seconds, max=max_wait_seconds),
        reraise=True,
    )
    try:
        async for attempt in retrying:
            with attempt:
                return await func()
    except RetryError as e:
        raise TripAssistantError(
            f"Call failed after {max_attempts} attempts", original_error=e
        ) from e
    raise TripAssistantError("Retry loop exited without a result")


def safe_execute(
    func: Callable[..., T], *args: Any, default: T | None = None, **kwargs: Any
) -> T | None:
    """Call ``func``; on any exception log it and return ``default`` instead."""
    try:
        return func(*args, **kwargs)
    except Exception as e:
        name = getattr(func, "__qualname__", repr(func))
        logger.error(f"{name} failed: {e!s}")
        logger.debug(traceback.format_exc())
        return default
