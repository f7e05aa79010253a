"""
Small helpers shared by the agents, services and repositories.
"""

import json
import re
import uuid
from datetime import date, datetime, time
from typing import Any

_FENCE_START = re.compile(r"^\s*```(?:json|JSON)?\s*")
_FENCE_END = re.compile(r"\s*```\s*$")


def generate_id(prefix: str = "") -> str:
    """Random UUID4 string, as ``<prefix>-<uuid>`` when a prefix is given."""
    value = str(uuid.uuid4())
    return f"{prefix}-{value}" if prefix else value


def generate_session_id() -> str:
    """Id for a chat modification session: ``chat-<timestamp>-<8 hex>``."""
    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    return f"chat-{stamp}-{uuid.uuid4().hex[:8]}"


def strip_code_fences(text: str) -> str:
    """
    Remove a leading ```json (or bare ```) marker and a trailing ``` marker.

    Args:
        text: Raw model output

    Returns:
        The text between the fences, stripped of surrounding whitespace
    """
    text = _FENCE_START.sub("", text or "")
    text = _FENCE_END.sub("", text)
    return text.strip()


def safe_serialize(obj: Any) -> Any:
    """
    Convert ``obj`` into plain JSON types.

    Pydantic models are dumped by alias, dates become ISO strings, tuples
    become lists and anything unknown falls back to its ``__dict__`` or
    ``str()``.
    """
    if obj is None or isinstance(obj, str | int | float | bool):
        return obj
    if isinstance(obj, datetime | date | time):
        return obj.isoformat()
    if isinstance(obj, list | tuple):
        return [safe_serialize(value) for value in obj]
    if isinstance(obj, dict):
        return {key: safe_serialize(value) for key, value in obj.items()}
    if hasattr(obj, "model_dump"):
        return safe_serialize(obj.model_dump(mode="json", by_alias=True))
    if hasattr(obj, "__dict__"):
        return safe_serialize(vars(obj))
    return str(obj)


def to_prompt_json(obj: Any, indent: int | None = 2) -> str:
    """Render an object as JSON for embedding in a prompt."""
    return json.dumps(safe_serialize(obj), indent=indent, ensure_ascii=False)


def format_price(amount: float) -> str:
    """Whole rupees with digit grouping, e.g. "₹50,000"."""
    return f"₹{int(amount):,}"
