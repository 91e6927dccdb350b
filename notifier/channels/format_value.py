"""
Human-readable rendering of template values.

Template data arrives from tool calls as arbitrary JSON: option lists, nested
objects such as ``{"name": "api", "id": 3}``, booleans. Each is reduced to the
short text a person would expect in a chat message.
"""

import json
from typing import Any, Mapping

# Looked up in this order when a dict stands in for a single named thing
DISPLAY_KEYS = ("full_name", "name", "login", "title", "label", "email", "html_url", "url", "id")

LIST_ITEM_LIMIT = 80


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters."""
    return text if len(text) <= limit else text[:limit]


def _ellipsize(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _display_name(value: Mapping[str, Any]) -> Any:
    for key in DISPLAY_KEYS:
        candidate = value.get(key)
        if candidate is not None and not isinstance(candidate, (dict, list)):
            return candidate
    return None


def format_value(val: Any, max_len: int = 300) -> str:
    """
    Format one template value as text.

    None renders as nothing and booleans as ``true``/``false``. Sequences are
    joined with ", ". A dict renders as its display name when it has one of
    DISPLAY_KEYS, otherwise as compact JSON. Joined and JSON output longer
    than ``max_len`` is cut and ends in "...".
    """
    if val is None:
        return ""
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, (list, tuple)):
        return _ellipsize(", ".join(format_value(item, LIST_ITEM_LIMIT) for item in val), max_len)
    if isinstance(val, dict):
        name = _display_name(val)
        if name is not None:
            return format_value(name, max_len)
        try:
            return _ellipsize(json.dumps(val, default=str), max_len)
        except (TypeError, ValueError):
            return "[complex value]"
    return str(val)
