"""Base types for provider formatters."""

from dataclasses import dataclass, field
from typing import Union


@dataclass
class ChannelPayload:
    """Represents the HTTP request a formatter wants sent."""
    method: str
    url: str
    headers: dict[str, str]
    body: Union[str, bytes]  # JSON string, plain text, or raw file bytes
    params: dict[str, str] = field(default_factory=dict)
