"""Common interface and shared helpers for provider formatters."""

import json
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from notifier.channels import ChannelPayload
from notifier.exceptions import TemplateNotFound
from notifier.schemas.notification import NotificationMessage, WebhookConfig
from notifier.templates import apply_card_template, apply_template

logger = logging.getLogger(__name__)

PROGRESS_SLOTS = 10


class BaseFormatter(ABC):
    """
    Turns a provider-agnostic NotificationMessage into a provider request.

    Subclasses implement format_message() and override format_headers() or
    prepare_request() only where their provider differs from a JSON POST.
    """

    provider_type = "generic"

    # Whether prepare_request() delivers a local image file itself
    handles_local_files = False

    def __init__(self, config: WebhookConfig):
        self.config = config

    @abstractmethod
    def format_message(self, message: NotificationMessage) -> Any:
        ...

    def format_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def prepare_request(self, message: NotificationMessage) -> ChannelPayload:
        return ChannelPayload(
            method="POST",
            url=self.config.url,
            headers=self.format_headers(),
            body=json.dumps(self.format_message(message)),
        )

    def apply_template(self, message: NotificationMessage, card: bool = False) -> NotificationMessage:
        """
        Return ``message`` with title and body rendered from its built-in template.

        Messages without a template come back unchanged. An unknown template
        name is logged and the message is formatted as-is.
        """
        if not message.template:
            return message
        render = apply_card_template if card else apply_template
        try:
            applied = render(message.template, message.template_data)
        except TemplateNotFound:
            logger.warning("Template not found: %s, using default formatting", message.template)
            return message
        return message.model_copy(update={"title": applied.title, "body": applied.message})


class GenericFormatter(BaseFormatter):
    """Plain JSON for receivers that are not a known chat service."""

    def format_message(self, message: NotificationMessage) -> dict:
        message = self.apply_template(message)
        payload = {
            "title": message.title or "Notification",
            "text": message.body,
            "url": message.link,
            "imageUrl": message.image_url,
        }
        return {k: v for k, v in payload.items() if v is not None}


# ---------------------------------------------------------------------------
# Helpers shared by the chat-card formatters
# ---------------------------------------------------------------------------


def pick_color(
    message: NotificationMessage,
    template_colors: Mapping[str, Any],
    priority_colors: Mapping[int, Any],
    default: Any,
) -> Any:
    """Resolve a card colour: template first, then priority, then default."""
    if message.template and message.template in template_colors:
        return template_colors[message.template]
    if message.priority is not None and message.priority in priority_colors:
        return priority_colors[message.priority]
    return default


def status_icon(status: Any) -> str:
    status = str(status).lower()
    if "success" in status or "complete" in status or "ok" in status:
        return "✅"
    if "warn" in status or "pending" in status:
        return "⚠️"
    if "error" in status or "fail" in status:
        return "❌"
    if "info" in status or "running" in status:
        return "ℹ️"
    return "🔔"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def progress_percent(data: Mapping[str, Any]) -> Optional[int]:
    """
    Percentage for the progress template, or None when it cannot be computed.

    An explicit ``percentage`` wins over ``current``/``total``.
    """
    try:
        if data.get("percentage") is not None:
            percent = _round_half_up(float(data["percentage"]))
        elif data.get("current") is not None and data.get("total") is not None:
            total = float(data["total"])
            if total == 0:
                return None
            percent = _round_half_up(float(data["current"]) / total * 100)
        else:
            return None
    except (TypeError, ValueError):
        return None
    if percent < 0 or percent > 100:
        return None
    return percent


def progress_bar(percent: int) -> str:
    filled = min(PROGRESS_SLOTS, max(0, percent // 10))
    return f"{'█' * filled}{'░' * (PROGRESS_SLOTS - filled)} {percent}%"
