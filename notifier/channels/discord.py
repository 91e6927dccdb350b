"""Discord channel formatter."""

import datetime
from typing import Any

from notifier.channels.base import (
    BaseFormatter,
    pick_color,
    progress_bar,
    progress_percent,
    status_icon,
)
from notifier.channels.format_value import format_value, truncate
from notifier.schemas.notification import NotificationAction, NotificationMessage

DEFAULT_COLOR = 0x0099FF  # Blue
SUCCESS_COLOR = 0x57F287  # Green
WARNING_COLOR = 0xFEE75C  # Yellow
ERROR_COLOR = 0xED4245  # Red
INFO_COLOR = 0x5865F2  # Blurple

TEMPLATE_COLORS = {
    "status": INFO_COLOR,
    "progress": SUCCESS_COLOR,
    "question": WARNING_COLOR,
    "problem": ERROR_COLOR,
}

PRIORITY_COLORS = {
    5: ERROR_COLOR,
    4: WARNING_COLOR,
    3: INFO_COLOR,
    2: DEFAULT_COLOR,
    1: SUCCESS_COLOR,
}

# Discord embed limits
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096
FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
MAX_FIELDS = 25
ERROR_DETAIL_LIMIT = 1000


def _field(name: str, value: Any, inline: bool = False) -> dict:
    return {
        "name": truncate(name, FIELD_NAME_LIMIT) or "\u200b",
        "value": truncate(format_value(value), FIELD_VALUE_LIMIT) or "\u200b",
        "inline": inline,
    }


def _link_label(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1] or url


class DiscordFormatter(BaseFormatter):
    """
    Builds a single embed per message.

    Built-in templates add fields on top of the rendered text: a status line
    with an emoji, a progress bar, error details, or the list of options.
    """

    provider_type = "discord"

    def format_message(self, message: NotificationMessage) -> dict:
        data = message.template_data
        rendered = self.apply_template(message, card=True)
        title = rendered.title or "Notification"
        fields: list[dict] = []

        if message.template == "status":
            if data.get("status"):
                status = format_value(data["status"])
                fields.insert(0, _field("Status", f"{status_icon(status)} {status}", inline=True))

        elif message.template == "progress":
            percent = progress_percent(data)
            if percent is not None:
                fields.append(_field("Progress", progress_bar(percent)))
            if data.get("eta"):
                fields.append(_field("ETA", data["eta"], inline=True))

        elif message.template == "problem":
            title = f"⚠️ {title}"
            detail = format_value(data.get("error")) or message.body
            fields.append(_field("Error Details", f"```\n{truncate(detail, ERROR_DETAIL_LIMIT)}\n```"))
            if data.get("severity"):
                fields.append(_field("Severity", data["severity"], inline=True))

        elif message.template == "question":
            title = f"❓ {title}"
            options = data.get("options")
            if isinstance(options, (list, tuple)):
                for i, option in enumerate(options, start=1):
                    fields.append(_field(f"Option {i}", option, inline=True))
            elif options:
                fields.append(_field("Options", options))

        for i, url in enumerate(message.attachments, start=1):
            fields.append(_field(f"Attachment {i}", f"[{_link_label(url)}]({url})", inline=True))

        for action in message.actions or self.config.default_actions:
            fields.append(self._action_field(action))

        embed: dict[str, Any] = {
            "title": truncate(title, TITLE_LIMIT),
            "description": truncate(rendered.body, DESCRIPTION_LIMIT),
            "color": pick_color(message, TEMPLATE_COLORS, PRIORITY_COLORS, DEFAULT_COLOR),
            "footer": {"text": self.config.name or "Notifier"},
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        if message.link:
            embed["url"] = message.link
        if message.image_url:
            embed["image"] = {"url": message.image_url}
        if fields:
            embed["fields"] = fields[:MAX_FIELDS]

        payload: dict[str, Any] = {"embeds": [embed]}
        if data.get("pingRoleId"):
            role_id = data["pingRoleId"]
            payload["content"] = f"<@&{role_id}>"
            payload["allowed_mentions"] = {"roles": [str(role_id)]}
        if self.config.username:
            payload["username"] = self.config.username
        if self.config.avatar_url:
            payload["avatar_url"] = self.config.avatar_url
        return payload

    @staticmethod
    def _action_field(action: NotificationAction) -> dict:
        text = "Open Link" if action.action == "view" else "Trigger Action"
        return _field(action.label, f"[{text}]({action.url})", inline=True)
