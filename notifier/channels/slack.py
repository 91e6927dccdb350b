"""
Slack channel formatter.

Known limitation: incoming webhooks cannot run server-side HTTP requests from
a button, so ``http`` actions are rendered as plain URL buttons, the same as
``view`` actions.
"""

import uuid
from typing import Any, Optional

from notifier.channels.base import (
    BaseFormatter,
    pick_color,
    progress_bar,
    progress_percent,
    status_icon,
)
from notifier.channels.format_value import format_value, truncate
from notifier.schemas.notification import NotificationAction, NotificationMessage

DEFAULT_COLOR = "#0099FF"  # Blue
SUCCESS_COLOR = "#2EB67D"  # Green
WARNING_COLOR = "#E1E44D"  # Yellow
ERROR_COLOR = "#E01E5A"  # Red
INFO_COLOR = "#4A154B"  # Purple

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

# Slack Block Kit limits
HEADER_LIMIT = 150
SECTION_LIMIT = 3000
ERROR_DETAIL_LIMIT = 2900
BUTTON_LABEL_LIMIT = 75
MAX_BUTTONS = 5


def _mrkdwn_section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _context(text: str) -> dict:
    return {"type": "context", "elements": [{"type": "mrkdwn", "text": text}]}


class SlackFormatter(BaseFormatter):
    """
    Header block plus one coloured attachment carrying the body.

    Top-level blocks hold the header, link, image and action buttons; the
    attachment holds the body and any template-specific blocks so they pick
    up the side colour.
    """

    provider_type = "slack"

    def format_message(self, message: NotificationMessage) -> dict:
        data = message.template_data
        rendered = self.apply_template(message, card=True)

        blocks: list[dict] = []
        attachment_blocks: list[dict] = []

        if rendered.title:
            blocks.append({
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": truncate(rendered.title, HEADER_LIMIT),
                    "emoji": True,
                },
            })

        body_text = rendered.body or "..."
        if data.get("pingRoleId"):
            body_text = f"<!subteam^{data['pingRoleId']}> {body_text}"
        attachment_blocks.append(_mrkdwn_section(truncate(body_text, SECTION_LIMIT)))

        if message.link:
            blocks.append(_mrkdwn_section(f"<{message.link}|Open Link>"))

        if message.image_url:
            blocks.append({
                "type": "image",
                "image_url": message.image_url,
                "alt_text": "Notification image",
            })

        if message.attachments:
            lines = [f"*Attachment {i}:* <{url}>" for i, url in enumerate(message.attachments, start=1)]
            attachment_blocks.append(_mrkdwn_section("\n".join(lines)))

        if message.template:
            attachment_blocks.extend(self._template_blocks(message.template, data))

        actions_block = self._actions_block(message.actions or self.config.default_actions)
        if actions_block:
            blocks.append(actions_block)

        payload: dict[str, Any] = {
            # Fallback text for notifications and older clients
            "text": rendered.title or rendered.body,
            "blocks": blocks,
            "attachments": [{
                "color": pick_color(message, TEMPLATE_COLORS, PRIORITY_COLORS, DEFAULT_COLOR),
                "blocks": attachment_blocks,
            }],
        }
        if self.config.username:
            payload["username"] = self.config.username
        if self.config.avatar_url:
            payload["icon_url"] = self.config.avatar_url
        return payload

    @staticmethod
    def _template_blocks(template: str, data: dict) -> list[dict]:
        blocks = []
        if template == "status":
            if data.get("status"):
                status = format_value(data["status"])
                blocks.append(_context(f"{status_icon(status)} *Status:* {status}"))

        elif template == "progress":
            percent = progress_percent(data)
            if percent is not None:
                blocks.append(_mrkdwn_section(f"*Progress:*\n{progress_bar(percent)}"))
            if data.get("eta"):
                blocks.append(_context(f"*ETA:* {format_value(data['eta'])}"))

        elif template == "problem":
            if data.get("error"):
                detail = truncate(format_value(data["error"]), ERROR_DETAIL_LIMIT)
                blocks.append(_mrkdwn_section(f"*Error Details:*\n```{detail}```"))
            if data.get("severity"):
                blocks.append(_context(f"*Severity:* {format_value(data['severity'])}"))

        elif template == "question":
            options = data.get("options")
            if isinstance(options, (list, tuple)) and options:
                numbered = "\n".join(f"{i}. {format_value(opt)}" for i, opt in enumerate(options, start=1))
                blocks.append(_mrkdwn_section(f"*Options:*\n{numbered}"))

        return blocks

    @staticmethod
    def _actions_block(actions: list[NotificationAction]) -> Optional[dict]:
        elements = [
            {
                "type": "button",
                "text": {
                    "type": "plain_text",
                    "text": truncate(action.label, BUTTON_LABEL_LIMIT),
                    "emoji": True,
                },
                "url": action.url,
                "action_id": f"{action.action}_{uuid.uuid4().hex[:8]}",
            }
            for action in actions[:MAX_BUTTONS]
        ]
        if not elements:
            return None
        return {"type": "actions", "elements": elements}
