"""
Ntfy channel formatter.

ntfy takes the message text as the request body and everything else (title,
priority, click URL, attachments, actions) as HTTP headers.

Three request shapes are produced:

- a plain ``POST`` of the body with metadata headers;
- a ``POST`` of ``templateData`` as JSON with ``X-Template: yes`` when a
  built-in template is requested, leaving rendering to the ntfy server;
- a ``PUT`` of a local image file (up to 15 MB) with the metadata moved to
  query parameters, which replaces the POST entirely.

See https://docs.ntfy.sh/publish/
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote

from notifier.channels import ChannelPayload
from notifier.channels.base import BaseFormatter
from notifier.schemas.notification import NotificationAction, NotificationMessage
from notifier.templates import get_template, has_template, render

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 3
MAX_UPLOAD_BYTES = 15 * 1024 * 1024

_URL_SAFE = ":/?#[]@!$&'()*+,;=%~"
_NEEDS_QUOTES = (",", ";", '"', "'")


def clamp_priority(value: Any) -> int:
    """Coerce any input to an ntfy priority in 1..5 (3 when unusable)."""
    try:
        priority = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    return max(1, min(5, priority))


def ascii_header(value: str) -> str:
    """Strip non-ASCII characters, which plain HTTP header values cannot carry."""
    return value.encode("ascii", "ignore").decode("ascii").strip()


def ascii_url(url: str) -> str:
    """Percent-encode non-ASCII characters of a URL; reserved characters stay as they are."""
    return quote(url, safe=_URL_SAFE)


def _quote(value: str) -> str:
    if not any(ch in value for ch in _NEEDS_QUOTES):
        return value
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    # Both quote characters: ntfy has no escape sequence, so double quotes become single
    return '"' + value.replace('"', "'") + '"'


def format_action(action: NotificationAction) -> str:
    """
    Render one action in ntfy's short header syntax.

    Text is reduced to ASCII and URLs are percent-encoded, so the result is
    always a valid header value.
    """
    label = ascii_header(action.label) or action.action
    parts = [action.action, _quote(label), _quote(ascii_url(action.url))]
    if action.action == "http" and action.method:
        parts.append(f"method={action.method}")
    if action.clear:
        parts.append("clear=true")
    if action.action == "http":
        for key, value in (action.headers or {}).items():
            parts.append(f"header:{ascii_header(key)}={_quote(ascii_header(value))}")
        if action.body:
            parts.append(f"body={_quote(ascii_header(action.body))}")
    return ",".join(parts)


def _is_remote(url: str) -> bool:
    return url.startswith(("http://", "https://"))


class NtfyFormatter(BaseFormatter):
    provider_type = "ntfy"
    handles_local_files = True

    def format_message(self, message: NotificationMessage) -> str:
        overrides = self.config.templates
        if overrides and overrides.message:
            return render(overrides.message, message.template_data)
        return message.body

    def format_headers(self) -> dict[str, str]:
        return {"Content-Type": "text/markdown" if self.config.markdown else "text/plain"}

    def prepare_request(self, message: NotificationMessage) -> ChannelPayload:
        local_file = self._local_file(message)
        if local_file is not None:
            return self._upload_request(message, local_file)

        if has_template(message.template):
            template = get_template(message.template)
            headers = {"Content-Type": "application/json", "X-Template": "yes"}
            headers.update(self._metadata_headers(message, title=None))
            return ChannelPayload(
                method="POST",
                url=self.config.url,
                headers=headers,
                body=json.dumps(message.template_data),
                params={"title": template.title, "message": template.message.strip()},
            )

        headers = self.format_headers()
        headers.update(self._metadata_headers(message, title=self._title(message)))
        return ChannelPayload(
            method="POST",
            url=self.config.url,
            headers=headers,
            body=self.format_message(message),
        )

    def priority(self, message: NotificationMessage) -> int:
        if message.priority is not None:
            return clamp_priority(message.priority)
        if self.config.default_priority is not None:
            return clamp_priority(self.config.default_priority)
        return DEFAULT_PRIORITY

    def _title(self, message: NotificationMessage) -> Optional[str]:
        overrides = self.config.templates
        if overrides and overrides.title:
            return render(overrides.title, message.template_data)
        return message.title

    def _attach(self, message: NotificationMessage) -> Optional[str]:
        if message.attachments:
            return ", ".join(ascii_url(url) for url in message.attachments)
        if message.image_url and _is_remote(message.image_url):
            return ascii_url(message.image_url)
        return None

    def _actions(self, message: NotificationMessage) -> Optional[str]:
        actions = message.actions or self.config.default_actions
        if not actions:
            return None
        return "; ".join(format_action(action) for action in actions)

    def _auth_headers(self) -> dict[str, str]:
        token = ascii_header(self.config.token or "")
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _metadata_headers(self, message: NotificationMessage, title: Optional[str]) -> dict[str, str]:
        headers = {"Priority": str(self.priority(message))}
        headers.update(self._auth_headers())
        if title:
            safe_title = ascii_header(title)
            if safe_title:
                headers["Title"] = safe_title
        if message.link:
            headers["Click"] = ascii_url(message.link)
        attach = self._attach(message)
        if attach:
            headers["Attach"] = attach
        actions = self._actions(message)
        if actions:
            headers["Actions"] = actions
        return headers

    def _local_file(self, message: NotificationMessage) -> Optional[Path]:
        """The local image to upload, if the message points at one that fits."""
        candidate = message.image or message.image_url
        if not candidate or _is_remote(candidate):
            return None
        path = Path(candidate).expanduser()
        if not path.is_file():
            return None
        size = path.stat().st_size
        if size > MAX_UPLOAD_BYTES:
            logger.warning(
                "Skipping attachment %s: %d bytes exceeds the %d byte limit",
                path, size, MAX_UPLOAD_BYTES,
            )
            return None
        return path

    def _upload_request(self, message: NotificationMessage, path: Path) -> ChannelPayload:
        headers = {
            "Filename": ascii_header(path.name) or "attachment",
            "Content-Type": "application/octet-stream",
        }
        headers.update(self._auth_headers())

        params = {
            "message": self.format_message(message),
            "priority": str(self.priority(message)),
        }
        title = self._title(message)
        if title:
            params["title"] = title
        if message.link:
            params["click"] = message.link
        actions = self._actions(message)
        if actions:
            params["actions"] = actions

        return ChannelPayload(
            method="PUT",
            url=self.config.url,
            headers=headers,
            body=path.read_bytes(),
            params=params,
        )
