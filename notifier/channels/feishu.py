"""
Feishu (Lark) channel formatter.

Known limitation: Feishu only renders images that were uploaded beforehand
and referenced by ``image_key``. The image URL is passed in that field as a
best-effort placeholder; most bots will ignore it.
"""

from notifier.channels.base import BaseFormatter
from notifier.schemas.notification import NotificationMessage


class FeishuFormatter(BaseFormatter):
    provider_type = "feishu"

    def format_message(self, message: NotificationMessage) -> dict:
        message = self.apply_template(message)

        # Plain text when there is nothing to lay out
        if not message.title and not message.image_url and not message.link:
            return {"msg_type": "text", "content": {"text": message.body}}

        paragraph = [{"tag": "text", "text": message.body}]
        if message.link:
            paragraph.append({"tag": "a", "text": "Open Link", "href": message.link})

        content = {
            "post": {
                "zh_cn": {
                    "title": message.title or "Notification",
                    "content": [paragraph],
                }
            }
        }
        if message.image_url:
            content["image_key"] = message.image_url

        return {"msg_type": "post", "content": content}
