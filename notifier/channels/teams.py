"""Microsoft Teams channel formatter (legacy connector MessageCard)."""

from notifier.channels.base import BaseFormatter
from notifier.schemas.notification import NotificationMessage


class TeamsFormatter(BaseFormatter):
    provider_type = "teams"

    def format_message(self, message: NotificationMessage) -> dict:
        message = self.apply_template(message)
        title = message.title or "Notification"

        section = {
            "activityTitle": title,
            "activitySubtitle": self.config.name or "",
            "text": message.body,
        }
        if message.image_url:
            section["activityImage"] = message.image_url

        card = {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "themeColor": "0076D7",
            "summary": title,
            "sections": [section],
        }
        if message.link:
            card["potentialAction"] = [
                {
                    "@type": "OpenUri",
                    "name": "Open Link",
                    "targets": [{"os": "default", "uri": message.link}],
                }
            ]
        return card
