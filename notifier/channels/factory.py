"""Select the formatter for a webhook configuration."""

from enum import Enum

from notifier.channels.base import BaseFormatter, GenericFormatter
from notifier.channels.discord import DiscordFormatter
from notifier.channels.feishu import FeishuFormatter
from notifier.channels.ntfy import NtfyFormatter
from notifier.channels.slack import SlackFormatter
from notifier.channels.teams import TeamsFormatter
from notifier.schemas.notification import WebhookConfig


class ProviderType(str, Enum):
    FEISHU = "feishu"
    DISCORD = "discord"
    SLACK = "slack"
    TEAMS = "teams"
    NTFY = "ntfy"
    GENERIC = "generic"
    CUSTOM = "custom"


_FORMATTERS: dict[ProviderType, type[BaseFormatter]] = {
    ProviderType.FEISHU: FeishuFormatter,
    ProviderType.DISCORD: DiscordFormatter,
    ProviderType.SLACK: SlackFormatter,
    ProviderType.TEAMS: TeamsFormatter,
    ProviderType.NTFY: NtfyFormatter,
    ProviderType.GENERIC: GenericFormatter,
    ProviderType.CUSTOM: GenericFormatter,
}


def resolve_provider(type_name: str) -> ProviderType:
    """Map a configured type to a provider; anything unknown is generic."""
    try:
        return ProviderType((type_name or "").strip().lower())
    except ValueError:
        return ProviderType.GENERIC


def create_formatter(config: WebhookConfig) -> BaseFormatter:
    return _FORMATTERS[resolve_provider(config.type)](config)
