"""Tests for provider selection, URL detection and config validation."""

import pytest

from notifier.channels.base import GenericFormatter
from notifier.channels.detect import detect_channel_type
from notifier.channels.discord import DiscordFormatter
from notifier.channels.factory import ProviderType, create_formatter, resolve_provider
from notifier.channels.feishu import FeishuFormatter
from notifier.channels.ntfy import NtfyFormatter
from notifier.channels.slack import SlackFormatter
from notifier.channels.teams import TeamsFormatter
from notifier.channels.validate import suggest_provider_type, validate_webhook_config
from notifier.schemas.notification import WebhookConfig


class TestFactory:
    @pytest.mark.parametrize(
        "type_name,formatter",
        [
            ("discord", DiscordFormatter),
            ("slack", SlackFormatter),
            ("teams", TeamsFormatter),
            ("feishu", FeishuFormatter),
            ("ntfy", NtfyFormatter),
            ("generic", GenericFormatter),
            ("custom", GenericFormatter),
            ("carrier-pigeon", GenericFormatter),
            ("", GenericFormatter),
        ],
    )
    def test_create_formatter(self, type_name, formatter):
        config = WebhookConfig(url="https://example.com", type=type_name)
        assert type(create_formatter(config)) is formatter

    def test_resolve_provider_normalises(self):
        assert resolve_provider(" Discord ") is ProviderType.DISCORD
        assert resolve_provider("unknown") is ProviderType.GENERIC


class TestDetect:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://discord.com/api/webhooks/1/abc", "discord"),
            ("https://discordapp.com/api/webhooks/1/abc", "discord"),
            ("https://hooks.slack.com/services/T/B/X", "slack"),
            ("https://acme.webhook.office.com/webhookb2/x", "teams"),
            ("https://open.feishu.cn/open-apis/bot/v2/hook/x", "feishu"),
            ("https://ntfy.sh/alerts", "ntfy"),
            ("https://example.com/hook", "generic"),
        ],
    )
    def test_detect(self, url, expected):
        assert detect_channel_type(url) == expected


class TestValidate:
    def test_valid(self):
        assert validate_webhook_config(WebhookConfig(url="https://example.com/hook")) is None

    def test_missing_url(self):
        assert validate_webhook_config(WebhookConfig()) == "Missing required field: url"

    def test_bad_scheme(self):
        error = validate_webhook_config(WebhookConfig(url="ftp://example.com"))
        assert error == "url must use http or https protocol"

    def test_ntfy_priority_range(self):
        config = WebhookConfig(url="https://ntfy.sh/x", type="ntfy", default_priority=7)
        assert validate_webhook_config(config) == "Ntfy defaultPriority must be between 1 and 5"

    def test_suggestions(self):
        assert suggest_provider_type("discrod") == "discord"
        assert suggest_provider_type("MSTeams") == "teams"
        assert suggest_provider_type("discord") is None
        assert suggest_provider_type("zzz") is None


class TestHeaders:
    """Every provider declares a Content-Type."""

    @pytest.mark.parametrize("type_name", [p.value for p in ProviderType])
    def test_content_type_always_set(self, type_name):
        formatter = create_formatter(WebhookConfig(url="https://example.com", type=type_name))
        assert formatter.format_headers()["Content-Type"]
