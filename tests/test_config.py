"""Tests for configuration loading: file lookup, env overrides, auto-detection."""

import json

import pytest

from notifier.config import Settings, check_config, load_config
from notifier.exceptions import ConfigurationError
from notifier.schemas.notification import NotifierConfig, WebhookConfig


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


class TestEnvironment:
    def test_defaults(self, clean_env):
        config = load_config(_settings())
        assert config.webhook.url == ""
        assert config.webhook.type == "generic"
        assert config.imgur is None
        assert config.ask.enabled is False
        assert config.ask.port == 4591
        assert config.request_timeout is None

    def test_detects_type_from_url(self, clean_env):
        config = load_config(_settings(webhook_url="https://discord.com/api/webhooks/1/abc"))
        assert config.webhook.type == "discord"

    def test_explicit_type_kept(self, clean_env):
        config = load_config(_settings(webhook_url="https://example.com/hook", webhook_type="ntfy"))
        assert config.webhook.type == "ntfy"

    def test_reads_process_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("WEBHOOK_URL", "https://ntfy.sh/alerts")
        monkeypatch.setenv("WEBHOOK_TOKEN", "tk")
        monkeypatch.setenv("ASK_ENABLED", "true")
        monkeypatch.setenv("ASK_PORT", "6000")
        monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
        config = load_config(_settings())
        assert config.webhook.url == "https://ntfy.sh/alerts"
        assert config.webhook.type == "ntfy"
        assert config.webhook.token == "tk"
        assert config.ask.enabled is True
        assert config.ask.port == 6000
        assert config.request_timeout == 2.5

    def test_legacy_feishu_url(self, clean_env):
        config = load_config(_settings(feishu_webhook_url="https://open.feishu.cn/open-apis/bot/v2/hook/x"))
        assert config.webhook.type == "feishu"
        assert config.webhook.url == "https://open.feishu.cn/open-apis/bot/v2/hook/x"

    def test_imgur(self, clean_env):
        config = load_config(_settings(imgur_client_id="abc"))
        assert config.imgur.client_id == "abc"

    def test_unknown_type_warns(self, clean_env, caplog):
        load_config(_settings(webhook_url="https://example.com", webhook_type="discrod"))
        assert "did you mean 'discord'" in caplog.text


class TestConfigFile:
    def test_file_in_working_directory(self, clean_env):
        _write(clean_env / "webhook-config.json", {
            "webhook": {"url": "https://ntfy.sh/alerts", "type": "ntfy", "defaultPriority": 4},
            "ask": {"enabled": True, "serverUrl": "https://box.example.com", "port": 5000},
            "requestTimeout": 10,
        })
        config = load_config(_settings())
        assert config.webhook.default_priority == 4
        assert config.ask.enabled is True
        assert config.ask.server_url == "https://box.example.com"
        assert config.ask.port == 5000
        assert config.request_timeout == 10

    def test_env_overrides_file(self, clean_env):
        _write(clean_env / "webhook-config.json", {
            "webhook": {"url": "https://ntfy.sh/alerts", "type": "ntfy", "name": "box"},
        })
        config = load_config(_settings(webhook_url="https://ntfy.sh/other"))
        assert config.webhook.url == "https://ntfy.sh/other"
        assert config.webhook.type == "ntfy"
        assert config.webhook.name == "box"

    def test_home_config(self, clean_env):
        _write(clean_env / "home" / ".config" / "mcp-notifier" / "webhook-config.json", {
            "webhook": {"url": "https://hooks.slack.com/services/T/B/X"},
        })
        config = load_config(_settings())
        assert config.webhook.type == "slack"

    def test_explicit_file_first(self, clean_env):
        _write(clean_env / "webhook-config.json", {"webhook": {"url": "https://cwd.example.com"}})
        explicit = _write(clean_env / "conf" / "notifier.json", {"webhook": {"url": "https://explicit.example.com"}})
        config = load_config(_settings(notifier_config_file=str(explicit)))
        assert config.webhook.url == "https://explicit.example.com"

    def test_invalid_file_ignored(self, clean_env, caplog):
        (clean_env / "webhook-config.json").write_text("{not json")
        config = load_config(_settings(webhook_url="https://example.com/hook"))
        assert config.webhook.url == "https://example.com/hook"
        assert "Error loading configuration file" in caplog.text


class TestCheckConfig:
    def test_missing_url(self):
        with pytest.raises(ConfigurationError, match="No webhook URL configured"):
            check_config(NotifierConfig())

    def test_bad_scheme(self):
        with pytest.raises(ConfigurationError, match="http or https"):
            check_config(NotifierConfig(webhook=WebhookConfig(url="ftp://example.com")))

    def test_valid(self):
        check_config(NotifierConfig(webhook=WebhookConfig(url="https://example.com/hook")))
