"""Shared fixtures: webhook configs and a recording mock transport."""

import json

import httpx
import pytest

from notifier.schemas.notification import WebhookConfig

# Environment variables read by notifier.config.Settings
NOTIFIER_ENV_VARS = (
    "WEBHOOK_URL",
    "WEBHOOK_TYPE",
    "WEBHOOK_TOKEN",
    "FEISHU_WEBHOOK_URL",
    "NOTIFIER_CONFIG_FILE",
    "IMGUR_CLIENT_ID",
    "IMGUR_API_URL",
    "ASK_ENABLED",
    "ASK_SERVER_URL",
    "ASK_HOST",
    "ASK_PORT",
    "REQUEST_TIMEOUT",
    "BLOCK_PRIVATE_NETWORKS",
    "LOG_LEVEL",
)


class RecordingHandler:
    """MockTransport handler that stores every request and answers with a fixed response."""

    def __init__(self, status_code: int = 200, text: str = "ok"):
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return RecordingHandler()


@pytest.fixture
def discord_config():
    return WebhookConfig(url="https://discord.com/api/webhooks/123/abc", type="discord")


@pytest.fixture
def slack_config():
    return WebhookConfig(url="https://hooks.slack.com/services/T/B/X", type="slack")


@pytest.fixture
def ntfy_config():
    return WebhookConfig(url="https://ntfy.sh/alerts", type="ntfy")


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No notifier env vars, and cwd/home pointing at an empty temp dir."""
    for name in NOTIFIER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path
