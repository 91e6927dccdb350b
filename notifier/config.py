"""
Configuration: environment (pydantic-settings) merged over an optional JSON file.

File lookup order: $NOTIFIER_CONFIG_FILE, ./webhook-config.json,
~/.config/mcp-notifier/webhook-config.json. Environment values win.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from notifier.channels.detect import detect_channel_type
from notifier.channels.validate import suggest_provider_type, validate_webhook_config
from notifier.exceptions import ConfigurationError
from notifier.schemas.notification import ImgurConfig, NotifierConfig, WebhookConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "webhook-config.json"


class Settings(BaseSettings):
    webhook_url: str = ""
    webhook_type: str = ""
    webhook_token: str = ""

    # Legacy: a Feishu URL alone configures a Feishu webhook
    feishu_webhook_url: str = ""

    notifier_config_file: str = ""

    # Imgur (image re-hosting); anonymous uploads when only the API URL is set
    imgur_client_id: str = ""
    imgur_api_url: str = ""

    # Ask/answer web form
    ask_enabled: Optional[bool] = None
    ask_server_url: str = ""
    ask_host: str = ""
    ask_port: Optional[int] = None

    # Outbound webhook calls wait forever unless this is set (seconds)
    request_timeout: Optional[float] = None
    block_private_networks: Optional[bool] = None

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()


def _config_paths(settings: Settings) -> list[Path]:
    paths = []
    if settings.notifier_config_file:
        paths.append(Path(settings.notifier_config_file).expanduser())
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    paths.append(Path.home() / ".config" / "mcp-notifier" / CONFIG_FILE_NAME)
    return paths


def _read_config_file(settings: Settings) -> NotifierConfig:
    for path in _config_paths(settings):
        if not path.is_file():
            continue
        logger.info("Loading configuration from %s", path)
        try:
            return NotifierConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, ValidationError):
            logger.error("Error loading configuration file %s", path, exc_info=True)
            break
    return NotifierConfig()


def load_config(settings: Optional[Settings] = None) -> NotifierConfig:
    """Build the effective configuration from file and environment."""
    if settings is None:
        settings = Settings()
    config = _read_config_file(settings)

    webhook = config.webhook
    if settings.webhook_url:
        webhook.url = settings.webhook_url
    if settings.webhook_type:
        webhook.type = settings.webhook_type
    if settings.webhook_token:
        webhook.token = settings.webhook_token
    if settings.feishu_webhook_url:
        webhook = WebhookConfig(type="feishu", url=settings.feishu_webhook_url)
    if not webhook.type:
        webhook.type = detect_channel_type(webhook.url) if webhook.url else "generic"
    else:
        suggestion = suggest_provider_type(webhook.type)
        if suggestion:
            logger.warning("Unknown webhook type %r, did you mean %r?", webhook.type, suggestion)
    config.webhook = webhook

    if settings.imgur_client_id or settings.imgur_api_url:
        imgur = config.imgur or ImgurConfig()
        if settings.imgur_client_id:
            imgur.client_id = settings.imgur_client_id
        if settings.imgur_api_url:
            imgur.api_url = settings.imgur_api_url
        config.imgur = imgur

    ask = config.ask
    if settings.ask_enabled is not None:
        ask.enabled = settings.ask_enabled
    if settings.ask_server_url:
        ask.server_url = settings.ask_server_url
    if settings.ask_host:
        ask.host = settings.ask_host
    if settings.ask_port is not None:
        ask.port = settings.ask_port

    if settings.request_timeout is not None:
        config.request_timeout = settings.request_timeout
    if settings.block_private_networks is not None:
        config.block_private_networks = settings.block_private_networks

    return config


def check_config(config: NotifierConfig) -> None:
    """
    Refuse configurations that can never deliver a notification.

    Raises:
        ConfigurationError: no webhook URL, or one that is not usable.
    """
    if not config.webhook.url:
        raise ConfigurationError(
            "No webhook URL configured. Please set WEBHOOK_URL environment variable or create a config file."
        )
    error = validate_webhook_config(config.webhook)
    if error:
        raise ConfigurationError(f"Invalid webhook configuration: {error}")
