"""Config validation for the webhook destination."""

from typing import Optional
from urllib.parse import urlparse

from notifier.channels.factory import ProviderType, resolve_provider
from notifier.schemas.notification import WebhookConfig

# Common typos -> correct type
_TYPE_SUGGESTIONS: dict[str, str] = {
    "discrod": "discord",
    "dicord": "discord",
    "disocrd": "discord",
    "slak": "slack",
    "sclack": "slack",
    "team": "teams",
    "ms-teams": "teams",
    "msteams": "teams",
    "microsoft-teams": "teams",
    "lark": "feishu",
    "feishu-bot": "feishu",
    "nfty": "ntfy",
    "webhook": "generic",
    "json": "generic",
}


def suggest_provider_type(input_type: str) -> Optional[str]:
    """Return a suggestion if the input looks like a typo of a valid type."""
    if input_type in {p.value for p in ProviderType}:
        return None
    return _TYPE_SUGGESTIONS.get(input_type.lower())


def validate_webhook_config(config: WebhookConfig) -> Optional[str]:
    """
    Validate a webhook configuration.
    Returns None if valid, or an error message string if invalid.
    """
    err = _validate_url(config.url, "url")
    if err:
        return err
    if resolve_provider(config.type) is ProviderType.NTFY:
        return _validate_ntfy(config)
    return None


# --- Internal validators ---


def _validate_url(value, field_name: str) -> Optional[str]:
    if not isinstance(value, str) or not value:
        return f"Missing required field: {field_name}"
    try:
        parsed = urlparse(value)
    except ValueError:
        return f"{field_name} is not a valid URL"
    if parsed.scheme not in ("http", "https"):
        return f"{field_name} must use http or https protocol"
    if not parsed.netloc:
        return f"{field_name} is not a valid URL"
    return None


def _validate_ntfy(config: WebhookConfig) -> Optional[str]:
    priority = config.default_priority
    if priority is not None and (priority < 1 or priority > 5):
        return "Ntfy defaultPriority must be between 1 and 5"
    return None
