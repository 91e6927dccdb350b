"""Auto-detection of provider type from URL."""


def detect_channel_type(url: str) -> str:
    """
    Detect the provider type from a webhook URL.

    Returns:
        Provider type string: 'discord', 'slack', 'teams', 'feishu', 'ntfy', or 'generic'
    """
    url_lower = url.lower()

    if "discord.com/api/webhooks" in url_lower or "discordapp.com/api/webhooks" in url_lower:
        return "discord"

    if "hooks.slack.com/" in url_lower:
        return "slack"

    if "webhook.office.com" in url_lower or "logic.azure.com" in url_lower:
        return "teams"

    if "open.feishu.cn/" in url_lower or "larksuite.com/" in url_lower:
        return "feishu"

    if "ntfy.sh/" in url_lower:
        return "ntfy"

    # Default to generic JSON webhook
    return "generic"
