from daybell.adapters.presenters.console import ConsolePresenter
from daybell.adapters.presenters.discord_presenter import DiscordPresenter, create_discord_client
from daybell.adapters.presenters.webhook import WebhookError, WebhookPresenter

__all__ = [
    "ConsolePresenter",
    "DiscordPresenter",
    "WebhookError",
    "WebhookPresenter",
    "create_discord_client",
]
