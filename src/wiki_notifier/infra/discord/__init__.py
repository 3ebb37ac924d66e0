"""Discord Webhook 通知クライアント。"""

from .client import DiscordWebhookClient, DiscordWebhookError, DiscordWebhookRequest
from .templates import build_notification_embed, truncate_text

__all__ = [
    "DiscordWebhookClient",
    "DiscordWebhookError",
    "DiscordWebhookRequest",
    "build_notification_embed",
    "truncate_text",
]
