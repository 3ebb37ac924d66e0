"""通知の描画と送信。"""

from .dispatcher import DispatchReport, NotificationDispatcher, WebhookSender
from .dto import AccentColor, NotificationField, RenderedNotification
from .links import WikiLinks, normalize_url, wiki_title
from .renderer import (
    DATE_FORMAT,
    ImageNotFoundError,
    NotificationRenderError,
    NotificationRenderer,
    PageImageResolver,
)

__all__ = [
    "DATE_FORMAT",
    "AccentColor",
    "DispatchReport",
    "ImageNotFoundError",
    "NotificationDispatcher",
    "NotificationField",
    "NotificationRenderError",
    "NotificationRenderer",
    "PageImageResolver",
    "RenderedNotification",
    "WebhookSender",
    "WikiLinks",
    "normalize_url",
    "wiki_title",
]
