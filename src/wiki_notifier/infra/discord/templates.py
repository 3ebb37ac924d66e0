"""Discord 通知用の Embed テンプレート。"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wiki_notifier.core.notifications.dto import RenderedNotification

DISCORD_MESSAGE_LIMIT = 2000
EMBED_AUTHOR_LIMIT = 256
EMBED_FIELD_NAME_LIMIT = 256
EMBED_FIELD_VALUE_LIMIT = 1024
EMBED_FOOTER_LIMIT = 2048


def truncate_text(value: str, limit: int = 300) -> str:
    """長文を Discord 用に短縮する。"""

    if len(value) <= limit:
        return value
    return value[: limit - 1].rstrip() + "…"


def build_notification_embed(notification: RenderedNotification) -> dict[str, Any]:
    """描画済み通知を Discord Embed の JSON オブジェクトへ変換する。

    本文は 1 つの非インラインフィールドにまとめ、Discord の文字数上限で切り詰める。
    """

    # 空のフィールド値は Discord に拒否される
    value = truncate_text(notification.description, EMBED_FIELD_VALUE_LIMIT) or "\u200b"
    embed: dict[str, Any] = {
        "author": {
            "name": truncate_text(notification.author_name, EMBED_AUTHOR_LIMIT),
            "icon_url": notification.author_icon_url,
        },
        "fields": [
            {
                "name": truncate_text(notification.section_title, EMBED_FIELD_NAME_LIMIT),
                "value": value,
                "inline": False,
            }
        ],
        "footer": {
            "text": truncate_text(notification.footer_text, EMBED_FOOTER_LIMIT),
            "icon_url": notification.footer_icon_url,
        },
        "color": int(notification.color),
    }
    if notification.image_url:
        embed["image"] = {"url": notification.image_url}
    return embed


__all__ = [
    "DISCORD_MESSAGE_LIMIT",
    "EMBED_FIELD_VALUE_LIMIT",
    "build_notification_embed",
    "truncate_text",
]
