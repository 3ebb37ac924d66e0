"""描画済み通知の DTO。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from wiki_notifier.core.changes.models import Change

__all__ = ["AccentColor", "NotificationField", "RenderedNotification"]


class AccentColor(IntEnum):
    """Embed のアクセントカラー。"""

    BLUE = 0x3498DB
    GOLD = 0xF1C40F
    GREEN = 0x2ECC71
    LIGHT_ORANGE = 0xC27C0E


@dataclass(slots=True, frozen=True)
class NotificationField:
    """本文中の 1 行 (ラベルと値)。"""

    label: str
    value: str

    def to_line(self) -> str:
        return f"**{self.label}**: {self.value}"


@dataclass(slots=True, frozen=True)
class RenderedNotification:
    """Webhook へ送る 1 件分の通知。"""

    change: Change
    author_name: str
    author_icon_url: str
    section_title: str
    footer_text: str
    footer_icon_url: str
    color: AccentColor
    fields: tuple[NotificationField, ...] = ()
    body: str | None = None
    image_url: str | None = None

    @property
    def description(self) -> str:
        """フィールドを 1 行ずつ並べた本文。自由文 `body` があればそれを優先する。"""

        if self.body is not None:
            return self.body
        return "\n".join(field.to_line() for field in self.fields)
