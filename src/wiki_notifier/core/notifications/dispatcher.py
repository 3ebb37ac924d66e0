"""描画済み通知を Webhook へ順に送信する。"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from structlog.stdlib import BoundLogger

from wiki_notifier.core.notifications.dto import RenderedNotification
from wiki_notifier.infra.discord import DiscordWebhookRequest, build_notification_embed
from wiki_notifier.shared.logging import get_logger
from wiki_notifier.shared.types import DTO

__all__ = ["DispatchReport", "NotificationDispatcher", "WebhookSender"]


class WebhookSender(Protocol):
    """1 件のメッセージを配信先へ送る能力。"""

    def send(self, request: DiscordWebhookRequest) -> None:
        """送信に失敗した場合は例外を送出する。"""


@dataclass(slots=True)
class DispatchReport(DTO):
    """送信結果の集計。"""

    sent: int = 0
    failed: int = 0


class NotificationDispatcher:
    def __init__(
        self,
        *,
        sender: WebhookSender,
        announcement: str,
        username: str | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._sender = sender
        self._announcement = announcement
        self._username = username
        self._logger = logger or get_logger(__name__, component="dispatcher")

    def dispatch(self, notifications: Iterable[RenderedNotification]) -> DispatchReport:
        """通知を 1 件ずつ独立に送信する。失敗はログに残して次へ進み、例外は送出しない。"""

        report = DispatchReport()
        for notification in notifications:
            try:
                request = DiscordWebhookRequest(
                    content=self._announcement,
                    username=self._username,
                    embeds=[build_notification_embed(notification)],
                )
                self._sender.send(request)
            except Exception as exc:  # noqa: BLE001 - 送信失敗は他の通知へ波及させない
                report.failed += 1
                self._logger.error(
                    "notification_send_failed",
                    title=notification.change.title,
                    timestamp=notification.change.timestamp.isoformat(),
                    error=str(exc),
                )
                continue
            report.sent += 1
        return report
