"""取得・描画・送信・ウォーターマーク更新を 1 回分まとめて実行するサービス。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from structlog.stdlib import BoundLogger

from wiki_notifier.core.changes import Change, RecentChangesFetcher
from wiki_notifier.core.notifications import NotificationDispatcher, NotificationRenderer
from wiki_notifier.core.watermark import WatermarkStore
from wiki_notifier.shared.logging import get_logger
from wiki_notifier.shared.types import DTO, MIN_TIMESTAMP

__all__ = ["NotificationRunService", "RunReport"]


@dataclass(slots=True)
class RunReport(DTO):
    """1 回の実行結果。"""

    previous_watermark: datetime = MIN_TIMESTAMP
    new_watermark: datetime = MIN_TIMESTAMP
    fetched: int = 0
    rendered: int = 0
    sent: int = 0
    failed_sends: int = 0
    fetch_failed: bool = False
    watermark_saved: bool = False

    @property
    def dropped(self) -> int:
        """描画できずに送信対象から外れた件数。"""

        return self.fetched - self.rendered


@dataclass(slots=True)
class NotificationRunService:
    """ウォーターマーク以降の変更を通知し、ウォーターマークを進める。

    取得自体が失敗した場合は変更 0 件として扱い、ウォーターマークは保存しない
    (次回実行で同じ範囲を取り直す)。個々の描画・送信の失敗はウォーターマークの
    更新を妨げない。
    """

    watermark_store: WatermarkStore
    fetcher: RecentChangesFetcher
    renderer: NotificationRenderer
    dispatcher: NotificationDispatcher
    logger: BoundLogger = field(
        default_factory=lambda: get_logger(__name__, component="run-service")
    )

    def run(self) -> RunReport:
        previous = self.watermark_store.load()
        self.logger.info("last_change_loaded", watermark=previous.isoformat())

        report = RunReport(previous_watermark=previous, new_watermark=previous)

        result = self.fetcher.fetch_since(previous)
        if result.is_err:
            report.fetch_failed = True
            self.logger.warning(
                "recent_changes_unavailable",
                error=str(result.unwrap_err()),
                watermark=previous.isoformat(),
            )
            changes: tuple[Change, ...] = ()
        else:
            changes = result.unwrap()

        notifications = self.renderer.render_all(changes)
        dispatch = self.dispatcher.dispatch(notifications)

        report.fetched = len(changes)
        report.rendered = len(notifications)
        report.sent = dispatch.sent
        report.failed_sends = dispatch.failed

        self.logger.info("new_changes_to_publish", count=len(changes))

        if changes:
            report.new_watermark = max(previous, changes[-1].timestamp)

        if not report.fetch_failed:
            self.watermark_store.save(report.new_watermark)
            report.watermark_saved = True

        self.logger.info(
            "run_summary",
            fetched=report.fetched,
            rendered=report.rendered,
            sent=report.sent,
            failed_sends=report.failed_sends,
            fetch_failed=report.fetch_failed,
            watermark=report.new_watermark.isoformat(),
        )
        return report
