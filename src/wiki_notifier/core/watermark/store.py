"""最終処理時刻 (ウォーターマーク) の永続化。"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from structlog.stdlib import BoundLogger

from wiki_notifier.shared.exceptions import DomainError
from wiki_notifier.shared.logging import get_logger
from wiki_notifier.shared.types import MIN_TIMESTAMP, ensure_utc, parse_timestamp

__all__ = ["WatermarkError", "WatermarkStore"]


class WatermarkError(DomainError):
    """ウォーターマークファイルの読み書きに失敗した場合のエラー。"""

    default_message = "watermark state is unreadable"


class WatermarkStore:
    """ISO-8601 (UTC) の時刻 1 行だけを保持するテキストファイル。"""

    def __init__(self, path: Path, *, logger: BoundLogger | None = None) -> None:
        self.path = path
        self._logger = logger or get_logger(__name__, component="watermark")

    def load(self) -> datetime:
        """保存済みの時刻を返す。ファイルがない、または空の場合は `MIN_TIMESTAMP`。"""

        try:
            text = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            self._logger.info("watermark_missing", path=str(self.path))
            return MIN_TIMESTAMP
        except OSError as exc:
            msg = f"cannot read watermark file {self.path}: {exc}"
            raise WatermarkError(msg) from exc

        if not text:
            return MIN_TIMESTAMP
        first_line = text.splitlines()[0]
        try:
            return parse_timestamp(first_line)
        except ValueError as exc:
            msg = f"watermark file {self.path} holds an invalid timestamp: {first_line!r}"
            raise WatermarkError(msg) from exc

    def save(self, watermark: datetime) -> None:
        value = ensure_utc(watermark).isoformat()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(f"{value}\n", encoding="utf-8")
        except OSError as exc:
            msg = f"cannot write watermark file {self.path}: {exc}"
            raise WatermarkError(msg) from exc
        self._logger.debug("watermark_saved", path=str(self.path), watermark=value)
