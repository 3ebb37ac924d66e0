"""MediaWiki の recentchanges API から新着の変更を取得する。"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

import httpx
from structlog.stdlib import BoundLogger

from wiki_notifier.core.changes.models import NOTIFIABLE_KINDS, Change, ChangeParseError
from wiki_notifier.shared.exceptions import DomainError, Result
from wiki_notifier.shared.logging import get_logger
from wiki_notifier.shared.types import ensure_utc

__all__ = ["RecentChangesError", "RecentChangesFetcher", "build_query_params"]

RC_PROPERTIES = ("ids", "title", "user", "comment", "timestamp", "loginfo")


class RecentChangesError(DomainError):
    """recentchanges の問い合わせ自体に失敗した場合のエラー。"""

    default_message = "recent changes query failed"


def build_query_params(limit: int) -> dict[str, str]:
    """recentchanges 一覧を要求するクエリパラメータを組み立てる。"""

    return {
        "action": "query",
        "list": "recentchanges",
        "rcprop": "|".join(RC_PROPERTIES),
        "rctype": "|".join(sorted(NOTIFIABLE_KINDS)),
        "rclimit": str(limit),
        "format": "json",
    }


class RecentChangesFetcher:
    """基準時刻より新しい変更を古い順に返すフェッチャー。"""

    def __init__(
        self,
        *,
        api_url: str,
        limit: int = 50,
        http_get: Callable[..., httpx.Response] = httpx.get,
        timeout: float = 10.0,
        logger: BoundLogger | None = None,
    ) -> None:
        if limit <= 0:
            msg = "limit must be positive"
            raise ValueError(msg)
        self._api_url = api_url
        self._limit = limit
        self._http_get = http_get
        self._timeout = timeout
        self._logger = logger or get_logger(__name__, component="recent-changes")

    def fetch_since(self, watermark: datetime) -> Result[tuple[Change, ...], RecentChangesError]:
        """`watermark` より厳密に新しい変更を時刻の昇順で返す。

        API 呼び出しやレスポンス封筒の解析に失敗した場合は `Result.err` を返す。
        個々のレコードの解析失敗はログに残してスキップする。
        """

        try:
            records = self._query()
        except RecentChangesError as exc:
            self._logger.error("recent_changes_query_failed", api_url=self._api_url, error=str(exc))
            return Result.err(exc)

        threshold = ensure_utc(watermark)
        changes: list[Change] = []
        for raw in self._notifiable(records):
            try:
                change = Change.from_payload(raw)
            except ChangeParseError as exc:
                self._logger.warning("recent_change_parse_failed", record=raw, error=str(exc))
                continue
            if change.timestamp > threshold:
                changes.append(change)

        changes.sort(key=lambda change: change.timestamp)
        self._logger.debug(
            "recent_changes_fetched",
            received=len(records),
            kept=len(changes),
            watermark=threshold.isoformat(),
        )
        return Result.ok(tuple(changes))

    def _query(self) -> list[Any]:
        try:
            response = self._http_get(
                self._api_url,
                params=build_query_params(self._limit),
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            msg = f"wiki API returned HTTP {exc.response.status_code}"
            raise RecentChangesError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"wiki API request failed: {exc}"
            raise RecentChangesError(msg) from exc
        except ValueError as exc:
            msg = "wiki API response is not valid JSON"
            raise RecentChangesError(msg) from exc

        if not isinstance(payload, dict):
            msg = "wiki API response must be a JSON object"
            raise RecentChangesError(msg)
        if "error" in payload:
            error = payload["error"]
            info = error.get("info") if isinstance(error, dict) else error
            msg = f"wiki API error: {info}"
            raise RecentChangesError(msg)

        query = payload.get("query")
        records = query.get("recentchanges") if isinstance(query, dict) else None
        if not isinstance(records, list):
            msg = "wiki API response has no query.recentchanges list"
            raise RecentChangesError(msg)
        return records

    @staticmethod
    def _notifiable(records: Iterable[Any]) -> Iterable[Any]:
        for raw in records:
            # type が文字列でないレコードは from_payload 側で解析エラーとして扱う
            kind = raw.get("type") if isinstance(raw, dict) else None
            if isinstance(kind, str) and kind not in NOTIFIABLE_KINDS:
                continue
            yield raw
