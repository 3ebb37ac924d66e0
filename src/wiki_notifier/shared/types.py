"""共有型・ユーティリティ。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

Timestamp = datetime

# 永続化された最終処理時刻が存在しない場合の初期値
MIN_TIMESTAMP: Timestamp = datetime.min.replace(tzinfo=UTC)


@dataclass(slots=True)
class DTO:
    """集計結果など可変なデータ転送オブジェクト用ベース。"""


def ensure_utc(value: datetime) -> datetime:
    """naive な日時は UTC とみなし、aware な日時は UTC へ変換する。"""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(raw: str) -> datetime:
    """ISO-8601 文字列 (末尾 `Z` を含む) を UTC の aware datetime へ変換する。"""

    text = raw.strip()
    if not text:
        msg = "timestamp is empty"
        raise ValueError(msg)
    return ensure_utc(datetime.fromisoformat(text))


__all__ = [
    "MIN_TIMESTAMP",
    "Timestamp",
    "DTO",
    "ensure_utc",
    "parse_timestamp",
]
