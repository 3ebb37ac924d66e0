"""recentchanges の 1 レコードを表すドメインモデルと分類。"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from wiki_notifier.shared.exceptions import DomainError
from wiki_notifier.shared.types import ensure_utc, parse_timestamp

__all__ = [
    "DEFAULT_USER_NAMESPACE",
    "NOTIFIABLE_KINDS",
    "Change",
    "ChangeCategory",
    "ChangeKind",
    "ChangeParseError",
]

DEFAULT_USER_NAMESPACE = "User"
UPLOAD_LOG_TYPE = "upload"


class ChangeParseError(DomainError):
    """API レコードから Change を構築できない場合のエラー。"""

    default_message = "recent change record is malformed"


class ChangeKind(str, Enum):
    """recentchanges の `type` のうち通知対象とするもの。"""

    EDIT = "edit"
    NEW = "new"
    LOG = "log"


NOTIFIABLE_KINDS: frozenset[str] = frozenset(kind.value for kind in ChangeKind)


class ChangeCategory(str, Enum):
    """通知の種類。判定は `Change.classify` の優先順位に従う。"""

    NEW_USER = "new_user"
    FILE_UPLOAD = "file_upload"
    STANDARD_EDIT = "standard_edit"
    PAGE_CREATION = "page_creation"
    MAINTENANCE_ACTION = "maintenance_action"


def _require(raw: Mapping[str, Any], key: str) -> Any:
    if key not in raw or raw[key] is None:
        msg = f"missing required field '{key}'"
        raise ChangeParseError(msg)
    return raw[key]


def _require_str(raw: Mapping[str, Any], key: str) -> str:
    value = _require(raw, key)
    if not isinstance(value, str):
        msg = f"field '{key}' must be a string, got {type(value).__name__}"
        raise ChangeParseError(msg)
    return value


def _require_int(raw: Mapping[str, Any], key: str) -> int:
    value = _require(raw, key)
    if isinstance(value, bool):
        msg = f"field '{key}' must be an integer, got bool"
        raise ChangeParseError(msg)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        msg = f"field '{key}' must be an integer, got {value!r}"
        raise ChangeParseError(msg) from exc


def _optional_str(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    return value if isinstance(value, str) and value else None


@dataclass(slots=True, frozen=True)
class Change:
    """Wiki 上の 1 件のリビジョンまたはログイベント。"""

    user: str
    title: str
    comment: str
    timestamp: datetime
    kind: str
    page: str
    revision_id: int
    previous_revision_id: int
    page_id: int
    log_type: str | None = None
    log_action: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> Change:
        """API の生レコードから Change を構築する。

        必須キー (`type`, `title`, `user`, `timestamp`, `revid`, `old_revid`, `pageid`)
        が欠けている、または型が不正な場合は `ChangeParseError` を送出する。
        `comment` は省略時に空文字、`page` は API が返さないため `title` を用いる。
        """

        if not isinstance(raw, Mapping):
            msg = f"record must be an object, got {type(raw).__name__}"
            raise ChangeParseError(msg)

        raw_timestamp = _require_str(raw, "timestamp")
        try:
            timestamp = parse_timestamp(raw_timestamp)
        except ValueError as exc:
            msg = f"invalid timestamp {raw_timestamp!r}"
            raise ChangeParseError(msg) from exc

        title = _require_str(raw, "title")
        comment = raw.get("comment")
        page = raw.get("page")

        return cls(
            user=_require_str(raw, "user"),
            title=title,
            comment=comment if isinstance(comment, str) else "",
            timestamp=timestamp,
            kind=_require_str(raw, "type"),
            page=page if isinstance(page, str) and page else title,
            revision_id=_require_int(raw, "revid"),
            previous_revision_id=_require_int(raw, "old_revid"),
            page_id=_require_int(raw, "pageid"),
            log_type=_optional_str(raw, "logtype"),
            log_action=_optional_str(raw, "logaction"),
        )

    def is_new_user(self, user_namespace: str = DEFAULT_USER_NAMESPACE) -> bool:
        return (
            self.page_id == 0
            and self.revision_id == 0
            and self.previous_revision_id == 0
            and self.title == f"{user_namespace}:{self.user}"
            and not self.comment
        )

    def is_file_upload(self) -> bool:
        return self.kind == ChangeKind.LOG.value and self.log_type == UPLOAD_LOG_TYPE

    def classify(self, user_namespace: str = DEFAULT_USER_NAMESPACE) -> ChangeCategory:
        """通知の種類を判定する。新規ユーザー、ファイルアップロード、type の順に評価する。"""

        if self.is_new_user(user_namespace):
            return ChangeCategory.NEW_USER
        if self.is_file_upload():
            return ChangeCategory.FILE_UPLOAD
        if self.kind == ChangeKind.EDIT.value:
            return ChangeCategory.STANDARD_EDIT
        if self.kind == ChangeKind.NEW.value:
            return ChangeCategory.PAGE_CREATION
        return ChangeCategory.MAINTENANCE_ACTION
