"""Change を通知 (Embed 相当) へ描画する。"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterable
from datetime import tzinfo

import httpx
from structlog.stdlib import BoundLogger

from wiki_notifier.core.changes.models import Change, ChangeCategory
from wiki_notifier.core.notifications.dto import (
    AccentColor,
    NotificationField,
    RenderedNotification,
)
from wiki_notifier.core.notifications.links import WikiLinks
from wiki_notifier.infra.localization import Localization
from wiki_notifier.shared.exceptions import DomainError
from wiki_notifier.shared.logging import get_logger

__all__ = [
    "DATE_FORMAT",
    "ImageNotFoundError",
    "NotificationRenderError",
    "NotificationRenderer",
    "PageImageResolver",
]

DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

# fullImageLink 要素内 (同じ行、閉じタグより前) の最初の href
_FULL_IMAGE_LINK = re.compile(r"fullImageLink(?:(?!</div>).)*?href=[\"']?([^\"'\s>]+)")


class NotificationRenderError(DomainError):
    """通知の描画に失敗した場合のエラー。"""

    default_message = "failed to render notification"


class ImageNotFoundError(NotificationRenderError):
    """ファイルページから画像リンクを見つけられなかった場合のエラー。"""

    default_message = "full size image link not found"


class PageImageResolver:
    """ファイルページの HTML から原寸画像の URL を取り出す。"""

    def __init__(
        self,
        *,
        links: WikiLinks,
        http_get: Callable[..., httpx.Response] = httpx.get,
        timeout: float = 10.0,
    ) -> None:
        self._links = links
        self._http_get = http_get
        self._timeout = timeout

    def resolve(self, title: str) -> str:
        page_url = self._links.page(title)
        response = self._http_get(page_url, timeout=self._timeout, follow_redirects=True)
        response.raise_for_status()

        match = _FULL_IMAGE_LINK.search(response.text)
        if match is None:
            msg = f"no full size image link on {page_url}"
            raise ImageNotFoundError(msg)
        return self._links.resource(html.unescape(match.group(1)))


class NotificationRenderer:
    """分類ごとの描画関数へ振り分けるレンダラー。

    1 件の描画で発生した例外はログに残して `None` を返し、呼び出し側の
    後続処理を止めない。
    """

    def __init__(
        self,
        *,
        links: WikiLinks,
        localization: Localization,
        image_resolver: PageImageResolver | None = None,
        display_timezone: tzinfo | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._links = links
        self._l10n = localization
        self._image_resolver = image_resolver or PageImageResolver(links=links)
        self._display_timezone = display_timezone
        self._logger = logger or get_logger(__name__, component="renderer")
        self._handlers: dict[ChangeCategory, Callable[[Change], RenderedNotification]] = {
            ChangeCategory.NEW_USER: self._render_new_user,
            ChangeCategory.FILE_UPLOAD: self._render_file_upload,
            ChangeCategory.STANDARD_EDIT: self._render_edit,
            ChangeCategory.PAGE_CREATION: self._render_page_creation,
            ChangeCategory.MAINTENANCE_ACTION: self._render_maintenance_action,
        }

    def render(self, change: Change) -> RenderedNotification | None:
        try:
            category = change.classify(self._l10n.user_namespace)
            return self._handlers[category](change)
        except Exception as exc:  # noqa: BLE001 - 1 件の失敗で後続を止めない
            self._logger.error(
                "notification_render_failed",
                title=change.title,
                kind=change.kind,
                timestamp=change.timestamp.isoformat(),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

    def render_all(self, changes: Iterable[Change]) -> tuple[RenderedNotification, ...]:
        """描画に成功した通知だけを入力順で返す。"""

        rendered = (self.render(change) for change in changes)
        return tuple(notification for notification in rendered if notification is not None)

    def _render_new_user(self, change: Change) -> RenderedNotification:
        l10n = self._l10n
        return RenderedNotification(
            change=change,
            author_name=l10n.new_user_title,
            author_icon_url=l10n.new_user_embed_logo_url,
            section_title=f"{l10n.new_user_welcome_message_content_title} {change.user} !",
            body=l10n.new_user_welcome_message,
            footer_text=l10n.new_user_welcome_message_footer,
            footer_icon_url=l10n.new_user_welcome_message_embed_logo_url,
            color=AccentColor.BLUE,
        )

    def _render_file_upload(self, change: Change) -> RenderedNotification:
        l10n = self._l10n
        image_url = self._image_resolver.resolve(change.title)
        return RenderedNotification(
            change=change,
            author_name=l10n.file_upload_title,
            author_icon_url=l10n.file_upload_embed_logo_url,
            section_title=l10n.file_upload_content_title,
            fields=self._content_fields(change),
            footer_text=l10n.file_upload_footer,
            footer_icon_url=l10n.file_upload_footer_logo_url,
            color=AccentColor.GOLD,
            image_url=image_url,
        )

    def _render_edit(self, change: Change) -> RenderedNotification:
        return self._standard(
            change,
            author_name=self._l10n.edit_title,
            author_icon_url=self._l10n.edit_page_embed_logo_url,
            color=AccentColor.GREEN,
            with_diff=True,
        )

    def _render_page_creation(self, change: Change) -> RenderedNotification:
        return self._standard(
            change,
            author_name=self._l10n.create_page_title,
            author_icon_url=self._l10n.create_page_embed_logo_url,
            color=AccentColor.GREEN,
        )

    def _render_maintenance_action(self, change: Change) -> RenderedNotification:
        return self._standard(
            change,
            author_name=self._l10n.maintenance_action_title,
            author_icon_url=self._l10n.maintenance_action_embed_logo_url,
            color=AccentColor.LIGHT_ORANGE,
        )

    def _standard(
        self,
        change: Change,
        *,
        author_name: str,
        author_icon_url: str,
        color: AccentColor,
        with_diff: bool = False,
    ) -> RenderedNotification:
        return RenderedNotification(
            change=change,
            author_name=author_name,
            author_icon_url=author_icon_url,
            section_title=self._l10n.default_content_title,
            fields=self._content_fields(change, with_diff=with_diff),
            footer_text=self._l10n.default_footer,
            footer_icon_url=self._l10n.default_footer_logo_url,
            color=color,
        )

    def _content_fields(
        self, change: Change, *, with_diff: bool = False
    ) -> tuple[NotificationField, ...]:
        l10n = self._l10n
        fields = [
            NotificationField(
                l10n.contributor, f"[{change.user}]({self._links.user_page(change.user)})"
            ),
            NotificationField(l10n.page, f"[{change.title}]({self._links.page(change.title)})"),
            NotificationField(l10n.commentary, change.comment or ""),
        ]
        if with_diff:
            diff_url = self._links.diff(
                change.title, change.revision_id, change.previous_revision_id
            )
            fields.append(NotificationField(l10n.modification, f"[{l10n.consult}]({diff_url})"))
        fields.append(NotificationField(l10n.date, self.format_date(change)))
        return tuple(fields)

    def format_date(self, change: Change) -> str:
        """表示用タイムゾーン (未指定ならローカル時刻) で日時を整形する。"""

        return change.timestamp.astimezone(self._display_timezone).strftime(DATE_FORMAT)
