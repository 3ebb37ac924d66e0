"""Discord Webhook へ通知を送信するクライアント。"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
from structlog.stdlib import BoundLogger

from wiki_notifier.shared.exceptions import BaseAppError
from wiki_notifier.shared.logging import get_logger

from .templates import DISCORD_MESSAGE_LIMIT, truncate_text


class DiscordWebhookError(BaseAppError):
    """Webhook 投稿に失敗した際の例外。"""

    default_message = "Discord webhook delivery failed"


@dataclass(slots=True)
class DiscordWebhookRequest:
    """Webhook へ送信するリクエスト DTO。"""

    content: str
    username: str | None = None
    embeds: list[dict[str, Any]] = field(default_factory=list)

    def to_payload(self, default_username: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": truncate_text(self.content, DISCORD_MESSAGE_LIMIT)}
        username = self.username or default_username
        if username:
            payload["username"] = username
        if self.embeds:
            payload["embeds"] = list(self.embeds)
        return payload


class DiscordWebhookClient:
    """Discord Webhook へメッセージを 1 件ずつ送信するクライアント。

    送信ごとに `http_post` (既定は `httpx.post`) を呼び出すため、HTTP 接続は
    呼び出し単位で確保・解放される。リトライは行わない。
    """

    def __init__(
        self,
        *,
        webhook_url: str,
        default_username: str | None = None,
        http_post: Callable[..., httpx.Response] = httpx.post,
        timeout: float = 10.0,
        logger: BoundLogger | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._default_username = default_username
        self._http_post = http_post
        self._timeout = timeout
        self._logger = logger or get_logger(__name__, component="discord-webhook")

    def send(self, request: DiscordWebhookRequest) -> None:
        """単一メッセージを送信する。失敗時は `DiscordWebhookError` を送出する。"""

        payload = request.to_payload(self._default_username)
        try:
            response = self._http_post(
                self._webhook_url,
                json=payload,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            body = exc.response.text if exc.response is not None else None
            self._logger.error(
                "discord_webhook_failed",
                status_code=status_code,
                body=body.strip() if body else None,
            )
            msg = f"Discord webhook returned HTTP {status_code}"
            raise DiscordWebhookError(msg) from exc
        except httpx.RequestError as exc:
            self._logger.error("discord_webhook_request_error", message=str(exc))
            msg = f"Discord webhook request failed: {exc}"
            raise DiscordWebhookError(msg) from exc


__all__ = [
    "DiscordWebhookClient",
    "DiscordWebhookError",
    "DiscordWebhookRequest",
]
