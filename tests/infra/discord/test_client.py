"""Discord Webhook クライアントの挙動を検証する。"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from wiki_notifier.core.changes import Change
from wiki_notifier.core.notifications import AccentColor, NotificationField, RenderedNotification
from wiki_notifier.infra.discord import (
    DiscordWebhookClient,
    DiscordWebhookError,
    DiscordWebhookRequest,
    build_notification_embed,
    truncate_text,
)

URL = "https://discord.example.com/api/webhooks/1/token"


def _notification(**overrides: Any) -> RenderedNotification:
    change = Change(
        user="Alice",
        title="Page A",
        comment="",
        timestamp=datetime(2024, 1, 2, 10, tzinfo=UTC),
        kind="edit",
        page="Page A",
        revision_id=5,
        previous_revision_id=4,
        page_id=12,
    )
    values: dict[str, Any] = {
        "change": change,
        "author_name": "A Page has been edited",
        "author_icon_url": "https://icons.example.org/pencil.png",
        "section_title": "Description",
        "fields": (
            NotificationField("Contributor", "[Alice](https://wiki.example.org/wiki/User:Alice)"),
            NotificationField("Commentary", ""),
        ),
        "footer_text": "Thanks you for your work !",
        "footer_icon_url": "https://icons.example.org/heart.png",
        "color": AccentColor.GREEN,
    }
    values.update(overrides)
    return RenderedNotification(**values)


def test_send_success() -> None:
    calls: list[dict[str, Any]] = []

    def http_post(url: str, *, json: dict[str, Any], timeout: float) -> httpx.Response:
        calls.append({"url": url, "json": json, "timeout": timeout})
        return httpx.Response(204, request=httpx.Request("POST", url))

    client = DiscordWebhookClient(
        webhook_url=URL,
        default_username="bot",
        http_post=http_post,
        timeout=3.0,
    )
    embed = build_notification_embed(_notification())

    client.send(DiscordWebhookRequest(content="hello", embeds=[embed]))

    assert calls[0]["url"] == URL
    assert calls[0]["timeout"] == 3.0
    assert calls[0]["json"] == {"content": "hello", "username": "bot", "embeds": [embed]}


def test_send_prefers_request_username() -> None:
    payloads: list[dict[str, Any]] = []

    def http_post(url: str, *, json: dict[str, Any], timeout: float) -> httpx.Response:
        payloads.append(json)
        return httpx.Response(204, request=httpx.Request("POST", url))

    client = DiscordWebhookClient(webhook_url=URL, default_username="bot", http_post=http_post)

    client.send(DiscordWebhookRequest(content="hi", username="WikiBot"))

    assert payloads[0]["username"] == "WikiBot"
    assert "embeds" not in payloads[0]


def test_send_without_username_omits_field() -> None:
    request = DiscordWebhookRequest(content="hi")

    assert request.to_payload() == {"content": "hi"}


def test_send_raises_on_http_status(dummy_logger) -> None:
    def http_post(url: str, *, json: dict[str, Any], timeout: float) -> httpx.Response:
        return httpx.Response(429, text="slow down", request=httpx.Request("POST", url))

    client = DiscordWebhookClient(webhook_url=URL, http_post=http_post, logger=dummy_logger)

    with pytest.raises(DiscordWebhookError, match="429"):
        client.send(DiscordWebhookRequest(content="fail"))

    level, event, context = dummy_logger.events[-1]
    assert (level, event) == ("error", "discord_webhook_failed")
    assert context["status_code"] == 429
    assert context["body"] == "slow down"


def test_send_raises_on_transport_error(dummy_logger) -> None:
    def http_post(url: str, *, json: dict[str, Any], timeout: float) -> httpx.Response:
        raise httpx.ConnectError("refused", request=httpx.Request("POST", url))

    client = DiscordWebhookClient(webhook_url=URL, http_post=http_post, logger=dummy_logger)

    with pytest.raises(DiscordWebhookError):
        client.send(DiscordWebhookRequest(content="fail"))

    assert dummy_logger.names("error") == ["discord_webhook_request_error"]


def test_content_is_truncated_to_message_limit() -> None:
    payload = DiscordWebhookRequest(content="a" * 2500).to_payload()

    assert len(payload["content"]) == 2000
    assert payload["content"].endswith("…")


def test_truncate_text_keeps_short_values() -> None:
    assert truncate_text("short", limit=10) == "short"
    assert truncate_text("abcdefghijkl", limit=5) == "abcd…"


def test_build_notification_embed_layout() -> None:
    embed = build_notification_embed(_notification())

    assert embed["author"] == {
        "name": "A Page has been edited",
        "icon_url": "https://icons.example.org/pencil.png",
    }
    assert embed["footer"]["text"] == "Thanks you for your work !"
    assert embed["color"] == 0x2ECC71
    assert embed["fields"] == [
        {
            "name": "Description",
            "value": (
                "**Contributor**: [Alice](https://wiki.example.org/wiki/User:Alice)\n"
                "**Commentary**: "
            ),
            "inline": False,
        }
    ]
    assert "image" not in embed


def test_build_notification_embed_with_body_and_image() -> None:
    embed = build_notification_embed(
        _notification(
            fields=(),
            body="Welcome!",
            image_url="https://wiki.example.org/images/Cat.png",
        )
    )

    assert embed["fields"][0]["value"] == "Welcome!"
    assert embed["image"] == {"url": "https://wiki.example.org/images/Cat.png"}


def test_build_notification_embed_never_sends_empty_value() -> None:
    embed = build_notification_embed(_notification(fields=()))

    assert embed["fields"][0]["value"] == "\u200b"
