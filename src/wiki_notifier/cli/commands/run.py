from __future__ import annotations

from datetime import tzinfo
from pathlib import Path
from typing import Annotated
from uuid import uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from structlog.stdlib import BoundLogger

from wiki_notifier.core.changes import RecentChangesFetcher
from wiki_notifier.core.notifications import (
    NotificationDispatcher,
    NotificationRenderer,
    PageImageResolver,
    WikiLinks,
    normalize_url,
)
from wiki_notifier.core.run import NotificationRunService, RunReport
from wiki_notifier.core.watermark import WatermarkStore
from wiki_notifier.infra.discord import DiscordWebhookClient
from wiki_notifier.infra.localization import load_localization
from wiki_notifier.shared.config import AppSettings, load_settings
from wiki_notifier.shared.exceptions import BaseAppError, ConfigurationError
from wiki_notifier.shared.logging import configure_logging, flush_logging, get_logger

app = typer.Typer(
    help="Wiki の最近の更新を Discord Webhook へ通知する",
    invoke_without_command=True,
)


def _resolve_timezone(name: str | None) -> tzinfo | None:
    if name is None:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"unknown display timezone: {name}"
        raise ConfigurationError(msg) from exc


def _build_service(settings: AppSettings, logger: BoundLogger) -> NotificationRunService:
    localization = load_localization(
        settings.localization.language, settings.localization.directory
    )
    domain = str(settings.wiki.domain)
    links = WikiLinks(domain=domain, wiki_path=settings.wiki.wiki_path)

    fetcher = RecentChangesFetcher(
        api_url=normalize_url(f"{domain}/{settings.wiki.api_path}"),
        limit=settings.wiki.query_limit,
        logger=logger,
    )
    renderer = NotificationRenderer(
        links=links,
        localization=localization,
        image_resolver=PageImageResolver(links=links),
        display_timezone=_resolve_timezone(settings.localization.display_timezone),
        logger=logger,
    )
    client = DiscordWebhookClient(
        webhook_url=str(settings.discord.webhook_url),
        default_username=settings.discord.webhook_username,
        timeout=settings.discord.timeout,
        logger=logger,
    )
    dispatcher = NotificationDispatcher(
        sender=client,
        announcement=localization.webhook_message,
        logger=logger,
    )
    return NotificationRunService(
        watermark_store=WatermarkStore(settings.storage.watermark_path, logger=logger),
        fetcher=fetcher,
        renderer=renderer,
        dispatcher=dispatcher,
        logger=logger,
    )


def _format_summary(report: RunReport) -> str:
    line = (
        f"{report.fetched} new changes to publish "
        f"(sent: {report.sent}, failed: {report.failed_sends}, dropped: {report.dropped})"
    )
    if report.fetch_failed:
        line += " - recent changes unavailable, watermark kept"
    return line


@app.callback()
def run(
    webhook: Annotated[
        str | None, typer.Option("--webhook", "-w", help="Discord Webhook URL")
    ] = None,
    domain: Annotated[
        str | None, typer.Option("--domain", "-d", help="Wiki のドメイン (https://...)")
    ] = None,
    api: Annotated[
        str | None, typer.Option("--api", "-a", help="ドメインからの api.php のパス")
    ] = None,
    wiki: Annotated[
        str | None, typer.Option("--wiki", help="記事 URL のパスプレフィックス")
    ] = None,
    limit: Annotated[
        int | None, typer.Option("--limit", "-l", help="一度に取得する最近の更新の件数")
    ] = None,
    language: Annotated[
        str | None, typer.Option("--language", help="通知文言の言語コード (例: en, fr)")
    ] = None,
    log_file: Annotated[
        Path | None, typer.Option("--log-file", help="ログを追記するファイル")
    ] = None,
    silent: Annotated[
        bool,
        typer.Option(
            "--silent", "-s", help="要約とログをコンソールへ出力しない (致命的なエラーは除く)"
        ),
    ] = False,
) -> None:
    """前回の実行以降の変更を取得して Discord へ通知する。"""

    try:
        settings = load_settings(
            log_file=log_file,
            wiki={"domain": domain, "api_path": api, "wiki_path": wiki, "query_limit": limit},
            discord={"webhook_url": webhook},
            localization={"language": language},
        )
    except BaseAppError as exc:
        typer.echo(f"設定の読み込みに失敗しました: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    try:
        configure_logging(
            settings.log_level,
            json_output=settings.log_json,
            log_file=settings.log_file,
            console=not silent,
        )
    except (ValueError, OSError) as exc:
        typer.echo(f"ロギングの設定に失敗しました: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    logger = get_logger("cli.run", run_id=uuid4().hex[:8])
    logger.info("application_started", wiki=str(settings.wiki.domain))

    try:
        service = _build_service(settings, logger)
        report = service.run()
    except BaseAppError as exc:
        logger.error("run_failed", error=str(exc), error_type=type(exc).__name__)
        # silent 指定時も致命的なエラーは標準エラーへ出す
        typer.echo(f"実行に失敗しました: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except Exception as exc:  # noqa: BLE001 - 最上位で捕捉して終了コードへ反映する
        logger.exception("run_unexpected_error")
        typer.echo(f"予期しないエラーが発生しました: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        logger.info("application_stopped")
        flush_logging()

    if not silent:
        typer.echo(_format_summary(report))


__all__ = ["app", "run"]
