"""構造化ロギングのセットアップとヘルパー。"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

DEFAULT_LOG_LEVEL = "INFO"
_HANDLER_MARKER = "_wiki_notifier_handler"


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level

    normalized = level.upper()
    mapping = logging.getLevelNamesMapping()
    if normalized in mapping:
        return mapping[normalized]
    msg = f"Unsupported log level: {level}"
    raise ValueError(msg)


def _build_handlers(log_file: Path | None, *, console: bool) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    if not handlers:
        # silent 指定かつログファイルなし: 出力先を持たない
        handlers.append(logging.NullHandler())
    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
        setattr(handler, _HANDLER_MARKER, True)
    return handlers


def configure_logging(
    level: str | int = DEFAULT_LOG_LEVEL,
    *,
    json_output: bool = False,
    log_file: Path | None = None,
    console: bool = True,
) -> None:
    """structlog を用いたロギング設定を行う。

    Args:
        level: 文字列または数値で表現したログレベル。
        json_output: True の場合 JSON 形式で出力する。
        log_file: 指定するとログを追記するファイル。
        console: False の場合は標準エラーへ出力しない (silent モード)。
    """

    log_level = _coerce_level(level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(log_file, console=console):
        root.addHandler(handler)
    root.setLevel(log_level)

    processors: list[structlog.types.Processor] = [
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # ファイル出力時は ANSI カラーを混ぜない
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=log_file is None and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """共有ロガーを取得し、必要に応じて初期バインド値を設定。"""

    logger = structlog.stdlib.get_logger(name)
    if initial_values:
        return logger.bind(**initial_values)
    return logger


def flush_logging() -> None:
    """実行終了時にすべてのハンドラをフラッシュする。"""

    for handler in logging.getLogger().handlers:
        handler.flush()


__all__ = ["DEFAULT_LOG_LEVEL", "configure_logging", "flush_logging", "get_logger"]
