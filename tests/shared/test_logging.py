"""structlog 設定の出力先を確認するテスト。"""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from wiki_notifier.shared.logging import configure_logging, flush_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()


def test_json_output_to_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "notifier.log"
    configure_logging("debug", json_output=True, log_file=log_file, console=False)

    get_logger("test", run_id="abc").info("probe_event", count=3)
    flush_logging()

    record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert record["event"] == "probe_event"
    assert record["run_id"] == "abc"
    assert record["count"] == 3
    assert record["level"] == "info"


def test_level_filters_events(tmp_path) -> None:
    log_file = tmp_path / "notifier.log"
    configure_logging("WARNING", json_output=True, log_file=log_file, console=False)

    logger = get_logger("test")
    logger.info("hidden_event")
    logger.warning("shown_event")
    flush_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "hidden_event" not in content
    assert "shown_event" in content


def test_reconfigure_replaces_own_handlers(tmp_path) -> None:
    root = logging.getLogger()
    configure_logging(console=True)
    configure_logging(console=False, log_file=tmp_path / "a.log")

    marked = [handler for handler in root.handlers if getattr(handler, "_wiki_notifier_handler", False)]
    assert len(marked) == 1
    assert isinstance(marked[0], logging.FileHandler)


def test_silent_without_file_uses_null_handler() -> None:
    configure_logging(console=False)

    marked = [
        handler
        for handler in logging.getLogger().handlers
        if getattr(handler, "_wiki_notifier_handler", False)
    ]
    assert [type(handler) for handler in marked] == [logging.NullHandler]


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        configure_logging("chatty")
