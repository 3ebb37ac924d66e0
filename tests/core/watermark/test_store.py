"""WatermarkStore の読み書きを検証する。"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from wiki_notifier.core.watermark import WatermarkError, WatermarkStore
from wiki_notifier.shared.types import MIN_TIMESTAMP


def test_load_missing_file_returns_minimum(tmp_path, dummy_logger) -> None:
    store = WatermarkStore(tmp_path / "last_change", logger=dummy_logger)

    assert store.load() == MIN_TIMESTAMP
    assert "watermark_missing" in dummy_logger.names("info")


def test_load_empty_file_returns_minimum(tmp_path, dummy_logger) -> None:
    path = tmp_path / "last_change"
    path.write_text("\n", encoding="utf-8")

    assert WatermarkStore(path, logger=dummy_logger).load() == MIN_TIMESTAMP


def test_save_then_load(tmp_path, dummy_logger) -> None:
    path = tmp_path / "state" / "last_change"
    store = WatermarkStore(path, logger=dummy_logger)
    watermark = datetime(2024, 1, 2, 10, 0, tzinfo=UTC)

    store.save(watermark)

    assert path.read_text(encoding="utf-8") == "2024-01-02T10:00:00+00:00\n"
    assert store.load() == watermark


def test_save_converts_to_utc(tmp_path, dummy_logger) -> None:
    path = tmp_path / "last_change"
    store = WatermarkStore(path, logger=dummy_logger)

    store.save(datetime(2024, 1, 2, 12, 0, tzinfo=timezone(timedelta(hours=2))))

    assert path.read_text(encoding="utf-8").strip() == "2024-01-02T10:00:00+00:00"


def test_load_accepts_zulu_suffix(tmp_path, dummy_logger) -> None:
    path = tmp_path / "last_change"
    path.write_text("2024-01-02T10:00:00Z", encoding="utf-8")

    assert WatermarkStore(path, logger=dummy_logger).load() == datetime(2024, 1, 2, 10, tzinfo=UTC)


def test_load_invalid_content_raises(tmp_path, dummy_logger) -> None:
    path = tmp_path / "last_change"
    path.write_text("not a date", encoding="utf-8")

    with pytest.raises(WatermarkError):
        WatermarkStore(path, logger=dummy_logger).load()
