"""テスト全体で共有するフィクスチャ。"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from wiki_notifier.core.changes import Change


class DummyLogger:
    """structlog の BoundLogger 代わりにイベントを記録する。"""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, Any]]] = []

    def _record(self, level: str, event: str, **kwargs: Any) -> None:
        self.events.append((level, event, kwargs))

    def debug(self, event: str, **kwargs: Any) -> None:
        self._record("debug", event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._record("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._record("warning", event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._record("error", event, **kwargs)

    def exception(self, event: str, **kwargs: Any) -> None:
        self._record("exception", event, **kwargs)

    def names(self, level: str | None = None) -> list[str]:
        return [name for lvl, name, _ in self.events if level is None or lvl == level]


@pytest.fixture()
def dummy_logger() -> DummyLogger:
    return DummyLogger()


def make_change(**overrides: Any) -> Change:
    values: dict[str, Any] = {
        "user": "Alice",
        "title": "Page A",
        "comment": "",
        "timestamp": datetime(2024, 1, 2, 10, 0, tzinfo=UTC),
        "kind": "edit",
        "page": "Page A",
        "revision_id": 5,
        "previous_revision_id": 4,
        "page_id": 12,
    }
    values.update(overrides)
    return Change(**values)


@pytest.fixture()
def change_factory():
    return make_change
