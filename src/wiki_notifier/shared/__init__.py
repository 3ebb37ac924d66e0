"""共有レイヤの公開インターフェース。"""

from .config import AppSettings, get_settings, load_settings
from .exceptions import BaseAppError, ConfigurationError, DomainError, Result
from .logging import configure_logging, flush_logging, get_logger
from .types import MIN_TIMESTAMP, Timestamp, ensure_utc, parse_timestamp

__all__ = [
    "AppSettings",
    "get_settings",
    "load_settings",
    "configure_logging",
    "flush_logging",
    "get_logger",
    "BaseAppError",
    "ConfigurationError",
    "DomainError",
    "Result",
    "MIN_TIMESTAMP",
    "Timestamp",
    "ensure_utc",
    "parse_timestamp",
]
