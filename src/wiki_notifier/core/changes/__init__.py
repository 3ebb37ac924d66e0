"""recentchanges の取得と分類。"""

from .fetcher import RecentChangesError, RecentChangesFetcher, build_query_params
from .models import (
    DEFAULT_USER_NAMESPACE,
    NOTIFIABLE_KINDS,
    Change,
    ChangeCategory,
    ChangeKind,
    ChangeParseError,
)

__all__ = [
    "DEFAULT_USER_NAMESPACE",
    "NOTIFIABLE_KINDS",
    "Change",
    "ChangeCategory",
    "ChangeKind",
    "ChangeParseError",
    "RecentChangesError",
    "RecentChangesFetcher",
    "build_query_params",
]
