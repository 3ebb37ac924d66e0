"""1 回分の通知実行。"""

from .service import NotificationRunService, RunReport

__all__ = ["NotificationRunService", "RunReport"]
