"""最終処理時刻の永続化。"""

from .store import WatermarkError, WatermarkStore

__all__ = ["WatermarkError", "WatermarkStore"]
