"""通知文言の翻訳リソース。"""

from .loader import Localization, LocalizationError, bundled_languages, load_localization

__all__ = ["Localization", "LocalizationError", "bundled_languages", "load_localization"]
