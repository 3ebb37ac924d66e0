"""アプリケーション全体で共有する設定ローダー。"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AnyHttpUrl, BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class WikiSettings(BaseModel):
    """監視対象の MediaWiki に関する設定。"""

    domain: AnyHttpUrl = Field(..., description="Wiki のドメイン (例: https://wiki.example.org)")
    api_path: str = Field("w/api.php", description="ドメインからの api.php への相対パス")
    wiki_path: str = Field("wiki", description="記事 URL のパスプレフィックス")
    query_limit: int = Field(
        50,
        ge=1,
        le=500,
        description="recentchanges で一度に取得する最大件数",
    )


class DiscordSettings(BaseModel):
    """Discord Webhook を利用した通知設定。"""

    webhook_url: AnyHttpUrl = Field(..., description="Discord Webhook URL")
    webhook_username: str | None = Field(None, description="Webhook 投稿時のユーザー名")
    timeout: float = Field(10.0, gt=0, description="Webhook 送信のタイムアウト秒数")


class StorageSettings(BaseModel):
    """状態保存関連の設定。"""

    watermark_path: Path = Field(Path("./last_change"), description="最終処理時刻を保存するファイル")


class LocalizationSettings(BaseModel):
    """通知文言と表示形式の設定。"""

    language: str = Field("en", description="翻訳リソースの言語コード")
    directory: Path | None = Field(None, description="翻訳 JSON を置いたディレクトリ")
    display_timezone: str | None = Field(
        None, description="日時表示に使う IANA タイムゾーン名。未指定ならローカル時刻"
    )


class AppSettings(BaseSettings):
    """共有設定。`.env` 読み込みと環境変数バリデーションを担う。"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="ルートロガーのログレベル")
    log_json: bool = Field(False, description="JSON 形式でログを出力するか")
    log_file: Path | None = Field(None, description="ログを追記するファイル")
    wiki: WikiSettings
    discord: DiscordSettings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    localization: LocalizationSettings = Field(default_factory=LocalizationSettings)


def load_settings(**overrides: Any) -> AppSettings:
    """環境変数に CLI などからの上書き値を重ねて設定をロードする。

    ネストした設定は辞書で渡す (例: ``wiki={"query_limit": 10}``)。
    値が ``None`` のキーは無視するため、未指定の CLI オプションをそのまま渡せる。
    """

    cleaned = _drop_none(overrides)
    try:
        return AppSettings(**cleaned)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """設定をロードし、再利用する。

    `pytest` などから `get_settings.cache_clear()` を呼び出すことで再読込できる。
    """

    return load_settings()


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, dict):
            nested = _drop_none(value)
            if nested:
                cleaned[key] = nested
        elif value is not None:
            cleaned[key] = value
    return cleaned


__all__ = [
    "AppSettings",
    "DiscordSettings",
    "LocalizationSettings",
    "StorageSettings",
    "WikiSettings",
    "get_settings",
    "load_settings",
]
