"""通知文言 (翻訳リソース) の読み込み。"""

from __future__ import annotations

import json
import re
from importlib import resources
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_pascal

from wiki_notifier.shared.exceptions import ConfigurationError

__all__ = ["Localization", "LocalizationError", "bundled_languages", "load_localization"]

_ICON_BASE = "https://github.com/Manu404/WikiDiscordNotifier/raw/main/icons"
_LANGUAGE_PATTERN = re.compile(r"^[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]{2,8})?$")


class LocalizationError(ConfigurationError):
    """翻訳リソースが見つからない、または不正な場合のエラー。"""

    default_message = "Localization resource is invalid or missing"


class Localization(BaseModel):
    """通知に表示するすべての文言とアイコン URL。

    JSON ファイルのキーは PascalCase (例: ``EditTitle``)。欠けたキーは既定値 (英語) で補う。
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    edit_title: str = "A Page has been edited"
    create_page_title: str = "A new page was created"
    maintenance_action_title: str = "Maintenance action"
    file_upload_title: str = "A new file has been added"
    new_user_title: str = "A new user joined us !"

    commentary: str = "Commentary"
    contributor: str = "Contributor"
    page: str = "Page"
    date: str = "Date"
    consult: str = "Consult"
    modification: str = "Modification"
    user_namespace: str = Field("User", alias="User")

    # 旧来のロケールファイルは綴り違いの `DefaulContentTitle` を使う
    default_content_title: str = Field(
        "Description",
        validation_alias=AliasChoices("DefaultContentTitle", "DefaulContentTitle"),
    )
    default_footer: str = "Thanks you for your work !"
    default_footer_logo_url: str = f"{_ICON_BASE}/heart.png"

    file_upload_content_title: str = "Description"
    file_upload_footer: str = "Thanks for your work !"
    file_upload_footer_logo_url: str = f"{_ICON_BASE}/heart.png"

    new_user_welcome_message_content_title: str = "Welcome among us"
    new_user_welcome_message: str = (
        "Welcome among us, to help us the best you can:\n"
        " • Consult the wiki rules\n"
        " • Consult the contribution guide\n"
        "See you soon !"
    )
    new_user_welcome_message_footer: str = "Thanks for joining us"
    new_user_welcome_message_embed_logo_url: str = f"{_ICON_BASE}/heart.png"

    new_user_embed_logo_url: str = f"{_ICON_BASE}/hand_wave.png"
    edit_page_embed_logo_url: str = f"{_ICON_BASE}/pencil.png"
    create_page_embed_logo_url: str = f"{_ICON_BASE}/add.png"
    maintenance_action_embed_logo_url: str = f"{_ICON_BASE}/settings.png"
    file_upload_embed_logo_url: str = f"{_ICON_BASE}/camera.png"

    webhook_message: str = "New changes are available !"


def _bundled_dir() -> Path:
    return Path(str(resources.files(__package__).joinpath("locales")))


def bundled_languages() -> tuple[str, ...]:
    """同梱されている翻訳の言語コード一覧。"""

    return tuple(sorted(path.stem for path in _bundled_dir().glob("*.json")))


def load_localization(language: str, directory: Path | None = None) -> Localization:
    """`<directory>/<language>.json` を読み込む。

    `directory` に該当ファイルがなければ同梱の翻訳を探す。どちらにもなければ
    `LocalizationError` を送出する。
    """

    if not _LANGUAGE_PATTERN.match(language):
        msg = f"invalid language code: {language!r}"
        raise LocalizationError(msg)

    candidates = [directory / f"{language}.json"] if directory is not None else []
    candidates.append(_bundled_dir() / f"{language}.json")

    for path in candidates:
        if path.is_file():
            return _read(path)

    searched = ", ".join(str(path) for path in candidates)
    msg = f"no localization for language '{language}' (searched: {searched})"
    raise LocalizationError(msg)


def _read(path: Path) -> Localization:
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"failed to read localization file {path}: {exc}"
        raise LocalizationError(msg) from exc

    if not isinstance(data, dict):
        msg = f"localization file {path} must contain a JSON object"
        raise LocalizationError(msg)

    try:
        return Localization.model_validate(data)
    except ValidationError as exc:
        msg = f"localization file {path} is invalid: {exc}"
        raise LocalizationError(msg) from exc
