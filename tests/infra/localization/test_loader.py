"""翻訳リソースの読み込みを検証する。"""

from __future__ import annotations

import json

import pytest

from wiki_notifier.infra.localization import (
    Localization,
    LocalizationError,
    bundled_languages,
    load_localization,
)


def test_bundled_languages() -> None:
    languages = bundled_languages()

    assert "en" in languages
    assert "fr" in languages
    assert list(languages) == sorted(languages)


def test_bundled_english_matches_defaults() -> None:
    assert load_localization("en") == Localization()


def test_bundled_french() -> None:
    localization = load_localization("fr")

    assert localization.user_namespace == "Utilisateur"
    assert localization.webhook_message == "Nouveau changement sur le wiki !"
    assert localization.edit_title != Localization().edit_title


def test_directory_overrides_bundled(tmp_path) -> None:
    (tmp_path / "en.json").write_text(
        json.dumps({"EditTitle": "Page edited", "User": "Member"}),
        encoding="utf-8",
    )

    localization = load_localization("en", tmp_path)

    assert localization.edit_title == "Page edited"
    assert localization.user_namespace == "Member"
    # 欠けたキーは既定値で補う
    assert localization.consult == "Consult"


def test_legacy_content_title_key_is_accepted(tmp_path) -> None:
    (tmp_path / "es.json").write_text(
        json.dumps({"DefaulContentTitle": "Descripción"}, ensure_ascii=False),
        encoding="utf-8",
    )

    assert load_localization("es", tmp_path).default_content_title == "Descripción"


def test_content_title_accepts_field_name() -> None:
    assert Localization(default_content_title="Résumé").default_content_title == "Résumé"


def test_directory_falls_back_to_bundled(tmp_path) -> None:
    assert load_localization("fr", tmp_path) == load_localization("fr")


def test_utf8_bom_is_accepted(tmp_path) -> None:
    (tmp_path / "de.json").write_text(
        json.dumps({"Page": "Seite"}, ensure_ascii=False),
        encoding="utf-8-sig",
    )

    assert load_localization("de", tmp_path).page == "Seite"


def test_unknown_language_raises(tmp_path) -> None:
    with pytest.raises(LocalizationError, match="no localization"):
        load_localization("xx", tmp_path)


@pytest.mark.parametrize("language", ["", "../en", "english-language-code"])
def test_invalid_language_code_raises(language: str) -> None:
    with pytest.raises(LocalizationError, match="invalid language code"):
        load_localization(language)


def test_malformed_json_raises(tmp_path) -> None:
    (tmp_path / "en.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(LocalizationError):
        load_localization("en", tmp_path)


def test_non_object_json_raises(tmp_path) -> None:
    (tmp_path / "en.json").write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(LocalizationError, match="JSON object"):
        load_localization("en", tmp_path)


def test_wrong_value_type_raises(tmp_path) -> None:
    (tmp_path / "en.json").write_text(json.dumps({"EditTitle": 42}), encoding="utf-8")

    with pytest.raises(LocalizationError, match="invalid"):
        load_localization("en", tmp_path)


def test_localization_is_immutable() -> None:
    localization = Localization()

    with pytest.raises(ValueError):
        localization.edit_title = "changed"  # type: ignore[misc]
