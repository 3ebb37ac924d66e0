from __future__ import annotations

import typer

from wiki_notifier.cli.commands import run
from wiki_notifier.infra.localization import bundled_languages
from wiki_notifier.shared.logging import configure_logging

app = typer.Typer(help="MediaWiki の最近の更新を Discord へ通知するツールのCLI")

app.add_typer(run.app, name="run", help="前回実行以降の変更を通知する")


@app.command("languages")
def languages() -> None:
    """同梱されている通知文言の言語コードを表示する。"""

    for code in bundled_languages():
        typer.echo(code)


def main() -> None:
    """エントリポイント。"""

    configure_logging()
    app()


if __name__ == "__main__":  # pragma: no cover - CLI エントリ
    main()
