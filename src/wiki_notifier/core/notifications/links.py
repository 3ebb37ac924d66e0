"""Wiki 上の URL 組み立てと正規化。"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["WikiLinks", "normalize_url", "wiki_title"]

_SCHEME_PREFIX = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*:)//+")
_SLASH_RUN = re.compile(r"/{2,}")


def normalize_url(url: str) -> str:
    """連続する `/` を 1 つにまとめる。`scheme:` 直後の `//` だけは維持する。

    >>> normalize_url("https://a//b///c")
    'https://a/b/c'
    """

    match = _SCHEME_PREFIX.match(url)
    if match is None:
        return _SLASH_RUN.sub("/", url)
    rest = url[match.end():]
    return f"{match.group(1)}//{_SLASH_RUN.sub('/', rest)}"


def wiki_title(title: str) -> str:
    """MediaWiki の URL 表記 (空白をアンダースコアへ) に変換する。"""

    return title.replace(" ", "_")


@dataclass(slots=True, frozen=True)
class WikiLinks:
    """ドメインと記事パスから各種リンクを組み立てる。"""

    domain: str
    wiki_path: str = "wiki"

    def page(self, title: str) -> str:
        return normalize_url(f"{self.domain}/{self.wiki_path}/{wiki_title(title)}")

    def user_page(self, user: str) -> str:
        # 正規名前空間 User: はどの言語の Wiki でも解決される
        return self.page(f"User:{user}")

    def diff(self, title: str, revision_id: int, previous_revision_id: int) -> str:
        return normalize_url(
            f"{self.domain}/{self.wiki_path}/index.php"
            f"?title={wiki_title(title)}&diff={revision_id}&oldid={previous_revision_id}"
        )

    def resource(self, href: str) -> str:
        """ページ HTML 内の href をドメイン基準の絶対 URL にする。"""

        if _SCHEME_PREFIX.match(href):
            return normalize_url(href)
        if href.startswith("//"):
            scheme = self.domain.split(":", 1)[0] if ":" in self.domain else "https"
            return normalize_url(f"{scheme}:{href}")
        return normalize_url(f"{self.domain}/{href}")
