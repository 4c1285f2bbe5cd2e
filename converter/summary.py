"""Title and description extraction."""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup

from .language import DocumentLanguageData
from .parsing import collapse_whitespace, get_title_text
from .url import EdgeUrl

MAX_TITLE_LENGTH = 128
MAX_SUMMARY_LENGTH = 255
MIN_PARAGRAPH_LENGTH = 60


def _abbreviate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


class TitleExtractor:
    def get_title_abbreviated(
        self, soup: BeautifulSoup, dld: DocumentLanguageData, url: str
    ) -> str:
        return _abbreviate(self.get_title(soup, dld, url), MAX_TITLE_LENGTH)

    def get_title(self, soup: BeautifulSoup, dld: DocumentLanguageData, url: str) -> str:
        title = get_title_text(soup)
        if title:
            return title

        for heading in ("h1", "h2"):
            tag = soup.find(heading)
            if tag is not None:
                text = collapse_whitespace(tag.get_text(" "))
                if text:
                    return text

        if dld.sentences:
            return " ".join(dld.sentences[0].words)

        try:
            parsed = EdgeUrl.parse(url)
        except ValueError:
            return url
        segment = parsed.path.rstrip("/").rsplit("/", 1)[-1]
        return segment or parsed.domain.host


class SummaryExtractor:
    """Pick a short description from meta tags or the first real paragraph."""

    def extract_summary(self, soup: BeautifulSoup) -> Optional[str]:
        for attrs in ({"name": "description"}, {"property": "og:description"}):
            meta = soup.find("meta", attrs=attrs)
            if meta is not None:
                content = collapse_whitespace(meta.get("content") or "")
                if content:
                    return _abbreviate(content, MAX_SUMMARY_LENGTH)

        for paragraph in soup.find_all("p"):
            text = collapse_whitespace(paragraph.get_text(" "))
            if len(text) >= MIN_PARAGRAPH_LENGTH:
                return _abbreviate(text, MAX_SUMMARY_LENGTH)

        return None
