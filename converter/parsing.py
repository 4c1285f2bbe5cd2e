"""HTML parsing helpers built on BeautifulSoup."""

from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Doctype, NavigableString, Tag

_INVISIBLE_TAGS = frozenset({"script", "style", "noscript", "template", "title", "head"})
_BLOCK_SPACE = re.compile(r"\s+")


def parse_document(body: str) -> BeautifulSoup:
    """Parse a raw HTML body into a queryable document tree."""
    return BeautifulSoup(body or "", "html.parser")


def collapse_whitespace(text: str) -> str:
    return _BLOCK_SPACE.sub(" ", text).strip()


def get_doctype(soup: BeautifulSoup) -> Optional[str]:
    """Return the raw doctype declaration text, or None if the page has none."""
    for item in soup.contents:
        if isinstance(item, Doctype):
            return str(item).strip()
    return None


def get_title_text(soup: BeautifulSoup) -> str:
    title = soup.find("title")
    if title is None:
        return ""
    return collapse_whitespace(title.get_text(" "))


def visible_strings(soup: BeautifulSoup) -> List[str]:
    """Text fragments a reader would see, in document order."""
    fragments: List[str] = []
    for node in soup.find_all(string=True):
        if type(node) is not NavigableString:
            # Doctype, comments, CDATA and processing instructions.
            continue
        if any(
            isinstance(parent, Tag) and parent.name in _INVISIBLE_TAGS
            for parent in node.parents
        ):
            continue
        text = collapse_whitespace(str(node))
        if text:
            fragments.append(text)
    return fragments


def visible_text(soup: BeautifulSoup) -> str:
    return " ".join(visible_strings(soup))


def document_text(soup: BeautifulSoup) -> str:
    """Readable text of the whole page, title first."""
    return " ".join(text for text in (get_title_text(soup), visible_text(soup)) if text)
