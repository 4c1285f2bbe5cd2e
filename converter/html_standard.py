"""Classify which HTML standard a page is written against."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from bs4 import BeautifulSoup

from .parsing import get_doctype


class HtmlStandard(Enum):
    """HTML generation of a document, with its quality-score weighting."""

    PLAIN = ("plain", 0.0, 1.0)
    UNKNOWN = ("unknown", 0.0, 1.0)
    HTML123 = ("html123", 0.0, 1.0)
    HTML4 = ("html4", -0.1, 1.05)
    XHTML = ("xhtml", -0.1, 1.05)
    HTML5 = ("html5", 0.5, 1.1)

    def __init__(self, label: str, offset: float, scale: float) -> None:
        self.label = label
        self.offset = offset
        self.scale = scale


_DOCTYPE_KEYWORD = re.compile(r"^\s*doctype\s+", re.IGNORECASE)
_PUBLIC_ID = re.compile(r'\bPUBLIC\s+["\']([^"\']*)["\']', re.IGNORECASE)

_HTML123_PREFIXES = (
    "-//IETF//DTD HTML 2",
    "-//IETF//DTD HTML//EN",
    "-//IETF//DTD HTML 3",
    "-//W3C//DTD HTML 3",
    "-/W3C//DTD HTML 3",
    "-//W3O//DTD W3 HTML 2",
    "-//W3O//DTD W3 HTML 3",
    "-//W3O//DTD HTML 3",
    "-//INTERNET/RFC XXXX//EN",
    "-//NETSCAPE COMM. CORP",
    "-//SQ//DTD HTML 2",
    "-//SOFTQUAD//DTD HTML 2",
    "-//SOFTQUAD SOFTWARE//DTD HOTMETAL PRO 4",
    "-//MICROSOFT//DTD INTERNET EXPLORER 2",
    "-//MICROSOFT//DTD INTERNET EXPLORER 3",
    "-//O'REILLY AND ASSOCIATES//DTD HTML 2",
    "-//SPYGLASS//DTD HTML 2",
    "-//METRIUS//DTD METRIUS PRESENTATIONAL",
)

_HTML5_CUES = ("article", "header", "footer", "nav", "section", "main")
_HTML4_CUES = ("font", "center", "frameset")


def parse_doctype(doctype: Optional[str]) -> HtmlStandard:
    """Classify from the doctype declaration text (``html PUBLIC "..."``)."""
    if doctype is None:
        return HtmlStandard.UNKNOWN

    doctype = _DOCTYPE_KEYWORD.sub("", doctype)
    match = _PUBLIC_ID.search(doctype)
    public_id = match.group(1).strip().upper() if match else ""
    if not public_id:
        if doctype.strip().lower().startswith("html"):
            return HtmlStandard.HTML5
        return HtmlStandard.UNKNOWN

    if public_id.startswith("-//SOFTQUAD SOFTWARE//DTD") and "HTML 4" in public_id:
        return HtmlStandard.HTML4
    if public_id.startswith("-//SOFTQUAD SOFTWARE//DTD") and "HTML 3" in public_id:
        return HtmlStandard.HTML123
    if public_id.startswith(_HTML123_PREFIXES):
        return HtmlStandard.HTML123
    if public_id.startswith("-//W3C//DTD HTML 4"):
        return HtmlStandard.HTML4
    if public_id.startswith("-//W3C//DTD XHTML"):
        return HtmlStandard.XHTML
    return HtmlStandard.UNKNOWN


def sniff_html_standard(soup: BeautifulSoup) -> HtmlStandard:
    """Guess the standard from structural elements when the doctype is unhelpful."""
    html5_cues = sum(1 for tag in _HTML5_CUES if soup.find(tag) is not None)
    html4_cues = sum(1 for tag in _HTML4_CUES if soup.find(tag) is not None)

    if html4_cues > html5_cues:
        return HtmlStandard.HTML4
    if html5_cues > 0:
        return HtmlStandard.HTML5
    return HtmlStandard.HTML123


def get_html_standard(soup: BeautifulSoup) -> HtmlStandard:
    standard = parse_doctype(get_doctype(soup))
    if standard is HtmlStandard.UNKNOWN:
        return sniff_html_standard(soup)
    return standard
