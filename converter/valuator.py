"""Document quality scoring."""

from __future__ import annotations

import math

from bs4 import BeautifulSoup

from .html_standard import HtmlStandard
from .language import DocumentLanguageData
from .parsing import visible_text

_SCRIPT_PENALTY = 0.25
_LARGE_INLINE_SCRIPT = 1000


class DocumentValuator:
    """Score a page by its text-to-markup ratio, HTML standard and scripting.

    Higher is better. A plain, text-heavy HTML5 page scores close to zero;
    script-laden pages with little text score well below it.
    """

    def get_quality(
        self,
        standard: HtmlStandard,
        soup: BeautifulSoup,
        dld: DocumentLanguageData,
        raw_length: int,
    ) -> float:
        text_length = max(len(visible_text(soup)), 1)
        ratio = math.log(text_length / (1.0 + raw_length))
        return ratio * standard.scale + standard.offset - self.get_script_penalty(soup)

    def get_script_penalty(self, soup: BeautifulSoup) -> float:
        penalty = 0.0
        for script in soup.find_all("script"):
            if script.get("src") or len(script.get_text()) > _LARGE_INLINE_SCRIPT:
                penalty += _SCRIPT_PENALTY
        return penalty
