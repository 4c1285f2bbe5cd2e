"""Keyword extraction from tokenized page text."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from .language import DocumentLanguageData
from .word_patterns import MAX_WORD_LENGTH, filter_strict, is_stop_word
from .words import EdgePageWordSet, IndexBlock

MAX_TOP_WORDS = 25
MIN_TOP_WORD_COUNT = 2


def _normalize(word: str) -> Optional[str]:
    if len(word) > MAX_WORD_LENGTH:
        return None
    if is_stop_word(word) or not filter_strict(word):
        return None
    return word.lower()


def _distinct(words: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(words))


class DocumentKeywordExtractor:
    """Turn sentence data into index terms that pass the lexical admission rules."""

    def extract_keywords(self, dld: DocumentLanguageData) -> EdgePageWordSet:
        counts: Counter[str] = Counter()
        body: List[str] = []
        for sentence in dld.sentences:
            for word in sentence.words:
                keyword = _normalize(word)
                if keyword is not None:
                    counts[keyword] += 1
                    body.append(keyword)

        title: List[str] = []
        if dld.title is not None:
            title = [k for k in map(_normalize, dld.title.words) if k is not None]

        top = sorted(
            (word for word, count in counts.items() if count >= MIN_TOP_WORD_COUNT),
            key=lambda word: (-counts[word], word),
        )[:MAX_TOP_WORDS]

        words = EdgePageWordSet()
        words.append(IndexBlock.TITLE, _distinct(title))
        words.append(IndexBlock.TOP, top)
        words.append(IndexBlock.WORDS, _distinct(body))
        return words
