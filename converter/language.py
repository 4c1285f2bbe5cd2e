"""Sentence extraction and language agreement scoring."""

from __future__ import annotations

import re
from dataclasses import dataclass
from importlib import resources
from typing import FrozenSet, Iterator, Optional, Tuple

from bs4 import BeautifulSoup

from .parsing import get_title_text, visible_strings
from .word_patterns import WORD_BREAK_PATTERN

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")

# Minimum agreement for a document to count as written in the target language.
MIN_LANGUAGE_AGREEMENT = 0.1


@dataclass(frozen=True, slots=True)
class DocumentSentence:
    """One sentence, as original tokens and their lower-cased forms."""

    words: Tuple[str, ...]
    words_lower_case: Tuple[str, ...]

    @classmethod
    def from_words(cls, words: Tuple[str, ...]) -> "DocumentSentence":
        return cls(words=words, words_lower_case=tuple(w.lower() for w in words))

    def __len__(self) -> int:
        return len(self.words)


@dataclass(frozen=True, slots=True)
class DocumentLanguageData:
    """Tokenized text of a page: body sentences plus the title sentence."""

    sentences: Tuple[DocumentSentence, ...]
    title: Optional[DocumentSentence] = None

    def total_num_words(self) -> int:
        return sum(len(sentence) for sentence in self.sentences)

    def iter_lower_case(self) -> Iterator[str]:
        for sentence in self.sentences:
            yield from sentence.words_lower_case


def tokenize(text: str) -> Tuple[str, ...]:
    return tuple(token for token in WORD_BREAK_PATTERN.split(text) if token)


class SentenceExtractor:
    """Split a parsed page into language-annotated sentences."""

    def extract_sentences(self, soup: BeautifulSoup) -> DocumentLanguageData:
        sentences = []
        for fragment in visible_strings(soup):
            for chunk in _SENTENCE_END.split(fragment):
                words = tokenize(chunk)
                if words:
                    sentences.append(DocumentSentence.from_words(words))

        title_words = tokenize(get_title_text(soup))
        title = DocumentSentence.from_words(title_words) if title_words else None
        return DocumentLanguageData(sentences=tuple(sentences), title=title)


def _load_dictionary() -> FrozenSet[str]:
    text = resources.files(__package__).joinpath("resources", "en-dictionary").read_text(
        encoding="utf-8"
    )
    return frozenset(line.strip() for line in text.splitlines() if line.strip())


ENGLISH_WORDS: FrozenSet[str] = _load_dictionary()


class LanguageFilter:
    """Estimate how much of a document is written in English."""

    def __init__(self, dictionary: FrozenSet[str] = ENGLISH_WORDS) -> None:
        self._dictionary = dictionary

    def dictionary_agreement(self, dld: DocumentLanguageData) -> float:
        """Share of distinct words found in the reference vocabulary, in [0, 1]."""
        seen = set(dld.iter_lower_case())
        if not seen or not self._dictionary:
            return 0.0
        known = sum(1 for word in seen if word in self._dictionary)
        return known / min(len(seen), len(self._dictionary))
