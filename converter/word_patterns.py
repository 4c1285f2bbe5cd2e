"""Lexical admission rules for index terms.

These predicates decide whether a single candidate token may be counted as a
keyword. They are independent of the tokenizer that produces the candidates:

    from converter.word_patterns import is_stop_word

    keywords = [w for w in tokens if not is_stop_word(w)]

The stopword set is loaded once when the module is imported and never
modified afterwards, so it can be shared freely between worker threads.
"""

from __future__ import annotations

import re
from importlib import resources
from typing import FrozenSet

MIN_WORD_LENGTH = 1
MAX_WORD_LENGTH = 64

# Letters (ASCII plus Latin-1 accented ranges), digits and a few joiners,
# with an optional '#' marker on either end (c#, #hashtag).
_WORD_CHARS = "_@a-zA-Z0-9'+\\-À-ÖØ-öø-ÿ"

WORD_PATTERN = re.compile(f"#?[{_WORD_CHARS}]+#?")

# Splits running text into candidate tokens. Dots survive inside tokens
# (node.js) but a dot followed by whitespace or end-of-text ends a token.
WORD_BREAK_PATTERN = re.compile(
    f"(?:[^#.{_WORD_CHARS}]+)|\\||(?:\\.(?:\\s+|$))"
)

CHARACTER_NOISE_PATTERN = re.compile(r"^[/+\-]+$")

_MAX_DIGITS = 6
_MAX_REPEATED_JOINERS = 2


def _load_word_list(name: str) -> FrozenSet[str]:
    text = resources.files(__package__).joinpath("resources", name).read_text(
        encoding="utf-8"
    )
    return frozenset(
        line.strip().lower() for line in text.splitlines() if line.strip()
    )


TOP_WORDS: FrozenSet[str] = _load_word_list("en-stopwords")


def matches_word_shape(word: str) -> bool:
    """Return True if ``word`` is made only of admissible term characters."""
    return WORD_PATTERN.fullmatch(word) is not None


def filter(word: str) -> bool:  # noqa: A001
    """Noise test: return False for tokens that look like junk.

    Rejects blank input, tokens with three or more hyphens or pluses,
    tokens that start or end with a hyphen, and tokens with more than six
    digits.
    """
    if not word or word.isspace():
        return False
    if word.count("-") > _MAX_REPEATED_JOINERS:
        return False
    if word.count("+") > _MAX_REPEATED_JOINERS:
        return False
    if word.startswith("-") or word.endswith("-"):
        return False

    num_digits = 0
    for char in word:
        if char.isdecimal():
            num_digits += 1
            if num_digits > _MAX_DIGITS:
                return False

    return True


def filter_strict(word: str) -> bool:
    """Return False for terms made up entirely of digits."""
    num_digits = sum(1 for char in word if char.isdecimal())
    return num_digits != len(word)


def is_stop_word(word: str) -> bool:
    """Return True if ``word`` must not be indexed as a standalone keyword."""
    if len(word) < MIN_WORD_LENGTH:
        return True
    if not matches_word_shape(word):
        return True
    if not filter(word):
        return True
    return word.lower() in TOP_WORDS
