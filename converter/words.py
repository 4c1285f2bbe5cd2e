"""Partitioned term collections produced for the index builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Tuple


class IndexBlock(Enum):
    """Named partition of extracted terms."""

    TITLE = "title"
    TOP = "top"
    WORDS = "words"
    META = "meta"


@dataclass(slots=True)
class EdgePageWordSet:
    """Terms grouped by index block.

    Blocks hold multisets: ``append`` never deduplicates, that policy belongs
    to the index builder.
    """

    blocks: Dict[IndexBlock, List[str]] = field(default_factory=dict)

    def append(self, block: IndexBlock, words: Iterable[str]) -> None:
        self.blocks.setdefault(block, []).extend(words)

    def get(self, block: IndexBlock) -> Tuple[str, ...]:
        return tuple(self.blocks.get(block, ()))

    def __contains__(self, block: object) -> bool:
        return block in self.blocks

    def as_dict(self) -> Dict[str, List[str]]:
        """Convert to a JSON-serializable dictionary keyed by block name."""
        return {block.value: list(words) for block, words in self.blocks.items()}
