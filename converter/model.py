"""Output records of the document processor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Union

from .features import HtmlFeature
from .html_standard import HtmlStandard
from .url import EdgeDomain, EdgeUrl
from .words import EdgePageWordSet


class EdgeUrlState(Enum):
    OK = "ok"
    REDIRECT = "redirect"
    DEAD = "dead"
    DISQUALIFIED = "disqualified"


class DisqualificationReason(Enum):
    STATUS = "status"
    CONTENT_TYPE = "content_type"
    LENGTH = "length"
    LANGUAGE = "language"
    QUALITY = "quality"


@dataclass(frozen=True, slots=True)
class ProcessedDocumentDetails:
    """Everything extracted from an admitted page apart from its terms."""

    title: str
    description: str
    length: int
    standard: HtmlStandard
    features: FrozenSet[HtmlFeature]
    quality: float
    hash_code: int
    links_internal: FrozenSet[EdgeUrl] = frozenset()
    links_external: FrozenSet[EdgeUrl] = frozenset()
    foreign_domains: FrozenSet[EdgeDomain] = frozenset()
    feeds: FrozenSet[EdgeUrl] = frozenset()


@dataclass(frozen=True, slots=True)
class Admitted:
    details: ProcessedDocumentDetails
    words: EdgePageWordSet


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: DisqualificationReason


Verdict = Union[Admitted, Rejected]


@dataclass(frozen=True, slots=True)
class ProcessedDocument:
    """Result of running one crawled document through the processor.

    ``details`` and ``words`` are present exactly when ``state`` is OK. A
    deliberate rejection carries one ``disqualification`` reason; an
    unexpected failure carries an ``error`` message instead.
    """

    url: Optional[EdgeUrl]
    state: EdgeUrlState
    details: Optional[ProcessedDocumentDetails] = None
    words: Optional[EdgePageWordSet] = None
    disqualification: Optional[DisqualificationReason] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        is_ok = self.state is EdgeUrlState.OK
        if is_ok != (self.details is not None) or is_ok != (self.words is not None):
            raise ValueError(
                f"details and words must be present iff state is OK (state={self.state.name})"
            )
        if self.disqualification is not None and self.error is not None:
            raise ValueError("A document is either disqualified or failed, not both")

    @property
    def is_ok(self) -> bool:
        return self.state is EdgeUrlState.OK

    @property
    def failed(self) -> bool:
        """True when conversion aborted on an unexpected error."""
        return self.error is not None

    @property
    def quality(self) -> Optional[float]:
        return self.details.quality if self.details is not None else None
