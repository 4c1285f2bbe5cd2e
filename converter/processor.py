"""Admission pipeline turning crawled documents into index-ready records.

Each document passes an ordered sequence of gates. The first gate that fails
decides the single disqualification reason and no later gate runs:

1. status       - the crawl must have produced a live page (HTTP < 300)
2. content type - only HTML and XHTML are processed
3. length       - enough words after tokenization
4. language     - enough words from the reference dictionary
5. quality      - the valuator score must reach the configured minimum

Admitted pages get keyword extraction, meta-word synthesis and link
classification. Anything unexpected raised along the way is caught in
:meth:`DocumentProcessor.process` and reported as a failed document, so one
bad page never affects another.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import ProcessorConfig
from .document import CrawledDocument, CrawledDomain, CrawlerDocumentStatus
from .features import FeatureExtractor
from .html_standard import get_html_standard
from .keywords import DocumentKeywordExtractor
from .language import (
    MIN_LANGUAGE_AGREEMENT,
    DocumentLanguageData,
    LanguageFilter,
    SentenceExtractor,
)
from .links import FeedExtractor, LinkParser, add_link_words, collect_links
from .meta_words import add_meta_words
from .model import (
    Admitted,
    DisqualificationReason,
    EdgeUrlState,
    ProcessedDocument,
    ProcessedDocumentDetails,
    Rejected,
    Verdict,
)
from .parsing import document_text, parse_document
from .summary import SummaryExtractor, TitleExtractor
from .url import EdgeUrl
from .valuator import DocumentValuator

LOGGER = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = frozenset(
    {"application/xhtml+xml", "application/xhtml", "text/html"}
)


def crawler_status_to_url_state(crawler_status: str, http_status: int) -> EdgeUrlState:
    """Map the crawler's status tag and HTTP status to a URL state.

    Raises:
        UnknownStatus: If ``crawler_status`` is not a known tag.
    """
    status = CrawlerDocumentStatus.from_tag(crawler_status)
    if status is CrawlerDocumentStatus.OK:
        return EdgeUrlState.OK if http_status < 300 else EdgeUrlState.DEAD
    if status is CrawlerDocumentStatus.REDIRECT:
        return EdgeUrlState.REDIRECT
    return EdgeUrlState.DEAD


def is_accepted_content_type(content_type: Optional[str]) -> bool:
    return content_type is not None and content_type.lower() in ACCEPTED_CONTENT_TYPES


def content_hash_to_long(document_body_hash: str) -> int:
    """Fingerprint: first eight hash bytes, little-endian, as a signed 64-bit int."""
    raw = bytes.fromhex(document_body_hash)
    if len(raw) < 8:
        raise ValueError(f"Content hash too short for a 64-bit fingerprint: {len(raw)} bytes")
    return int.from_bytes(raw[:8], "little", signed=True)


# Gates: each returns the rejection it causes, or None to let the document pass.


def check_status(state: EdgeUrlState) -> Optional[Rejected]:
    if state is not EdgeUrlState.OK:
        return Rejected(DisqualificationReason.STATUS)
    return None


def check_content_type(content_type: Optional[str]) -> Optional[Rejected]:
    if not is_accepted_content_type(content_type):
        return Rejected(DisqualificationReason.CONTENT_TYPE)
    return None


def check_length(dld: DocumentLanguageData, min_document_length: int) -> Optional[Rejected]:
    if dld.total_num_words() < min_document_length:
        return Rejected(DisqualificationReason.LENGTH)
    return None


def check_language(agreement: float) -> Optional[Rejected]:
    if agreement < MIN_LANGUAGE_AGREEMENT:
        return Rejected(DisqualificationReason.LANGUAGE)
    return None


def check_quality(quality: float, min_document_quality: float) -> Optional[Rejected]:
    if quality < min_document_quality:
        return Rejected(DisqualificationReason.QUALITY)
    return None


class DocumentProcessor:
    """Runs the admission gates and assembles :class:`ProcessedDocument` records.

    All collaborators are stateless and may be shared between threads, so one
    processor instance can serve many concurrent workers.
    """

    def __init__(
        self,
        config: Optional[ProcessorConfig] = None,
        *,
        sentence_extractor: Optional[SentenceExtractor] = None,
        language_filter: Optional[LanguageFilter] = None,
        feature_extractor: Optional[FeatureExtractor] = None,
        title_extractor: Optional[TitleExtractor] = None,
        summary_extractor: Optional[SummaryExtractor] = None,
        keyword_extractor: Optional[DocumentKeywordExtractor] = None,
        valuator: Optional[DocumentValuator] = None,
        link_parser: Optional[LinkParser] = None,
        feed_extractor: Optional[FeedExtractor] = None,
    ) -> None:
        self.config = config or ProcessorConfig()
        self._sentence_extractor = sentence_extractor or SentenceExtractor()
        self._language_filter = language_filter or LanguageFilter()
        self._feature_extractor = feature_extractor or FeatureExtractor()
        self._title_extractor = title_extractor or TitleExtractor()
        self._summary_extractor = summary_extractor or SummaryExtractor()
        self._keyword_extractor = keyword_extractor or DocumentKeywordExtractor()
        self._valuator = valuator or DocumentValuator()
        self._link_parser = link_parser or LinkParser()
        self._feed_extractor = feed_extractor or FeedExtractor(self._link_parser)

    def process(
        self,
        crawled_document: CrawledDocument,
        crawled_domain: Optional[CrawledDomain] = None,
    ) -> ProcessedDocument:
        """Convert one crawled document. Never raises."""
        url: Optional[EdgeUrl] = None
        try:
            url = EdgeUrl.parse(crawled_document.url)
            state = crawler_status_to_url_state(
                crawled_document.crawler_status, crawled_document.http_status
            )
            verdict = self._admit(crawled_document, crawled_domain, url, state)
        except Exception as exc:
            LOGGER.warning("Failed to convert %s: %s", crawled_document.url, exc)
            LOGGER.debug("Conversion traceback for %s", crawled_document.url, exc_info=True)
            return ProcessedDocument(
                url=url,
                state=EdgeUrlState.DISQUALIFIED,
                error=str(exc) or type(exc).__name__,
            )

        if isinstance(verdict, Rejected):
            LOGGER.info("Disqualified %s: %s", url, verdict.reason.name)
            # A failed status gate keeps the crawl-derived state (DEAD, REDIRECT).
            if verdict.reason is DisqualificationReason.STATUS:
                final_state = state
            else:
                final_state = EdgeUrlState.DISQUALIFIED
            return ProcessedDocument(
                url=url, state=final_state, disqualification=verdict.reason
            )

        return ProcessedDocument(
            url=url,
            state=EdgeUrlState.OK,
            details=verdict.details,
            words=verdict.words,
        )

    def _admit(
        self,
        crawled_document: CrawledDocument,
        crawled_domain: Optional[CrawledDomain],
        url: EdgeUrl,
        state: EdgeUrlState,
    ) -> Verdict:
        rejected = check_status(state) or check_content_type(crawled_document.content_type)
        if rejected:
            return rejected

        soup = parse_document(crawled_document.document_body)
        dld = self._sentence_extractor.extract_sentences(soup)

        rejected = check_length(dld, self.config.min_document_length)
        if rejected:
            return rejected
        rejected = check_language(self._language_filter.dictionary_agreement(dld))
        if rejected:
            return rejected

        description = self._summary_extractor.extract_summary(soup) or ""
        length = len(document_text(soup))
        standard = get_html_standard(soup)
        title = self._title_extractor.get_title_abbreviated(soup, dld, crawled_document.url)
        features = self._feature_extractor.get_features(crawled_domain, soup)
        quality = self._valuator.get_quality(
            standard, soup, dld, len(crawled_document.document_body)
        )
        hash_code = content_hash_to_long(crawled_document.document_body_hash)

        rejected = check_quality(quality, self.config.min_document_quality)
        if rejected:
            return rejected

        links = collect_links(soup, url, self._link_parser, self._feed_extractor)
        details = ProcessedDocumentDetails(
            title=title,
            description=description,
            length=length,
            standard=standard,
            features=features,
            quality=quality,
            hash_code=hash_code,
            links_internal=links.internal,
            links_external=links.external,
            foreign_domains=links.foreign_domains,
            feeds=links.feeds,
        )

        words = self._keyword_extractor.extract_keywords(dld)
        add_meta_words(words, details, url)
        add_link_words(words, links)

        return Admitted(details=details, words=words)
