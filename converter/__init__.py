"""Convert crawled web pages into index-ready records.

This module provides a clean API for deciding which crawled pages deserve to
be indexed and for extracting what the index needs from them:

- Admission gates (status, content type, length, language, quality)
- Title, description, HTML standard, features and quality score
- Index terms partitioned into title, top, body and metadata blocks
- Link classification (internal, external, foreign domains, feeds)

Example usage:

    from converter import CrawledDocument, DocumentProcessor, IndexBlock

    processor = DocumentProcessor()
    doc = processor.process(
        CrawledDocument(
            url="https://example.com/",
            content_type="text/html",
            http_status=200,
            crawler_status="OK",
            document_body=html,
            document_body_hash=body_hash,
        )
    )
    if doc.is_ok:
        print(doc.details.title, doc.words.get(IndexBlock.TOP))
    else:
        print(doc.state, doc.disqualification)

    # A whole crawled site
    result = process_domain(CrawledDomain.from_dict(data))
    print(result.state, result.quality, result.stats)

    # Live pages (requires a Crawl4AI browser setup)
    from converter import fetch_domains
    for crawled in fetch_domains(["https://example.com/"]):
        print(process_domain(crawled).stats)
"""

from __future__ import annotations

from .config import ProcessorConfig
from .document import CrawledDocument, CrawledDomain, CrawlerDocumentStatus, UnknownStatus
from .domain import (
    EdgeDomainIndexingState,
    ProcessedDomain,
    process_domain,
    process_domain_async,
)
from .features import HtmlFeature
from .html_standard import HtmlStandard
from .model import (
    DisqualificationReason,
    EdgeUrlState,
    ProcessedDocument,
    ProcessedDocumentDetails,
)
from .processor import DocumentProcessor
from .url import EdgeDomain, EdgeUrl, InvalidUrl
from .word_patterns import filter, filter_strict, is_stop_word  # noqa: A004
from .words import EdgePageWordSet, IndexBlock

__all__ = [
    # Input records
    "CrawledDocument",
    "CrawledDomain",
    "CrawlerDocumentStatus",
    "UnknownStatus",
    # Output records
    "ProcessedDocument",
    "ProcessedDocumentDetails",
    "ProcessedDomain",
    "EdgeUrlState",
    "DisqualificationReason",
    "EdgeDomainIndexingState",
    "EdgePageWordSet",
    "IndexBlock",
    "HtmlFeature",
    "HtmlStandard",
    # URLs
    "EdgeUrl",
    "EdgeDomain",
    "InvalidUrl",
    # Processing
    "DocumentProcessor",
    "ProcessorConfig",
    "process_domain",
    "process_domain_async",
    # Lexical rules
    "is_stop_word",
    "filter",
    "filter_strict",
    # Live fetching (lazy)
    "fetch_domains",
    "fetch_documents_async",
]

_FETCH_EXPORTS = ("fetch_domains", "fetch_documents_async")


# Lazy import for the fetch helpers to avoid starting Crawl4AI if not used
def __getattr__(name):
    if name in _FETCH_EXPORTS:
        from . import fetch

        return getattr(fetch, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
