"""Process every crawled document of a site."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .document import CrawledDomain
from .model import ProcessedDocument
from .processor import DocumentProcessor
from .url import EdgeDomain

LOGGER = logging.getLogger(__name__)


class EdgeDomainIndexingState(Enum):
    ACTIVE = 0
    BLOCKED = -1
    REDIR = -2
    ERROR = -3
    UNKNOWN = -100

    @property
    def code(self) -> int:
        return self.value


_DOMAIN_STATES = {
    "OK": EdgeDomainIndexingState.ACTIVE,
    "BLOCKED": EdgeDomainIndexingState.BLOCKED,
    "REDIRECT": EdgeDomainIndexingState.REDIR,
    "ERROR": EdgeDomainIndexingState.ERROR,
}


def domain_indexing_state(crawler_status: Optional[str]) -> EdgeDomainIndexingState:
    return _DOMAIN_STATES.get((crawler_status or "").upper(), EdgeDomainIndexingState.UNKNOWN)


@dataclass
class ProcessedDomain:
    """A site's processed documents plus the site-level state and quality.

    This is what the persistence layer consumes: ``state`` and ``quality``
    describe the site, each document carries its own result.
    """

    domain: EdgeDomain
    state: EdgeDomainIndexingState
    redirect: Optional[EdgeDomain] = None
    documents: List[ProcessedDocument] = field(default_factory=list)
    quality: Optional[float] = None
    stats: Dict[str, int] = field(default_factory=dict)


def document_outcome(document: ProcessedDocument) -> str:
    """Counter key for one document, keeping failures apart from each gate."""
    if document.failed:
        return "failed"
    if document.disqualification is not None:
        return f"disqualified:{document.disqualification.value}"
    return document.state.value


def _summarize(documents: List[ProcessedDocument]) -> Dict[str, int]:
    stats = Counter(document_outcome(doc) for doc in documents)
    stats["total_documents"] = len(documents)
    return dict(stats)


def _average_quality(documents: List[ProcessedDocument]) -> Optional[float]:
    qualities = [doc.quality for doc in documents if doc.quality is not None]
    if not qualities:
        return None
    return sum(qualities) / len(qualities)


async def process_domain_async(
    crawled_domain: CrawledDomain,
    processor: Optional[DocumentProcessor] = None,
    *,
    concurrency: int = 4,
) -> ProcessedDomain:
    """
    Run every document of a crawled site through the processor.

    Documents are converted in worker threads, at most ``concurrency`` at a
    time. The output keeps the input order.

    Args:
        crawled_domain: The site and its crawled documents.
        processor: Processor to use; a default-configured one if omitted.
        concurrency: Maximum number of documents processed at once.

    Returns:
        ProcessedDomain with per-document results, site state and stats.
    """
    processor = processor or DocumentProcessor()
    domain = EdgeDomain.from_host(crawled_domain.domain)
    state = domain_indexing_state(crawled_domain.crawler_status)

    redirect = None
    if crawled_domain.redirect_domain:
        redirect = EdgeDomain.from_host(crawled_domain.redirect_domain)

    if state is not EdgeDomainIndexingState.ACTIVE:
        LOGGER.info("Skipping documents of %s (state=%s)", domain, state.name)
        return ProcessedDomain(domain=domain, state=state, redirect=redirect, stats=_summarize([]))

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _run(document):
        async with semaphore:
            return await asyncio.to_thread(processor.process, document, crawled_domain)

    documents = list(
        await asyncio.gather(*(_run(doc) for doc in crawled_domain.documents))
    )
    stats = _summarize(documents)
    LOGGER.info(
        "Processed %s: %d documents (%d ok, %d failed)",
        domain,
        stats["total_documents"],
        stats.get("ok", 0),
        stats.get("failed", 0),
    )

    return ProcessedDomain(
        domain=domain,
        state=state,
        redirect=redirect,
        documents=documents,
        quality=_average_quality(documents),
        stats=stats,
    )


def process_domain(
    crawled_domain: CrawledDomain,
    processor: Optional[DocumentProcessor] = None,
    *,
    concurrency: int = 4,
) -> ProcessedDomain:
    """Synchronous wrapper for process_domain_async."""
    return asyncio.run(
        process_domain_async(crawled_domain, processor, concurrency=concurrency)
    )
