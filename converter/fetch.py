"""Fetch live pages with Crawl4AI and hand them to the converter as crawled documents.

Example usage:

    from converter.fetch import fetch_domains

    for crawled_domain in fetch_domains(["https://example.com/"]):
        print(crawled_domain.domain, len(crawled_domain.documents))
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from crawl4ai import AsyncWebCrawler, BrowserConfig, CrawlerRunConfig
from crawl4ai.async_configs import CacheMode
from crawl4ai.async_dispatcher import SemaphoreDispatcher

from .builder import _extract_requested_url, build_crawled_document
from .document import CrawledDocument, CrawledDomain, CrawlerDocumentStatus

LOGGER = logging.getLogger(__name__)


@dataclass
class FetchConfigOverrides:
    """Optional fetch-run overrides."""

    verbose: Optional[bool] = None
    semaphore_count: Optional[int] = None
    wait_until: Optional[str] = None
    delay_before_return_html: Optional[float] = None
    page_timeout: Optional[int] = None
    cache_mode: Optional[str] = None
    user_agent: Optional[str] = None


def _convert_cache_mode(value: Optional[str], default: CacheMode) -> CacheMode:
    if not value:
        return default
    candidate = value.strip().replace("CacheMode.", "")
    try:
        return CacheMode[candidate.upper()]
    except KeyError:
        pass
    try:
        return CacheMode(candidate.lower())
    except ValueError:
        LOGGER.warning(
            "Unknown cache_mode '%s'; falling back to %s.", value, default.name
        )
        return default


def _apply_overrides(config: CrawlerRunConfig, overrides: FetchConfigOverrides) -> None:
    """Apply optional overrides to a CrawlerRunConfig."""
    if overrides.verbose is not None:
        config.verbose = overrides.verbose
    if overrides.semaphore_count is not None:
        config.semaphore_count = overrides.semaphore_count
    if overrides.wait_until is not None:
        config.wait_until = overrides.wait_until
    if overrides.delay_before_return_html is not None:
        config.delay_before_return_html = overrides.delay_before_return_html
    if overrides.page_timeout is not None:
        config.page_timeout = overrides.page_timeout
    if overrides.cache_mode:
        config.cache_mode = _convert_cache_mode(overrides.cache_mode, config.cache_mode)
    if overrides.user_agent:
        config.user_agent = overrides.user_agent


def build_fetch_run_config(
    overrides: Optional[FetchConfigOverrides] = None,
) -> CrawlerRunConfig:
    """RunConfig for fetching raw page HTML."""
    config = CrawlerRunConfig(
        verbose=False,
        semaphore_count=1,
        wait_until="domcontentloaded",
        delay_before_return_html=0.5,
        cache_mode=CacheMode.BYPASS,
    )
    if overrides:
        _apply_overrides(config, overrides)
    return config


async def fetch_document_async(
    url: str,
    *,
    config: Optional[CrawlerRunConfig] = None,
) -> CrawledDocument:
    """
    Fetch a single page and return it as a crawled document.

    Args:
        url: The URL to fetch.
        config: Optional CrawlerRunConfig for advanced customization.

    Returns:
        CrawledDocument; failed fetches carry crawler status ERROR.
    """
    run_config = config or build_fetch_run_config()
    async with AsyncWebCrawler(config=BrowserConfig(verbose=False)) as crawler:
        container = await crawler.arun(url=url, config=run_config)

    try:
        first_result = container[0]
    except (IndexError, TypeError):
        first_result = None

    if first_result is None:
        return _failed_document(url, "Crawler returned no result")

    return build_crawled_document(first_result, requested_url=url)


async def fetch_documents_async(
    urls: List[str],
    *,
    config: Optional[CrawlerRunConfig] = None,
    concurrency: int = 3,
) -> List[CrawledDocument]:
    """
    Fetch multiple pages, keeping the input order.

    Args:
        urls: List of URLs to fetch.
        config: Optional CrawlerRunConfig for advanced customization.
        concurrency: Maximum number of concurrent fetches.

    Returns:
        One CrawledDocument per input URL; failures have status ERROR.
    """
    if not urls:
        return []

    run_config = config or build_fetch_run_config()
    dispatcher = SemaphoreDispatcher(semaphore_count=max(1, concurrency))
    by_url: Dict[str, CrawledDocument] = {}

    try:
        async with AsyncWebCrawler(config=BrowserConfig(verbose=False)) as crawler:
            results = await crawler.arun_many(
                urls=urls, config=run_config, dispatcher=dispatcher
            )
            for result in results or []:
                result_url = str(getattr(result, "url", "") or "")
                requested = _match_requested_url(
                    _extract_requested_url(getattr(result, "metadata", None) or {}, result_url),
                    urls,
                )
                try:
                    by_url[requested] = build_crawled_document(result, requested_url=requested)
                except Exception as exc:
                    LOGGER.warning("Failed to build document for %s: %s", requested, exc)
                    by_url[requested] = _failed_document(requested, str(exc))
    except Exception as exc:
        LOGGER.warning("Fetching %d URLs failed: %s", len(urls), exc)
        return [_failed_document(url, str(exc)) for url in urls]

    return [
        by_url.get(url) or _failed_document(url, "Crawler returned no result")
        for url in urls
    ]


def _url_key(url: str) -> str:
    return url.split("#", 1)[0].rstrip("/")


def _match_requested_url(url: str, requested: List[str]) -> str:
    """Map a URL reported by the crawler back to the URL it was asked for."""
    if url in requested:
        return url
    key = _url_key(url)
    for candidate in requested:
        if _url_key(candidate) == key:
            return candidate
    return url


def _failed_document(url: str, error_message: str) -> CrawledDocument:
    return CrawledDocument(
        url=url,
        content_type=None,
        http_status=0,
        crawler_status=CrawlerDocumentStatus.ERROR.name,
        document_body="",
        document_body_hash="",
        crawler_status_desc=error_message,
    )


def group_by_domain(documents: List[CrawledDocument]) -> List[CrawledDomain]:
    """Bundle fetched documents into one crawled domain per host, in first-seen order."""
    domains: Dict[str, CrawledDomain] = {}
    for document in documents:
        host = (urlsplit(document.url).hostname or "").lower()
        if not host:
            LOGGER.warning("Dropping document without host: %s", document.url)
            continue
        domains.setdefault(host, CrawledDomain(domain=host)).documents.append(document)
    return list(domains.values())


def fetch_domains(
    urls: List[str],
    *,
    config: Optional[CrawlerRunConfig] = None,
    concurrency: int = 3,
) -> List[CrawledDomain]:
    """Synchronous helper: fetch ``urls`` and group the results per site."""
    documents = asyncio.run(
        fetch_documents_async(urls, config=config, concurrency=concurrency)
    )
    return group_by_domain(documents)
