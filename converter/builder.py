"""Translate Crawl4AI results into CrawledDocument instances."""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from crawl4ai.models import CrawlResult

from .document import CrawledDocument, CrawlerDocumentStatus

LOGGER = logging.getLogger(__name__)


def build_crawled_document(
    result: CrawlResult, *, requested_url: Optional[str] = None
) -> CrawledDocument:
    """Convert a Crawl4AI CrawlResult into the converter's input record."""
    request_url = requested_url or _extract_requested_url(result.metadata or {}, result.url)
    final_url = str(getattr(result, "redirected_url", None) or request_url)
    html = result.html or ""
    headers = result.response_headers or {}

    if not result.success:
        status = CrawlerDocumentStatus.ERROR
        status_desc = _derive_failure_reason(result)
    elif _strip_fragment(final_url) != _strip_fragment(request_url):
        status = CrawlerDocumentStatus.REDIRECT
        status_desc = f"Redirected to {final_url}"
    else:
        status = CrawlerDocumentStatus.OK
        status_desc = None

    if status is not CrawlerDocumentStatus.OK:
        LOGGER.debug("Fetch of %s ended as %s: %s", request_url, status.name, status_desc)

    return CrawledDocument(
        url=request_url,
        content_type=_content_type(headers),
        http_status=int(result.status_code or 0),
        crawler_status=status.name,
        document_body=html,
        document_body_hash=hashlib.sha256(html.encode("utf-8")).hexdigest(),
        crawler_status_desc=status_desc,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def _content_type(headers: Dict[str, Any]) -> Optional[str]:
    """Media type from the response headers, without parameters such as charset."""
    for name, value in headers.items():
        if str(name).lower() == "content-type" and value:
            return str(value).split(";", 1)[0].strip().lower() or None
    return None


def _strip_fragment(url: str) -> str:
    return url.split("#", 1)[0]


def _derive_failure_reason(result: CrawlResult) -> str:
    if result.error_message:
        return result.error_message
    if result.status_code:
        return f"HTTP {result.status_code}"
    return "Crawler returned no content"


def _extract_requested_url(metadata: Dict[str, Any], default: Optional[str]) -> str:
    for key in ("requested_url", "request_url", "source_url"):
        value = metadata.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return str(default or "")
