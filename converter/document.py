"""Data structures representing crawled documents and their sites."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class UnknownStatus(ValueError):
    """Raised for a crawler status tag this converter does not know."""


class CrawlerDocumentStatus(Enum):
    OK = "OK"
    BAD_CONTENT_TYPE = "BAD_CONTENT_TYPE"
    BAD_CHARSET = "BAD_CHARSET"
    REDIRECT = "REDIRECT"
    ROBOTS_TXT = "ROBOTS_TXT"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"

    @classmethod
    def from_tag(cls, tag: str) -> "CrawlerDocumentStatus":
        try:
            return cls[tag]
        except KeyError:
            raise UnknownStatus(f"Unknown crawler status {tag!r}") from None


@dataclass(frozen=True, slots=True)
class CrawledDocument:
    """One fetched page as recorded by the crawler."""

    url: str
    content_type: Optional[str]
    http_status: int
    crawler_status: str  # OK, REDIRECT, ERROR, ...
    document_body: str
    document_body_hash: str
    crawler_status_desc: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrawledDocument":
        body = data.get("document_body") or ""
        body_hash = data.get("document_body_hash") or hashlib.sha256(
            body.encode("utf-8")
        ).hexdigest()
        return cls(
            url=data["url"],
            content_type=data.get("content_type"),
            http_status=int(data.get("http_status", 0)),
            crawler_status=data.get("crawler_status", "OK"),
            document_body=body,
            document_body_hash=body_hash,
            crawler_status_desc=data.get("crawler_status_desc"),
            timestamp=data.get("timestamp"),
        )


@dataclass(slots=True)
class CrawledDomain:
    """Crawl state of a whole site, consulted by feature detection."""

    domain: str
    crawler_status: str = "OK"  # OK, ERROR, BLOCKED, REDIRECT
    crawler_status_desc: Optional[str] = None
    ip: Optional[str] = None
    redirect_domain: Optional[str] = None
    cookies: List[str] = field(default_factory=list)
    documents: List[CrawledDocument] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrawledDomain":
        return cls(
            domain=data["domain"],
            crawler_status=data.get("crawler_status", "OK"),
            crawler_status_desc=data.get("crawler_status_desc"),
            ip=data.get("ip"),
            redirect_domain=data.get("redirect_domain"),
            cookies=list(data.get("cookies") or []),
            documents=[
                CrawledDocument.from_dict(doc) for doc in data.get("documents") or []
            ],
        )
