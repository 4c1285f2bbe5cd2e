"""Outbound link parsing and classification.

Anchors, frames and ``<link rel="alternate">`` feeds found on a page are
resolved against the page and sorted into internal links, external links,
foreign domains and feeds. Broken references are skipped rather than raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Set

from bs4 import BeautifulSoup, Tag

from .url import EdgeDomain, EdgeUrl, resolve_url
from .words import EdgePageWordSet, IndexBlock

LOGGER = logging.getLogger(__name__)

SUPPORTED_PROTOCOLS = frozenset({"http", "https"})
FEED_TYPES = frozenset({"application/rss+xml", "application/atom+xml"})
_IGNORED_SCHEMES = ("javascript:", "mailto:", "tel:", "data:", "about:")


def _attr(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return (value or "").strip()


class LinkParser:
    """Resolve link-bearing elements to absolute URLs."""

    def parse_link(self, base_url: EdgeUrl, tag: Tag) -> Optional[EdgeUrl]:
        if "noindex" in _attr(tag, "rel").lower():
            return None
        return self._resolve(base_url, _attr(tag, "href"))

    def parse_frame(self, base_url: EdgeUrl, tag: Tag) -> Optional[EdgeUrl]:
        return self._resolve(base_url, _attr(tag, "src"))

    def get_base_link(self, soup: BeautifulSoup, page_url: EdgeUrl) -> EdgeUrl:
        """Return the URL relative links resolve against (honours ``<base href>``)."""
        base = soup.find("base", href=True)
        if base is None:
            return page_url
        resolved = self._resolve(page_url, _attr(base, "href"))
        return resolved or page_url

    def _resolve(self, base_url: EdgeUrl, href: str) -> Optional[EdgeUrl]:
        if not href or href.startswith("#"):
            return None
        if href.lower().startswith(_IGNORED_SCHEMES):
            return None
        url = resolve_url(base_url, href)
        if url is None or url.proto not in SUPPORTED_PROTOCOLS:
            return None
        return url


class FeedExtractor:
    def __init__(self, link_parser: LinkParser) -> None:
        self._link_parser = link_parser

    def get_feed_from_alternate_tag(
        self, base_url: EdgeUrl, tag: Tag
    ) -> Optional[EdgeUrl]:
        if _attr(tag, "type").lower() not in FEED_TYPES:
            return None
        return self._link_parser.parse_link(base_url, tag)


@dataclass(frozen=True, slots=True)
class LinkSummary:
    """Link relations of one page, finalized by :class:`LinkProcessor`."""

    internal: FrozenSet[EdgeUrl] = frozenset()
    external: FrozenSet[EdgeUrl] = frozenset()
    foreign_domains: FrozenSet[EdgeDomain] = frozenset()
    feeds: FrozenSet[EdgeUrl] = frozenset()


@dataclass(slots=True)
class LinkProcessor:
    """Accumulates the links of a single page."""

    base_url: EdgeUrl
    internal: Set[EdgeUrl] = field(default_factory=set)
    external: Set[EdgeUrl] = field(default_factory=set)
    foreign_domains: Set[EdgeDomain] = field(default_factory=set)
    feeds: Set[EdgeUrl] = field(default_factory=set)

    def accept(self, link: EdgeUrl) -> None:
        if link.proto not in SUPPORTED_PROTOCOLS:
            return
        if link.domain == self.base_url.domain:
            self.internal.add(link)
        else:
            self.external.add(link)
            self.foreign_domains.add(link.domain)

    def accept_feed(self, link: EdgeUrl) -> None:
        self.feeds.add(link)

    def build(self) -> LinkSummary:
        return LinkSummary(
            internal=frozenset(self.internal),
            external=frozenset(self.external),
            foreign_domains=frozenset(self.foreign_domains),
            feeds=frozenset(self.feeds),
        )


def collect_links(
    soup: BeautifulSoup,
    page_url: EdgeUrl,
    link_parser: LinkParser,
    feed_extractor: FeedExtractor,
) -> LinkSummary:
    """Classify every anchor, frame and alternate feed link on the page."""
    base_url = link_parser.get_base_link(soup, page_url)
    processor = LinkProcessor(page_url)

    for anchor in soup.find_all("a"):
        link = link_parser.parse_link(base_url, anchor)
        if link is not None:
            processor.accept(link)

    for frame in soup.find_all("frame"):
        link = link_parser.parse_frame(base_url, frame)
        if link is not None:
            processor.accept(link)

    for alternate in soup.find_all("link", rel="alternate"):
        feed = feed_extractor.get_feed_from_alternate_tag(base_url, alternate)
        if feed is not None:
            processor.accept_feed(feed)

    summary = processor.build()
    LOGGER.debug(
        "Links on %s: %d internal, %d external, %d feeds",
        page_url,
        len(summary.internal),
        len(summary.external),
        len(summary.feeds),
    )
    return summary


def link_terms(summary: LinkSummary) -> List[str]:
    """``links:<host>`` and ``links:<apex>`` for each foreign domain, deduplicated."""
    terms: Set[str] = set()
    for domain in summary.foreign_domains:
        terms.add("links:" + domain.host.lower())
        terms.add("links:" + domain.apex.lower())
    return sorted(terms)


def add_link_words(words: EdgePageWordSet, summary: LinkSummary) -> None:
    words.append(IndexBlock.META, link_terms(summary))
