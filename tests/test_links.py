"""Tests for converter.links module."""

from __future__ import annotations

from converter.links import (
    FeedExtractor,
    LinkParser,
    LinkProcessor,
    add_link_words,
    collect_links,
    link_terms,
)
from converter.parsing import parse_document
from converter.url import EdgeDomain, EdgeUrl
from converter.words import EdgePageWordSet, IndexBlock

PAGE_URL = EdgeUrl.parse("https://a.example/dir/page")


def _collect(html: str, page_url: EdgeUrl = PAGE_URL):
    parser = LinkParser()
    return collect_links(parse_document(html), page_url, parser, FeedExtractor(parser))


def _urls(links):
    return sorted(str(link) for link in links)


class TestCollectLinks:
    def test_internal_and_external(self):
        summary = _collect(
            '<a href="other">o</a><a href="/root">r</a>'
            '<a href="https://b.other/x">x</a><a href="https://www.c.example/y">y</a>'
        )
        assert _urls(summary.internal) == [
            "https://a.example/dir/other",
            "https://a.example/root",
        ]
        assert _urls(summary.external) == ["https://b.other/x", "https://www.c.example/y"]
        assert {d.host for d in summary.foreign_domains} == {"b.other", "www.c.example"}

    def test_skips_unusable_references(self):
        summary = _collect(
            '<a href="#top">t</a><a href="javascript:void(0)">j</a>'
            '<a href="mailto:me@a.example">m</a><a href="ftp://b.other/f">f</a>'
            '<a>no href</a><a href="http://exa mple.com/">bad</a>'
        )
        assert summary.internal == frozenset()
        assert summary.external == frozenset()

    def test_noindex_rel_skipped(self):
        summary = _collect('<a rel="nofollow noindex" href="https://b.other/">x</a>')
        assert summary.external == frozenset()

    def test_duplicate_links_collapse(self):
        summary = _collect('<a href="https://b.other/x">1</a><a href="https://b.other/x#f">2</a>')
        assert len(summary.external) == 1

    def test_base_href(self):
        summary = _collect('<base href="https://b.other/base/"><a href="rel">x</a>')
        assert _urls(summary.external) == ["https://b.other/base/rel"]

    def test_frames(self):
        summary = _collect('<frameset><frame src="/menu"></frameset>')
        assert _urls(summary.internal) == ["https://a.example/menu"]

    def test_iframes_are_not_links(self):
        summary = _collect('<iframe src="https://b.other/embed"></iframe>')
        assert summary.external == frozenset()

    def test_feeds(self):
        summary = _collect(
            '<link rel="alternate" type="application/rss+xml" href="/feed.xml">'
            '<link rel="alternate" type="application/atom+xml" href="https://b.other/atom">'
            '<link rel="alternate" hreflang="de" href="/de/">'
            '<link rel="stylesheet" type="text/css" href="/s.css">'
        )
        assert _urls(summary.feeds) == ["https://a.example/feed.xml", "https://b.other/atom"]
        assert summary.internal == frozenset()


class TestLinkProcessor:
    def test_same_host_is_internal(self):
        processor = LinkProcessor(PAGE_URL)
        processor.accept(EdgeUrl.parse("http://a.example/x"))
        summary = processor.build()
        assert len(summary.internal) == 1
        assert summary.foreign_domains == frozenset()

    def test_sibling_subdomain_is_external(self):
        processor = LinkProcessor(EdgeUrl.parse("https://www.example.org/"))
        processor.accept(EdgeUrl.parse("https://blog.example.org/post"))
        summary = processor.build()
        assert summary.foreign_domains == {EdgeDomain.from_host("blog.example.org")}


class TestLinkTerms:
    def test_three_links_to_one_host(self):
        summary = _collect(
            '<a href="https://b.other/1">1</a>'
            '<a href="https://b.other/2">2</a>'
            '<a href="https://b.other/3">3</a>'
        )
        assert link_terms(summary) == ["links:b.other"]

    def test_host_and_apex(self):
        summary = _collect('<a href="https://news.bbc.co.uk/x">x</a>')
        assert link_terms(summary) == ["links:bbc.co.uk", "links:news.bbc.co.uk"]

    def test_no_foreign_domains(self):
        assert link_terms(_collect('<a href="/x">x</a>')) == []

    def test_ipv6_host(self):
        summary = _collect('<a href="http://[2001:db8::1]/x">x</a>')
        assert _urls(summary.external) == ["http://[2001:db8::1]/x"]
        assert link_terms(summary) == ["links:2001:db8::1"]

    def test_ipv6_page_url(self):
        page = EdgeUrl.parse("http://[::1]/")
        summary = _collect('<a href="/x">x</a>', page_url=page)
        assert _urls(summary.internal) == ["http://[::1]/x"]
        assert link_terms(summary) == []

    def test_add_link_words_targets_meta(self):
        words = EdgePageWordSet()
        add_link_words(words, _collect('<a href="https://b.other/">b</a>'))
        assert words.get(IndexBlock.META) == ("links:b.other",)
        assert IndexBlock.WORDS not in words
