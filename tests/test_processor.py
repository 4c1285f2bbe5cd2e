"""Tests for converter.processor module."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from converter.config import ProcessorConfig
from converter.document import UnknownStatus
from converter.features import HtmlFeature
from converter.html_standard import HtmlStandard
from converter.language import DocumentLanguageData, DocumentSentence
from converter.model import DisqualificationReason, EdgeUrlState, Rejected
from converter.parsing import parse_document, visible_text
from converter.processor import (
    DocumentProcessor,
    check_content_type,
    check_language,
    check_length,
    check_quality,
    check_status,
    content_hash_to_long,
    crawler_status_to_url_state,
    is_accepted_content_type,
)
from converter.words import IndexBlock


class TestCrawlerStatusToUrlState:
    @pytest.mark.parametrize(
        "crawler_status,http_status,expected",
        [
            ("OK", 200, EdgeUrlState.OK),
            ("OK", 299, EdgeUrlState.OK),
            ("OK", 301, EdgeUrlState.DEAD),
            ("OK", 404, EdgeUrlState.DEAD),
            ("REDIRECT", 301, EdgeUrlState.REDIRECT),
            ("ERROR", 0, EdgeUrlState.DEAD),
            ("TIMEOUT", 0, EdgeUrlState.DEAD),
            ("ROBOTS_TXT", 200, EdgeUrlState.DEAD),
            ("BAD_CONTENT_TYPE", 200, EdgeUrlState.DEAD),
        ],
    )
    def test_mapping(self, crawler_status, http_status, expected):
        assert crawler_status_to_url_state(crawler_status, http_status) is expected

    def test_unknown_status(self):
        with pytest.raises(UnknownStatus):
            crawler_status_to_url_state("MYSTERY", 200)


class TestContentType:
    @pytest.mark.parametrize(
        "content_type", ["text/html", "TEXT/HTML", "application/xhtml+xml", "application/xhtml"]
    )
    def test_accepted(self, content_type):
        assert is_accepted_content_type(content_type)

    @pytest.mark.parametrize(
        "content_type", [None, "", "image/png", "text/plain", "text/html; charset=utf-8"]
    )
    def test_rejected(self, content_type):
        assert not is_accepted_content_type(content_type)


class TestContentHashToLong:
    def test_little_endian(self):
        assert content_hash_to_long("0102030405060708" + "00" * 24) == 0x0807060504030201

    def test_signed(self):
        assert content_hash_to_long("ff" * 32) == -1

    def test_too_short(self):
        with pytest.raises(ValueError):
            content_hash_to_long("abcd")


class TestGates:
    def _dld(self, count):
        words = tuple(f"w{i}" for i in range(count))
        return DocumentLanguageData(sentences=(DocumentSentence.from_words(words),))

    def test_status(self):
        assert check_status(EdgeUrlState.OK) is None
        assert check_status(EdgeUrlState.DEAD) == Rejected(DisqualificationReason.STATUS)

    def test_content_type(self):
        assert check_content_type("text/html") is None
        assert check_content_type("image/png") == Rejected(DisqualificationReason.CONTENT_TYPE)

    def test_length_boundary(self):
        assert check_length(self._dld(10), 10) is None
        assert check_length(self._dld(9), 10) == Rejected(DisqualificationReason.LENGTH)

    def test_language_boundary(self):
        assert check_language(0.1) is None
        assert check_language(0.09) == Rejected(DisqualificationReason.LANGUAGE)

    def test_quality_boundary(self):
        assert check_quality(-15.0, -15.0) is None
        assert check_quality(-15.01, -15.0) == Rejected(DisqualificationReason.QUALITY)


class TestDocumentProcessorAdmits:
    def test_sample_page(self, processor, document_factory):
        doc = processor.process(document_factory())
        assert doc.state is EdgeUrlState.OK
        assert doc.disqualification is None
        assert doc.error is None

        details = doc.details
        assert details.title == "Sunny Day in the Park"
        assert details.description == "A short story about a sunny day."
        assert details.standard is HtmlStandard.HTML5
        assert details.features == {HtmlFeature.JS, HtmlFeature.TRACKING}
        assert details.quality > -15.0
        assert details.length > 0
        assert {str(u) for u in details.links_internal} == {"https://a.example/story"}
        assert len(details.links_external) == 3
        assert {d.host for d in details.foreign_domains} == {"b.other"}
        assert {str(u) for u in details.feeds} == {"https://a.example/feed.xml"}

    def test_sample_page_words(self, processor, document_factory):
        words = processor.process(document_factory()).words
        assert words.get(IndexBlock.TITLE) == ("sunny", "day", "park")
        assert words.get(IndexBlock.TOP) == ("park", "day", "friends", "sunny")
        assert words.get(IndexBlock.META) == (
            "format:html5",
            "site:a.example",
            "proto:https",
            "js:true",
            "special:tracking",
            "links:b.other",
        )
        body = words.get(IndexBlock.WORDS)
        assert body[:2] == ("sunny", "day")
        assert body[-5:] == (
            "format:html5",
            "site:a.example",
            "proto:https",
            "js:true",
            "special:tracking",
        )
        assert "links:b.other" not in body

    def test_hash_code(self, processor, document_factory):
        crawled = document_factory()
        doc = processor.process(crawled)
        assert doc.details.hash_code == content_hash_to_long(crawled.document_body_hash)

    def test_length_counts_title(self, processor, document_factory, sample_html):
        doc = processor.process(document_factory())
        body_text = visible_text(parse_document(sample_html))
        assert doc.details.length == len("Sunny Day in the Park") + 1 + len(body_text)

    def test_idempotent(self, processor, document_factory):
        crawled = document_factory()
        assert processor.process(crawled) == processor.process(crawled)

    def test_xhtml_content_type(self, processor, document_factory):
        doc = processor.process(document_factory(content_type="application/xhtml+xml"))
        assert doc.is_ok

    def test_ipv6_page(self, processor, document_factory):
        doc = processor.process(document_factory(url="http://[::1]/page"))
        assert doc.state is EdgeUrlState.OK
        assert str(doc.url) == "http://[::1]/page"
        assert doc.url.domain.host == "::1"


class TestDocumentProcessorRejects:
    def test_not_found_is_dead(self, processor, document_factory):
        doc = processor.process(document_factory(http_status=404))
        assert doc.state is EdgeUrlState.DEAD
        assert doc.disqualification is DisqualificationReason.STATUS
        assert doc.details is None
        assert doc.words is None

    def test_redirect_keeps_state(self, processor, document_factory):
        doc = processor.process(document_factory(crawler_status="REDIRECT", http_status=301))
        assert doc.state is EdgeUrlState.REDIRECT
        assert doc.disqualification is DisqualificationReason.STATUS

    def test_crawler_error_is_dead(self, processor, document_factory):
        doc = processor.process(document_factory(crawler_status="ERROR", http_status=0))
        assert doc.state is EdgeUrlState.DEAD

    def test_image_content_type(self, processor, document_factory):
        doc = processor.process(document_factory(content_type="image/png"))
        assert doc.state is EdgeUrlState.DISQUALIFIED
        assert doc.disqualification is DisqualificationReason.CONTENT_TYPE
        assert doc.details is None

    def test_missing_content_type(self, processor, document_factory):
        doc = processor.process(document_factory(content_type=None))
        assert doc.disqualification is DisqualificationReason.CONTENT_TYPE

    def test_too_short(self, document_factory):
        doc = DocumentProcessor().process(document_factory())
        assert doc.state is EdgeUrlState.DISQUALIFIED
        assert doc.disqualification is DisqualificationReason.LENGTH

    def test_foreign_language(self, document_factory, nonsense_html):
        processor = DocumentProcessor(ProcessorConfig(min_document_length=5))
        doc = processor.process(document_factory(nonsense_html))
        assert doc.state is EdgeUrlState.DISQUALIFIED
        assert doc.disqualification is DisqualificationReason.LANGUAGE

    def test_low_quality(self, document_factory):
        processor = DocumentProcessor(
            ProcessorConfig(min_document_length=10, min_document_quality=100.0)
        )
        doc = processor.process(document_factory())
        assert doc.state is EdgeUrlState.DISQUALIFIED
        assert doc.disqualification is DisqualificationReason.QUALITY
        assert doc.details is None
        assert doc.words is None

    def test_length_reported_before_quality(self, document_factory):
        html = "<p>Tiny page.</p><script>" + "x = 1;" * 5000 + "</script>"
        processor = DocumentProcessor(
            ProcessorConfig(min_document_length=250, min_document_quality=0.0)
        )
        doc = processor.process(document_factory(html))
        assert doc.disqualification is DisqualificationReason.LENGTH

    def test_status_checked_before_content_type(self, processor, document_factory):
        doc = processor.process(document_factory(content_type="image/png", http_status=500))
        assert doc.disqualification is DisqualificationReason.STATUS

    def test_rejection_logged(self, processor, document_factory, caplog):
        with caplog.at_level(logging.INFO, logger="converter.processor"):
            processor.process(document_factory(content_type="image/png"))
        assert "Disqualified https://a.example/page: CONTENT_TYPE" in caplog.text


class TestDocumentProcessorFailures:
    def test_unknown_crawler_status(self, processor, document_factory):
        doc = processor.process(document_factory(crawler_status="MYSTERY"))
        assert doc.failed
        assert doc.state is EdgeUrlState.DISQUALIFIED
        assert doc.disqualification is None
        assert "MYSTERY" in doc.error
        assert str(doc.url) == "https://a.example/page"

    def test_invalid_url(self, processor, document_factory):
        doc = processor.process(document_factory(url="not a url"))
        assert doc.failed
        assert doc.url is None

    def test_short_hash(self, processor, document_factory):
        crawled = document_factory()
        broken = type(crawled)(
            url=crawled.url,
            content_type=crawled.content_type,
            http_status=crawled.http_status,
            crawler_status=crawled.crawler_status,
            document_body=crawled.document_body,
            document_body_hash="abcd",
        )
        doc = processor.process(broken)
        assert doc.failed
        assert doc.details is None

    def test_collaborator_error(self, document_factory, caplog):
        feature_extractor = MagicMock()
        feature_extractor.get_features.side_effect = RuntimeError("boom")
        processor = DocumentProcessor(
            ProcessorConfig(min_document_length=10), feature_extractor=feature_extractor
        )
        with caplog.at_level(logging.WARNING, logger="converter.processor"):
            doc = processor.process(document_factory())
        assert doc.error == "boom"
        assert doc.words is None
        assert "Failed to convert https://a.example/page: boom" in caplog.text

    def test_error_without_message(self, document_factory):
        valuator = MagicMock()
        valuator.get_quality.side_effect = ZeroDivisionError()
        processor = DocumentProcessor(ProcessorConfig(min_document_length=10), valuator=valuator)
        doc = processor.process(document_factory())
        assert doc.error == "ZeroDivisionError"

    def test_failure_does_not_affect_next_document(self, processor, document_factory):
        processor.process(document_factory(crawler_status="MYSTERY"))
        assert processor.process(document_factory()).is_ok
