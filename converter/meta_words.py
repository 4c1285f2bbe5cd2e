"""Synthesized tag terms describing a page (format, site, protocol, features)."""

from __future__ import annotations

from typing import List

from .features import HtmlFeature
from .model import ProcessedDocumentDetails
from .url import EdgeUrl
from .words import EdgePageWordSet, IndexBlock

SPECIAL_FEATURE_TAGS = (
    (HtmlFeature.MEDIA, "special:media"),
    (HtmlFeature.TRACKING, "special:tracking"),
    (HtmlFeature.AFFILIATE_LINK, "special:affiliate"),
    (HtmlFeature.COOKIES, "special:cookies"),
)


def synthesize_meta_words(details: ProcessedDocumentDetails, url: EdgeUrl) -> List[str]:
    domain = url.domain
    tags = [
        "format:" + details.standard.label,
        "site:" + domain.host,
    ]
    if domain.apex != domain.host:
        tags.append("site:" + domain.apex)

    tags.append("proto:" + url.proto)
    tags.append("js:" + str(HtmlFeature.JS in details.features).lower())

    for feature, tag in SPECIAL_FEATURE_TAGS:
        if feature in details.features:
            tags.append(tag)

    return [tag.lower() for tag in tags]


def add_meta_words(
    words: EdgePageWordSet, details: ProcessedDocumentDetails, url: EdgeUrl
) -> None:
    """Append the meta tags to the metadata block and, for searchability, the body block."""
    tags = synthesize_meta_words(details, url)
    words.append(IndexBlock.META, tags)
    words.append(IndexBlock.WORDS, tags)
