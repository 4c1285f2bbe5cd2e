"""Detect markup features such as scripting, media and tracking."""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional, Set
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup

from .document import CrawledDomain


class HtmlFeature(Enum):
    JS = "js"
    MEDIA = "media"
    TRACKING = "tracking"
    AFFILIATE_LINK = "affiliate"
    COOKIES = "cookies"
    ADVERTISEMENT = "ads"


TRACKING_MARKERS = (
    "google-analytics.com",
    "googletagmanager.com",
    "gtag(",
    "connect.facebook.net",
    "fbq(",
    "_paq.push",
    "matomo.js",
    "plausible.io",
    "hotjar.com",
    "stats.wp.com",
    "quantserve.com",
)

AD_MARKERS = (
    "googlesyndication.com",
    "adsbygoogle",
    "doubleclick.net",
    "amazon-adsystem.com",
    "adnxs.com",
    "taboola.com",
    "outbrain.com",
)

MEDIA_HOSTS = ("youtube.com", "youtube-nocookie.com", "player.vimeo.com", "dailymotion.com")

AFFILIATE_HOSTS = (
    "amzn.to",
    "shareasale.com",
    "awin1.com",
    "anrdoezrs.net",
    "tkqlhce.com",
    "go.skimresources.com",
    "click.linksynergy.com",
)


def _host_of(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def _host_matches(host: str, candidates) -> bool:
    return any(host == c or host.endswith("." + c) for c in candidates)


def _is_affiliate_link(href: str) -> bool:
    host = _host_of(href)
    if not host:
        return False
    if _host_matches(host, AFFILIATE_HOSTS):
        return True
    if host.startswith("amazon.") or ".amazon." in host:
        try:
            return "tag" in parse_qs(urlsplit(href).query)
        except ValueError:
            return False
    return False


class FeatureExtractor:
    """Derive the feature set of a page from its markup and its site's crawl state."""

    def get_features(
        self, crawled_domain: Optional[CrawledDomain], soup: BeautifulSoup
    ) -> FrozenSet[HtmlFeature]:
        features: Set[HtmlFeature] = set()

        scripts = soup.find_all("script")
        if scripts:
            features.add(HtmlFeature.JS)
        for script in scripts:
            source = (script.get("src") or "") + " " + script.get_text()
            if any(marker in source for marker in TRACKING_MARKERS):
                features.add(HtmlFeature.TRACKING)
            if any(marker in source for marker in AD_MARKERS):
                features.add(HtmlFeature.ADVERTISEMENT)

        if soup.find(["video", "audio", "embed", "object"]) is not None:
            features.add(HtmlFeature.MEDIA)
        for frame in soup.find_all("iframe", src=True):
            if _host_matches(_host_of(frame["src"]), MEDIA_HOSTS):
                features.add(HtmlFeature.MEDIA)

        for anchor in soup.find_all("a", href=True):
            if _is_affiliate_link(anchor["href"]):
                features.add(HtmlFeature.AFFILIATE_LINK)
                break

        if crawled_domain is not None and crawled_domain.cookies:
            features.add(HtmlFeature.COOKIES)

        return frozenset(features)
