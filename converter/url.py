"""URL and domain values used throughout the converter."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

import tldextract

# Bundled Public Suffix List snapshot only, never fetched over the network.
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())

_DEFAULT_PORTS = {"http": 80, "https": 443}


class InvalidUrl(ValueError):
    """Raised when a string cannot be interpreted as an absolute web URL."""


def _normalize_host(host: Optional[str]) -> str:
    """Normalize hostname by removing port and brackets and lowercasing."""
    if not host:
        return ""
    host = host.strip()
    if host.startswith("["):
        host = host[1:].split("]", 1)[0]
    elif host.count(":") == 1:
        host = host.split(":", 1)[0]
    return host.strip(".").lower()


@lru_cache(maxsize=4096)
def _registrable_domain(host: str) -> str:
    """Extract the registrable domain from a hostname."""
    if ":" in host:
        return host
    extracted = _EXTRACT(host)
    if not extracted.domain or not extracted.suffix:
        return host
    return f"{extracted.domain}.{extracted.suffix}"


@dataclass(frozen=True, slots=True)
class EdgeDomain:
    """A site host together with its apex (registrable) domain."""

    host: str
    apex: str

    @classmethod
    def from_host(cls, host: str) -> "EdgeDomain":
        normalized = _normalize_host(host)
        if not normalized:
            raise InvalidUrl(f"Empty host: {host!r}")
        return cls(host=normalized, apex=_registrable_domain(normalized))

    def __str__(self) -> str:
        return self.host


@dataclass(frozen=True, slots=True)
class EdgeUrl:
    """An absolute http(s) URL split into the parts the index cares about."""

    proto: str
    domain: EdgeDomain
    path: str = "/"
    port: Optional[int] = None
    param: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "EdgeUrl":
        """Parse an absolute URL, raising :class:`InvalidUrl` when malformed."""
        if not raw or not raw.strip():
            raise InvalidUrl("Empty URL")
        try:
            parts = urlsplit(raw.strip())
            port = parts.port
        except ValueError as exc:
            raise InvalidUrl(f"Malformed URL {raw!r}: {exc}") from exc

        proto = parts.scheme.lower()
        if not proto:
            raise InvalidUrl(f"URL has no scheme: {raw!r}")
        if not parts.hostname:
            raise InvalidUrl(f"URL has no host: {raw!r}")
        if any(char.isspace() for char in parts.netloc):
            raise InvalidUrl(f"URL host contains whitespace: {raw!r}")

        if port is not None and _DEFAULT_PORTS.get(proto) == port:
            port = None

        return cls(
            proto=proto,
            domain=EdgeDomain.from_host(parts.hostname),
            path=parts.path or "/",
            port=port,
            param=parts.query or None,
        )

    def __str__(self) -> str:
        netloc = self.domain.host
        if ":" in netloc:
            netloc = f"[{netloc}]"
        if self.port is not None:
            netloc = f"{netloc}:{self.port}"
        return urlunsplit((self.proto, netloc, self.path, self.param or "", ""))


def resolve_url(base: EdgeUrl, reference: str) -> Optional[EdgeUrl]:
    """Resolve ``reference`` against ``base``; None if the result is unusable."""
    try:
        return EdgeUrl.parse(urljoin(str(base), reference.strip()))
    except ValueError:
        return None
