"""Global pytest hooks for strict test-accounting guardrails and shared page fixtures."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional

import pytest

from converter.config import ProcessorConfig
from converter.document import CrawledDocument
from converter.processor import DocumentProcessor


@dataclass
class _TestAccounting:
    deselected: int = 0
    skipped: int = 0
    xfailed: int = 0
    xpassed: int = 0


_ACCOUNTING = _TestAccounting()


def pytest_deselected(items):  # pragma: no cover - pytest hook
    _ACCOUNTING.deselected += len(items)


def pytest_runtest_logreport(report):  # pragma: no cover - pytest hook
    if report.when not in {"setup", "call"}:
        return

    is_xfail = bool(getattr(report, "wasxfail", False))
    if is_xfail:
        if report.outcome == "skipped":
            _ACCOUNTING.xfailed += 1
        elif report.outcome == "passed":
            _ACCOUNTING.xpassed += 1
        return

    if report.outcome == "skipped":
        _ACCOUNTING.skipped += 1


def pytest_sessionfinish(session, exitstatus):  # pragma: no cover - pytest hook
    violations = []
    if _ACCOUNTING.deselected:
        violations.append(f"deselected={_ACCOUNTING.deselected}")
    if _ACCOUNTING.skipped:
        violations.append(f"skipped={_ACCOUNTING.skipped}")
    if _ACCOUNTING.xfailed:
        violations.append(f"xfailed={_ACCOUNTING.xfailed}")
    if _ACCOUNTING.xpassed:
        violations.append(f"xpassed={_ACCOUNTING.xpassed}")

    if not violations:
        return

    reporter = session.config.pluginmanager.get_plugin("terminalreporter")
    if reporter:
        reporter.write_sep(
            "=",
            "Strict guard failed: test accounting violations detected "
            f"({', '.join(violations)})",
        )
        reporter.write_line(
            "Hard guard requires zero skipped/deselected/xfail/xpass tests."
        )

    session.exitstatus = 1


SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
<title>Sunny Day in the Park</title>
<meta name="description" content="A short story about a sunny day.">
<link rel="alternate" type="application/rss+xml" href="/feed.xml">
<script src="https://www.googletagmanager.com/gtag/js?id=G-1"></script>
</head>
<body>
<article>
<h1>Sunny Day</h1>
<p>It was a sunny day and the friends had a lot of fun in the park with his dog.</p>
<p>The park was full of friends and the day was long.</p>
<a href="/story">Story</a>
<a href="https://b.other/one">Park</a>
<a href="https://b.other/two">Park</a>
<a href="https://b.other/three">Park</a>
</article>
</body>
</html>
"""

NONSENSE_HTML = """<!DOCTYPE html>
<html><head><title>Zxq</title></head>
<body><p>zxq vrbl klompf drazzle wibbit snorf plonk quaggle frimp blort.</p></body>
</html>
"""


def make_document(
    body: str = SAMPLE_HTML,
    *,
    url: str = "https://a.example/page",
    content_type: Optional[str] = "text/html",
    http_status: int = 200,
    crawler_status: str = "OK",
) -> CrawledDocument:
    return CrawledDocument(
        url=url,
        content_type=content_type,
        http_status=http_status,
        crawler_status=crawler_status,
        document_body=body,
        document_body_hash=hashlib.sha256(body.encode("utf-8")).hexdigest(),
    )


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def processor() -> DocumentProcessor:
    """Processor with a length threshold small enough for hand-written pages."""
    return DocumentProcessor(ProcessorConfig(min_document_length=10))


@pytest.fixture
def nonsense_html() -> str:
    return NONSENSE_HTML


@pytest.fixture
def document_factory():
    return make_document
