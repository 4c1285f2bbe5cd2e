"""Output and formatting helpers for the convert command."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .domain import ProcessedDomain
from .model import ProcessedDocument, ProcessedDocumentDetails


def _sorted_str(values) -> List[str]:
    return sorted(str(value) for value in values)


def details_to_dict(details: ProcessedDocumentDetails) -> Dict[str, Any]:
    return {
        "title": details.title,
        "description": details.description,
        "length": details.length,
        "standard": details.standard.label,
        "features": sorted(feature.value for feature in details.features),
        "quality": details.quality,
        "hash_code": details.hash_code,
        "links_internal": _sorted_str(details.links_internal),
        "links_external": _sorted_str(details.links_external),
        "foreign_domains": _sorted_str(details.foreign_domains),
        "feeds": _sorted_str(details.feeds),
    }


def doc_to_dict(doc: ProcessedDocument) -> Dict[str, Any]:
    """Convert a processed document to a JSON-serializable dict."""
    return {
        "url": str(doc.url) if doc.url is not None else None,
        "state": doc.state.value,
        "disqualification": doc.disqualification.value if doc.disqualification else None,
        "error": doc.error,
        "details": details_to_dict(doc.details) if doc.details is not None else None,
        "words": doc.words.as_dict() if doc.words is not None else None,
    }


def domain_to_dict(domain: ProcessedDomain) -> Dict[str, Any]:
    return {
        "domain": domain.domain.host,
        "apex": domain.domain.apex,
        "state": domain.state.name,
        "state_code": domain.state.code,
        "redirect": str(domain.redirect) if domain.redirect is not None else None,
        "quality": domain.quality,
        "stats": domain.stats,
        "documents": [doc_to_dict(doc) for doc in domain.documents],
    }


def format_document_line(doc: ProcessedDocument) -> str:
    """One line per document: state, reason or error, quality, URL, title."""
    if doc.failed:
        outcome = f"FAILED ({doc.error})"
    elif doc.disqualification is not None:
        outcome = f"{doc.state.name} ({doc.disqualification.name})"
    else:
        outcome = doc.state.name

    url = str(doc.url) if doc.url is not None else "-"
    if doc.details is None:
        return f"{outcome:<28} {url}"
    return f"{outcome:<28} {doc.details.quality:7.2f} {url}  {doc.details.title}"


def format_domain_summary(domain: ProcessedDomain) -> str:
    lines = [f"# {domain.domain} [{domain.state.name}]"]
    if domain.quality is not None:
        lines.append(f"_Average quality {domain.quality:.2f}_")
    lines.extend(format_document_line(doc) for doc in domain.documents)
    return "\n".join(lines)


def write_output(
    domains: List[ProcessedDomain],
    output: Optional[str],
    json_output: bool,
) -> None:
    """Write processed domains to stdout or a file."""
    if json_output:
        payload = [domain_to_dict(domain) for domain in domains]
        text = json.dumps(payload, indent=2, ensure_ascii=False)
    else:
        text = "\n\n".join(format_domain_summary(domain) for domain in domains)

    if output is None:
        print(text)
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    logging.info("Wrote %d domains to %s", len(domains), path)
