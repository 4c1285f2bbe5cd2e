"""Command-line interface for the page converter."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .cli_config import load_config
from .cli_output import write_output
from .config import ProcessorConfig
from .document import CrawledDomain
from .domain import ProcessedDomain, process_domain_async
from .processor import DocumentProcessor


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def _parse_convert_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="convert",
        description="Decide which crawled pages to index and extract their terms.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  # Convert a crawled site stored as JSON
  convert crawl/example.com.json

  # Fetch pages live and convert them
  convert --fetch https://example.com/ https://example.com/about

  # Full JSON output (details and index terms) to a file
  convert crawl/*.json --json -o processed.json

  # Relax the admission thresholds
  convert crawl/example.com.json --min-length 50 --min-quality -20
""",
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        help="Crawled-domain JSON file(s)",
    )
    parser.add_argument(
        "--fetch",
        nargs="+",
        metavar="URL",
        default=[],
        help="Fetch these URLs with a headless browser and convert them",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON (includes details and index terms)",
    )
    parser.add_argument(
        "--min-length",
        type=int,
        default=None,
        help="Minimum document length in words (default: $CONVERTER_MIN_DOCUMENT_LENGTH or 250)",
    )
    parser.add_argument(
        "--min-quality",
        type=float,
        default=None,
        help="Minimum quality score (default: $CONVERTER_MIN_DOCUMENT_QUALITY or -15)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=4,
        help="Documents processed concurrently (default: 4)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)
    if not args.inputs and not args.fetch:
        parser.error("provide crawled-domain JSON files or --fetch URLs")
    return args


def _build_processor(args: argparse.Namespace) -> DocumentProcessor:
    config = ProcessorConfig.from_env()
    config = ProcessorConfig(
        min_document_length=(
            args.min_length if args.min_length is not None else config.min_document_length
        ),
        min_document_quality=(
            args.min_quality if args.min_quality is not None else config.min_document_quality
        ),
    )
    logging.debug(
        "Admission thresholds: min_length=%d, min_quality=%.2f",
        config.min_document_length,
        config.min_document_quality,
    )
    return DocumentProcessor(config)


def _load_domain_file(path: Path) -> List[CrawledDomain]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return [CrawledDomain.from_dict(item) for item in data]
    return [CrawledDomain.from_dict(data)]


async def _run_convert_async(args: argparse.Namespace) -> int:
    """Main async entry point for convert."""
    processor = _build_processor(args)

    crawled: List[CrawledDomain] = []
    for name in args.inputs:
        try:
            crawled.extend(_load_domain_file(Path(name)))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logging.warning("Skipping %s: %s", name, exc)

    if args.fetch:
        from .fetch import fetch_documents_async, group_by_domain

        logging.info("Fetching %d URLs...", len(args.fetch))
        documents = await fetch_documents_async(args.fetch, concurrency=args.concurrency)
        crawled.extend(group_by_domain(documents))

    if not crawled:
        logging.error("No crawled domains to convert")
        return 1

    results: List[ProcessedDomain] = []
    for crawled_domain in crawled:
        try:
            processed = await process_domain_async(
                crawled_domain, processor, concurrency=args.concurrency
            )
        except ValueError as exc:
            logging.warning("Skipping domain %r: %s", crawled_domain.domain, exc)
            continue
        results.append(processed)

    admitted = sum(domain.stats.get("ok", 0) for domain in results)
    failed = sum(domain.stats.get("failed", 0) for domain in results)
    logging.info(
        "Converted %d domains: %d documents admitted, %d failed",
        len(results),
        admitted,
        failed,
    )

    write_output(results, args.output, args.json_output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the convert command."""
    args = _parse_convert_args(argv)
    _setup_logging(args.verbose)
    load_config(load_env=load_dotenv, copy_file=shutil.copy)

    try:
        return asyncio.run(_run_convert_async(args))
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130
    except Exception as exc:
        logging.error("Error: %s", exc)
        if args.verbose:
            logging.exception("Full traceback:")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
