"""CLI for running the bill text pipeline."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pipeline.bills_text.normalizer import clean_text
from pipeline.bills_text.source import extract_pre_text

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)-5.5s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def bills_text_command(
    congress: int | None = None,
    limit: int | None = None,
    bill_id: str | None = None,
    cache_text: bool = False,
    citation_cache: bool = False,
    data_dir: Path | None = None,
) -> int:
    """Index the full text of bill versions for a congress.

    Args:
        congress: Congress number (default: current congress).
        limit: Maximum number of bills to process.
        bill_id: Process only this bill (e.g., "hr81-112").
        cache_text: Write each bill's latest version text to the cache.
        citation_cache: Reuse cached citation service responses.
        data_dir: GPO BILLS directory (default: from settings).

    Returns:
        0 on success, 1 on failure.
    """
    from app.config import settings
    from app.models.base import async_session_maker
    from pipeline.bills_text import (
        BillTextIngestionService,
        CitationServiceClient,
        FilesystemVersionSource,
        IndexPublisher,
        RunOptions,
    )
    from pipeline.cache import get_pipeline_cache

    cache = get_pipeline_cache()
    options = RunOptions(
        congress=congress,
        limit=limit,
        bill_id=bill_id,
        cache_text=cache_text,
        citation_cache=citation_cache,
    )

    async with async_session_maker() as session:
        service = BillTextIngestionService(
            session,
            source=FilesystemVersionSource(data_dir or settings.gpo_bills_dir),
            extractor=CitationServiceClient(cache=cache),
            publisher=IndexPublisher(),
            cache=cache,
            index_name=settings.bills_index,
            archive_versions=settings.archive_versions,
            missing_descriptor_allow_list=settings.missing_descriptor_allow_list,
        )
        try:
            report = await service.run(options)
        except Exception as e:
            logger.error(f"Bill text run failed: {e}")
            return 1

    if report.bills_failed:
        logger.error(f"{report.bills_failed} bills failed to publish")
        return 1
    return 0


def normalize_command(file: Path | None = None, html: bool = False) -> int:
    """Print the normalized text of a file (or stdin).

    Args:
        file: Path to a text or GPO version HTML file.
        html: If True, extract the <pre> block first.

    Returns:
        0 on success, 1 on failure.
    """
    if file:
        try:
            content = file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not read {file}: {e}")
            return 1
    else:
        content = sys.stdin.read()

    if html or (file and file.suffix in (".htm", ".html")):
        content = extract_pre_text(content)

    print(clean_text(content))
    return 0


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Bill text ingestion pipeline CLI")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Bills text command
    bills_text_parser = subparsers.add_parser(
        "bills-text",
        help="Index full text of bill versions into the archive and search index",
    )
    bills_text_parser.add_argument(
        "--congress",
        type=int,
        help="Congress number (default: current congress)",
    )
    bills_text_parser.add_argument(
        "--limit",
        type=int,
        help="Number of bills to stop at (useful for development)",
    )
    bills_text_parser.add_argument(
        "--bill-id",
        help="Index only a specific bill (e.g., hr81-112)",
    )
    bills_text_parser.add_argument(
        "--cache-text",
        action="store_true",
        help="Write each bill's latest version text to the cache",
    )
    bills_text_parser.add_argument(
        "--citation-cache",
        action="store_true",
        help="Reuse cached citation service responses",
    )
    bills_text_parser.add_argument(
        "--dir",
        type=Path,
        help="GPO BILLS directory (default: GPO_BILLS_DIR setting)",
    )
    bills_text_parser.add_argument(
        "--debug",
        action="store_true",
        help="Log per-version progress",
    )

    # Normalize command
    normalize_parser = subparsers.add_parser(
        "normalize", help="Print normalized bill text"
    )
    normalize_parser.add_argument(
        "file",
        type=Path,
        nargs="?",
        help="File to normalize (default: stdin)",
    )
    normalize_parser.add_argument(
        "--html",
        action="store_true",
        help="Input is GPO version HTML; extract the <pre> block first",
    )

    args = parser.parse_args()

    if args.command == "bills-text":
        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)
        return asyncio.run(
            bills_text_command(
                congress=args.congress,
                limit=args.limit,
                bill_id=args.bill_id,
                cache_text=args.cache_text,
                citation_cache=args.citation_cache,
                data_dir=args.dir,
            )
        )

    elif args.command == "normalize":
        return normalize_command(args.file, html=args.html)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
