"""Reduce a bill's collected versions to its current snapshot."""

import logging

from pipeline.bills_text.citations import CitationExtractor
from pipeline.bills_text.collector import CollectedVersion
from pipeline.bills_text.diagnostics import RunDiagnostics
from pipeline.bills_text.versions import BillRef, BillSnapshot, Skip
from pipeline.cache import citation_cache_key

logger = logging.getLogger(__name__)


async def aggregate(
    bill: BillRef,
    versions: list[CollectedVersion],
    extractor: CitationExtractor,
    diagnostics: RunDiagnostics,
    use_cache: bool = False,
) -> BillSnapshot | Skip:
    """Build the snapshot that will be published for a bill.

    Args:
        bill: Bill being aggregated.
        versions: Valid versions, oldest first. The last one is current.
        extractor: Citation extractor run over the current version's text.
        diagnostics: Run-wide warning/note collector.
        use_cache: Passed through to the extractor.

    Returns:
        BillSnapshot, or Skip if there are no valid versions. A citation
        failure does not skip the bill; it publishes with no citations.
    """
    if not versions:
        diagnostics.warn(
            f"No versions with a valid date found for bill {bill.bill_id}, "
            "SKIPPING update of the bill entirely in the archive and search index",
            bill.bill_id,
        )
        return Skip("no valid versions")

    latest = versions[-1]

    citation_ids = await extractor.extract(
        bill, latest.text, citation_cache_key(bill), use_cache
    )
    if citation_ids is None:
        diagnostics.warn(
            f"Failed to extract citations from {bill.bill_id}, "
            f"version code: {latest.summary.version_code}",
            bill.bill_id,
        )
        citation_ids = []

    return BillSnapshot(
        version_info=[v.summary for v in versions],
        citation_ids=citation_ids,
        last_version_text=latest.text,
    )
