"""Index the full text of bill versions into the archive and search index.

For each target bill: collect its valid versions from the GPO bulk data,
aggregate them into a snapshot, archive the snapshot on the Bill row, and
queue a search document. Problems with one version or one bill become
warnings in the run report; only failing to select the target bills stops
the run.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Bill, DataIngestionLog
from pipeline.bills_text.aggregator import aggregate
from pipeline.bills_text.archive import ArchiveWriter
from pipeline.bills_text.citations import CitationExtractor
from pipeline.bills_text.collector import VersionCollector
from pipeline.bills_text.diagnostics import (
    LoggingReporter,
    Reporter,
    RunDiagnostics,
    RunReport,
)
from pipeline.bills_text.index import (
    IndexPublisher,
    IndexPublishError,
    bill_index_document,
)
from pipeline.bills_text.source import VersionSource
from pipeline.bills_text.versions import Skip, current_congress
from pipeline.cache import PipelineCache, text_cache_key

logger = logging.getLogger(__name__)


@dataclass
class RunOptions:
    """Parameters for one run.

    Attributes:
        congress: Congress to index (defaults to the current one).
        limit: Stop after this many bills (useful for development).
        bill_id: Index only this bill; overrides congress and limit.
        cache_text: Write each bill's latest version text to the cache.
        citation_cache: Reuse cached citation service responses.
    """

    congress: int | None = None
    limit: int | None = None
    bill_id: str | None = None
    cache_text: bool = False
    citation_cache: bool = False


class BillOutcome(str, enum.Enum):
    """Terminal state of one bill in a run."""

    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class BillTextIngestionService:
    """Runs the bill text pipeline over a set of bills."""

    def __init__(
        self,
        session: AsyncSession,
        source: VersionSource,
        extractor: CitationExtractor,
        publisher: IndexPublisher,
        cache: PipelineCache | None = None,
        reporter: Reporter | None = None,
        index_name: str = "bills",
        archive_versions: bool = True,
        missing_descriptor_allow_list: list[str] | None = None,
    ):
        """Initialize the ingestion service.

        Args:
            session: SQLAlchemy async session.
            source: Where bill version files are read from.
            extractor: Citation extractor for the latest version's text.
            publisher: Search index publisher.
            cache: Cache for latest version text (optional).
            reporter: Receives the end-of-run report.
            index_name: Search index for bill documents.
            archive_versions: Store each version's text in bill_version.
            missing_descriptor_allow_list: Version ids whose missing MODS
                file should not be reported.
        """
        self.session = session
        self.extractor = extractor
        self.publisher = publisher
        self.cache = cache
        self.reporter = reporter or LoggingReporter()
        self.index_name = index_name
        self.archive = ArchiveWriter(session)
        self.collector = VersionCollector(
            source,
            archive=self.archive if archive_versions else None,
            missing_descriptor_allow_list=missing_descriptor_allow_list or [],
        )

    async def run(self, options: RunOptions | None = None) -> RunReport:
        """Index bill text for a congress (or a single bill).

        Args:
            options: Run parameters.

        Returns:
            Report with counts, warnings, and notes.

        Raises:
            Exception: Whatever prevented the target bills from being
                selected. A failed ingestion log is recorded first.
        """
        options = options or RunOptions()
        congress = options.congress or current_congress()
        started_at = datetime.now(UTC)
        operation = f"bills_text_{options.bill_id or congress}"

        try:
            bill_ids = await self._select_targets(congress, options)
        except Exception as e:
            logger.exception(f"Error selecting bills for congress {congress}")
            await self.session.rollback()
            await self._write_log(
                operation,
                started_at,
                status="failed",
                error_message=str(e),
            )
            raise

        logger.info(f"Indexing text for {len(bill_ids)} bills")

        diagnostics = RunDiagnostics()
        report = RunReport(congress=congress)

        # Versions per bill counted Done, until a failed flush says otherwise
        published: dict[str, int] = {}

        for bill_id in bill_ids:
            try:
                outcome, versions = await self._process_bill(
                    bill_id, options, diagnostics
                )
            except IndexPublishError as e:
                diagnostics.warn(f"Failed to index bill: {e}", bill_id)
                report.bills_failed += 1
                self._abandon_publish(e, published, report, diagnostics)
                continue

            if outcome is BillOutcome.DONE:
                published[bill_id] = versions
                report.bills_processed += 1
                report.versions_processed += versions
            elif outcome is BillOutcome.SKIPPED:
                report.bills_skipped += 1
            else:
                report.bills_failed += 1

        # Index any leftover docs
        try:
            await self.publisher.force_flush(self.index_name)
        except IndexPublishError as e:
            diagnostics.warn(f"Final flush to search index failed: {e}")
            self._abandon_publish(e, published, report, diagnostics)

        report.warnings = diagnostics.warnings
        report.notes = diagnostics.notes

        if report.warnings:
            self.reporter.warning(
                "Warnings found while parsing bill text and metadata", report.warnings
            )
        if report.notes:
            self.reporter.note(
                "Notes found while parsing bill text and metadata", report.notes
            )
        self.reporter.success(report.summary, report)

        await self._write_log(operation, started_at, status="completed", report=report)
        return report

    async def _select_targets(self, congress: int, options: RunOptions) -> list[str]:
        """Return the ids of the bills to index."""
        if options.bill_id:
            stmt = select(Bill.bill_id).where(Bill.bill_id == options.bill_id)
        else:
            # Only unabbreviated bills have text worth indexing
            stmt = (
                select(Bill.bill_id)
                .where(Bill.abbreviated.is_(False), Bill.congress == congress)
                .order_by(Bill.bill_id)
            )
            if options.limit:
                stmt = stmt.limit(options.limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _process_bill(
        self,
        bill_id: str,
        options: RunOptions,
        diagnostics: RunDiagnostics,
    ) -> tuple[BillOutcome, int]:
        """Run one bill through collect, aggregate, and publish.

        Returns:
            The bill's outcome and the number of versions queued for the
            index.

        Raises:
            IndexPublishError: If queuing the document triggered a flush
                that failed.
        """
        try:
            bill = await self.session.get(Bill, bill_id)
            if bill is None:
                diagnostics.warn("Bill not found, SKIPPING", bill_id)
                return BillOutcome.SKIPPED, 0

            collected = await self.collector.collect(bill, diagnostics)
            if isinstance(collected, Skip):
                return BillOutcome.SKIPPED, 0

            snapshot = await aggregate(
                bill,
                collected.versions,
                self.extractor,
                diagnostics,
                use_cache=options.citation_cache,
            )
            if isinstance(snapshot, Skip):
                return BillOutcome.SKIPPED, 0

            await self.archive.archive_bill_snapshot(bill, snapshot)
            document = bill_index_document(bill, snapshot, datetime.now(UTC))
            text_key = text_cache_key(bill)
            await self.session.commit()
        except Exception as e:
            logger.error(f"Error archiving {bill_id}: {e}")
            await self.session.rollback()
            diagnostics.warn(f"Failed to save bill text, SKIPPING publish: {e}", bill_id)
            return BillOutcome.FAILED, 0

        if options.cache_text and self.cache is not None:
            self.cache.put_text(text_key, snapshot.last_version_text)

        logger.debug(f"[{bill_id}] Indexing...")
        await self.publisher.enqueue(self.index_name, bill_id, document)

        logger.debug(f"[{bill_id}] Queued for index.")
        return BillOutcome.DONE, snapshot.versions_count

    @staticmethod
    def _abandon_publish(
        error: IndexPublishError,
        published: dict[str, int],
        report: RunReport,
        diagnostics: RunDiagnostics,
    ) -> None:
        """Move bills whose documents never reached the index to Failed.

        Bills already counted as Done are taken back out of the processed
        and version totals.
        """
        for bill_id in error.document_ids:
            if bill_id not in published:
                continue
            diagnostics.warn(f"Failed to index bill: {error}", bill_id)
            report.bills_processed -= 1
            report.versions_processed -= published.pop(bill_id)
            report.bills_failed += 1

    async def _write_log(
        self,
        operation: str,
        started_at: datetime,
        status: str,
        report: RunReport | None = None,
        error_message: str | None = None,
    ) -> DataIngestionLog:
        """Record the run in the ingestion log."""
        log = DataIngestionLog(
            source="GPO",
            operation=operation[:50],
            started_at=started_at,
            completed_at=datetime.now(UTC),
            status=status,
            error_message=error_message,
        )
        if report is not None:
            log.records_processed = (
                report.bills_processed + report.bills_skipped + report.bills_failed
            )
            log.records_updated = report.bills_processed
            log.records_skipped = report.bills_skipped
            log.records_failed = report.bills_failed
            log.details = report.summary
            log.warnings = [w.to_dict() for w in report.warnings]
            log.notes = [n.to_dict() for n in report.notes]

        self.session.add(log)
        await self.session.commit()
        return log
