"""Collect the valid, dated versions of a bill."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from lxml import etree

from pipeline.bills_text.archive import ArchiveWriter
from pipeline.bills_text.diagnostics import RunDiagnostics
from pipeline.bills_text.mods import InvalidVersionError, resolve_version_metadata
from pipeline.bills_text.normalizer import clean_text
from pipeline.bills_text.source import VersionFile, VersionSource
from pipeline.bills_text.versions import BillRef, Skip, VersionSummary, version_name_for

logger = logging.getLogger(__name__)


@dataclass
class CollectedVersion:
    """A valid version together with its normalized text."""

    summary: VersionSummary
    text: str


@dataclass
class CollectionResult:
    """Versions found for a bill, ordered by issue date (oldest first).

    Attributes:
        versions: Valid versions; empty if every file was rejected.
        files_found: Number of version files seen, valid or not.
    """

    versions: list[CollectedVersion]
    files_found: int

    @property
    def summaries(self) -> list[VersionSummary]:
        return [v.summary for v in self.versions]


class VersionCollector:
    """Finds, validates, normalizes, and optionally archives bill versions."""

    def __init__(
        self,
        source: VersionSource,
        archive: ArchiveWriter | None = None,
        missing_descriptor_allow_list: Iterable[str] = (),
    ):
        """Initialize the collector.

        Args:
            source: Where version files are read from.
            archive: If given, each valid version's text is archived.
            missing_descriptor_allow_list: Version ids whose missing MODS
                file is known and should not produce a warning.
        """
        self.source = source
        self.archive = archive
        self.missing_descriptor_allow_list = frozenset(missing_descriptor_allow_list)

    async def collect(
        self, bill: BillRef, diagnostics: RunDiagnostics
    ) -> CollectionResult | Skip:
        """Collect every valid version of a bill.

        Invalid versions are skipped with a warning; they never abort the
        bill. Duplicate version codes are kept as-is.

        Args:
            bill: Bill to collect.
            diagnostics: Run-wide warning/note collector.

        Returns:
            CollectionResult sorted by issue date (stable, so same-day versions
            keep file order), or Skip if the bill has no version files.
        """
        files = self.source.list_versions(bill)
        if not files:
            diagnostics.warn(
                "Skipping bill, GPO has no version information for it (yet)",
                bill.bill_id,
            )
            return Skip("no version files")

        collected: list[CollectedVersion] = []
        for version in files:
            item = await self._collect_version(bill, version, diagnostics)
            if item is not None:
                collected.append(item)

        collected.sort(key=lambda v: v.summary.issued_on)
        self._note_duplicate_codes(bill, collected, diagnostics)

        return CollectionResult(versions=collected, files_found=len(files))

    async def _collect_version(
        self,
        bill: BillRef,
        version: VersionFile,
        diagnostics: RunDiagnostics,
    ) -> CollectedVersion | None:
        bill_version_id = version.bill_version_id

        try:
            descriptor = self.source.read_descriptor(bill, version)
        except OSError as e:
            diagnostics.warn(
                f"Could not read MODS data for {bill_version_id}, SKIPPING: {e}",
                bill.bill_id,
            )
            return None

        try:
            metadata = resolve_version_metadata(descriptor)
        except InvalidVersionError as e:
            self._warn_invalid(bill, bill_version_id, e.reason, diagnostics)
            return None

        try:
            raw_text = self.source.read_text(bill, version)
        except (OSError, etree.LxmlError) as e:
            diagnostics.warn(
                f"Could not read text for {bill_version_id}, SKIPPING: {e}",
                bill.bill_id,
            )
            return None

        full_text = clean_text(raw_text)
        logger.debug(f"[{bill.bill_id}][{version.version_code}] Processing...")

        if self.archive is not None:
            await self.archive.archive_version(
                bill_version_id, bill.bill_id, version.version_code, full_text
            )

        version_name = version_name_for(version.version_code)
        if version_name is None:
            diagnostics.note(
                f"Unknown version code '{version.version_code}' for {bill_version_id}",
                bill.bill_id,
            )
            version_name = version.version_code

        summary = VersionSummary(
            version_code=version.version_code,
            version_name=version_name,
            issued_on=metadata.issued_on,
            bill_version_id=bill_version_id,
            urls=metadata.urls,
        )
        return CollectedVersion(summary=summary, text=full_text)

    def _warn_invalid(
        self,
        bill: BillRef,
        bill_version_id: str,
        reason: str,
        diagnostics: RunDiagnostics,
    ) -> None:
        if reason == "no descriptor":
            logger.debug(
                f"[{bill.bill_id}][{bill_version_id}] No MODS data, skipping!"
            )
            if bill_version_id not in self.missing_descriptor_allow_list:
                diagnostics.warn(
                    f"No MODS data available for {bill_version_id}, SKIPPING",
                    bill.bill_id,
                )
        elif reason == "no date":
            diagnostics.warn(
                f"Had MODS data but no date available for {bill_version_id}, SKIPPING",
                bill.bill_id,
            )
        else:
            diagnostics.warn(
                f"Invalid MODS data ({reason}) for {bill_version_id}, SKIPPING",
                bill.bill_id,
            )

    @staticmethod
    def _note_duplicate_codes(
        bill: BillRef,
        collected: list[CollectedVersion],
        diagnostics: RunDiagnostics,
    ) -> None:
        counts = Counter(v.summary.version_code for v in collected)
        for code, count in counts.items():
            if count > 1:
                diagnostics.note(
                    f"Version code '{code}' appears {count} times; "
                    "the latest issued copy is treated as current",
                    bill.bill_id,
                )
