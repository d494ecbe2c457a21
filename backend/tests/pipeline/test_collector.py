"""Tests for the version collector."""

from datetime import date
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from pipeline.bills_text.collector import CollectionResult, VersionCollector
from pipeline.bills_text.diagnostics import RunDiagnostics
from pipeline.bills_text.source import FilesystemVersionSource, VersionFile
from pipeline.bills_text.versions import Skip


def _make_archive() -> MagicMock:
    archive = MagicMock()
    archive.archive_version = AsyncMock(return_value=True)
    return archive


class TestVersionCollector:
    """Tests for VersionCollector.collect."""

    @pytest.mark.asyncio
    async def test_no_files_skips_bill(self, gpo_root: Path, make_bill) -> None:
        bill = make_bill()
        collector = VersionCollector(FilesystemVersionSource(gpo_root))
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert result == Skip("no version files")
        assert len(diagnostics.warnings) == 1
        assert diagnostics.warnings[0].bill_id == "hr1-117"
        assert "no version information" in diagnostics.warnings[0].message

    @pytest.mark.asyncio
    async def test_valid_and_missing_descriptor(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "ih", text="Hello  world\n", date_issued="2021-01-01")
        write_version(bill, "rh", with_mods=False)
        archive = _make_archive()
        collector = VersionCollector(FilesystemVersionSource(gpo_root), archive=archive)
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert result.files_found == 2
        assert len(result.versions) == 1
        summary = result.versions[0].summary
        assert summary.version_code == "ih"
        assert summary.version_name == "Introduced in House"
        assert summary.issued_on == date(2021, 1, 1)
        assert summary.bill_version_id == "hr1-117-ih"
        assert result.versions[0].text == "Hello world"

        assert len(diagnostics.warnings) == 1
        assert diagnostics.warnings[0].message == (
            "No MODS data available for hr1-117-rh, SKIPPING"
        )
        archive.archive_version.assert_awaited_once_with(
            "hr1-117-ih", "hr1-117", "ih", "Hello world"
        )

    @pytest.mark.asyncio
    async def test_sorted_by_issue_date(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "enr", date_issued="2021-06-01")
        write_version(bill, "ih", date_issued="2021-01-01")
        write_version(bill, "eh", date_issued="2021-03-01")
        collector = VersionCollector(FilesystemVersionSource(gpo_root))

        result = await collector.collect(bill, RunDiagnostics())

        assert isinstance(result, CollectionResult)
        assert [v.summary.version_code for v in result.versions] == ["ih", "eh", "enr"]

    @pytest.mark.asyncio
    async def test_same_day_versions_keep_file_order(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "rh", date_issued="2021-01-01")
        write_version(bill, "eh", date_issued="2021-01-01")
        collector = VersionCollector(FilesystemVersionSource(gpo_root))

        result = await collector.collect(bill, RunDiagnostics())

        assert isinstance(result, CollectionResult)
        assert [v.summary.version_code for v in result.versions] == ["eh", "rh"]

    @pytest.mark.asyncio
    async def test_undated_version_skipped(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "ih", date_issued=None)
        archive = _make_archive()
        collector = VersionCollector(FilesystemVersionSource(gpo_root), archive=archive)
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert result.versions == []
        assert result.files_found == 1
        assert diagnostics.warnings[0].message == (
            "Had MODS data but no date available for hr1-117-ih, SKIPPING"
        )
        archive.archive_version.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_allow_listed_missing_descriptor_is_silent(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill("hr", 81, 112)
        write_version(bill, "enr", with_mods=False)
        collector = VersionCollector(
            FilesystemVersionSource(gpo_root),
            missing_descriptor_allow_list=["hr81-112-enr"],
        )
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert result.versions == []
        assert diagnostics.warnings == []

    @pytest.mark.asyncio
    async def test_allow_list_does_not_hide_undated_descriptor(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill("hr", 81, 112)
        write_version(bill, "enr", date_issued=None)
        collector = VersionCollector(
            FilesystemVersionSource(gpo_root),
            missing_descriptor_allow_list=["hr81-112-enr"],
        )
        diagnostics = RunDiagnostics()

        await collector.collect(bill, diagnostics)

        assert len(diagnostics.warnings) == 1

    @pytest.mark.asyncio
    async def test_urls_carried_into_summary(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(
            bill,
            "ih",
            urls={
                "HTML rendition": "https://example.gov/a.htm",
                "PDF rendition": "https://example.gov/a.pdf",
            },
        )
        collector = VersionCollector(FilesystemVersionSource(gpo_root))

        result = await collector.collect(bill, RunDiagnostics())

        assert isinstance(result, CollectionResult)
        assert result.versions[0].summary.urls == {
            "html": "https://example.gov/a.htm",
            "pdf": "https://example.gov/a.pdf",
        }

    @pytest.mark.asyncio
    async def test_unknown_code_noted(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "zz")
        collector = VersionCollector(FilesystemVersionSource(gpo_root))
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert result.versions[0].summary.version_name == "zz"
        assert len(diagnostics.notes) == 1
        assert diagnostics.warnings == []

    @pytest.mark.asyncio
    async def test_duplicate_codes_kept_and_noted(self, make_bill) -> None:
        bill = make_bill()
        source = MagicMock()
        source.list_versions.return_value = [
            VersionFile("hr1-117-ih", "ih"),
            VersionFile("hr1-117-ih-reprint", "ih"),
        ]
        source.read_text.return_value = "text"
        source.read_descriptor.side_effect = [
            b"<mods><dateIssued>2021-02-01</dateIssued></mods>",
            b"<mods><dateIssued>2021-01-01</dateIssued></mods>",
        ]
        collector = VersionCollector(source)
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert [v.summary.bill_version_id for v in result.versions] == [
            "hr1-117-ih-reprint",
            "hr1-117-ih",
        ]
        assert len(diagnostics.notes) == 1
        assert "appears 2 times" in diagnostics.notes[0].message

    @pytest.mark.asyncio
    async def test_unreadable_descriptor_skips_version(self, make_bill) -> None:
        bill = make_bill()
        source = MagicMock()
        source.list_versions.return_value = [
            VersionFile("hr1-117-ih", "ih"),
            VersionFile("hr1-117-rh", "rh"),
        ]
        source.read_descriptor.side_effect = [
            PermissionError("permission denied"),
            b"<mods><dateIssued>2021-01-01</dateIssued></mods>",
        ]
        source.read_text.return_value = "text"
        collector = VersionCollector(source)
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert [v.summary.version_code for v in result.versions] == ["rh"]
        assert len(diagnostics.warnings) == 1
        assert "Could not read MODS data for hr1-117-ih" in (
            diagnostics.warnings[0].message
        )

    @pytest.mark.asyncio
    async def test_unreadable_text_skips_version(self, make_bill) -> None:
        bill = make_bill()
        source = MagicMock()
        source.list_versions.return_value = [VersionFile("hr1-117-ih", "ih")]
        source.read_descriptor.return_value = (
            b"<mods><dateIssued>2021-01-01</dateIssued></mods>"
        )
        source.read_text.side_effect = OSError("disk error")
        collector = VersionCollector(source)
        diagnostics = RunDiagnostics()

        result = await collector.collect(bill, diagnostics)

        assert isinstance(result, CollectionResult)
        assert result.versions == []
        assert "Could not read text" in diagnostics.warnings[0].message
