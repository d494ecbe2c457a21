"""Tests for the filesystem version source."""

from pathlib import Path

from pipeline.bills_text.source import (
    FilesystemVersionSource,
    VersionFile,
    extract_pre_text,
)


class TestVersionFile:
    """Tests for VersionFile.from_stem."""

    def test_from_stem(self) -> None:
        version = VersionFile.from_stem("hr81-112-enr")
        assert version == VersionFile(bill_version_id="hr81-112-enr", version_code="enr")

    def test_from_stem_without_code(self) -> None:
        assert VersionFile.from_stem("hr81") is None


class TestExtractPreText:
    """Tests for extract_pre_text."""

    def test_pre_block(self) -> None:
        html = "<html><body><p>nav</p><pre>SEC. 1.  Short title.\n</pre></body></html>"
        assert extract_pre_text(html) == "SEC. 1.  Short title.\n"

    def test_entities_decoded(self) -> None:
        html = "<html><body><pre>A &amp; B &lt;all&gt;</pre></body></html>"
        assert extract_pre_text(html) == "A & B <all>"

    def test_fragment_is_pre(self) -> None:
        assert extract_pre_text("<pre>text</pre>") == "text"

    def test_no_pre_falls_back_to_document_text(self) -> None:
        assert extract_pre_text("<html><body><p>only text</p></body></html>") == (
            "only text"
        )


class TestFilesystemVersionSource:
    """Tests for FilesystemVersionSource."""

    def test_lists_versions_sorted(self, gpo_root: Path, make_bill, write_version) -> None:
        bill = make_bill("hr", 1, 117)
        write_version(bill, "rh")
        write_version(bill, "ih")
        write_version(bill, "eh")

        source = FilesystemVersionSource(gpo_root)
        versions = source.list_versions(bill)

        assert [v.version_code for v in versions] == ["eh", "ih", "rh"]
        assert versions[0].bill_version_id == "hr1-117-eh"

    def test_does_not_match_other_bill_numbers(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        write_version(make_bill("hr", 1, 117), "ih")
        write_version(make_bill("hr", 10, 117), "ih")
        write_version(make_bill("hr", 1, 116), "ih")

        source = FilesystemVersionSource(gpo_root)
        versions = source.list_versions(make_bill("hr", 1, 117))

        assert [v.bill_version_id for v in versions] == ["hr1-117-ih"]

    def test_ignores_mods_files(self, gpo_root: Path, make_bill, write_version) -> None:
        bill = make_bill()
        write_version(bill, "ih", with_mods=True)

        source = FilesystemVersionSource(gpo_root)

        assert len(source.list_versions(bill)) == 1

    def test_no_directory(self, gpo_root: Path, make_bill) -> None:
        source = FilesystemVersionSource(gpo_root)
        assert source.list_versions(make_bill("s", 5, 117)) == []

    def test_reads_text_and_descriptor(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "ih", text="Hello  world\n", date_issued="2021-01-01")
        source = FilesystemVersionSource(gpo_root)
        version = source.list_versions(bill)[0]

        assert source.read_text(bill, version) == "Hello  world\n"
        descriptor = source.read_descriptor(bill, version)
        assert descriptor is not None
        assert b"2021-01-01" in descriptor

    def test_missing_descriptor_is_none(
        self, gpo_root: Path, make_bill, write_version
    ) -> None:
        bill = make_bill()
        write_version(bill, "ih", with_mods=False)
        source = FilesystemVersionSource(gpo_root)
        version = source.list_versions(bill)[0]

        assert source.read_descriptor(bill, version) is None
