"""Shared fixtures for bill text pipeline tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from app.models import Bill

MODS_NS = "http://www.loc.gov/mods/v3"


def make_mods(
    date_issued: str | None = "2021-01-01",
    urls: dict[str, str] | None = None,
) -> str:
    """Build a minimal GPO MODS document."""
    date_xml = (
        f'<dateIssued encoding="w3cdtf">{date_issued}</dateIssued>'
        if date_issued is not None
        else ""
    )
    url_xml = "".join(
        f'<url displayLabel="{label}" access="raw object">{url}</url>'
        for label, url in (urls or {}).items()
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<mods xmlns="{MODS_NS}" version="3.3">'
        f"<originInfo>{date_xml}</originInfo>"
        f"<location>{url_xml}</location>"
        "</mods>"
    )


def make_version_html(text: str) -> str:
    """Build a GPO-style version HTML page wrapping text in <pre>."""
    return (
        "<html><head><title>BILLS</title></head>"
        f"<body><pre>{text}</pre></body></html>"
    )


@pytest.fixture
def gpo_root(tmp_path: Path) -> Path:
    """Root of a fake GPO BILLS directory."""
    root = tmp_path / "BILLS"
    root.mkdir()
    return root


@pytest.fixture
def write_version(gpo_root: Path) -> Callable[..., Path]:
    """Write a version file (and optionally its MODS file) under gpo_root."""

    def _write(
        bill: Bill,
        code: str,
        text: str = "Bill text.",
        date_issued: str | None = "2021-01-01",
        with_mods: bool = True,
        urls: dict[str, str] | None = None,
    ) -> Path:
        bill_dir = gpo_root / str(bill.congress) / bill.bill_type
        bill_dir.mkdir(parents=True, exist_ok=True)
        stem = f"{bill.bill_type}{bill.number}-{bill.congress}-{code}"
        path = bill_dir / f"{stem}.htm"
        path.write_text(make_version_html(text), encoding="utf-8")
        if with_mods:
            (bill_dir / f"{stem}.mods.xml").write_text(
                make_mods(date_issued, urls), encoding="utf-8"
            )
        return path

    return _write


@pytest.fixture
def make_bill() -> Callable[..., Bill]:
    """Create a transient Bill."""

    def _make(bill_type: str = "hr", number: int = 1, congress: int = 117) -> Bill:
        return Bill(
            bill_id=f"{bill_type}{number}-{congress}",
            bill_type=bill_type,
            number=number,
            congress=congress,
            abbreviated=False,
            official_title=f"A bill numbered {number}.",
        )

    return _make
