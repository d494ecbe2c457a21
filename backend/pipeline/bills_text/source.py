"""Version sources: where a bill's version files come from.

The collector only needs three things from storage: the list of version
files for a bill, each file's text body, and its MODS descriptor. The
filesystem implementation reads the GPO bulk data layout:

    {root}/{congress}/{type}/{type}{number}-{congress}-{code}.htm
    {root}/{congress}/{type}/{type}{number}-{congress}-{code}.mods.xml
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from lxml import html

if TYPE_CHECKING:
    from pipeline.bills_text.versions import BillRef

logger = logging.getLogger(__name__)

VERSION_CODE_RE = re.compile(r"-(\w+)$")


@dataclass(frozen=True)
class VersionFile:
    """One candidate version of a bill, before validation."""

    bill_version_id: str  # file stem, e.g. "hr81-112-enr"
    version_code: str

    @classmethod
    def from_stem(cls, stem: str) -> VersionFile | None:
        """Build from a file stem; None if it carries no version code."""
        match = VERSION_CODE_RE.search(stem)
        if not match:
            return None
        return cls(bill_version_id=stem, version_code=match.group(1))


class VersionSource(Protocol):
    """Storage-independent access to a bill's version files."""

    def list_versions(self, bill: BillRef) -> list[VersionFile]:
        """Return the bill's version files in a stable order."""
        ...

    def read_text(self, bill: BillRef, version: VersionFile) -> str:
        """Return the raw text body of a version."""
        ...

    def read_descriptor(self, bill: BillRef, version: VersionFile) -> bytes | None:
        """Return the version's MODS XML, or None if there is none."""
        ...


def extract_pre_text(content: str | bytes) -> str:
    """Pull the bill text out of a GPO version HTML page.

    GPO wraps the whole bill in a single <pre> block. Pages without one fall
    back to the text of the whole document.
    """
    doc = html.fromstring(content)
    pre = doc.find(".//pre")
    if pre is None and doc.tag == "pre":
        pre = doc
    if pre is not None:
        return pre.text_content()
    return doc.text_content()


class FilesystemVersionSource:
    """Reads versions from a local copy of the GPO BILLS collection."""

    def __init__(self, root: Path | str = "data/gpo/BILLS"):
        """Initialize the source.

        Args:
            root: Directory holding {congress}/{type}/ subdirectories.
        """
        self.root = Path(root)

    def _bill_dir(self, bill: BillRef) -> Path:
        return self.root / str(bill.congress) / bill.bill_type

    def list_versions(self, bill: BillRef) -> list[VersionFile]:
        pattern = f"{bill.bill_type}{bill.number}-{bill.congress}-[a-z]*.htm"
        paths = sorted(self._bill_dir(bill).glob(pattern))

        versions = []
        for path in paths:
            version = VersionFile.from_stem(path.stem)
            if version is None:
                logger.debug(f"Ignoring file without version code: {path}")
                continue
            versions.append(version)
        return versions

    def read_text(self, bill: BillRef, version: VersionFile) -> str:
        path = self._bill_dir(bill) / f"{version.bill_version_id}.htm"
        return extract_pre_text(path.read_bytes())

    def read_descriptor(self, bill: BillRef, version: VersionFile) -> bytes | None:
        path = self._bill_dir(bill) / f"{version.bill_version_id}.mods.xml"
        if not path.exists():
            return None
        return path.read_bytes()
