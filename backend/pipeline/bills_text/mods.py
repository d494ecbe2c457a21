"""Read version metadata from GPO MODS descriptor files.

Each bill version in the GPO bulk data ships with a MODS XML sidecar
(``{bill_version_id}.mods.xml``). Only two things are taken from it: the
date the version was issued and the download URLs GPO lists for it.

The MODS file stays small no matter how large the bill is, so it is parsed
whole.
"""

import contextlib
import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from lxml import etree

logger = logging.getLogger(__name__)

# Label substrings checked in order; first match wins for each <url>
URL_KINDS: list[tuple[str, str]] = [
    ("HTML", "html"),
    ("XML", "xml"),
    ("PDF", "pdf"),
]


class InvalidVersionError(Exception):
    """A bill version cannot be used because its metadata is missing or bad."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class VersionMetadata:
    """Metadata resolved from a version's MODS file."""

    issued_on: date
    urls: dict[str, str] = field(default_factory=dict)


def parse_issued_on(timestamp: str | None) -> date | None:
    """Parse a MODS dateIssued value into a date.

    Accepts plain dates ("2021-01-01") and ISO timestamps. Timestamps with
    an offset are converted to UTC first.

    Args:
        timestamp: Raw element text.

    Returns:
        Issue date, or None if the value is blank or unparsable.
    """
    if not timestamp or not timestamp.strip():
        return None

    value = timestamp.strip().replace("Z", "+00:00")
    with contextlib.suppress(ValueError):
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(UTC)
        return parsed.date()
    return None


def _elements(doc: etree._Element, name: str) -> list[etree._Element]:
    # MODS documents are namespaced; match on local name only
    return doc.xpath(f"//*[local-name()='{name}']")


def urls_for(doc: etree._Element) -> dict[str, str]:
    """Collect html/xml/pdf URLs from a parsed MODS document."""
    urls: dict[str, str] = {}
    for elem in _elements(doc, "url"):
        label = (elem.get("displayLabel") or "").upper()
        for needle, kind in URL_KINDS:
            if needle in label:
                urls[kind] = (elem.text or "").strip()
                break
    return urls


def resolve_version_metadata(descriptor: bytes | str | None) -> VersionMetadata:
    """Resolve a version's issue date and URLs from its MODS file.

    Args:
        descriptor: MODS XML content, or None if the file does not exist.

    Returns:
        VersionMetadata for a usable version.

    Raises:
        InvalidVersionError: If the descriptor is missing, unparsable, or has
            no usable dateIssued. The whole version is unusable in each case.
    """
    if descriptor is None:
        raise InvalidVersionError("no descriptor")

    if isinstance(descriptor, str):
        descriptor = descriptor.encode("utf-8")

    try:
        doc = etree.fromstring(descriptor)
    except etree.XMLSyntaxError as e:
        logger.debug(f"MODS parse error: {e}")
        raise InvalidVersionError("unparsable descriptor") from e

    date_elems = _elements(doc, "dateIssued")
    issued_on = parse_issued_on(date_elems[0].text if date_elems else None)
    if issued_on is None:
        raise InvalidVersionError("no date")

    return VersionMetadata(issued_on=issued_on, urls=urls_for(doc))
