"""Bill version vocabulary and the value types passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Protocol

# =============================================================================
# GPO bill version codes
# =============================================================================
# Source: https://www.govinfo.gov/help/bills#types
# Codes appear as the suffix of the version file stem, e.g. hr81-112-enr.

VERSION_NAMES: dict[str, str] = {
    "as": "Amendment Ordered to be Printed",
    "ash": "Additional Sponsors House",
    "ath": "Agreed to House",
    "ats": "Agreed to Senate",
    "cdh": "Committee Discharged House",
    "cds": "Committee Discharged Senate",
    "cph": "Considered and Passed House",
    "cps": "Considered and Passed Senate",
    "eah": "Engrossed Amendment House",
    "eas": "Engrossed Amendment Senate",
    "eh": "Engrossed in House",
    "ehr": "Engrossed in House-Reprint",
    "eih": "Engrossed as Introduced in House",
    "eis": "Engrossed as Introduced in Senate",
    "enr": "Enrolled Bill",
    "es": "Engrossed in Senate",
    "esr": "Engrossed in Senate-Reprint",
    "fah": "Failed Amendment House",
    "fph": "Failed Passage House",
    "fps": "Failed Passage Senate",
    "hdh": "Held at Desk House",
    "hds": "Held at Desk Senate",
    "ih": "Introduced in House",
    "ihr": "Introduced in House-Reprint",
    "iph": "Indefinitely Postponed in House",
    "ips": "Indefinitely Postponed in Senate",
    "is": "Introduced in Senate",
    "isr": "Introduced in Senate-Reprint",
    "lth": "Laid on Table in House",
    "lts": "Laid on Table in Senate",
    "oph": "Ordered to be Printed House",
    "ops": "Ordered to be Printed Senate",
    "pch": "Placed on Calendar House",
    "pcs": "Placed on Calendar Senate",
    "pp": "Public Print",
    "rah": "Referred with Amendments House",
    "ras": "Referred with Amendments Senate",
    "rch": "Reference Change House",
    "rcs": "Reference Change Senate",
    "rdh": "Received in House",
    "rds": "Received in Senate",
    "re": "Reprint of an Amendment",
    "reah": "Re-engrossed Amendment House",
    "renr": "Re-enrolled Bill",
    "res": "Re-engrossed Amendment Senate",
    "rfh": "Referred in House",
    "rfs": "Referred in Senate",
    "rh": "Reported in House",
    "rhuc": "Returned to the House by Unanimous Consent",
    "rih": "Referral Instructions House",
    "ris": "Referral Instructions Senate",
    "rs": "Reported in Senate",
    "rth": "Referred to Committee House",
    "rts": "Referred to Committee Senate",
    "sas": "Additional Sponsors Senate",
    "sc": "Sponsor Change",
}


def version_name_for(version_code: str) -> str | None:
    """Return the standard GPO name for a version code, or None if unknown."""
    return VERSION_NAMES.get(version_code)


def current_congress(today: date | None = None) -> int:
    """Return the number of the Congress sitting on a given date.

    A Congress spans two years starting in an odd year; the 1st Congress
    began in 1789. January 1-2 of an odd year still belongs to the previous
    Congress, which is ignored here.

    Args:
        today: Date to evaluate (defaults to today).

    Returns:
        Congress number (e.g., 119 for 2025-2026).
    """
    year = (today or date.today()).year
    return (year + 1) // 2 - 894


class BillRef(Protocol):
    """The identity fields of a bill that the pipeline needs."""

    bill_id: str
    bill_type: str
    number: int
    congress: int


# =============================================================================
# Stage results
# =============================================================================


@dataclass(frozen=True)
class VersionSummary:
    """One valid, dated version of a bill."""

    version_code: str
    version_name: str
    issued_on: date
    bill_version_id: str
    urls: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSONB storage and the search index."""
        return {
            "version_code": self.version_code,
            "version_name": self.version_name,
            "issued_on": self.issued_on.isoformat(),
            "bill_version_id": self.bill_version_id,
            "urls": dict(self.urls),
        }


@dataclass(frozen=True)
class Skip:
    """A stage declined to produce a result for a bill."""

    reason: str


@dataclass
class BillSnapshot:
    """The current, aggregated view of a bill's versions.

    Attributes:
        version_info: Valid versions ordered by issue date (oldest first).
        citation_ids: Citations found in the latest version's text.
        last_version_text: Normalized full text of the latest version.
    """

    version_info: list[VersionSummary]
    citation_ids: list[str]
    last_version_text: str

    @property
    def last_version(self) -> VersionSummary:
        return self.version_info[-1]

    @property
    def last_version_on(self) -> date:
        return self.last_version.issued_on

    @property
    def version_codes(self) -> list[str]:
        return [v.version_code for v in self.version_info]

    @property
    def versions_count(self) -> int:
        return len(self.version_info)

    def to_record(self) -> dict[str, Any]:
        """Return the bill fields this snapshot sets, in storable form."""
        return {
            "version_info": [v.to_dict() for v in self.version_info],
            "version_codes": self.version_codes,
            "versions_count": self.versions_count,
            "last_version": self.last_version.to_dict(),
            "last_version_on": self.last_version_on,
            "citation_ids": list(self.citation_ids),
        }
