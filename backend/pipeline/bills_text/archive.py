"""Persist version text and bill snapshots to the document archive."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Bill, BillVersion
from pipeline.bills_text.versions import BillSnapshot

logger = logging.getLogger(__name__)


class ArchiveWriter:
    """Upserts BillVersion rows and a Bill's version fields.

    Writes are flushed but not committed; the run coordinator commits once a
    bill has been fully archived, so a failure leaves no partial bill.
    """

    def __init__(self, session: AsyncSession):
        """Initialize the writer.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def archive_version(
        self,
        bill_version_id: str,
        bill_id: str,
        version_code: str,
        full_text: str,
    ) -> bool:
        """Insert or overwrite the archived text of one version.

        Args:
            bill_version_id: Version key, e.g. "hr81-112-ih".
            bill_id: Owning bill, e.g. "hr81-112".
            version_code: Version code, e.g. "ih".
            full_text: Normalized text. Replaces any previous text.

        Returns:
            True if created, False if an existing record was overwritten.
        """
        result = await self.session.execute(
            select(BillVersion).where(BillVersion.bill_version_id == bill_version_id)
        )
        existing = result.scalar_one_or_none()

        if existing:
            existing.full_text = full_text
            existing.version_code = version_code
            await self.session.flush()
            return False

        self.session.add(
            BillVersion(
                bill_version_id=bill_version_id,
                bill_id=bill_id,
                version_code=version_code,
                full_text=full_text,
            )
        )
        await self.session.flush()
        return True

    async def archive_bill_snapshot(self, bill: Bill, snapshot: BillSnapshot) -> None:
        """Overwrite a bill's version fields with a new snapshot.

        Args:
            bill: Persistent Bill to update.
            snapshot: Aggregated versions and citations.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: If the flush fails.
        """
        for name, value in snapshot.to_record().items():
            setattr(bill, name, value)
        await self.session.flush()
        logger.debug(f"[{bill.bill_id}] Updated bill with version codes.")
