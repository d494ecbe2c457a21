"""Bill and bill version archive models."""

from datetime import date
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin


class Bill(Base, TimestampMixin):
    """A bill introduced in Congress.

    Rows are created by the bill status loader. The text pipeline only
    updates the version fields at the bottom of the column list.
    """

    __tablename__ = "bill"

    # e.g. "hr81-112": GPO type prefix, number, congress
    bill_id: Mapped[str] = mapped_column(String(30), primary_key=True)
    bill_type: Mapped[str] = mapped_column(String(10), nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    congress: Mapped[int] = mapped_column(Integer, nullable=False)
    chamber: Mapped[str | None] = mapped_column(String(10), nullable=True)
    # Abbreviated bills have only basic status data and are not text-indexed
    abbreviated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    official_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    popular_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    introduced_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    sponsor: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    keywords: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    last_action: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)

    # Written by the bill text pipeline
    version_info: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONB, nullable=True
    )
    version_codes: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)
    versions_count: Mapped[int] = mapped_column(Integer, default=0)
    last_version: Mapped[dict[str, Any] | None] = mapped_column(JSONB, nullable=True)
    last_version_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    citation_ids: Mapped[list[str] | None] = mapped_column(JSONB, nullable=True)

    versions: Mapped[list["BillVersion"]] = relationship(back_populates="bill")

    __table_args__ = (
        CheckConstraint(
            "congress >= 1 AND congress <= 200",
            name="ck_bill_congress_range",
        ),
        Index("idx_bill_congress", "congress"),
        Index("idx_bill_congress_abbreviated", "congress", "abbreviated"),
        Index("idx_bill_last_version_on", "last_version_on"),
    )

    def __repr__(self) -> str:
        return f"<Bill({self.bill_id})>"


class BillVersion(Base, TimestampMixin):
    """Archived full text of one published version of a bill."""

    __tablename__ = "bill_version"

    # e.g. "hr81-112-ih"
    bill_version_id: Mapped[str] = mapped_column(String(40), primary_key=True)
    bill_id: Mapped[str] = mapped_column(
        ForeignKey("bill.bill_id", ondelete="CASCADE"), nullable=False
    )
    version_code: Mapped[str] = mapped_column(String(10), nullable=False)
    full_text: Mapped[str] = mapped_column(Text, nullable=False)

    bill: Mapped["Bill"] = relationship(back_populates="versions")

    __table_args__ = (Index("idx_bill_version_bill", "bill_id"),)

    def __repr__(self) -> str:
        return f"<BillVersion({self.bill_version_id})>"
