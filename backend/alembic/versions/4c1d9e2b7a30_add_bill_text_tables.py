"""Add bill, bill version archive, and ingestion log tables.

Revision ID: 4c1d9e2b7a30
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d9e2b7a30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "bill",
        sa.Column("bill_id", sa.String(30), nullable=False),
        sa.Column("bill_type", sa.String(10), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("congress", sa.Integer(), nullable=False),
        sa.Column("chamber", sa.String(10), nullable=True),
        sa.Column(
            "abbreviated", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("official_title", sa.Text(), nullable=True),
        sa.Column("short_title", sa.String(500), nullable=True),
        sa.Column("popular_title", sa.String(500), nullable=True),
        sa.Column("introduced_on", sa.Date(), nullable=True),
        sa.Column("sponsor", postgresql.JSONB(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("keywords", postgresql.JSONB(), nullable=True),
        sa.Column("last_action", postgresql.JSONB(), nullable=True),
        sa.Column("version_info", postgresql.JSONB(), nullable=True),
        sa.Column("version_codes", postgresql.JSONB(), nullable=True),
        sa.Column("versions_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_version", postgresql.JSONB(), nullable=True),
        sa.Column("last_version_on", sa.Date(), nullable=True),
        sa.Column("citation_ids", postgresql.JSONB(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("bill_id", name="pk_bill"),
        sa.CheckConstraint(
            "congress >= 1 AND congress <= 200", name="ck_bill_congress_range"
        ),
    )
    op.create_index("idx_bill_congress", "bill", ["congress"])
    op.create_index(
        "idx_bill_congress_abbreviated", "bill", ["congress", "abbreviated"]
    )
    op.create_index("idx_bill_last_version_on", "bill", ["last_version_on"])

    op.create_table(
        "bill_version",
        sa.Column("bill_version_id", sa.String(40), nullable=False),
        sa.Column(
            "bill_id",
            sa.String(30),
            sa.ForeignKey("bill.bill_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("version_code", sa.String(10), nullable=False),
        sa.Column("full_text", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("bill_version_id", name="pk_bill_version"),
    )
    op.create_index("idx_bill_version_bill", "bill_version", ["bill_id"])

    op.create_table(
        "data_ingestion_log",
        sa.Column("log_id", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(100), nullable=False),
        sa.Column("operation", sa.String(50), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="running"),
        sa.Column("records_processed", sa.Integer(), server_default="0"),
        sa.Column("records_updated", sa.Integer(), server_default="0"),
        sa.Column("records_skipped", sa.Integer(), server_default="0"),
        sa.Column("records_failed", sa.Integer(), server_default="0"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("warnings", postgresql.JSONB(), nullable=True),
        sa.Column("notes", postgresql.JSONB(), nullable=True),
        sa.PrimaryKeyConstraint("log_id", name="pk_data_ingestion_log"),
    )
    op.create_index("idx_ingestion_source", "data_ingestion_log", ["source"])
    op.create_index("idx_ingestion_status", "data_ingestion_log", ["status"])
    op.create_index("idx_ingestion_started", "data_ingestion_log", ["started_at"])


def downgrade() -> None:
    op.drop_index("idx_ingestion_started", table_name="data_ingestion_log")
    op.drop_index("idx_ingestion_status", table_name="data_ingestion_log")
    op.drop_index("idx_ingestion_source", table_name="data_ingestion_log")
    op.drop_table("data_ingestion_log")
    op.drop_index("idx_bill_version_bill", table_name="bill_version")
    op.drop_table("bill_version")
    op.drop_index("idx_bill_last_version_on", table_name="bill")
    op.drop_index("idx_bill_congress_abbreviated", table_name="bill")
    op.drop_index("idx_bill_congress", table_name="bill")
    op.drop_table("bill")
