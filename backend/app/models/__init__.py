"""SQLAlchemy models for the bill text pipeline."""

from app.models.base import Base, TimestampMixin, async_session_maker
from app.models.bill import Bill, BillVersion
from app.models.ingestion_log import DataIngestionLog

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "async_session_maker",
    # Bills
    "Bill",
    "BillVersion",
    # Supporting
    "DataIngestionLog",
]
