"""Bill version text ingestion from GPO bulk data."""

from pipeline.bills_text.citations import CitationServiceClient
from pipeline.bills_text.index import IndexPublisher
from pipeline.bills_text.ingestion import BillTextIngestionService, RunOptions
from pipeline.bills_text.source import FilesystemVersionSource

__all__ = [
    "BillTextIngestionService",
    "CitationServiceClient",
    "FilesystemVersionSource",
    "IndexPublisher",
    "RunOptions",
]
