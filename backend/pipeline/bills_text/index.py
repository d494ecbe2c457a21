"""Batched publishing of bill documents to the Elasticsearch index.

Documents are buffered per index and written with the ``_bulk`` API. A
batch is flushed automatically when it reaches ``batch_size``; whatever is
left must be written with ``force_flush`` at the end of a run, or it is
lost.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from app.models import Bill
    from pipeline.bills_text.versions import BillSnapshot

logger = logging.getLogger(__name__)


class IndexPublishError(Exception):
    """A bulk write to the search index failed.

    Attributes:
        document_ids: Ids of the documents that were not published: the
            rejected items when the cluster reports them, otherwise the
            whole batch.
    """

    def __init__(self, message: str, document_ids: list[str] | None = None):
        super().__init__(message)
        self.document_ids = list(document_ids or [])


class FlushTrigger(str, enum.Enum):
    """Why a batch is being flushed."""

    THRESHOLD = "threshold"
    FINAL = "final"


@dataclass
class IndexAction:
    """One buffered document."""

    document_id: str
    document: dict[str, Any]


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def bill_index_document(
    bill: Bill, snapshot: BillSnapshot, updated_at: datetime
) -> dict[str, Any]:
    """Project a bill and its snapshot into a search index document.

    Args:
        bill: Persisted bill, already updated with the snapshot.
        snapshot: Aggregated versions and citations.
        updated_at: Publish time.

    Returns:
        Flat document with the latest version's full text under "versions".
    """
    return {
        "bill_id": bill.bill_id,
        "bill_type": bill.bill_type,
        "number": bill.number,
        "congress": bill.congress,
        "chamber": bill.chamber,
        "official_title": bill.official_title,
        "short_title": bill.short_title,
        "popular_title": bill.popular_title,
        "introduced_on": bill.introduced_on,
        "sponsor": bill.sponsor,
        "summary": bill.summary,
        "keywords": bill.keywords,
        "last_action": bill.last_action,
        "versions": snapshot.last_version_text,
        "updated_at": updated_at,
        **snapshot.to_record(),
    }


class IndexPublisher:
    """Buffers documents per index and bulk-writes them to Elasticsearch."""

    def __init__(
        self,
        base_url: str | None = None,
        batch_size: int | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the publisher.

        Args:
            base_url: Elasticsearch base URL. Defaults to settings.
            batch_size: Documents per bulk request. Defaults to settings.
            timeout: HTTP request timeout in seconds.
            transport: httpx transport override (used by tests).
        """
        if base_url is None or batch_size is None:
            from app.config import settings

            base_url = base_url or settings.elasticsearch_url
            batch_size = batch_size or settings.index_batch_size
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.base_url = base_url.rstrip("/")
        self.batch_size = batch_size
        self.timeout = timeout
        self.transport = transport
        self._batches: dict[str, list[IndexAction]] = {}
        self.documents_written = 0

    def pending(self, index_name: str) -> int:
        """Number of documents buffered for an index."""
        return len(self._batches.get(index_name, []))

    async def enqueue(
        self, index_name: str, document_id: str, document: dict[str, Any]
    ) -> None:
        """Buffer a document, flushing the batch once it is full.

        Raises:
            IndexPublishError: If the automatic flush fails.
        """
        batch = self._batches.setdefault(index_name, [])
        batch.append(IndexAction(document_id, document))
        if len(batch) >= self.batch_size:
            await self.flush(index_name, FlushTrigger.THRESHOLD)

    async def force_flush(self, index_name: str) -> int:
        """Write whatever is buffered for an index. Call once per run."""
        return await self.flush(index_name, FlushTrigger.FINAL)

    async def flush(
        self, index_name: str, trigger: FlushTrigger = FlushTrigger.FINAL
    ) -> int:
        """Bulk-write and clear an index's batch.

        The batch is cleared even if the write fails; nothing is retried.

        Args:
            index_name: Index to flush.
            trigger: What caused the flush (for logging).

        Returns:
            Number of documents written.

        Raises:
            IndexPublishError: On HTTP failure or per-document errors.
        """
        batch = self._batches.pop(index_name, [])
        if not batch:
            return 0

        logger.info(
            f"Flushing {len(batch)} documents to '{index_name}' ({trigger.value})"
        )
        body = self._bulk_body(index_name, batch)
        document_ids = [action.document_id for action in batch]

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/_bulk",
                    content=body,
                    headers={"Content-Type": "application/x-ndjson"},
                )
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IndexPublishError(
                f"Bulk write of {len(batch)} documents to '{index_name}' failed: {e}",
                document_ids,
            ) from e

        if not isinstance(result, dict):
            raise IndexPublishError(
                f"Unexpected bulk response from '{index_name}': "
                f"{type(result).__name__}",
                document_ids,
            )

        if result.get("errors"):
            items = result.get("items")
            if not isinstance(items, list) or not all(
                isinstance(item, dict) and isinstance(item.get("index", {}), dict)
                for item in items
            ):
                raise IndexPublishError(
                    f"Unexpected bulk response items from '{index_name}'",
                    document_ids,
                )
            failed = [
                item.get("index", {}).get("_id")
                for item in items
                if item.get("index", {}).get("error")
            ]
            self.documents_written += len(batch) - len(failed)
            raise IndexPublishError(
                f"{len(failed)} of {len(batch)} documents rejected by "
                f"'{index_name}': {', '.join(str(f) for f in failed[:10])}",
                [str(f) for f in failed if f is not None] or document_ids,
            )

        self.documents_written += len(batch)
        return len(batch)

    @staticmethod
    def _bulk_body(index_name: str, batch: list[IndexAction]) -> str:
        lines = []
        for action in batch:
            lines.append(
                json.dumps({"index": {"_index": index_name, "_id": action.document_id}})
            )
            lines.append(json.dumps(action.document, default=_json_default))
        # The bulk API requires a trailing newline
        return "\n".join(lines) + "\n"
