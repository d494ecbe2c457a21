"""Local filesystem cache for derived pipeline artifacts.

Cache keys mirror the local data/ directory structure, e.g.:
    citation/bills/117/hr1-117.json
    citation/bills/117/hr1-117.txt

Writes are best-effort: a failed write is logged and never interrupts a run,
since every cached artifact can be derived again.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pipeline.bills_text.versions import BillRef

logger = logging.getLogger(__name__)


def citation_cache_key(bill: BillRef) -> str:
    """Cache key for the citation service response of a bill's latest text."""
    return f"citation/bills/{bill.congress}/{bill.bill_id}.json"


def text_cache_key(bill: BillRef) -> str:
    """Cache key for the normalized text of a bill's latest version."""
    return f"citation/bills/{bill.congress}/{bill.bill_id}.txt"


class PipelineCache:
    """Text cache rooted at a local directory."""

    def __init__(self, local_root: Path | str = "data") -> None:
        self.local_root = Path(local_root)

    def get_text(self, key: str) -> str | None:
        """Get cached text content by key, or None on a miss."""
        local = self.local_path(key)
        if not local.exists():
            return None
        try:
            return local.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    def put_text(self, key: str, content: str) -> bool:
        """Write text content. Returns False if the write failed."""
        local = self.local_path(key)
        try:
            local.parent.mkdir(parents=True, exist_ok=True)
            local.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False
        logger.debug(f"Cached {key}")
        return True

    def has_local(self, key: str) -> bool:
        """Check whether a key exists in the cache."""
        return self.local_path(key).exists()

    def local_path(self, key: str) -> Path:
        """Return the local filesystem path for a cache key."""
        return self.local_root / key


def get_pipeline_cache() -> PipelineCache:
    """Factory that reads settings and returns a configured PipelineCache."""
    from app.config import settings

    return PipelineCache(local_root=Path(settings.cache_dir))
