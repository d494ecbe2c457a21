"""Citation extraction for bill text.

Citation parsing itself lives in a separate citation-finding service; this
module only sends text to it and reduces the response to citation ids.

Service contract:
    POST {base_url}/citation/find   (form field "text")
    -> {"results": [{"type": "usc", "usc": {"id": "usc/5/552", ...}, ...}]}
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from pipeline.cache import PipelineCache

if TYPE_CHECKING:
    from pipeline.bills_text.versions import BillRef

logger = logging.getLogger(__name__)


class CitationExtractor(Protocol):
    """Anything that can find citations in a bill's text."""

    async def extract(
        self,
        bill: BillRef,
        text: str,
        cache_key: str | None = None,
        use_cache: bool = False,
    ) -> list[str] | None:
        """Return citation ids found in text, or None if extraction failed."""
        ...


def citation_ids_from_response(data: dict[str, Any]) -> list[str]:
    """Reduce a citation service response to unique ids, in order found."""
    ids: list[str] = []
    seen: set[str] = set()
    for result in data.get("results", []):
        kind = result.get("type")
        detail = result.get(kind) if kind else None
        citation_id = detail.get("id") if isinstance(detail, dict) else None
        if citation_id and citation_id not in seen:
            seen.add(citation_id)
            ids.append(citation_id)
    return ids


class CitationServiceClient:
    """Client for the citation-finding service."""

    def __init__(
        self,
        base_url: str | None = None,
        cache: PipelineCache | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service base URL. Defaults to settings.
            cache: Cache for raw service responses (optional).
            timeout: HTTP request timeout in seconds. Defaults to settings.
            transport: httpx transport override (used by tests).
        """
        if base_url is None or timeout is None:
            from app.config import settings

            base_url = base_url or settings.citation_service_url
            timeout = timeout if timeout is not None else settings.citation_timeout
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self.transport = transport

    async def extract(
        self,
        bill: BillRef,
        text: str,
        cache_key: str | None = None,
        use_cache: bool = False,
    ) -> list[str] | None:
        """Find citations in a bill's text.

        Args:
            bill: Bill the text belongs to (for logging).
            text: Normalized text of the bill's latest version.
            cache_key: Where to cache the raw service response.
            use_cache: If True, reuse a cached response instead of calling
                the service.

        Returns:
            Citation ids, or None if the service call failed.
        """
        if use_cache and self.cache and cache_key:
            cached = self.cache.get_text(cache_key)
            if cached is not None:
                try:
                    return citation_ids_from_response(json.loads(cached))
                except ValueError:
                    logger.warning(f"[{bill.bill_id}] Ignoring corrupt citation cache")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/citation/find", data={"text": text}
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[{bill.bill_id}] Citation service failed: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"[{bill.bill_id}] Unexpected citation service response")
            return None

        if self.cache and cache_key:
            self.cache.put_text(cache_key, json.dumps(data))

        return citation_ids_from_response(data)
