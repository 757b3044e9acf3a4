"""
Vector Retriever

Similarity search against the Qdrant collection holding the document
corpus, through Qdrant's REST API.

Responsibilities
----------------
- Issue a thresholded, capped similarity search for a query vector
- Validate hits into ``SearchResult`` objects, preserving index order
- Apply the retriever's failure policy: by default any failure degrades to
  "no evidence" (an empty list) instead of an error
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from ..config import settings
from ..core.errors import DegradedRetrievalError, FailurePolicy
from .models import SearchResult

logger = logging.getLogger("geant.retriever")


class Retriever:
    """
    Thresholded similarity search over a single Qdrant collection.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        collection: Optional[str] = None,
        score_threshold: Optional[float] = None,
        top_k: Optional[int] = None,
        timeout: Optional[float] = None,
        failure_policy: FailurePolicy = FailurePolicy.DEGRADE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = (url or settings.qdrant_url).rstrip("/")
        if api_key is None and settings.qdrant_api_key is not None:
            api_key = settings.qdrant_api_key.get_secret_value()
        self._api_key = api_key
        self.collection = collection or settings.qdrant_collection
        self.score_threshold = (
            settings.similarity_threshold if score_threshold is None else score_threshold
        )
        self.top_k = top_k or settings.search_top_k
        self.timeout = timeout or settings.qdrant_timeout
        self.failure_policy = failure_policy
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search(
        self,
        vector: List[float],
        top_k: Optional[int] = None,
    ) -> List[SearchResult]:
        """
        Return up to ``top_k`` hits scoring at least the similarity
        threshold, in descending score order as ranked by the index.

        Under ``FailurePolicy.DEGRADE`` this never raises; failures are
        logged and an empty list is returned.
        """
        limit = top_k or self.top_k
        try:
            return await self._query_index(vector, limit)
        except DegradedRetrievalError as exc:
            if self.failure_policy is FailurePolicy.PROPAGATE:
                raise
            logger.warning(
                "Search failed, continuing without evidence: %s",
                exc,
                exc_info=exc.__cause__,
            )
            return []

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["api-key"] = self._api_key
        return headers

    async def _query_index(
        self,
        vector: List[float],
        limit: int,
    ) -> List[SearchResult]:
        endpoint = f"{self.url}/collections/{self.collection}/points/search"
        body = {
            "vector": vector,
            "limit": limit,
            "with_payload": True,
            "score_threshold": self.score_threshold,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    endpoint,
                    json=body,
                    headers=self._headers(),
                )
                response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise DegradedRetrievalError(
                f"Vector search failed: {type(exc).__name__}"
            ) from exc

        return self._parse_hits(data)

    @staticmethod
    def _parse_hits(data: Any) -> List[SearchResult]:
        """
        Validate Qdrant's ``{"result": [{"id", "score", "payload"}, ...]}``.

        Hits are validated one by one; a malformed hit is logged and
        skipped so the remaining evidence keeps its rank order.
        """
        if not isinstance(data, dict) or not isinstance(data.get("result"), list):
            raise DegradedRetrievalError("Search response missing 'result' list.")

        results: List[SearchResult] = []
        for rank, hit in enumerate(data["result"]):
            try:
                results.append(SearchResult.model_validate(hit))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed search hit at rank %d (%d errors)",
                    rank,
                    exc.error_count(),
                )
        return results
