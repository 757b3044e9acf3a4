"""
Evidence formatting and citation extraction.

Both functions read the same ranked hit list; neither filters by score,
which has already happened in the retriever.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Set, Union

from ..config import settings
from ..retrieval.models import SearchResult, SourceRef


def assemble_context(results: Sequence[SearchResult]) -> Optional[str]:
    """
    Render hits as numbered evidence blocks, in rank order.

    Returns None (never an empty string) when there is no evidence.
    """
    if not results:
        return None

    blocks = []
    for idx, result in enumerate(results, start=1):
        payload = result.payload
        blocks.append(
            f"[Source {idx}] Title: {payload.display_title or 'Untitled'}\n"
            f"Content: {payload.content}\n"
            "---"
        )
    return "\n\n".join(blocks)


def extract_sources(
    results: Sequence[SearchResult],
    limit: Optional[int] = None,
) -> List[SourceRef]:
    """
    Collapse hits to unique cited works, keyed by ``record_id``.

    First-seen order is kept and collection stops once ``limit`` works
    (default ``settings.max_sources``) have been gathered.
    """
    max_sources = settings.max_sources if limit is None else limit
    seen: Set[Union[int, str, None]] = set()
    sources: List[SourceRef] = []

    for result in results:
        if len(sources) >= max_sources:
            break
        payload = result.payload
        if payload.record_id in seen:
            continue
        seen.add(payload.record_id)
        sources.append(
            SourceRef(
                title=payload.display_title,
                authors=payload.authors,
                url=payload.url,
                doi=payload.doi,
            )
        )

    return sources
