"""
RAG Pipeline Orchestrator

Sequences one question through the stages:

    query -> embedding -> search hits -> {context, sources} -> answer

Each stage is awaited before the next starts. The orchestrator holds no
mutable state, so a single instance serves concurrent requests.

Failure mapping
---------------
- Invalid query            -> PipelineFailure("invalid_input", 400), no
                              service is contacted
- Embedder failure         -> per the embedder's FailurePolicy: PROPAGATE
                              gives a server error, DEGRADE continues as if
                              no evidence was found (missing credentials are
                              always fatal)
- Retriever failure        -> absorbed by the retriever (empty hits)
- Anything else            -> PipelineFailure("internal_error", 500) with a
                              generic message; details are logged only
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Union

from ..core.errors import (
    GENERIC_SERVER_ERROR,
    INVALID_MESSAGE,
    FailurePolicy,
    InvalidInputError,
    ProviderError,
)
from ..embeddings.embedder import Embedder
from ..retrieval.models import SearchResult
from ..retrieval.retriever import Retriever
from .context import assemble_context, extract_sources
from .generator import AnswerGenerator, GeneratedAnswer

logger = logging.getLogger("geant.pipeline")


@dataclass(frozen=True)
class PipelineFailure:
    code: str
    message: str
    status_code: int


PipelineResult = Union[GeneratedAnswer, PipelineFailure]


def validate_query(query: Any) -> str:
    """Return the stripped query or raise InvalidInputError."""
    if not isinstance(query, str) or not query.strip():
        raise InvalidInputError(INVALID_MESSAGE)
    return query.strip()


class RAGPipeline:
    def __init__(
        self,
        embedder: Embedder,
        retriever: Retriever,
        generator: AnswerGenerator,
    ) -> None:
        self.embedder = embedder
        self.retriever = retriever
        self.generator = generator

    async def answer(self, query: Any) -> PipelineResult:
        """
        Answer one question. Never raises; failures come back as
        ``PipelineFailure`` with a caller-safe message.
        """
        try:
            text = validate_query(query)
        except InvalidInputError:
            logger.info("Rejected invalid query (type=%s)", type(query).__name__)
            return PipelineFailure("invalid_input", INVALID_MESSAGE, 400)

        try:
            return await self._run(text)
        except Exception:
            logger.exception("Pipeline failed")
            return PipelineFailure("internal_error", GENERIC_SERVER_ERROR, 500)

    async def _run(self, query: str) -> GeneratedAnswer:
        logger.debug("Answering query: %.80s", query)

        results = await self._retrieve(query)
        context = assemble_context(results)
        sources = extract_sources(results)

        return await self.generator.generate(query, context, sources)

    async def _retrieve(self, query: str) -> List[SearchResult]:
        try:
            vector = await self.embedder.embed(query)
        except ProviderError as exc:
            if self.embedder.failure_policy is not FailurePolicy.DEGRADE:
                raise
            logger.warning(
                "Embedding failed (status=%s), answering without evidence",
                exc.status_code,
            )
            return []

        results = await self.retriever.search(vector)
        logger.info("Retrieved %d results above threshold", len(results))
        return results
