"""
Answer Generator

Builds the grounding-aware prompt pair and invokes the completion service.

Two branches, selected by whether evidence exists:
- grounded: context block + question, answer strictly from context,
  cite the deduplicated sources
- ungrounded: tell the model nothing matched, return no sources

Completion failures are NOT absorbed here; they surface as GenerationError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..config import settings
from ..core.errors import FailurePolicy, GenerationError
from ..llm.client import LLMClient
from ..prompts import (
    GROUNDED_USER_PROMPT,
    SUGGESTED_TOPICS,
    SYSTEM_PROMPT,
    UNGROUNDED_USER_PROMPT,
)
from ..retrieval.models import SourceRef

logger = logging.getLogger("geant.generator")


@dataclass(frozen=True)
class GeneratedAnswer:
    answer: str
    sources: List[SourceRef] = field(default_factory=list)


def build_user_prompt(query: str, context: Optional[str]) -> str:
    if context is not None:
        return GROUNDED_USER_PROMPT.format(context=context, query=query)
    return UNGROUNDED_USER_PROMPT.format(
        query=query,
        topics=", ".join(SUGGESTED_TOPICS),
    )


class AnswerGenerator:
    """
    Composes prompts and calls the LLM with low temperature and a bounded
    output length.
    """

    failure_policy = FailurePolicy.PROPAGATE

    def __init__(
        self,
        llm: LLMClient,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        self.llm = llm
        self.temperature = (
            settings.llm_temperature if temperature is None else temperature
        )
        self.max_tokens = max_tokens or settings.llm_max_tokens

    async def generate(
        self,
        query: str,
        context: Optional[str],
        sources: Sequence[SourceRef],
    ) -> GeneratedAnswer:
        """
        Raises
        ------
        GenerationError
            If the completion call fails for any reason, including a missing
            credential.
        """
        grounded = context is not None
        user_prompt = build_user_prompt(query, context)

        try:
            answer = await self.llm.chat(
                SYSTEM_PROMPT,
                user_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as exc:
            logger.error("Completion failed (%s)", type(exc).__name__)
            raise GenerationError("Failed to generate response") from exc

        logger.info(
            "Generated %s answer (%d sources)",
            "grounded" if grounded else "ungrounded",
            len(sources) if grounded else 0,
        )
        return GeneratedAnswer(
            answer=answer,
            sources=list(sources) if grounded else [],
        )
