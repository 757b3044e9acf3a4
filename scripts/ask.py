"""
Ask the assistant one question from the command line.

Usage:
    python scripts/ask.py "What is eduroam?"

Reads provider credentials from the environment or a local .env file.
"""

import asyncio
import sys

from dotenv import load_dotenv
load_dotenv()

from geant_assistant.embeddings.embedder import Embedder
from geant_assistant.llm.client import LLMClient
from geant_assistant.rag.generator import AnswerGenerator
from geant_assistant.rag.pipeline import PipelineFailure, RAGPipeline
from geant_assistant.retrieval.retriever import Retriever


async def main(question: str) -> int:
    pipeline = RAGPipeline(
        embedder=Embedder(),
        retriever=Retriever(),
        generator=AnswerGenerator(LLMClient()),
    )

    result = await pipeline.answer(question)
    if isinstance(result, PipelineFailure):
        print(f"Error ({result.status_code}): {result.message}")
        return 1

    print(result.answer)
    if result.sources:
        print("\nSources:")
        for i, source in enumerate(result.sources, start=1):
            print(f"  [{i}] {source.title}")
            if source.authors:
                print(f"      By: {source.authors}")
            if source.url:
                print(f"      {source.url}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(" ".join(sys.argv[1:]))))
