from functools import lru_cache

from ..embeddings.embedder import Embedder
from ..llm.client import LLMClient
from ..rag.generator import AnswerGenerator
from ..rag.pipeline import RAGPipeline
from ..retrieval.retriever import Retriever
from ..sessions.store import SessionStore, session_store


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


@lru_cache
def get_retriever() -> Retriever:
    return Retriever()


@lru_cache
def get_llm_client() -> LLMClient:
    return LLMClient()


@lru_cache
def get_pipeline() -> RAGPipeline:
    return RAGPipeline(
        embedder=get_embedder(),
        retriever=get_retriever(),
        generator=AnswerGenerator(get_llm_client()),
    )


def get_session_store() -> SessionStore:
    return session_store
