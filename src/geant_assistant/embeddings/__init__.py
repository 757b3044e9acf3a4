from .embedder import Embedder, EmbeddingResponse, VectorShape, parse_embedding_response

__all__ = ["Embedder", "EmbeddingResponse", "VectorShape", "parse_embedding_response"]
