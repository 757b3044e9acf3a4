from .models import DocumentPayload, SearchResult, SourceRef
from .retriever import Retriever

__all__ = ["DocumentPayload", "SearchResult", "SourceRef", "Retriever"]
